from pydantic import Field

from pvflux_service.schemas.common import PanelFields, SiteSeriesRequest


class ClearSkyRequest(SiteSeriesRequest):
    model: str = Field(default="ineichen", description="'ineichen' or 'haurwitz'")
    turbidity_source: str = Field(
        default="value",
        description="Where Linke turbidity comes from: 'value' (linke_turbidity), "
        "'database' (HDF5 climatology) or 'simple' (location-class heuristic).",
    )
    linke_turbidity: float = Field(default=3.0, gt=0, description="Used when turbidity_source='value'")
    interpolate_turbidity: bool = Field(
        default=True, description="Interpolate database values between month centres"
    )
    location_type: str = Field(
        default="rural",
        description="Heuristic class: clean_rural, rural, urban or polluted",
    )
    altitude: float = Field(default=0.0, ge=-500, le=9000, description="Site altitude (m)")
    perez_enhancement: bool = False
    decomposition: str = Field(
        default="erbs", description="DNI/DHI split for the Haurwitz model"
    )


class DecompositionRequest(SiteSeriesRequest):
    ghi: list[float] = Field(min_length=1, description="Global horizontal irradiance (W/m²)")
    model: str = Field(default="erbs", description="'erbs' or 'boland_ridley'")
    averaging: str = Field(
        default="1h", description="Boland-Ridley coefficient set: '1h' or '15min'"
    )


class TranspositionRequest(SiteSeriesRequest, PanelFields):
    ghi: list[float] = Field(min_length=1)
    dni: list[float] | None = Field(
        default=None, description="Direct normal irradiance; required except for 'olmo'"
    )
    dhi: list[float] | None = Field(
        default=None, description="Diffuse horizontal irradiance; required except for 'olmo'"
    )
    model: str = Field(
        default="haydavies", description="'haydavies', 'reindl', 'perez' or 'olmo'"
    )
