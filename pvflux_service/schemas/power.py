from pydantic import BaseModel, Field

from pvflux_service.schemas.common import PanelFields, SiteSeriesRequest


class ModuleParams(BaseModel):
    p_dc0: float = Field(default=230.0, gt=0, description="DC rating at STC (W)")
    gamma: float = Field(default=-0.0043, description="Power temperature coefficient (1/K)")
    iam_exp: float | None = Field(
        default=0.05, ge=0, description="Power-law IAM exponent; null disables IAM"
    )
    t_noct: float = 45.0
    t_a_noct: float = 20.0
    i_noct: float = Field(default=800.0, gt=0)
    v_noct: float = 1.0
    eta_stc: float = Field(default=0.141, gt=0, lt=1)
    tau_alpha: float = Field(default=0.9, gt=0, le=1)
    u0: float = Field(default=25.0, gt=0)
    u1: float = Field(default=6.84, ge=0)


class InverterParams(BaseModel):
    n_inverters: int = Field(default=20, ge=1)
    inverter_kw: float = Field(default=500.0, gt=0, description="AC rating per inverter (kW)")
    eta_inv: float = Field(default=0.97, gt=0, le=1)


class _PowerBase(SiteSeriesRequest, PanelFields):
    t_air: list[float] = Field(min_length=1, description="Ambient temperature (°C)")
    wind: list[float] = Field(min_length=1, description="Wind speed (m/s)")
    decomposition: str = Field(default="erbs", description="'erbs' or 'boland_ridley'")
    skoplaki_variant: str = Field(default="model1", description="'model1' or 'model2'")
    module: ModuleParams = Field(default_factory=ModuleParams)
    inverter: InverterParams | None = Field(
        default_factory=InverterParams,
        description="Inverter fleet; null returns DC power only",
    )


class PowerPipelineRequest(_PowerBase):
    ghi: list[float] = Field(min_length=1, description="Global horizontal irradiance (W/m²)")
    transposition: str = "olmo"
    cell_temp: str = "skoplaki"


class EnsembleRequest(_PowerBase):
    ghi: list[float] = Field(min_length=1, description="Global horizontal irradiance (W/m²)")
    transpositions: list[str] = Field(default=["olmo", "haydavies"], min_length=1)
    cell_temps: list[str] = Field(default=["skoplaki", "faiman"], min_length=1)


class ClearSkyPowerRequest(_PowerBase):
    clearsky_model: str = "ineichen"
    linke_turbidity: float = Field(default=3.0, gt=0)
    altitude: float = Field(default=0.0, ge=-500, le=9000)
    perez_enhancement: bool = False
    transposition: str = "haydavies"
    cell_temp: str = "skoplaki"
