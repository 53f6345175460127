from pydantic import Field

from pvflux_service.schemas.common import SiteSeriesRequest


class SolarPositionRequest(SiteSeriesRequest):
    max_zenith: float | None = Field(
        default=None,
        ge=0,
        le=180,
        description="If set, also return an 'above_threshold' flag for zenith < max_zenith.",
    )
