from typing import Any

from pydantic import BaseModel, Field


class SiteSeriesRequest(BaseModel):
    """Timestamps at one site; the base of every computation request."""

    times: list[str] = Field(
        min_length=1,
        description="ISO-8601 timestamps. Offsets are echoed back unchanged; naive times are UTC.",
    )
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class PanelFields(BaseModel):
    tilt: float = Field(default=30.0, ge=0, le=90, description="Tilt from horizontal (degrees)")
    azimuth: float = Field(
        default=0.0, ge=0, le=360, description="Panel azimuth, clockwise from north (degrees)"
    )
    albedo: float = Field(default=0.2, ge=0, le=1, description="Ground reflectance")


class TableResponse(BaseModel):
    """One JSON object per input timestamp, in input order."""

    count: int
    columns: list[str]
    rows: list[dict[str, Any]]
