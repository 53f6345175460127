"""Solar position endpoint."""

from fastapi import APIRouter

from pvflux.solar import filter_solar_elevation, solar_position
from pvflux_service.core.logging import log_result
from pvflux_service.core.serialization import table_response
from pvflux_service.schemas.common import TableResponse
from pvflux_service.schemas.solar import SolarPositionRequest

router = APIRouter()


@router.post(
    "/position",
    response_model=TableResponse,
    summary="Solar position",
    description="Zenith, azimuth (clockwise from north) and elevation per timestamp.",
)
def position(req: SolarPositionRequest) -> dict:
    result = solar_position(req.times, req.latitude, req.longitude)
    if req.max_zenith is not None:
        mask = filter_solar_elevation(
            req.times, req.latitude, req.longitude, max_zenith=req.max_zenith
        )
        result["above_threshold"] = mask
    log_result("solar.position", result, req.latitude, req.longitude)
    return table_response(result)
