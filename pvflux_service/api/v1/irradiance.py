"""Clear-sky, decomposition and transposition endpoints."""

from typing import Any

from fastapi import APIRouter
from numpy.typing import ArrayLike

from pvflux.inputs import coerce_choice, coerce_enum
from pvflux.solar import (
    ClearSkyModel,
    DecompositionModel,
    TranspositionModel,
    clearsky,
    decompose,
    lookup_linke_turbidity,
    simple_linke_turbidity,
    transpose,
)
from pvflux_service.config import settings
from pvflux_service.core.logging import log_result
from pvflux_service.core.serialization import table_response
from pvflux_service.schemas.common import TableResponse
from pvflux_service.schemas.irradiance import (
    ClearSkyRequest,
    DecompositionRequest,
    TranspositionRequest,
)

router = APIRouter()

TURBIDITY_SOURCES = ("value", "database", "simple")


def _linke_turbidity(req: ClearSkyRequest) -> ArrayLike:
    source = coerce_choice(req.turbidity_source, TURBIDITY_SOURCES, "turbidity_source")
    if source == "value":
        return req.linke_turbidity
    if source == "database":
        series = lookup_linke_turbidity(
            req.times,
            req.latitude,
            req.longitude,
            interpolate=req.interpolate_turbidity,
            filepath=settings.turbidity_path,
        )
    else:
        hemisphere = "south" if req.latitude < 0 else "north"
        series = simple_linke_turbidity(
            req.times, location_type=req.location_type, hemisphere=hemisphere
        )
    return series.to_numpy()


@router.post(
    "/clearsky",
    response_model=TableResponse,
    summary="Clear-sky irradiance",
    description="Ineichen-Perez or Haurwitz clear-sky GHI, DNI and DHI with zenith and airmass.",
)
def clearsky_irradiance(req: ClearSkyRequest) -> dict:
    model = coerce_enum(ClearSkyModel, req.model, "model")
    kwargs: dict[str, Any] = {"solar_constant": settings.solar_constant}
    if model is ClearSkyModel.INEICHEN:
        kwargs.update(
            linke_turbidity=_linke_turbidity(req),
            altitude=req.altitude,
            perez_enhancement=req.perez_enhancement,
        )
    else:
        kwargs["decomposition"] = req.decomposition

    result = clearsky(model, req.times, req.latitude, req.longitude, **kwargs)
    log_result("irradiance.clearsky", result, req.latitude, req.longitude, [model.value])
    return table_response(result)


@router.post(
    "/decomposition",
    response_model=TableResponse,
    summary="GHI decomposition",
    description="Split measured GHI into DNI and DHI with the Erbs or Boland-Ridley model.",
)
def decomposition(req: DecompositionRequest) -> dict:
    model = coerce_enum(DecompositionModel, req.model, "model")
    kwargs: dict[str, Any] = {"solar_constant": settings.solar_constant}
    if model is DecompositionModel.BOLAND_RIDLEY:
        kwargs["averaging"] = req.averaging

    result = decompose(model, req.times, req.latitude, req.longitude, req.ghi, **kwargs)
    log_result("irradiance.decomposition", result, req.latitude, req.longitude, [model.value])
    return table_response(result)


@router.post(
    "/transposition",
    response_model=TableResponse,
    summary="Plane-of-array irradiance",
    description="Transpose horizontal irradiance to a tilted plane. "
    "Hay-Davies, Reindl and Perez need DNI and DHI; Olmo uses GHI only.",
)
def transposition(req: TranspositionRequest) -> dict:
    model = coerce_enum(TranspositionModel, req.model, "model")
    kwargs: dict[str, Any] = {"albedo": req.albedo}
    if model.needs_decomposition:
        kwargs["solar_constant"] = settings.solar_constant

    result = transpose(
        model,
        req.times,
        req.latitude,
        req.longitude,
        req.ghi,
        req.tilt,
        req.azimuth,
        dni=req.dni,
        dhi=req.dhi,
        **kwargs,
    )
    log_result("irradiance.transposition", result, req.latitude, req.longitude, [model.value])
    return table_response(result)
