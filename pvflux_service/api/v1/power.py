"""PV power pipeline and ensemble endpoints."""

import pandas as pd
from fastapi import APIRouter

from pvflux.pv import (
    InverterConfig,
    ModuleConfig,
    clearsky_dc_pipeline,
    clearsky_power_pipeline,
    dc_ensemble,
    dc_pipeline,
    power_ensemble,
    power_pipeline,
)
from pvflux_service.config import settings
from pvflux_service.core.logging import log_result
from pvflux_service.core.serialization import table_response
from pvflux_service.schemas.common import TableResponse
from pvflux_service.schemas.power import (
    ClearSkyPowerRequest,
    EnsembleRequest,
    InverterParams,
    PowerPipelineRequest,
)

router = APIRouter()


def _inverter(params: InverterParams | None) -> InverterConfig | None:
    return InverterConfig(**params.model_dump()) if params is not None else None


def _model_labels(result: pd.DataFrame) -> list[str]:
    return list(pd.unique(result["transposition"] + "_" + result["cell_temp"]))


@router.post(
    "/pipeline",
    response_model=TableResponse,
    summary="PV power pipeline",
    description="GHI and weather to plane-of-array irradiance, cell temperature, DC power "
    "and, when an inverter is given, clipped AC power.",
)
def pipeline(req: PowerPipelineRequest) -> dict:
    args = (
        req.times, req.latitude, req.longitude, req.ghi, req.t_air, req.wind,
        req.tilt, req.azimuth,
    )
    kwargs = dict(
        albedo=req.albedo,
        transposition=req.transposition,
        decomposition=req.decomposition,
        cell_temp=req.cell_temp,
        skoplaki_variant=req.skoplaki_variant,
        module=ModuleConfig(**req.module.model_dump()),
        solar_constant=settings.solar_constant,
    )
    inverter = _inverter(req.inverter)
    if inverter is None:
        result = dc_pipeline(*args, **kwargs)
    else:
        result = power_pipeline(*args, inverter=inverter, **kwargs)
    log_result("power.pipeline", result, req.latitude, req.longitude, _model_labels(result))
    return table_response(result)


@router.post(
    "/ensemble",
    response_model=TableResponse,
    summary="Model ensemble",
    description="Run the pipeline for every transposition x cell-temperature combination. "
    "Rows are grouped by the 'model' column.",
)
def ensemble(req: EnsembleRequest) -> dict:
    args = (
        req.times, req.latitude, req.longitude, req.ghi, req.t_air, req.wind,
        req.tilt, req.azimuth,
    )
    kwargs = dict(
        transpositions=req.transpositions,
        cell_temps=req.cell_temps,
        albedo=req.albedo,
        decomposition=req.decomposition,
        skoplaki_variant=req.skoplaki_variant,
        module=ModuleConfig(**req.module.model_dump()),
        solar_constant=settings.solar_constant,
    )
    inverter = _inverter(req.inverter)
    if inverter is None:
        result = dc_ensemble(*args, **kwargs)
    else:
        result = power_ensemble(*args, inverter=inverter, **kwargs)
    log_result("power.ensemble", result, req.latitude, req.longitude, _model_labels(result))
    return table_response(result)


@router.post(
    "/clearsky",
    response_model=TableResponse,
    summary="Clear-sky PV power",
    description="Expected power under clear skies, from Ineichen-Perez or Haurwitz irradiance.",
)
def clearsky_power(req: ClearSkyPowerRequest) -> dict:
    args = (
        req.times, req.latitude, req.longitude, req.t_air, req.wind, req.tilt, req.azimuth,
    )
    kwargs = dict(
        linke_turbidity=req.linke_turbidity,
        altitude=req.altitude,
        clearsky_model=req.clearsky_model,
        transposition=req.transposition,
        cell_temp=req.cell_temp,
        decomposition=req.decomposition,
        albedo=req.albedo,
        perez_enhancement=req.perez_enhancement,
        skoplaki_variant=req.skoplaki_variant,
        module=ModuleConfig(**req.module.model_dump()),
        solar_constant=settings.solar_constant,
    )
    inverter = _inverter(req.inverter)
    if inverter is None:
        result = clearsky_dc_pipeline(*args, **kwargs)
    else:
        result = clearsky_power_pipeline(*args, inverter=inverter, **kwargs)
    log_result("power.clearsky", result, req.latitude, req.longitude, _model_labels(result))
    return table_response(result)
