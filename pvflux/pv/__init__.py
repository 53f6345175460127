"""
PV system models.

Provides Skoplaki and Faiman cell temperature, PVWatts DC power with a
power-law IAM, constant-efficiency inverter clipping, and the DC/AC
pipelines and ensembles that chain them behind the solar models.
"""

from .dc import iam_power_law, pvwatts_dc
from .ensemble import dc_ensemble, power_ensemble
from .inverter import ACResult, simple_clipping
from .pipeline import (
    InverterConfig,
    ModuleConfig,
    clearsky_dc_pipeline,
    clearsky_performance_ratio,
    clearsky_power_pipeline,
    dc_pipeline,
    power_pipeline,
)
from .temperature import CellTemperatureModel, faiman, skoplaki

__all__ = [
    # temperature
    "CellTemperatureModel",
    "skoplaki",
    "faiman",
    # dc
    "iam_power_law",
    "pvwatts_dc",
    # inverter
    "ACResult",
    "simple_clipping",
    # pipeline
    "ModuleConfig",
    "InverterConfig",
    "dc_pipeline",
    "power_pipeline",
    "clearsky_dc_pipeline",
    "clearsky_power_pipeline",
    "clearsky_performance_ratio",
    # ensemble
    "dc_ensemble",
    "power_ensemble",
]
