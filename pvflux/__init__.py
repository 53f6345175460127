"""
pvflux: photovoltaic power estimation from weather and solar geometry.

The pipeline is a chain of independent physical models (solar position,
clear-sky irradiance, GHI decomposition, plane-of-array transposition,
cell temperature, DC power and inverter clipping). Every public function
takes a time series plus scalar-or-per-instant parameters and returns a
``pandas.DataFrame`` indexed by the caller's own timestamps.
"""

from .errors import InputValidationError, PVFluxError, TurbidityDatabaseError
from .timeutils import TimeInfo, prepare_time_utc, restore_time_tz

__version__ = "0.1.0"

__all__ = [
    "PVFluxError",
    "InputValidationError",
    "TurbidityDatabaseError",
    "TimeInfo",
    "prepare_time_utc",
    "restore_time_tz",
    "__version__",
]
