"""
Decomposition of global horizontal irradiance into direct and diffuse parts.

Both models estimate the diffuse fraction from the clearness index
kt = GHI / (I0n * cos z). The direct normal component is whatever the
diffuse fraction leaves, projected back onto the normal plane.

References
----------
- Erbs D.G., Klein S.A., Duffie J.A., "Estimation of the diffuse radiation
  fraction for hourly, daily and monthly-average global radiation",
  Solar Energy, 28(4):293-302, 1982.
- Ridley B., Boland J., Lauret P., "Modelling of diffuse solar fraction
  with multiple predictors", Renewable Energy, 35(2):478-483, 2010.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from ..inputs import coerce_choice, coerce_enum, require_same_length, validate_location
from ..timeutils import TimeInfo, day_of_year, output_index, prepare_time_utc
from .extraterrestrial import SOLAR_CONSTANT, extra_radiation_spencer
from .position import zenith_azimuth

# Logistic coefficients (a, b) per averaging interval
BOLAND_COEFFS: dict[str, tuple[float, float]] = {
    "1h": (8.645, 0.613),
    "15min": (8.6, 0.6),
}


class DecompositionModel(str, Enum):
    ERBS = "erbs"
    BOLAND_RIDLEY = "boland_ridley"


# ---------------------------------------------------------------------------
# Shared geometry
# ---------------------------------------------------------------------------


def _clearness_index(
    ghi: NDArray[np.float64],
    zenith: NDArray[np.float64],
    dni_extra: NDArray[np.float64],
    min_cos_zenith: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.bool_]]:
    """Return (kt, floored cos z, sun-up mask)."""
    cos_z = np.cos(np.radians(zenith))
    sun_up = cos_z > 0.0
    cos_z_floor = np.maximum(cos_z, min_cos_zenith)
    i0 = np.where(sun_up, dni_extra * cos_z_floor, 0.0)

    i0_safe = np.where(i0 > 0.0, i0, 1.0)
    kt = np.where(i0 > 0.0, np.clip(ghi / i0_safe, 0.0, 1.0), 0.0)
    return kt, cos_z_floor, sun_up


def _split(
    ghi: NDArray[np.float64],
    diffuse_fraction: NDArray[np.float64],
    zenith: NDArray[np.float64],
    cos_z_floor: NDArray[np.float64],
    sun_up: NDArray[np.bool_],
    max_zenith: float,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Apply a diffuse fraction, returning (dni, dhi) with night/horizon guards."""
    dhi = diffuse_fraction * ghi
    dni = (ghi - dhi) / cos_z_floor

    bad = (zenith >= max_zenith) | (ghi < 0.0) | (dni < 0.0)
    dni = np.where(bad, 0.0, dni)

    # Night: everything measured is diffuse
    dhi = np.where(sun_up, dhi, ghi)
    dni = np.where(sun_up, dni, 0.0)
    return dni, dhi


def _table(
    info: TimeInfo,
    ghi: NDArray[np.float64],
    dni: NDArray[np.float64],
    dhi: NDArray[np.float64],
    kt: NDArray[np.float64],
    zenith: NDArray[np.float64],
) -> pd.DataFrame:
    return pd.DataFrame(
        {"ghi": ghi, "dni": dni, "dhi": dhi, "kt": kt, "zenith": zenith},
        index=output_index(info),
    )


def _prepare(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    solar_constant: float,
) -> tuple[TimeInfo, NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    info = prepare_time_utc(time)
    n = len(info)
    lat_arr, lon_arr = validate_location(lat, lon, n)
    (ghi_arr,) = require_same_length(n, ghi=ghi)
    zenith, _ = zenith_azimuth(info, lat_arr, lon_arr)
    dni_extra = extra_radiation_spencer(day_of_year(info.time_utc), solar_constant)
    return info, ghi_arr, zenith, dni_extra


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def erbs_diffuse_fraction(kt: ArrayLike) -> NDArray[np.float64]:
    """Erbs piecewise diffuse fraction as a function of clearness index."""
    kt = np.asarray(kt, dtype=np.float64)
    middle = 0.9511 - 0.1604 * kt + 4.388 * kt**2 - 16.638 * kt**3 + 12.336 * kt**4
    return np.where(kt <= 0.22, 1.0 - 0.09 * kt, np.where(kt <= 0.8, middle, 0.165))


def boland_diffuse_fraction(kt: ArrayLike, a: float, b: float) -> NDArray[np.float64]:
    """Logistic diffuse fraction ``1 / (1 + exp(a * (kt - b)))``."""
    kt = np.asarray(kt, dtype=np.float64)
    return 1.0 / (1.0 + np.exp(a * (kt - b)))


def erbs(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    solar_constant: float = SOLAR_CONSTANT,
    min_cos_zenith: float = 0.065,
    max_zenith: float = 87.0,
) -> pd.DataFrame:
    """Estimate DNI and DHI from GHI with the Erbs (1982) correlation.

    Parameters
    ----------
    time : sequence of instants
        Timestamps, one per GHI sample.
    lat, lon : float or array_like
        Site coordinates in degrees.
    ghi : array_like, shape (N,)
        Global horizontal irradiance (W/m^2).
    solar_constant : float
        Used for the extraterrestrial irradiance.
    min_cos_zenith : float
        Floor on cos(zenith) when computing kt and projecting DNI.
    max_zenith : float
        DNI is forced to zero at or above this zenith (degrees).

    Returns
    -------
    DataFrame
        Columns ``ghi``, ``dni``, ``dhi``, ``kt``, ``zenith``.

    Raises
    ------
    InputValidationError
        On length mismatch or out-of-range coordinates.
    """
    info, ghi_arr, zenith, dni_extra = _prepare(time, lat, lon, ghi, solar_constant)
    kt, cos_z_floor, sun_up = _clearness_index(ghi_arr, zenith, dni_extra, min_cos_zenith)
    df = erbs_diffuse_fraction(kt)
    dni, dhi = _split(ghi_arr, df, zenith, cos_z_floor, sun_up, max_zenith)
    return _table(info, ghi_arr, dni, dhi, kt, zenith)


def boland_ridley(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    averaging: str = "1h",
    a_coeff: float | None = None,
    b_coeff: float | None = None,
    solar_constant: float = SOLAR_CONSTANT,
    min_cos_zenith: float = 0.065,
    max_zenith: float = 87.0,
) -> pd.DataFrame:
    """Estimate DNI and DHI from GHI with the Boland-Ridley logistic model.

    ``averaging`` selects the default coefficients for the sampling
    interval of ``ghi`` (``"1h"`` or ``"15min"``). ``a_coeff`` and
    ``b_coeff`` override them individually. Guards and output columns
    match :func:`erbs`.
    """
    default_a, default_b = BOLAND_COEFFS[coerce_choice(averaging, BOLAND_COEFFS, "averaging")]
    a = default_a if a_coeff is None else float(a_coeff)
    b = default_b if b_coeff is None else float(b_coeff)

    info, ghi_arr, zenith, dni_extra = _prepare(time, lat, lon, ghi, solar_constant)
    kt, cos_z_floor, sun_up = _clearness_index(ghi_arr, zenith, dni_extra, min_cos_zenith)
    df = boland_diffuse_fraction(kt, a, b)
    dni, dhi = _split(ghi_arr, df, zenith, cos_z_floor, sun_up, max_zenith)
    return _table(info, ghi_arr, dni, dhi, kt, zenith)


_DISPATCH: dict[DecompositionModel, Callable[..., pd.DataFrame]] = {
    DecompositionModel.ERBS: erbs,
    DecompositionModel.BOLAND_RIDLEY: boland_ridley,
}


def decompose(
    model: DecompositionModel | str,
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    ghi: ArrayLike,
    **kwargs: Any,
) -> pd.DataFrame:
    """Run the decomposition model named by ``model``."""
    model = coerce_enum(DecompositionModel, model, "decomposition")
    return _DISPATCH[model](time, lat, lon, ghi, **kwargs)
