"""
Clear-sky irradiance models.

Both models return the full GHI / DNI / DHI triple. Ineichen-Perez derives
all three from turbidity and airmass; Haurwitz gives GHI only, and its
direct and diffuse parts come from a decomposition model.

References
----------
- Ineichen P., Perez R., "A new airmass independent formulation for the
  Linke turbidity coefficient", Solar Energy, 73(3):151-157, 2002.
- Haurwitz B., "Insolation in relation to cloudiness and cloud density",
  Journal of Meteorology, 2:154-166, 1945.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from ..inputs import broadcast, coerce_enum, thresholded_ratio, validate_location
from ..timeutils import TimeInfo, day_of_year, output_index, prepare_time_utc
from .airmass import absolute_airmass
from .decomposition import DecompositionModel, decompose
from .extraterrestrial import SOLAR_CONSTANT, extra_radiation_spencer
from .position import zenith_azimuth


class ClearSkyModel(str, Enum):
    INEICHEN = "ineichen"
    HAURWITZ = "haurwitz"


def _table(
    info: TimeInfo,
    ghi: NDArray[np.float64],
    dni: NDArray[np.float64],
    dhi: NDArray[np.float64],
    zenith: NDArray[np.float64],
    airmass: NDArray[np.float64],
) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "ghi_clearsky": ghi,
            "dni_clearsky": dni,
            "dhi_clearsky": dhi,
            "zenith": zenith,
            "airmass": pd.array(airmass, dtype="Float64"),
        },
        index=output_index(info),
    )


def ineichen_perez(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    linke_turbidity: ArrayLike = 3.0,
    altitude: ArrayLike = 1233.0,
    dni_extra: ArrayLike | None = None,
    solar_constant: float = SOLAR_CONSTANT,
    perez_enhancement: bool = False,
    min_cos_zenith: float = 0.065,
) -> pd.DataFrame:
    """Ineichen-Perez clear-sky GHI, DNI and DHI.

    Parameters
    ----------
    time : sequence of instants
        Timestamps (naive is taken as UTC).
    lat, lon : float or array_like
        Site coordinates in degrees.
    linke_turbidity : float or array_like
        Linke turbidity TL. Values outside [1, 10] are computed but lie
        outside the range the model was fitted on.
    altitude : float or array_like
        Site altitude in metres.
    dni_extra : float or array_like, optional
        Extraterrestrial normal irradiance. Computed from the UTC day of
        year with Spencer's series when omitted.
    solar_constant : float
        Used only when ``dni_extra`` is omitted.
    perez_enhancement : bool
        Apply the ``exp(0.01 * am**1.8)`` GHI enhancement factor.
    min_cos_zenith : float
        Floor on cos(zenith) near the horizon.

    Returns
    -------
    DataFrame
        Columns ``ghi_clearsky``, ``dni_clearsky``, ``dhi_clearsky``,
        ``zenith`` and ``airmass``. Airmass is ``<NA>`` while the sun is
        below the horizon; the three irradiance columns are 0 there.
    """
    info = prepare_time_utc(time)
    n = len(info)
    lat_arr, lon_arr = validate_location(lat, lon, n)
    tl = broadcast("linke_turbidity", linke_turbidity, n)
    alt = broadcast("altitude", altitude, n)
    if dni_extra is None:
        i0n = extra_radiation_spencer(day_of_year(info.time_utc), solar_constant)
    else:
        i0n = broadcast("dni_extra", dni_extra, n)

    zenith, _ = zenith_azimuth(info, lat_arr, lon_arr)
    sun_up = zenith < 90.0
    cos_z = np.maximum(np.cos(np.radians(zenith)), min_cos_zenith)

    airmass = absolute_airmass(zenith, alt)
    am = np.where(sun_up, airmass, 0.0)

    fh1 = np.exp(-alt / 8000.0)
    fh2 = np.exp(-alt / 1250.0)
    cg1 = 5.09e-5 * alt + 0.868
    cg2 = 3.92e-5 * alt + 0.0387

    ghi = cg1 * i0n * cos_z * np.exp(-cg2 * am * (fh1 + fh2 * (tl - 1.0)))
    if perez_enhancement:
        ghi = ghi * np.exp(0.01 * am**1.8)

    b = 0.664 + 0.163 / fh1
    bnci = b * i0n * np.exp(-0.09 * am * (tl - 1.0))
    bnci_constraint = (ghi / cos_z) * (1.0 - (0.1 - 0.2 * np.exp(-tl)) / (0.1 + 0.882 / fh1))
    dni = np.minimum(bnci, bnci_constraint)
    dhi = ghi - dni * cos_z

    ghi = np.maximum(np.where(sun_up, ghi, 0.0), 0.0)
    dni = np.maximum(np.where(sun_up, dni, 0.0), 0.0)
    dhi = np.maximum(np.where(sun_up, dhi, 0.0), 0.0)
    return _table(info, ghi, dni, dhi, zenith, airmass)


def haurwitz(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    decomposition: DecompositionModel | str = DecompositionModel.ERBS,
    solar_constant: float = SOLAR_CONSTANT,
) -> pd.DataFrame:
    """Haurwitz clear-sky GHI, split into DNI and DHI by ``decomposition``.

    GHI = 1098 * cos z * exp(-0.059 / cos z) while the sun is up, else 0.
    Output columns match :func:`ineichen_perez`; the airmass reported is
    the sea-level relative airmass.
    """
    info = prepare_time_utc(time)
    n = len(info)
    lat_arr, lon_arr = validate_location(lat, lon, n)
    decomposition = coerce_enum(DecompositionModel, decomposition, "decomposition")

    zenith, _ = zenith_azimuth(info, lat_arr, lon_arr)
    cos_z = np.cos(np.radians(zenith))
    up = cos_z > 0.0
    cos_z_safe = np.where(up, cos_z, 1.0)
    ghi = np.where(up, 1098.0 * cos_z_safe * np.exp(-0.059 / cos_z_safe), 0.0)

    split = decompose(
        decomposition, info.time_utc, lat_arr, lon_arr, ghi, solar_constant=solar_constant
    )
    dni = split["dni"].to_numpy()
    dhi = split["dhi"].to_numpy()
    return _table(info, ghi, dni, dhi, zenith, absolute_airmass(zenith, 0.0))


def clearsky_index(
    ghi_measured: ArrayLike,
    ghi_clearsky: ArrayLike,
    min_clearsky_ghi: float = 50.0,
) -> pd.Series:
    """Ratio of measured to clear-sky GHI.

    Returns a nullable ``Float64`` series, ``<NA>`` wherever the clear-sky
    GHI is below ``min_clearsky_ghi`` (night and low sun). The index of
    ``ghi_measured`` is kept when it is a Series.
    """
    return thresholded_ratio(ghi_measured, ghi_clearsky, min_clearsky_ghi, "clearsky_index")


_DISPATCH: dict[ClearSkyModel, Callable[..., pd.DataFrame]] = {
    ClearSkyModel.INEICHEN: ineichen_perez,
    ClearSkyModel.HAURWITZ: haurwitz,
}


def clearsky(
    model: ClearSkyModel | str,
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    **kwargs: Any,
) -> pd.DataFrame:
    """Run the clear-sky model named by ``model``."""
    model = coerce_enum(ClearSkyModel, model, "clearsky_model")
    return _DISPATCH[model](time, lat, lon, **kwargs)
