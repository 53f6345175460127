"""
Optical airmass.

References
----------
- Kasten F., Young A.T., "Revised optical air mass tables and
  approximation formula", Applied Optics, 28(22):4735-4738, 1989.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Scale height of the standard atmosphere (m)
_SCALE_HEIGHT = 8434.5


def kasten_young_airmass(zenith: ArrayLike) -> NDArray[np.float64]:
    """Relative airmass (Kasten & Young, 1989).

    Parameters
    ----------
    zenith : array_like
        Solar zenith angle in degrees.

    Returns
    -------
    ndarray
        Relative airmass; NaN where the sun is at or below the horizon.
    """
    zenith = np.asarray(zenith, dtype=np.float64)
    up = zenith < 90.0
    z = np.where(up, zenith, 0.0)
    am = 1.0 / (np.cos(np.radians(z)) + 0.50572 * (96.07995 - z) ** (-1.6364))
    return np.where(up, am, np.nan)


def pressure_altitude_correction(altitude: ArrayLike) -> NDArray[np.float64]:
    """Ratio of site pressure to sea-level pressure for an altitude in metres."""
    return np.exp(-np.asarray(altitude, dtype=np.float64) / _SCALE_HEIGHT)


def absolute_airmass(zenith: ArrayLike, altitude: ArrayLike = 0.0) -> NDArray[np.float64]:
    """Pressure-corrected airmass: relative airmass times the altitude correction."""
    return kasten_young_airmass(zenith) * pressure_altitude_correction(altitude)
