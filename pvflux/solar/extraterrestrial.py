"""
Extraterrestrial normal irradiance.

References
----------
- Spencer J.W., "Fourier series representation of the position of
  the sun", Search, 2(5):172, 1971.
- Iqbal M., "An Introduction to Solar Energy", Academic Press, 1983.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import InputValidationError

SOLAR_CONSTANT = 1366.1  # W/m^2


def extra_radiation_spencer(
    day_of_year: ArrayLike,
    solar_constant: float = SOLAR_CONSTANT,
) -> NDArray[np.float64]:
    """Normal extraterrestrial irradiance (W/m^2) accounting for the
    Earth-Sun distance variation (Spencer's Fourier series).

    Parameters
    ----------
    day_of_year : array_like
        Day of year (1-366). Fractional days are accepted.
    solar_constant : float
        Mean extraterrestrial irradiance at 1 AU (W/m^2).

    Returns
    -------
    ndarray
        Extraterrestrial irradiance normal to the sun's rays (W/m^2).

    Raises
    ------
    InputValidationError
        If any day of year is NaN or infinite.
    """
    day_of_year = np.asarray(day_of_year, dtype=np.float64)
    if np.any(~np.isfinite(day_of_year)):
        raise InputValidationError("day_of_year", "day of year must be finite")

    day_angle = 2.0 * np.pi * (day_of_year - 1.0) / 365.0
    e0 = (
        1.000110
        + 0.034221 * np.cos(day_angle)
        + 0.001280 * np.sin(day_angle)
        + 0.000719 * np.cos(2.0 * day_angle)
        + 0.000077 * np.sin(2.0 * day_angle)
    )
    return solar_constant * e0
