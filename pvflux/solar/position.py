"""
Solar position from vector algebra.

Sun position is obtained from a topocentric unit sun vector built from
declination, hour angle and latitude (Corripio 2003). Declination and the
equation of time follow the polynomial expansions in Julian centuries
given by Meeus. The position is the geometric centre of the solar disc:
no atmospheric refraction correction is applied.

Zenith angles past 90 degrees are returned as computed. Deciding what a
below-horizon sun means for irradiance is left to the consumers.

References
----------
- Corripio J.G., "Vectorial algebra algorithms for calculating terrain
  parameters from DEMs and the position of the sun for solar radiation
  modelling in mountainous terrain", Int. J. Geographical Information
  Science, 17(1):1-23, 2003.
- Meeus J., "Astronomical Algorithms", 2nd ed., Willmann-Bell, 1999.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from ..inputs import validate_location
from ..timeutils import TimeInfo, output_index, prepare_time_utc

# Julian Day of the Unix epoch and of J2000.0
_JD_UNIX_EPOCH = 2440587.5
_JD_J2000 = 2451545.0
_DAYS_PER_CENTURY = 36525.0


def julian_day(time_utc: pd.DatetimeIndex) -> NDArray[np.float64]:
    """Julian Day of UTC instants: ``unix_seconds / 86400 + 2440587.5``.

    Independent of the index resolution (``s``, ``ms``, ``us`` or ``ns``).
    """
    seconds = time_utc.as_unit("ns").asi8.astype(np.float64) / 1e9
    return seconds / 86400.0 + _JD_UNIX_EPOCH


def _julian_century(jd: NDArray[np.float64]) -> NDArray[np.float64]:
    return (np.asarray(jd, dtype=np.float64) - _JD_J2000) / _DAYS_PER_CENTURY


def equation_of_time(jd: ArrayLike) -> NDArray[np.float64]:
    """Equation of time in minutes.

    Parameters
    ----------
    jd : array_like
        Julian Day.

    Returns
    -------
    ndarray
        Apparent minus mean solar time (minutes).
    """
    t = _julian_century(jd)
    sec = 21.448 - t * (46.8150 + t * (0.00059 - t * 0.001813))
    e0 = 23.0 + (26.0 + sec / 60.0) / 60.0
    ecc = 0.016708634 - t * (0.000042037 + 0.0000001267 * t)
    # obliquity corrected for nutation (Omega term)
    oblcorr = e0 + 0.00256 * np.cos(np.radians(125.04 - 1934.136 * t))
    y = np.tan(np.radians(oblcorr) / 2.0) ** 2
    l0 = np.mod(280.46646 + t * (36000.76983 + t * 0.0003032), 360.0)
    rl0 = np.radians(l0)
    gmas = np.radians(357.52911 + t * (35999.05029 - 0.0001537 * t))

    eqt = (
        y * np.sin(2.0 * rl0)
        - 2.0 * ecc * np.sin(gmas)
        + 4.0 * ecc * y * np.sin(gmas) * np.cos(2.0 * rl0)
        - 0.5 * y**2 * np.sin(4.0 * rl0)
        - 1.25 * ecc**2 * np.sin(2.0 * gmas)
    )
    return np.degrees(eqt) * 4.0


def declination(jd: ArrayLike) -> NDArray[np.float64]:
    """Solar declination in degrees (Meeus ch. 24)."""
    t = _julian_century(jd)

    # mean obliquity of the ecliptic (21.2)
    epsilon = (
        (23.0 + 26.0 / 60.0 + 21.448 / 3600.0)
        - (46.8150 / 3600.0) * t
        - (0.00059 / 3600.0) * t**2
        + (0.001813 / 3600.0) * t**3
    )
    # geometric mean longitude (24.2) and mean anomaly (24.3)
    l0 = 280.46645 + 36000.76983 * t + 0.0003032 * t**2
    m = np.radians(357.52910 + 35999.05030 * t - 0.0001559 * t**2 - 0.00000048 * t**3)

    # equation of centre
    c = (
        (1.914600 - 0.004817 * t - 0.000014 * t**2) * np.sin(m)
        + (0.019993 - 0.000101 * t) * np.sin(2.0 * m)
        + 0.000290 * np.sin(3.0 * m)
    )
    true_longitude = l0 + c

    # longitude of the Moon's ascending node, for nutation
    omega = 125.04452 - 1934.136261 * t + 0.0020708 * t**2 + t**3 / 450000.0
    apparent_longitude = true_longitude - 0.00569 - 0.00478 * np.sin(np.radians(omega))

    delta = np.arcsin(np.sin(np.radians(epsilon)) * np.sin(np.radians(apparent_longitude)))
    return np.degrees(delta)


def hour_angle(jd: ArrayLike, longitude: ArrayLike, timezone: float = 0.0) -> NDArray[np.float64]:
    """Hour angle in radians (solar noon = 0, morning negative).

    Parameters
    ----------
    jd : array_like
        Julian Day.
    longitude : array_like
        Site longitude in degrees (positive east).
    timezone : float
        Offset of the clock the Julian Day was built from, in hours
        (west negative). ``0`` for UTC-normalised input.
    """
    jd = np.asarray(jd, dtype=np.float64)
    hour = np.mod((jd - np.floor(jd)) * 24.0 + 12.0, 24.0)
    standard_meridian = timezone * 15.0
    delta_lon_time = (np.asarray(longitude, dtype=np.float64) - standard_meridian) * 24.0 / 360.0
    return np.pi * (((hour + delta_lon_time + equation_of_time(jd) / 60.0) / 12.0) - 1.0)


def sun_vector(
    jd: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
    timezone: float = 0.0,
) -> NDArray[np.float64]:
    """Unit vector towards the sun in the local frame (x east, y south, z up).

    Returns
    -------
    ndarray, shape (N, 3)
        Columns ``(svx, svy, svz)``.
    """
    omega = hour_angle(jd, longitude, timezone)
    delta = np.radians(declination(jd))
    phi = np.radians(np.asarray(latitude, dtype=np.float64))

    svx = -np.sin(omega) * np.cos(delta)
    svy = np.sin(phi) * np.cos(omega) * np.cos(delta) - np.cos(phi) * np.sin(delta)
    svz = np.cos(phi) * np.cos(omega) * np.cos(delta) + np.sin(phi) * np.sin(delta)
    return np.column_stack(np.broadcast_arrays(svx, svy, svz))


def sun_position(sun_vec: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Azimuth and zenith (degrees) of a sun vector.

    Returns
    -------
    azimuth : ndarray
        Clockwise from north, in [0, 360).
    zenith : ndarray
        From the vertical, in [0, 180].
    """
    sun_vec = np.atleast_2d(sun_vec)
    azimuth = np.degrees(np.pi - np.arctan2(sun_vec[:, 0], sun_vec[:, 1]))
    azimuth = np.mod(azimuth, 360.0)
    zenith = np.degrees(np.arccos(np.clip(sun_vec[:, 2], -1.0, 1.0)))
    return azimuth, zenith


def zenith_azimuth(
    info: TimeInfo,
    lat: NDArray[np.float64],
    lon: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Zenith and azimuth for already-validated inputs (UTC, timezone 0)."""
    jd = julian_day(info.time_utc)
    azimuth, zenith = sun_position(sun_vector(jd, lat, lon, 0.0))
    return zenith, azimuth


def solar_position(time: Any, lat: ArrayLike, lon: ArrayLike) -> pd.DataFrame:
    """Solar zenith, azimuth and elevation for a series of instants.

    Parameters
    ----------
    time : sequence of instants
        Timezone-aware or naive (naive is taken as UTC).
    lat, lon : float or array_like
        Site coordinates in degrees, scalar or one per instant.

    Returns
    -------
    DataFrame
        Indexed by the input timestamps (original timezone) with columns
        ``zenith``, ``azimuth`` and ``elevation`` in degrees.
    """
    info = prepare_time_utc(time)
    lat_arr, lon_arr = validate_location(lat, lon, len(info))
    zenith, azimuth = zenith_azimuth(info, lat_arr, lon_arr)
    return pd.DataFrame(
        {"zenith": zenith, "azimuth": azimuth, "elevation": 90.0 - zenith},
        index=output_index(info),
    )


def cos_aoi(
    surface_tilt: ArrayLike,
    surface_azimuth: ArrayLike,
    solar_zenith: ArrayLike,
    solar_azimuth: ArrayLike,
) -> NDArray[np.float64]:
    """Cosine of the angle of incidence, clipped to [-1, 1].

    Negative values mean the sun is behind the surface; callers that
    need a projection use ``max(0, cos_aoi)``.
    """
    tilt_r = np.radians(surface_tilt)
    saz_r = np.radians(surface_azimuth)
    sz_r = np.radians(solar_zenith)
    sa_r = np.radians(solar_azimuth)

    projection = np.cos(tilt_r) * np.cos(sz_r) + np.sin(tilt_r) * np.sin(sz_r) * np.cos(sa_r - saz_r)
    return np.clip(projection, -1.0, 1.0)


def aoi(
    surface_tilt: ArrayLike,
    surface_azimuth: ArrayLike,
    solar_zenith: ArrayLike,
    solar_azimuth: ArrayLike,
) -> NDArray[np.float64]:
    """Angle of incidence between the sun vector and the surface normal.

    Parameters
    ----------
    surface_tilt : float or array_like
        Surface tilt from horizontal in degrees [0, 180].
    surface_azimuth : float or array_like
        Surface azimuth in degrees clockwise from north [0, 360).
    solar_zenith : array_like
        Solar zenith angle in degrees.
    solar_azimuth : array_like
        Solar azimuth angle in degrees.

    Returns
    -------
    ndarray
        Angle of incidence in degrees, [0, 180].
    """
    return np.degrees(np.arccos(cos_aoi(surface_tilt, surface_azimuth, solar_zenith, solar_azimuth)))


def filter_solar_elevation(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    max_zenith: float = 80.0,
) -> NDArray[np.bool_]:
    """Mask of instants whose solar zenith is below ``max_zenith``.

    ``max_zenith=90`` keeps every daylight instant; the default of 80
    keeps the sun at least 10 degrees above the horizon.
    """
    info = prepare_time_utc(time)
    lat_arr, lon_arr = validate_location(lat, lon, len(info))
    zenith, _ = zenith_azimuth(info, lat_arr, lon_arr)
    return zenith < max_zenith
