"""Entry validation shared by every model function.

All shape handling is explicit: a parameter is either a scalar, which
is repeated for every instant, or a 1-D sequence whose length equals the
number of instants. Anything else is rejected before computation.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from .errors import InputValidationError

E = TypeVar("E", bound=Enum)


def broadcast(name: str, value: ArrayLike, n: int) -> NDArray[np.float64]:
    """Return ``value`` as a float array of length ``n``.

    Scalars are repeated; sequences must already have ``n`` elements.
    """
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 0:
        return np.full(n, float(arr), dtype=np.float64)
    if arr.ndim != 1:
        raise InputValidationError(name, f"expected a scalar or 1-D sequence, got shape {arr.shape}")
    if arr.shape[0] != n:
        raise InputValidationError(name, f"length {arr.shape[0]} does not match {n} timestamps")
    return arr.copy()


def require_same_length(n: int, **arrays: ArrayLike) -> list[NDArray[np.float64]]:
    """Convert required per-instant sequences, checking each has length ``n``.

    Unlike :func:`broadcast`, scalars are not accepted here: these are
    measured series (GHI, air temperature, ...) that must be supplied
    row by row.
    """
    out = []
    for name, value in arrays.items():
        arr = np.atleast_1d(np.asarray(value, dtype=np.float64))
        if arr.ndim != 1 or arr.shape[0] != n:
            raise InputValidationError(
                name, f"expected {n} values matching the timestamps, got shape {arr.shape}"
            )
        out.append(arr)
    return out


def validate_location(
    lat: ArrayLike, lon: ArrayLike, n: int
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Broadcast and range-check latitude/longitude (degrees)."""
    lat_arr = broadcast("lat", lat, n)
    lon_arr = broadcast("lon", lon, n)
    if np.any(~np.isfinite(lat_arr)) or np.any((lat_arr < -90.0) | (lat_arr > 90.0)):
        raise InputValidationError("lat", "latitude must be within [-90, 90] degrees")
    if np.any(~np.isfinite(lon_arr)) or np.any((lon_arr < -180.0) | (lon_arr > 180.0)):
        raise InputValidationError("lon", "longitude must be within [-180, 180] degrees")
    return lat_arr, lon_arr


def coerce_enum(enum_cls: type[E], value: E | str, field: str) -> E:
    """Accept an enum member or its string value; reject anything else."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InputValidationError(field, f"unknown model '{value}' (choose from {choices})") from None


def coerce_choice(value: str, choices: Iterable[str], field: str) -> str:
    """Validate a plain string option against a fixed set."""
    allowed = tuple(choices)
    if value not in allowed:
        raise InputValidationError(field, f"'{value}' is not one of {', '.join(allowed)}")
    return value


def thresholded_ratio(
    numerator: ArrayLike,
    denominator: ArrayLike,
    threshold: float,
    name: str,
) -> pd.Series:
    """``numerator / denominator`` as a nullable ``Float64`` series.

    Rows whose denominator is below ``threshold`` are ``<NA>``. The index
    of ``numerator`` is kept when it is a Series.
    """
    num = np.atleast_1d(np.asarray(numerator, dtype=np.float64))
    if num.ndim != 1:
        raise InputValidationError(name, f"expected a 1-D sequence, got shape {num.shape}")
    den = broadcast(name, denominator, num.shape[0])
    valid = den >= threshold
    ratio = np.where(valid, num / np.where(valid, den, 1.0), np.nan)
    index = numerator.index if isinstance(numerator, pd.Series) else None
    return pd.Series(pd.array(ratio, dtype="Float64"), index=index, name=name)
