"""
Climatological Linke turbidity.

The reference database is a global 5 arc-minute grid stored as an HDF5
dataset ``LinkeTurbidity`` of shape (2160 latitude, 4320 longitude, 12
months), values scaled by 20. Latitude runs from 90 to -90 and longitude
from -180 to 180, both inclusive. Lookup is nearest grid point in space,
with optional linear interpolation between month centres in time.

Months and days of year are taken from the *local* calendar date of each
instant (the timezone the caller supplied), not from UTC.

References
----------
- Remund J. et al., "Worldwide Linke turbidity information", Proc. ISES
  Solar World Congress, Göteborg, 2003.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol

import h5py
import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from ..config import EngineSettings
from ..errors import InputValidationError, TurbidityDatabaseError
from ..inputs import coerce_choice, validate_location
from ..timeutils import output_index, prepare_time_utc

logger = logging.getLogger(__name__)

LINKE_DATASET = "LinkeTurbidity"
LINKE_SCALE = 20.0
GRID_SHAPE = (2160, 4320, 12)

_LAT_FIRST, _LAT_LAST = 90.0, -90.0
_LON_FIRST, _LON_LAST = -180.0, 180.0

# Day of year at the middle of each month (non-leap)
_MONTH_CENTRES = np.array(
    [15, 46, 74, 105, 135, 166, 196, 227, 258, 288, 319, 349], dtype=np.float64
)
# December wrapped before January, January wrapped after December
_ANCHOR_DAYS = np.concatenate(
    ([_MONTH_CENTRES[-1] - 365.0], _MONTH_CENTRES, [_MONTH_CENTRES[0] + 365.0])
)

_BASE_TURBIDITY = {
    "clean_rural": 2.5,
    "rural": 3.5,
    "urban": 4.5,
    "polluted": 5.5,
}
# Month (1-12 scale, fractional) of the seasonal maximum
_SEASONAL_PEAK = {"north": 6.5, "south": 0.5}


class TurbidityGrid(Protocol):
    """Read access to a global (lat, lon, month) turbidity grid."""

    @property
    def shape(self) -> tuple[int, int]:
        """Number of (latitude, longitude) grid points."""
        ...

    def monthly_values(self, lat_index: int, lon_index: int) -> NDArray[np.float64]:
        """Twelve raw (x20) monthly values at one grid point."""
        ...


def _layout_problem(handle: Any) -> str | None:
    """Why an open HDF5 file is not a usable turbidity grid, or None."""
    if LINKE_DATASET not in handle:
        return f"has no '{LINKE_DATASET}' dataset"
    shape = tuple(handle[LINKE_DATASET].shape)
    if len(shape) != 3 or shape[2] != 12 or shape[0] < 2 or shape[1] < 2:
        return f"has dataset shape {shape}, expected (n_lat, n_lon, 12)"
    return None


class H5TurbidityGrid:
    """HDF5-backed grid, open only inside a ``with`` block.

    >>> with H5TurbidityGrid("LinkeTurbidities.h5") as grid:
    ...     raw = grid.monthly_values(1000, 2500)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._file: Any = None

    def __enter__(self) -> H5TurbidityGrid:
        if not self.path.is_file():
            raise TurbidityDatabaseError(
                str(self.path),
                suggestion="Set PVFLUX_TURBIDITY_PATH or pass filepath= to the lookup.",
            )
        try:
            handle = h5py.File(self.path, "r")
        except OSError as exc:
            raise TurbidityDatabaseError(
                str(self.path), reason="is not a readable HDF5 file"
            ) from exc
        problem = _layout_problem(handle)
        if problem is not None:
            handle.close()
            raise TurbidityDatabaseError(str(self.path), reason=problem)
        self._file = handle
        logger.debug("Opened turbidity grid %s", self.path)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def _dataset(self) -> Any:
        if self._file is None:
            raise RuntimeError("H5TurbidityGrid must be used as a context manager")
        return self._file[LINKE_DATASET]

    @property
    def shape(self) -> tuple[int, int]:
        n_lat, n_lon, _ = self._dataset().shape
        return int(n_lat), int(n_lon)

    def monthly_values(self, lat_index: int, lon_index: int) -> NDArray[np.float64]:
        return np.asarray(self._dataset()[lat_index, lon_index, :], dtype=np.float64)


class ArrayTurbidityGrid:
    """In-memory grid with the same orientation as the HDF5 database.

    Any global (n_lat, n_lon, 12) array is accepted, so coarse grids can
    stand in for the full-resolution file.
    """

    def __init__(self, values: ArrayLike):
        arr = np.asarray(values)
        if arr.ndim != 3 or arr.shape[2] != 12 or arr.shape[0] < 2 or arr.shape[1] < 2:
            raise InputValidationError(
                "values", f"expected an (n_lat, n_lon, 12) grid, got shape {arr.shape}"
            )
        self._values = arr

    @property
    def shape(self) -> tuple[int, int]:
        return int(self._values.shape[0]), int(self._values.shape[1])

    def monthly_values(self, lat_index: int, lon_index: int) -> NDArray[np.float64]:
        return np.asarray(self._values[lat_index, lon_index, :], dtype=np.float64)


# ---------------------------------------------------------------------------
# Indexing and interpolation
# ---------------------------------------------------------------------------


def degrees_to_index(
    coord: ArrayLike,
    first: float,
    last: float,
    n_points: int,
) -> NDArray[np.intp]:
    """Nearest 0-based grid index of a coordinate on an inclusive regular axis.

    ``first`` and ``last`` are the coordinates of index 0 and index
    ``n_points - 1``; a descending axis (``first > last``) is supported.
    Results are clamped to ``[0, n_points - 1]``.
    """
    spacing = (last - first) / (n_points - 1)
    index = np.round((np.asarray(coord, dtype=np.float64) - first) / spacing)
    return np.clip(index, 0, n_points - 1).astype(np.intp)


def interpolate_monthly(monthly: ArrayLike, day_of_year: ArrayLike) -> NDArray[np.float64]:
    """Linear interpolation of 12 monthly values at month centres.

    The curve wraps across the year end; days outside the anchor range
    take the nearest anchor value.
    """
    monthly = np.asarray(monthly, dtype=np.float64)
    anchors = np.concatenate(([monthly[-1]], monthly, [monthly[0]]))
    return np.interp(np.asarray(day_of_year, dtype=np.float64), _ANCHOR_DAYS, anchors)


def _read_points(
    grid: TurbidityGrid,
    lat: NDArray[np.float64],
    lon: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.intp]]:
    """Monthly TL for each distinct grid point, plus the row-to-point map."""
    n_lat, n_lon = grid.shape
    lat_idx = degrees_to_index(lat, _LAT_FIRST, _LAT_LAST, n_lat)
    lon_idx = degrees_to_index(lon, _LON_FIRST, _LON_LAST, n_lon)

    points, inverse = np.unique(np.column_stack((lat_idx, lon_idx)), axis=0, return_inverse=True)
    inverse = np.asarray(inverse).reshape(-1)
    logger.debug("Reading %d turbidity grid point(s) for %d row(s)", len(points), len(lat))

    table = np.empty((len(points), 12), dtype=np.float64)
    for k, (i, j) in enumerate(points):
        table[k] = grid.monthly_values(int(i), int(j))
    return table / LINKE_SCALE, inverse


def lookup_linke_turbidity(
    time: Any,
    lat: ArrayLike,
    lon: ArrayLike,
    interpolate: bool = True,
    filepath: str | Path | None = None,
    grid: TurbidityGrid | None = None,
) -> pd.Series:
    """Linke turbidity from the climatological grid.

    Parameters
    ----------
    time : sequence of instants
        Timestamps; month and day of year come from their local date.
    lat, lon : float or array_like
        Coordinates in degrees, scalar or one per instant.
    interpolate : bool
        Interpolate between month centres by day of year. When False the
        value of the calendar month is returned.
    filepath : str or Path, optional
        HDF5 database path. Defaults to ``PVFLUX_TURBIDITY_PATH``.
    grid : TurbidityGrid, optional
        Grid to read instead of a file. Takes precedence over ``filepath``.

    Returns
    -------
    Series
        ``linke_turbidity`` indexed by the input timestamps.

    Raises
    ------
    InputValidationError
        On length mismatch or out-of-range coordinates.
    TurbidityDatabaseError
        If no grid is given and the database file is missing or unset.
    """
    info = prepare_time_utc(time)
    lat_arr, lon_arr = validate_location(lat, lon, len(info))
    local = info.local

    if grid is not None:
        table, inverse = _read_points(grid, lat_arr, lon_arr)
    else:
        path = filepath if filepath is not None else EngineSettings().turbidity_path
        if path is None:
            raise TurbidityDatabaseError(
                None, suggestion="Set PVFLUX_TURBIDITY_PATH or pass filepath= to the lookup."
            )
        with H5TurbidityGrid(path) as h5_grid:
            table, inverse = _read_points(h5_grid, lat_arr, lon_arr)

    if interpolate:
        doy = np.asarray(local.dayofyear, dtype=np.float64)
        values = np.empty(len(info), dtype=np.float64)
        for k in range(len(table)):
            rows = inverse == k
            values[rows] = interpolate_monthly(table[k], doy[rows])
    else:
        month_idx = np.asarray(local.month, dtype=np.intp) - 1
        values = table[inverse, month_idx]

    return pd.Series(values, index=output_index(info), name="linke_turbidity")


def simple_linke_turbidity(
    time: Any,
    location_type: str = "rural",
    seasonal_variation: bool = True,
    hemisphere: str = "north",
) -> pd.Series:
    """Heuristic Linke turbidity by location class.

    An explicit alternative to :func:`lookup_linke_turbidity` for sites
    without the database. Base values are 2.5 (clean_rural), 3.5 (rural),
    4.5 (urban) and 5.5 (polluted). The optional seasonal term
    ``0.5 * cos((month - peak) * pi / 6)`` peaks in mid-summer of the
    given hemisphere.
    """
    coerce_choice(location_type, _BASE_TURBIDITY, "location_type")
    coerce_choice(hemisphere, _SEASONAL_PEAK, "hemisphere")

    info = prepare_time_utc(time)
    values = np.full(len(info), _BASE_TURBIDITY[location_type], dtype=np.float64)
    if seasonal_variation:
        month = np.asarray(info.local.month, dtype=np.float64)
        values += 0.5 * np.cos((month - _SEASONAL_PEAK[hemisphere]) * np.pi / 6.0)
    return pd.Series(values, index=output_index(info), name="linke_turbidity")
