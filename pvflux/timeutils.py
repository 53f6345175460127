"""Instant handling at the pipeline boundary.

Every model works on UTC instants. The caller's timezone is captured once
on entry by :func:`prepare_time_utc` and re-applied to the output index by
:func:`restore_time_tz`, so restoring a prepared index reproduces it exactly
for any representable local time, DST transitions included. Naive input
is interpreted as UTC and restored as naive.

Timestamps that carry different UTC offsets (ISO strings from a series that
crosses a DST change, for example) cannot share one pandas timezone. Their
per-element offsets are kept and restored one by one, so the output index
is then an object ``Index`` of :class:`pandas.Timestamp`.
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from .errors import InputValidationError

# None (naive), one timezone, or one timezone per instant
OriginalTZ = tzinfo | tuple[tzinfo, ...] | None


@dataclass(frozen=True)
class TimeInfo:
    """UTC-normalised instants plus the display timezone(s) they came in."""

    time_utc: pd.DatetimeIndex
    original_tz: OriginalTZ

    def __len__(self) -> int:
        return len(self.time_utc)

    @property
    def local(self) -> pd.DatetimeIndex:
        """Instants in the caller's own timezone (local calendar dates).

        With mixed offsets this is the naive local wall-clock time.
        """
        if isinstance(self.original_tz, tuple):
            shifts = [
                ts.tz_convert(tz).utcoffset() for ts, tz in zip(self.time_utc, self.original_tz)
            ]
            return self.time_utc.tz_convert(None) + pd.TimedeltaIndex(shifts)
        return restore_time_tz(self.time_utc, self.original_tz)


def _parse(time: Any) -> tuple[pd.DatetimeIndex, tuple[tzinfo, ...] | None]:
    """Parse to a ``DatetimeIndex``; per-element timezones when offsets differ."""
    if isinstance(time, pd.DatetimeIndex):
        return time, None
    if isinstance(time, (str, datetime, pd.Timestamp, np.datetime64)):
        time = [time]
    values = list(time)
    try:
        with warnings.catch_warnings():
            # pandas 2 warns before refusing mixed offsets; pandas 3 raises directly
            warnings.simplefilter("ignore", FutureWarning)
            return pd.DatetimeIndex(pd.to_datetime(values)), None
    except (TypeError, ValueError):
        stamps = [pd.Timestamp(v) for v in values]
    if any(ts is pd.NaT for ts in stamps):
        raise ValueError("timestamps must not contain NaT")
    if any(ts.tz is None for ts in stamps):
        raise ValueError("naive and timezone-aware timestamps cannot be mixed")
    index = pd.DatetimeIndex([ts.tz_convert("UTC") for ts in stamps])
    return index, tuple(ts.tzinfo for ts in stamps)


def prepare_time_utc(time: Any) -> TimeInfo:
    """Normalise timestamps to a UTC ``DatetimeIndex``.

    Args:
        time: A ``DatetimeIndex``, datetime ``Series``, sequence of
            datetimes / ISO-8601 strings, or a single timestamp.

    Returns:
        :class:`TimeInfo` holding the UTC index and the original timezone,
        or one timezone per instant when the input mixes UTC offsets.

    Raises:
        InputValidationError: If the timestamps cannot be parsed or are empty.
    """
    try:
        index, per_element = _parse(time)
    except (TypeError, ValueError) as exc:
        raise InputValidationError("time", f"cannot interpret timestamps ({exc})") from exc
    if len(index) == 0:
        raise InputValidationError("time", "at least one timestamp is required")
    if index.hasnans:
        raise InputValidationError("time", "timestamps must not contain NaT")

    if per_element is not None:
        return TimeInfo(time_utc=index, original_tz=per_element)
    if index.tz is None:
        return TimeInfo(time_utc=index.tz_localize("UTC"), original_tz=None)
    return TimeInfo(time_utc=index.tz_convert("UTC"), original_tz=index.tz)


def restore_time_tz(time_utc: pd.DatetimeIndex, original_tz: OriginalTZ) -> pd.Index:
    """Express UTC instants in the caller's original timezone.

    A sequence of timezones is applied element by element and gives an
    object ``Index`` of timestamps; otherwise the result is a
    ``DatetimeIndex``.
    """
    if original_tz is None:
        return time_utc.tz_convert(None)
    if isinstance(original_tz, Sequence) and not isinstance(original_tz, str):
        if len(original_tz) != len(time_utc):
            raise InputValidationError(
                "original_tz", f"expected {len(time_utc)} timezones, got {len(original_tz)}"
            )
        return pd.Index(
            [ts.tz_convert(tz) for ts, tz in zip(time_utc, original_tz)], dtype=object
        )
    return time_utc.tz_convert(original_tz)


def day_of_year(index: pd.DatetimeIndex) -> NDArray[np.float64]:
    """Calendar day of year (1-366) of each instant, in the index's own timezone."""
    return np.asarray(index.dayofyear, dtype=np.float64)


def output_index(info: TimeInfo) -> pd.Index:
    """Index for result tables: original representation, named ``time``."""
    return restore_time_tz(info.time_utc, info.original_tz).rename("time")
