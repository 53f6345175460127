"""Result tables to JSON-ready rows."""

from __future__ import annotations

import math
from typing import Any

import pandas as pd


def _json_value(value: Any) -> Any:
    if value is None or value is pd.NA:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """One dict per row, ``time`` first as ISO-8601 in the index's own offset.

    ``<NA>``, NaN and infinities become ``None`` (JSON ``null``).
    """
    times = [ts.isoformat() for ts in frame.index]
    columns = {name: [_json_value(v) for v in frame[name].tolist()] for name in frame.columns}
    return [
        {"time": t, **{name: values[i] for name, values in columns.items()}}
        for i, t in enumerate(times)
    ]


def table_response(frame: pd.DataFrame) -> dict[str, Any]:
    return {
        "count": len(frame),
        "columns": ["time", *map(str, frame.columns)],
        "rows": frame_to_rows(frame),
    }
