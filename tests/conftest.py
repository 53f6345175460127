"""Shared test fixtures for pvflux engine and API tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from pvflux.solar import ArrayTurbidityGrid, solar_position

# De Aar, Northern Cape, South Africa
DE_AAR_LAT = -30.6279
DE_AAR_LON = 24.0054
DE_AAR_ALT = 1233.0

# Coarse 10-degree grid: 19 latitudes (90..-90) x 37 longitudes (-180..180)
COARSE_GRID_SHAPE = (19, 37, 12)


# ======================================================================
# Site and time fixtures
# ======================================================================

@pytest.fixture
def site() -> dict[str, float]:
    return {"lat": DE_AAR_LAT, "lon": DE_AAR_LON, "altitude": DE_AAR_ALT}


@pytest.fixture
def day_times() -> pd.DatetimeIndex:
    """24 hourly UTC instants on 2026-01-15 (southern summer)."""
    return pd.date_range("2026-01-15 00:00", periods=24, freq="h", tz="UTC")


@pytest.fixture
def day_weather(day_times: pd.DatetimeIndex) -> dict[str, np.ndarray]:
    """Synthetic hourly weather at De Aar following the sun.

    GHI is 85% of a cos(zenith) envelope, zero at night; air temperature
    follows a 18-32 degC diurnal cycle; wind is a steady 3 m/s breeze.
    """
    zenith = solar_position(day_times, DE_AAR_LAT, DE_AAR_LON)["zenith"].to_numpy()
    cos_z = np.cos(np.radians(zenith))
    ghi = np.where(cos_z > 0, 0.85 * 1100.0 * cos_z, 0.0)

    hour = np.arange(24, dtype=np.float64)
    t_air = 25.0 + 7.0 * np.sin(2 * np.pi * (hour - 8) / 24)
    wind = np.full(24, 3.0)
    return {"ghi": ghi, "t_air": t_air, "wind": wind, "zenith": zenith}


# ======================================================================
# Turbidity fixtures
# ======================================================================

def coarse_turbidity_values() -> np.ndarray:
    """Raw (x20) values: 40 + lat_index + 2 * month_index.

    Linke turbidity therefore rises by 0.05 per latitude row and by 0.1
    per month, which makes both spatial and temporal lookups checkable.
    """
    i = np.arange(COARSE_GRID_SHAPE[0])[:, None, None]
    m = np.arange(12)[None, None, :]
    raw = 40 + i + 2 * m + np.zeros(COARSE_GRID_SHAPE)
    return raw.astype(np.uint8)


@pytest.fixture
def coarse_grid() -> ArrayTurbidityGrid:
    return ArrayTurbidityGrid(coarse_turbidity_values())
