"""API test infrastructure: async httpx client against the ASGI app."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pvflux_service.config import settings


@pytest_asyncio.fixture
async def app(monkeypatch):
    from pvflux_service.main import create_app

    monkeypatch.setattr(settings, "turbidity_path", None)
    monkeypatch.delenv("PVFLUX_TURBIDITY_PATH", raising=False)

    application = create_app()
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

DE_AAR = {"latitude": -30.6279, "longitude": 24.0054}


@pytest.fixture
def hourly_times() -> list[str]:
    """Six hours around midday on 2026-01-15, in South African time."""
    return [f"2026-01-15T{h:02d}:00:00+02:00" for h in range(11, 17)]


@pytest.fixture
def weather_payload(hourly_times) -> dict:
    return {
        "times": hourly_times,
        **DE_AAR,
        "ghi": [820.0, 900.0, 930.0, 900.0, 820.0, 690.0],
        "t_air": [26.0, 28.0, 29.5, 30.0, 30.0, 29.0],
        "wind": [3.0, 3.5, 4.0, 4.0, 3.5, 3.0],
        "tilt": 30.0,
        "azimuth": 0.0,
    }
