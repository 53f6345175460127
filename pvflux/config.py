from __future__ import annotations

from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Engine defaults read from ``PVFLUX_*`` environment variables."""

    model_config = {"env_prefix": "PVFLUX_", "case_sensitive": False}

    # Linke turbidity HDF5 grid used when no path or grid is passed explicitly
    turbidity_path: str | None = None

    solar_constant: float = 1366.1
