from pvflux.config import EngineSettings


class Settings(EngineSettings):
    model_config = {"env_prefix": "PVFLUX_", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "pvflux"

    # Logging
    log_json: bool = False

    # CORS (comma-separated origins)
    cors_origins: str = "http://localhost:3000,http://localhost:5173"


settings = Settings()
