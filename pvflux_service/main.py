import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pvflux import __version__
from pvflux.errors import InputValidationError, TurbidityDatabaseError
from pvflux_service.config import settings
from pvflux_service.api.v1 import irradiance, power, solar
from pvflux_service.core.logging import RequestLoggingMiddleware, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info(
        "Starting %s (%s), turbidity database: %s",
        settings.app_name,
        settings.environment,
        settings.turbidity_path or "not configured",
    )
    yield


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json, debug=settings.debug)

    application = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(solar.router, prefix="/api/v1/solar", tags=["solar"])
    application.include_router(
        irradiance.router, prefix="/api/v1/irradiance", tags=["irradiance"]
    )
    application.include_router(power.router, prefix="/api/v1/power", tags=["power"])

    @application.exception_handler(InputValidationError)
    async def input_validation_handler(
        request: Request, exc: InputValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "field": exc.field},
        )

    @application.exception_handler(TurbidityDatabaseError)
    async def turbidity_database_handler(
        request: Request, exc: TurbidityDatabaseError
    ) -> JSONResponse:
        logger.warning("Turbidity database unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"detail": str(exc)},
        )

    @application.get("/health")
    async def health_check() -> dict:
        result: dict = {"status": "ok", "version": __version__, "services": {}}

        # Check turbidity database
        path = settings.turbidity_path
        if path is None:
            result["services"]["turbidity_database"] = "not configured"
        elif Path(path).is_file():
            result["services"]["turbidity_database"] = "ok"
        else:
            result["services"]["turbidity_database"] = f"error: file not found: {path}"
            result["status"] = "degraded"

        return result

    return application


app = create_app()
