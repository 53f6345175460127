"""Service logging: access lines, result lines and JSON output.

Two records carry structured fields. :class:`RequestLoggingMiddleware`
writes one ``pvflux.access`` line per request (method, path, status,
timing). :func:`log_result` writes one ``pvflux.api`` line per computed
table (endpoint, row count, models, site). With ``json_format=True``
:class:`JSONFormatter` emits each record as a single JSON object tagged
with the request ID.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Sequence
from contextvars import ContextVar
from typing import Any

import pandas as pd
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

ACCESS_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip")
RESULT_FIELDS = ("endpoint", "rows", "models", "latitude", "longitude")

access_logger = logging.getLogger("pvflux.access")
result_logger = logging.getLogger("pvflux.api")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the request ID and structured fields."""

    fields = ACCESS_FIELDS + RESULT_FIELDS

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = request_id_var.get("")
        if rid:
            entry["request_id"] = rid
        for key in self.fields:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def log_result(
    endpoint: str,
    frame: pd.DataFrame,
    latitude: float,
    longitude: float,
    models: Sequence[str] = (),
) -> None:
    """Record the size and model selection of a computed result table."""
    models = list(models)
    result_logger.info(
        "%s: %d rows%s",
        endpoint,
        len(frame),
        f" [{', '.join(models)}]" if models else "",
        extra={
            "endpoint": endpoint,
            "rows": len(frame),
            "models": models or None,
            "latitude": latitude,
            "longitude": longitude,
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an X-Request-ID and log its status and timing."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers["X-Request-ID"] = rid

        access_logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response


def setup_logging(json_format: bool = False, debug: bool = False) -> None:
    """Configure the root handler; ``json_format=True`` for production."""
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    # Engine model selection and turbidity reads log at debug level
    logging.getLogger("pvflux").setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
