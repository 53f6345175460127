"""Tests for access/result log records and the JSON formatter."""

from __future__ import annotations

import json
import logging

import pytest
from httpx import AsyncClient

from pvflux_service.core.logging import JSONFormatter, request_id_var


def _records(caplog, logger_name: str) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == logger_name]


# ======================================================================
# JSON formatter
# ======================================================================


class TestJSONFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            "pvflux.api", logging.INFO, __file__, 1, "power.pipeline: %d rows", (24,), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_result_fields(self):
        record = self._record(
            endpoint="power.pipeline", rows=24, models=["olmo_skoplaki"],
            latitude=-30.6, longitude=24.0,
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "power.pipeline: 24 rows"
        assert entry["logger"] == "pvflux.api"
        assert entry["rows"] == 24
        assert entry["models"] == ["olmo_skoplaki"]
        assert entry["latitude"] == -30.6

    def test_request_id_and_unset_fields(self):
        token = request_id_var.set("req-42")
        try:
            entry = json.loads(JSONFormatter().format(self._record(status_code=200)))
        finally:
            request_id_var.reset(token)
        assert entry["request_id"] == "req-42"
        assert entry["status_code"] == 200
        assert "rows" not in entry
        assert "models" not in entry


# ======================================================================
# Records written while serving requests
# ======================================================================


@pytest.mark.asyncio
class TestRequestLogs:
    async def test_pipeline_result_line(self, client: AsyncClient, weather_payload, caplog):
        with caplog.at_level(logging.INFO, logger="pvflux"):
            resp = await client.post("/api/v1/power/pipeline", json=weather_payload)
        assert resp.status_code == 200

        (record,) = _records(caplog, "pvflux.api")
        assert record.endpoint == "power.pipeline"
        assert record.rows == len(weather_payload["times"])
        assert record.models == ["olmo_skoplaki"]
        assert record.latitude == weather_payload["latitude"]

    async def test_ensemble_lists_every_member(self, client: AsyncClient, weather_payload, caplog):
        with caplog.at_level(logging.INFO, logger="pvflux"):
            await client.post("/api/v1/power/ensemble", json=weather_payload)
        (record,) = _records(caplog, "pvflux.api")
        assert record.models == [
            "olmo_skoplaki", "haydavies_skoplaki", "olmo_faiman", "haydavies_faiman",
        ]
        assert record.rows == 4 * len(weather_payload["times"])

    async def test_access_line(self, client: AsyncClient, caplog):
        with caplog.at_level(logging.INFO, logger="pvflux"):
            await client.get("/health")
        (record,) = _records(caplog, "pvflux.access")
        assert record.method == "GET"
        assert record.path == "/health"
        assert record.status_code == 200
        assert record.duration_ms >= 0.0

    async def test_rejected_request_has_no_result_line(self, client: AsyncClient, caplog):
        with caplog.at_level(logging.INFO, logger="pvflux"):
            resp = await client.post(
                "/api/v1/solar/position",
                json={"times": ["2026-01-15T12:00:00Z"], "latitude": 95.0, "longitude": 0.0},
            )
        assert resp.status_code == 422
        assert _records(caplog, "pvflux.api") == []
        assert _records(caplog, "pvflux.access")[0].status_code == 422
