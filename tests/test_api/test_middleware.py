"""Tests for request ID and timeout middleware."""

import asyncio
import re

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware.timeout import TimeoutMiddleware

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class TestCorrelationIdMiddleware:
    """Test X-Request-ID middleware behavior."""

    def test_generates_uuid_when_no_header(self, client):
        resp = client.get("/health")

        request_id = resp.headers.get("X-Request-ID")
        assert request_id is not None
        assert UUID_RE.match(request_id), f"Expected UUID v4, got: {request_id}"

    def test_echoes_custom_request_id(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "custom-id-123"})
        assert resp.headers.get("X-Request-ID") == "custom-id-123"

    def test_echoes_correlation_id(self, client):
        resp = client.get("/health", headers={"X-Correlation-ID": "corr-456"})
        assert resp.headers.get("X-Request-ID") == "corr-456"

    def test_request_id_on_error_responses(self, anon_client):
        resp = anon_client.get("/sources", headers={"X-Request-ID": "err-789"})

        assert resp.status_code == 401
        assert resp.headers.get("X-Request-ID") == "err-789"


def _slow_app(timeout_seconds: float, **kwargs) -> FastAPI:
    app = FastAPI()
    app.add_middleware(TimeoutMiddleware, timeout_seconds=timeout_seconds, **kwargs)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1.0)
        return {"ok": True}

    @app.get("/health/slow")
    async def slow_health():
        await asyncio.sleep(0.2)
        return {"ok": True}

    return app


class TestTimeoutMiddleware:
    def test_slow_request_times_out(self):
        with TestClient(_slow_app(0.05)) as client:
            resp = client.get("/slow")

        assert resp.status_code == 504
        assert resp.json()["error_type"] == "TIMEOUT"

    def test_health_excluded(self):
        with TestClient(_slow_app(0.05)) as client:
            resp = client.get("/health/slow")

        assert resp.status_code == 200

    def test_timeout_body_shape(self):
        with TestClient(_slow_app(0.05)) as client:
            resp = client.get("/slow")

        assert resp.json() == {
            "detail": "Request exceeded the 0.05s deadline",
            "error_type": "TIMEOUT",
        }

    def test_custom_exempt_prefixes(self):
        app = _slow_app(0.05, exempt_prefixes=("/slow",))
        with TestClient(app) as client:
            assert client.get("/slow").status_code == 200
            assert client.get("/health/slow").status_code == 504

    def test_exempt_paths_from_settings(self, monkeypatch):
        from src.config.settings import get_settings

        monkeypatch.setenv("REQUEST_TIMEOUT_EXEMPT_PATHS", "/health, /docs")
        get_settings.cache_clear()

        assert get_settings().timeout_exempt_prefixes == ("/health", "/docs")
