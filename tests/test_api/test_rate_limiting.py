"""Tests for API rate limiting configuration."""

import pytest
from starlette.requests import Request

from src.api.rate_limit import caller_key, create_limiter, read_limit, write_limit
from src.config.settings import get_settings


def _request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/sources",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("192.168.1.100", 12345),
    }
    return Request(scope)


@pytest.fixture
def configure(monkeypatch):
    def _configure(**env: str) -> None:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        get_settings.cache_clear()

    return _configure


class TestCallerKey:
    """Tests for the per-caller bucket key."""

    def test_api_key_buckets_by_mapped_user(self, configure):
        configure(API_KEYS="k-alpha:user-a,k-beta:user-a")

        assert caller_key(_request({"X-API-KEY": "k-alpha"})) == "user:user-a"
        assert caller_key(_request({"X-API-KEY": "k-beta"})) == "user:user-a"

    def test_unknown_key_buckets_by_address(self, configure):
        configure(API_KEYS="k-alpha:user-a")

        assert caller_key(_request({"X-API-KEY": "guess"})) == "addr:192.168.1.100"

    def test_development_uses_user_header(self):
        assert caller_key(_request({"X-USER-ID": "user-b"})) == "user:user-b"

    def test_production_ignores_user_header(self, configure):
        configure(ENVIRONMENT="production")

        assert caller_key(_request({"X-USER-ID": "user-b"})) == "addr:192.168.1.100"

    def test_anonymous_buckets_by_address(self):
        assert caller_key(_request()) == "addr:192.168.1.100"


class TestLimiter:
    def test_disabled_by_default(self):
        assert create_limiter().enabled is False

    def test_enabled_from_env(self, configure):
        configure(RATE_LIMIT_ENABLED="true")

        assert create_limiter().enabled is True

    def test_write_and_read_limits(self, configure):
        configure(RATE_LIMIT_WRITE="5/minute", RATE_LIMIT_DEFAULT="50/minute")

        assert write_limit() == "5/minute"
        assert read_limit() == "50/minute"
