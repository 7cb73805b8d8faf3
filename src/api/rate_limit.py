"""
Per-caller rate limiting for the feedback routes (slowapi).

Requests are bucketed by the caller they resolve to: the user id an
API key maps to, or the ``X-USER-ID`` header in development mode.
Anything else, unknown keys included, is bucketed by client address.
Writes (create, update, tag) and reads draw from separate limits. The
limiter is inert unless ``RATE_LIMIT_ENABLED`` is set.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.config.settings import get_settings


def caller_key(request: Request) -> str:
    """Bucket key for ``request``: ``user:<id>`` or ``addr:<ip>``."""
    settings = get_settings()
    key_map = settings.api_key_map

    if key_map:
        user_id = key_map.get(request.headers.get("X-API-KEY", ""))
    elif not settings.is_production:
        user_id = request.headers.get("X-USER-ID")
    else:
        user_id = None

    if user_id:
        return f"user:{user_id}"
    return f"addr:{get_remote_address(request)}"


def write_limit() -> str:
    return get_settings().rate_limit_write


def read_limit() -> str:
    return get_settings().rate_limit_default


def create_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=caller_key,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        enabled=settings.rate_limit_enabled,
    )


limiter = create_limiter()
