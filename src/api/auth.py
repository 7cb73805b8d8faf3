"""
Caller identity resolution from the X-API-KEY header.

Configured keys (``API_KEYS``) map to stable user ids. With no keys
configured the service runs in development mode and trusts the
``X-USER-ID`` header instead, except in production where every request
is refused until keys are set. Either way a request without an identity
fails with UNAUTHORIZED before anything else runs.
"""

import structlog
from fastapi import Header, Security
from fastapi.security import APIKeyHeader

from src.config.settings import get_settings
from src.feedback.errors import UnauthorizedError
from src.feedback.guard import require_user

logger = structlog.get_logger(__name__)

# API key header scheme
api_key_header = APIKeyHeader(name="X-API-KEY", auto_error=False)


async def get_current_user(
    api_key: str | None = Security(api_key_header),
    dev_user_id: str | None = Header(default=None, alias="X-USER-ID"),
) -> str:
    """
    Resolve the authenticated user id for the request.

    Returns:
        The caller's user id

    Raises:
        UnauthorizedError: If no identity is present or the key is unknown
    """
    settings = get_settings()
    key_map = settings.api_key_map

    # No API keys configured: development mode, never in production
    if not key_map:
        if settings.is_production:
            logger.error("API_KEYS is empty in production; refusing X-USER-ID identity")
            raise UnauthorizedError("API keys are not configured.")
        return require_user(dev_user_id)

    if api_key is None:
        raise UnauthorizedError("You must be signed in to perform this action.")

    user_id = key_map.get(api_key)
    if user_id is None:
        raise UnauthorizedError("Invalid API key")

    return user_id
