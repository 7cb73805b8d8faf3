"""
Request deadline middleware.

A request that runs past ``timeout_seconds`` is cancelled and answered
with 504 in the same ``{detail, error_type}`` shape the feedback error
handlers use. Paths under ``exempt_prefixes`` (``/health`` by default,
see ``REQUEST_TIMEOUT_EXEMPT_PATHS``) run without a deadline.
"""

import asyncio

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger(__name__)

DEFAULT_EXEMPT_PREFIXES: tuple[str, ...] = ("/health",)


def deadline_exceeded(timeout_seconds: float) -> JSONResponse:
    return JSONResponse(
        status_code=504,
        content={
            "detail": f"Request exceeded the {timeout_seconds:g}s deadline",
            "error_type": "TIMEOUT",
        },
    )


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Cancel feedback requests that outlive their deadline."""

    def __init__(
        self,
        app,
        timeout_seconds: float,
        exempt_prefixes: tuple[str, ...] = DEFAULT_EXEMPT_PREFIXES,
    ):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds
        self.exempt_prefixes = tuple(exempt_prefixes)

    def is_exempt(self, path: str) -> bool:
        return bool(self.exempt_prefixes) and path.startswith(self.exempt_prefixes)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self.is_exempt(request.url.path):
            return await call_next(request)

        try:
            return await asyncio.wait_for(call_next(request), self.timeout_seconds)
        except TimeoutError:
            logger.warning(
                "request_deadline_exceeded",
                method=request.method,
                path=request.url.path,
                timeout_seconds=self.timeout_seconds,
            )
            return deadline_exceeded(self.timeout_seconds)
