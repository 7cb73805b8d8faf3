"""Typed errors raised by the feedback service.

Each error carries a machine-readable ``code`` and the HTTP status the
API layer renders it with. ``NotFoundError`` is used both for missing
records and for records owned by someone else, so callers cannot probe
for the existence of other users' data.
"""


class FeedbackError(Exception):
    """Base class for feedback errors surfaced to callers."""

    code = "internal"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(FeedbackError):
    """No caller identity is available for the request."""

    code = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(FeedbackError):
    """Referenced source or entry does not exist or is not owned by the caller."""

    code = "NOT_FOUND"
    status_code = 404


class FeedbackValidationError(FeedbackError, ValueError):
    """Input failed a shape or content constraint."""

    code = "BAD_REQUEST"
    status_code = 422
