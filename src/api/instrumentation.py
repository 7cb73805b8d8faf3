"""Per-operation metrics recording shared by the feedback routes."""

import time

from src.feedback.errors import FeedbackError
from src.observability.metrics import get_metrics

_STATUS_BY_CODE = {
    "UNAUTHORIZED": "unauthorized",
    "NOT_FOUND": "not_found",
    "BAD_REQUEST": "bad_request",
}


def record_operation(
    operation: str,
    start_time: float,
    error: BaseException | None = None,
) -> float:
    """Record an operation outcome and return its latency in milliseconds."""
    elapsed = time.perf_counter() - start_time

    if error is None:
        status = "success"
    elif isinstance(error, FeedbackError):
        status = _STATUS_BY_CODE.get(error.code, "error")
    else:
        status = "error"

    get_metrics().record_operation(operation, status, latency=elapsed)
    return round(elapsed * 1000, 2)
