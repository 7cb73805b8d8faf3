"""
Prometheus metrics for the feedback API.

Counts every operation by outcome and records its latency. Exposed on a
separate HTTP port for Prometheus scraping (see ``serve``).
"""

import logging

from prometheus_client import REGISTRY, Counter, Histogram, start_http_server

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)


class MetricsCollector:
    """
    Prometheus metrics collector for feedback operations.

    Usage:
        metrics = get_metrics()
        metrics.record_operation("createFeedbackSource", "success", latency=0.012)
    """

    def __init__(self):
        self.operations = Counter(
            "feedback_tracker_operations_total",
            "Total feedback operations handled",
            ["operation", "status"],  # status: success, unauthorized, not_found, bad_request, error
        )

        self.operation_latency = Histogram(
            "feedback_tracker_operation_latency_seconds",
            "Time to handle a feedback operation",
            ["operation"],
            buckets=LATENCY_BUCKETS,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info("Prometheus metrics server started on port %d", port)

    def record_operation(
        self,
        operation: str,
        status: str,
        latency: float | None = None,
    ) -> None:
        """
        Record the outcome of one operation.

        Args:
            operation: Operation name (e.g. createFeedbackEntry)
            status: Outcome label
            latency: Optional handling time in seconds
        """
        self.operations.labels(operation=operation, status=status).inc()
        if latency is not None:
            self.operation_latency.labels(operation=operation).observe(latency)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
