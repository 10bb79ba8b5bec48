"""
Prometheus metrics for monitoring the relay.

Defines and exposes metrics for:
- Upstream polls by outcome
- Source retirements
- Feed requests and composition latency
- Live poll tasks

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from pgn_mule.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for feed composition latency (in seconds)
LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)


class MetricsCollector:
    """
    Prometheus metrics collector for pgn-mule.

    Usage:
        metrics = MetricsCollector()
        metrics.start_server()

        metrics.record_poll("ok")
        metrics.feed_latency.observe(0.004)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.polls = Counter(
            "pgn_mule_polls_total",
            "Total upstream polls",
            ["outcome"],  # ok, empty, not_found, http_error, network_error
        )

        self.retirements = Counter(
            "pgn_mule_source_retirements_total",
            "Sources removed due to inactivity",
        )

        self.feed_requests = Counter(
            "pgn_mule_feed_requests_total",
            "Total aggregated feed requests",
        )

        self.feed_latency = Histogram(
            "pgn_mule_feed_latency_seconds",
            "Time spent composing an aggregated feed",
            buckets=LATENCY_BUCKETS,
        )

        self.active_pollers = Gauge(
            "pgn_mule_active_pollers",
            "Number of sources with a live poll task",
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
        logger.info(f"Prometheus metrics server started on port {port}")

    def record_poll(self, outcome: str) -> None:
        """Record the outcome of one upstream poll."""
        self.polls.labels(outcome=outcome).inc()

    def set_active_pollers(self, count: int) -> None:
        """Set the number of live poll tasks."""
        self.active_pollers.set(count)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
