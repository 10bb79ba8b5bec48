"""Observability: structured logging and Prometheus metrics."""

from pgn_mule.observability.logging import get_logger, setup_logging
from pgn_mule.observability.metrics import MetricsCollector, get_metrics

__all__ = ["MetricsCollector", "get_logger", "get_metrics", "setup_logging"]
