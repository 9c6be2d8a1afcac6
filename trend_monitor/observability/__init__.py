"""
Observability module for logging and metrics.

- Prometheus metrics exporters
- Structured logging with per-search context
"""

from trend_monitor.observability.metrics import (
    metrics_registry,
    api_request_counter,
    api_request_duration,
    searches_counter,
    search_duration,
    get_metrics,
)

from trend_monitor.observability.logging import (
    setup_logging,
    get_logger,
    log_context,
)

__all__ = [
    # Metrics
    "metrics_registry",
    "api_request_counter",
    "api_request_duration",
    "searches_counter",
    "search_duration",
    "get_metrics",
    # Logging
    "setup_logging",
    "get_logger",
    "log_context",
]
