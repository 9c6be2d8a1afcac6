"""
Prometheus metrics for the trend monitor.

This module defines and exports Prometheus metrics for monitoring:
- API request rates and latencies
- Search invocations and their duration
- Adapter result counts and failures
- Records processed and failed per source
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
)


# Create a custom registry for this application
metrics_registry = CollectorRegistry()


# ============================================================================
# API Metrics
# ============================================================================

api_request_counter = Counter(
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
    registry=metrics_registry,
)

api_request_duration = Histogram(
    "api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=metrics_registry,
)

# ============================================================================
# Ingestion Metrics
# ============================================================================

searches_counter = Counter(
    "trend_searches_total",
    "Total number of search invocations",
    ["status"],  # success, rejected, aborted
    registry=metrics_registry,
)

search_duration = Histogram(
    "trend_search_duration_seconds",
    "Search invocation duration in seconds",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    registry=metrics_registry,
)

adapter_results_counter = Counter(
    "adapter_results_total",
    "Total number of results returned by source adapters",
    ["source"],
    registry=metrics_registry,
)

adapter_failures_counter = Counter(
    "adapter_failures_total",
    "Total number of adapter calls that failed and yielded no results",
    ["source"],
    registry=metrics_registry,
)

records_processed_counter = Counter(
    "records_processed_total",
    "Total number of search results analyzed and stored",
    ["source"],
    registry=metrics_registry,
)

records_failed_counter = Counter(
    "records_failed_total",
    "Total number of search results that failed processing",
    ["source", "error_type"],
    registry=metrics_registry,
)

# ============================================================================
# Application Info
# ============================================================================

app_info = Info(
    "app",
    "Application information",
    registry=metrics_registry,
)

app_info.info({
    "name": "Trend Monitor",
    "version": "1.0.0",
})


# ============================================================================
# Decorator Functions for Auto-Instrumentation
# ============================================================================

def track_api_request(endpoint: str, method: str = "GET"):
    """
    Decorator to track API request metrics.

    Args:
        endpoint: API endpoint path
        method: HTTP method served by the endpoint

    Example:
        @track_api_request("/api/v1/trends")
        async def list_trends():
            pass
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status_code = 500

            try:
                result = await func(*args, **kwargs)
                status_code = getattr(result, "status_code", 200)
                return result

            finally:
                duration = time.time() - start_time
                api_request_duration.labels(
                    method=method,
                    endpoint=endpoint,
                ).observe(duration)

                api_request_counter.labels(
                    method=method,
                    endpoint=endpoint,
                    status_code=status_code,
                ).inc()

        return wrapper
    return decorator


# ============================================================================
# Metrics Endpoint Handler
# ============================================================================

def get_metrics() -> bytes:
    """Get Prometheus metrics in text format."""
    return generate_latest(metrics_registry)


# ============================================================================
# Helper Functions
# ============================================================================

def record_adapter_results(source: str, count: int):
    """Record results returned by an adapter."""
    adapter_results_counter.labels(source=source).inc(count)


def record_adapter_failure(source: str):
    """Record an adapter call that failed."""
    adapter_failures_counter.labels(source=source).inc()


def record_processed(source: str, count: int = 1):
    """Record search results analyzed and stored."""
    records_processed_counter.labels(source=source).inc(count)


def record_failed(source: str, error_type: str, count: int = 1):
    """Record search results that failed processing."""
    records_failed_counter.labels(source=source, error_type=error_type).inc(count)
