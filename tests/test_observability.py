"""
Tests for observability components (metrics and logging).

This module tests:
- Prometheus metrics collection and export
- Metric decorators
- Structured logging functionality
- Log context management
"""

import json
import logging
import sys

import pytest

from trend_monitor.observability.logging import (
    JSONFormatter,
    get_logger,
    log_context,
    request_context,
    setup_logging,
)
from trend_monitor.observability.metrics import (
    adapter_failures_counter,
    api_request_counter,
    get_metrics,
    record_adapter_failure,
    record_failed,
    record_processed,
    records_failed_counter,
    records_processed_counter,
    track_api_request,
)


# ============================================================================
# Metrics Tests
# ============================================================================

class TestPrometheusMetrics:
    """Test Prometheus metrics collection."""

    def test_record_processed(self):
        initial = records_processed_counter.labels(source="reddit")._value.get()

        record_processed("reddit", 3)

        assert records_processed_counter.labels(source="reddit")._value.get() == initial + 3

    def test_record_failed(self):
        counter = records_failed_counter.labels(source="news", error_type="raw_storage")
        initial = counter._value.get()

        record_failed("news", "raw_storage")

        assert counter._value.get() == initial + 1

    def test_record_adapter_failure(self):
        initial = adapter_failures_counter.labels(source="yle")._value.get()

        record_adapter_failure("yle")

        assert adapter_failures_counter.labels(source="yle")._value.get() == initial + 1

    def test_get_metrics(self):
        """Test metrics export."""
        metrics_text = get_metrics().decode("utf-8")

        assert "api_requests_total" in metrics_text
        assert "trend_searches_total" in metrics_text
        assert "adapter_results_total" in metrics_text

    @pytest.mark.asyncio
    async def test_track_api_request_decorator(self):
        """Test API request tracking decorator."""
        @track_api_request("/test/endpoint", method="POST")
        async def endpoint():
            return "success"

        counter = api_request_counter.labels(
            method="POST", endpoint="/test/endpoint", status_code=200
        )
        initial = counter._value.get()

        result = await endpoint()

        assert result == "success"
        assert counter._value.get() == initial + 1

    @pytest.mark.asyncio
    async def test_track_api_request_counts_failures_as_500(self):
        @track_api_request("/test/failing")
        async def endpoint():
            raise RuntimeError("boom")

        counter = api_request_counter.labels(
            method="GET", endpoint="/test/failing", status_code=500
        )
        initial = counter._value.get()

        with pytest.raises(RuntimeError):
            await endpoint()

        assert counter._value.get() == initial + 1


# ============================================================================
# Logging Tests
# ============================================================================

def make_record(message="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=message,
        args=(),
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Test JSON log formatting."""

    def test_basic_fields(self):
        output = json.loads(JSONFormatter().format(make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test_logger"
        assert output["message"] == "Test message"
        assert output["line"] == 42
        assert output["timestamp"].endswith("Z")
        assert "context" not in output

    def test_includes_log_context(self):
        with log_context(keyword="sustainable packaging"):
            output = json.loads(JSONFormatter().format(make_record()))

        assert output["context"] == {"keyword": "sustainable packaging"}

    def test_includes_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "bad value"
        assert "Traceback" in output["exception"]["traceback"]

    def test_includes_extra_fields(self):
        record = make_record()
        record.extra_fields = {"source": "reddit", "count": 4}

        output = json.loads(JSONFormatter().format(record))

        assert output["source"] == "reddit"
        assert output["count"] == 4


class TestLogContext:
    """Test contextvar-based log context."""

    def test_context_is_restored_on_exit(self):
        assert request_context.get() == {}

        with log_context(keyword="outer"):
            with log_context(source="reddit"):
                assert request_context.get() == {"keyword": "outer", "source": "reddit"}
            assert request_context.get() == {"keyword": "outer"}

        assert request_context.get() == {}

    def test_context_is_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with log_context(keyword="failing"):
                raise RuntimeError("boom")

        assert request_context.get() == {}


class TestLoggingSetup:
    """Test logging configuration."""

    def test_setup_json_logging(self):
        setup_logging(level="DEBUG", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_setup_plain_logging(self):
        setup_logging(level="WARNING", json_format=False)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_get_logger(self):
        assert get_logger("trend_monitor.test").name == "trend_monitor.test"
