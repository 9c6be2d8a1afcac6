"""
Mock implementations for testing.

In-memory storage and adapter doubles so tests run without a database or
network access.
"""

from tests.mocks.adapters import FailingAdapter, StaticAdapter
from tests.mocks.storage import (
    FailureInjector,
    MockIngestionMetricsRepository,
    MockKeywordRepository,
    MockRawIngestionRepository,
    MockTrendDataRepository,
    create_mock_gateway,
)

__all__ = [
    "FailingAdapter",
    "StaticAdapter",
    "FailureInjector",
    "MockIngestionMetricsRepository",
    "MockKeywordRepository",
    "MockRawIngestionRepository",
    "MockTrendDataRepository",
    "create_mock_gateway",
]
