"""
Persistence gateway for ingested and analyzed content.

Exports the repository contracts, the storage exceptions and the PostgreSQL
implementations.
"""

from trend_monitor.storage.interfaces import (
    ConnectionError,
    IngestionMetricsRepository,
    IntegrityError,
    KeywordRepository,
    NotFoundError,
    RawIngestionRepository,
    StorageError,
    StorageGateway,
    TrendDataRepository,
)
from trend_monitor.storage.postgres import (
    PostgreSQLConnectionPool,
    PostgreSQLIngestionMetricsRepository,
    PostgreSQLKeywordRepository,
    PostgreSQLRawIngestionRepository,
    PostgreSQLTrendDataRepository,
    build_gateway,
    init_schema,
)

__all__ = [
    "ConnectionError",
    "IngestionMetricsRepository",
    "IntegrityError",
    "KeywordRepository",
    "NotFoundError",
    "RawIngestionRepository",
    "StorageError",
    "StorageGateway",
    "TrendDataRepository",
    "PostgreSQLConnectionPool",
    "PostgreSQLIngestionMetricsRepository",
    "PostgreSQLKeywordRepository",
    "PostgreSQLRawIngestionRepository",
    "PostgreSQLTrendDataRepository",
    "build_gateway",
    "init_schema",
]
