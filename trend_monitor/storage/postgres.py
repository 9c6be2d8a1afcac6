"""
PostgreSQL repository implementations.

This module provides asyncpg-based implementations of the storage interfaces,
the connection pool wrapper and the schema DDL.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import asyncpg
from asyncpg import Pool

from trend_monitor.processing.keywords import canonicalize_keyword
from trend_monitor.storage.interfaces import (
    BaseIngestionMetricsRepository,
    BaseKeywordRepository,
    BaseRawIngestionRepository,
    BaseTrendDataRepository,
    ConnectionError,
    IntegrityError,
    StorageError,
    StorageGateway,
)
from trend_monitor.types import (
    IngestionMetrics,
    Keyword,
    KeywordAssociation,
    ProcessingStatus,
    RawIngestionRecord,
    Sentiment,
    SourceType,
    TrendKeywordView,
    TrendRecord,
    TrendView,
    clamp_unit,
)

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS "uuid-ossp";

DO $$ BEGIN
    CREATE TYPE processing_status AS ENUM ('pending', 'processing', 'completed', 'failed');
EXCEPTION
    WHEN duplicate_object THEN NULL;
END $$;

CREATE TABLE IF NOT EXISTS raw_data_ingestion (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    source_type TEXT NOT NULL,
    source_url TEXT,
    raw_content JSONB NOT NULL,
    metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
    processing_status processing_status NOT NULL DEFAULT 'pending',
    ingested_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    processed_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS trend_data (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    raw_data_id UUID NOT NULL REFERENCES raw_data_ingestion(id) ON DELETE CASCADE,
    content_summary TEXT NOT NULL,
    sentiment TEXT NOT NULL CHECK (sentiment IN ('positive', 'negative', 'neutral')),
    confidence_score DOUBLE PRECISION NOT NULL CHECK (confidence_score BETWEEN 0 AND 1),
    mention_count INTEGER NOT NULL DEFAULT 1 CHECK (mention_count >= 0),
    engagement_metrics JSONB NOT NULL DEFAULT '{}'::jsonb,
    source_type TEXT NOT NULL,
    timestamp_original TIMESTAMPTZ NOT NULL,
    location_data JSONB,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_trend_data_timestamp_original
    ON trend_data (timestamp_original DESC);

CREATE TABLE IF NOT EXISTS keywords (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    keyword TEXT NOT NULL UNIQUE,
    category TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS trend_keywords (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    keyword_id UUID NOT NULL REFERENCES keywords(id) ON DELETE CASCADE,
    trend_data_id UUID NOT NULL REFERENCES trend_data(id) ON DELETE CASCADE,
    relevance_score DOUBLE PRECISION NOT NULL CHECK (relevance_score BETWEEN 0 AND 1),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (keyword_id, trend_data_id)
);

CREATE TABLE IF NOT EXISTS ingestion_metrics (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    source_type TEXT NOT NULL,
    records_processed INTEGER NOT NULL DEFAULT 0,
    records_failed INTEGER NOT NULL DEFAULT 0,
    processing_duration_ms INTEGER NOT NULL DEFAULT 0,
    error_details JSONB NOT NULL DEFAULT '[]'::jsonb,
    batch_timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


# ============================================================================
# Connection Pool Management
# ============================================================================


class PostgreSQLConnectionPool:
    """
    Manages PostgreSQL connection pool lifecycle.

    A single pool is shared by all repositories of a process.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "trends",
        user: str = "trend_user",
        password: str = "trend_password",
        min_size: int = 2,
        max_size: int = 10,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[Pool] = None

    async def connect(self) -> Pool:
        """
        Create and return a connection pool.

        Returns:
            asyncpg connection pool

        Raises:
            ConnectionError: If connection fails
        """
        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=60,
            )
            logger.info(
                f"PostgreSQL connection pool created: {self.host}:{self.port}/{self.database}"
            )
            return self._pool
        except Exception as e:
            logger.error(f"Failed to create connection pool: {e}")
            raise ConnectionError(f"Database connection failed: {e}")

    async def close(self):
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL connection pool closed")

    @property
    def pool(self) -> Optional[Pool]:
        """Get the current pool instance."""
        return self._pool


async def init_schema(pool: Pool) -> None:
    """
    Create the tables, enum type and indexes if they do not exist.

    Raises:
        StorageError: If the DDL fails
    """
    try:
        async with pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
        logger.info("Database schema initialized")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise StorageError(f"Failed to initialize schema: {e}")


def build_gateway(pool: Pool) -> StorageGateway:
    """Bundle PostgreSQL repositories sharing one pool."""
    return StorageGateway(
        raw=PostgreSQLRawIngestionRepository(pool),
        trends=PostgreSQLTrendDataRepository(pool),
        keywords=PostgreSQLKeywordRepository(pool),
        metrics=PostgreSQLIngestionMetricsRepository(pool),
    )


# ============================================================================
# Helper Functions
# ============================================================================


def _to_jsonb(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, default=str)


def _from_jsonb(value: Any, default: Any = None) -> Any:
    if value is None:
        return default
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_raw_record(row: asyncpg.Record) -> RawIngestionRecord:
    return RawIngestionRecord(
        id=row["id"],
        source_type=SourceType(row["source_type"]),
        source_url=row["source_url"],
        raw_content=_from_jsonb(row["raw_content"], {}),
        metadata=_from_jsonb(row["metadata"], {}),
        processing_status=ProcessingStatus(row["processing_status"]),
        ingested_at=row["ingested_at"],
        processed_at=row["processed_at"],
    )


def _row_to_trend_record(row: asyncpg.Record) -> TrendRecord:
    return TrendRecord(
        id=row["id"],
        raw_data_id=row["raw_data_id"],
        content_summary=row["content_summary"],
        sentiment=Sentiment(row["sentiment"]),
        confidence_score=row["confidence_score"],
        mention_count=row["mention_count"],
        engagement_metrics=_from_jsonb(row["engagement_metrics"], {}),
        source_type=SourceType(row["source_type"]),
        timestamp_original=row["timestamp_original"],
        location_data=_from_jsonb(row["location_data"]),
        created_at=row["created_at"],
    )


def _row_to_keyword(row: asyncpg.Record) -> Keyword:
    return Keyword(
        id=row["id"],
        keyword=row["keyword"],
        category=row["category"],
        created_at=row["created_at"],
    )


def _row_to_association(row: asyncpg.Record) -> KeywordAssociation:
    return KeywordAssociation(
        id=row["id"],
        keyword_id=row["keyword_id"],
        trend_data_id=row["trend_data_id"],
        relevance_score=row["relevance_score"],
    )


def _row_to_metrics(row: asyncpg.Record) -> IngestionMetrics:
    return IngestionMetrics(
        id=row["id"],
        source_type=SourceType(row["source_type"]),
        records_processed=row["records_processed"],
        records_failed=row["records_failed"],
        processing_duration_ms=row["processing_duration_ms"],
        error_details=_from_jsonb(row["error_details"], []),
        batch_timestamp=row["batch_timestamp"],
    )


# ============================================================================
# Repository Implementations
# ============================================================================


class PostgreSQLRawIngestionRepository(BaseRawIngestionRepository):
    """PostgreSQL implementation of RawIngestionRepository."""

    def __init__(self, pool: Pool):
        self.pool = pool

    async def create(self, record: RawIngestionRecord) -> UUID:
        try:
            query = """
                INSERT INTO raw_data_ingestion (
                    id, source_type, source_url, raw_content, metadata,
                    processing_status, ingested_at, processed_at
                ) VALUES (
                    COALESCE($1, uuid_generate_v4()), $2, $3, $4::jsonb, $5::jsonb,
                    $6::processing_status, $7, $8
                )
                RETURNING id
            """
            record_id = await self.pool.fetchval(
                query,
                record.id,
                record.source_type.value,
                record.source_url,
                _to_jsonb(record.raw_content),
                _to_jsonb(record.metadata),
                record.processing_status.value,
                record.ingested_at,
                record.processed_at,
            )
            logger.debug(f"Saved raw record {record_id} from {record.source_type.value}")
            return record_id

        except Exception as e:
            logger.error(f"Failed to save raw record: {e}")
            raise StorageError(f"Failed to save raw record: {e}")

    async def get(self, record_id: UUID) -> Optional[RawIngestionRecord]:
        try:
            row = await self.pool.fetchrow(
                "SELECT * FROM raw_data_ingestion WHERE id = $1", record_id
            )
            return _row_to_raw_record(row) if row else None

        except Exception as e:
            logger.error(f"Failed to get raw record {record_id}: {e}")
            raise StorageError(f"Failed to get raw record: {e}")

    async def update_status(
        self,
        record_id: UUID,
        status: ProcessingStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        try:
            result = await self.pool.execute(
                """
                UPDATE raw_data_ingestion
                SET processing_status = $2::processing_status,
                    processed_at = COALESCE($3, processed_at)
                WHERE id = $1
                """,
                record_id,
                status.value,
                processed_at,
            )
            # asyncpg returns the command tag, e.g. "UPDATE 1"
            return result.split()[-1] != "0"

        except Exception as e:
            logger.error(f"Failed to update raw record {record_id}: {e}")
            raise StorageError(f"Failed to update raw record: {e}")


class PostgreSQLTrendDataRepository(BaseTrendDataRepository):
    """PostgreSQL implementation of TrendDataRepository."""

    def __init__(self, pool: Pool):
        self.pool = pool

    async def create(self, record: TrendRecord) -> UUID:
        try:
            query = """
                INSERT INTO trend_data (
                    id, raw_data_id, content_summary, sentiment, confidence_score,
                    mention_count, engagement_metrics, source_type,
                    timestamp_original, location_data, created_at
                ) VALUES (
                    COALESCE($1, uuid_generate_v4()), $2, $3, $4, $5,
                    $6, $7::jsonb, $8, $9, $10::jsonb, $11
                )
                RETURNING id
            """
            trend_id = await self.pool.fetchval(
                query,
                record.id,
                record.raw_data_id,
                record.content_summary,
                record.sentiment.value,
                record.confidence_score,
                record.mention_count,
                _to_jsonb(record.engagement_metrics),
                record.source_type.value,
                record.timestamp_original,
                _to_jsonb(record.location_data),
                record.created_at,
            )
            logger.debug(f"Saved trend record {trend_id}")
            return trend_id

        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Raw record {record.raw_data_id} does not exist: {e}")
        except Exception as e:
            logger.error(f"Failed to save trend record: {e}")
            raise StorageError(f"Failed to save trend record: {e}")

    async def get(self, record_id: UUID) -> Optional[TrendRecord]:
        try:
            row = await self.pool.fetchrow("SELECT * FROM trend_data WHERE id = $1", record_id)
            return _row_to_trend_record(row) if row else None

        except Exception as e:
            logger.error(f"Failed to get trend record {record_id}: {e}")
            raise StorageError(f"Failed to get trend record: {e}")

    async def search_by_keyword(self, keyword: str, limit: int = 20) -> List[TrendView]:
        try:
            pattern = f"%{_escape_like(canonicalize_keyword(keyword))}%"
            rows = await self.pool.fetch(
                """
                SELECT td.* FROM trend_data td
                WHERE EXISTS (
                    SELECT 1 FROM trend_keywords tk
                    JOIN keywords k ON k.id = tk.keyword_id
                    WHERE tk.trend_data_id = td.id AND k.keyword ILIKE $1
                )
                ORDER BY td.timestamp_original DESC
                LIMIT $2
                """,
                pattern,
                limit,
            )
            if not rows:
                return []

            ids = [row["id"] for row in rows]
            keyword_rows = await self.pool.fetch(
                """
                SELECT tk.trend_data_id, k.keyword, tk.relevance_score
                FROM trend_keywords tk
                JOIN keywords k ON k.id = tk.keyword_id
                WHERE tk.trend_data_id = ANY($1::uuid[])
                ORDER BY tk.relevance_score DESC
                """,
                ids,
            )
            keywords_by_trend: Dict[UUID, List[TrendKeywordView]] = {}
            for row in keyword_rows:
                keywords_by_trend.setdefault(row["trend_data_id"], []).append(
                    TrendKeywordView(keyword=row["keyword"], relevance_score=row["relevance_score"])
                )

            return [
                TrendView(
                    id=row["id"],
                    content_summary=row["content_summary"],
                    sentiment=Sentiment(row["sentiment"]),
                    confidence_score=row["confidence_score"],
                    mention_count=row["mention_count"],
                    source_type=SourceType(row["source_type"]),
                    timestamp_original=row["timestamp_original"],
                    keywords=keywords_by_trend.get(row["id"], []),
                )
                for row in rows
            ]

        except Exception as e:
            logger.error(f"Failed to search trends for '{keyword}': {e}")
            raise StorageError(f"Failed to search trends: {e}")


class PostgreSQLKeywordRepository(BaseKeywordRepository):
    """PostgreSQL implementation of KeywordRepository."""

    _UPSERT = """
        INSERT INTO keywords (keyword, category)
        VALUES ($1, $2)
        ON CONFLICT (keyword) DO UPDATE
            SET category = COALESCE(keywords.category, EXCLUDED.category)
        RETURNING *
    """

    def __init__(self, pool: Pool):
        self.pool = pool

    async def get_or_create(self, keyword: str, category: Optional[str] = None) -> Keyword:
        text = canonicalize_keyword(keyword)
        if not text:
            raise StorageError("Keyword text must not be empty")
        try:
            row = await self.pool.fetchrow(self._UPSERT, text, category)
            return _row_to_keyword(row)

        except Exception as e:
            logger.error(f"Failed to save keyword '{text}': {e}")
            raise StorageError(f"Failed to save keyword: {e}")

    async def get_by_text(self, keyword: str) -> Optional[Keyword]:
        try:
            row = await self.pool.fetchrow(
                "SELECT * FROM keywords WHERE keyword = $1", canonicalize_keyword(keyword)
            )
            return _row_to_keyword(row) if row else None

        except Exception as e:
            logger.error(f"Failed to get keyword '{keyword}': {e}")
            raise StorageError(f"Failed to get keyword: {e}")

    async def add_trend_keywords(
        self, trend_id: UUID, keywords: Sequence[Tuple[str, float]]
    ) -> List[KeywordAssociation]:
        pairs = [(canonicalize_keyword(text), relevance) for text, relevance in keywords]
        pairs = [(text, relevance) for text, relevance in pairs if text]

        try:
            associations = []
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    for text, relevance in pairs:
                        keyword_row = await conn.fetchrow(self._UPSERT, text, None)
                        row = await conn.fetchrow(
                            """
                            INSERT INTO trend_keywords (keyword_id, trend_data_id, relevance_score)
                            VALUES ($1, $2, $3)
                            ON CONFLICT (keyword_id, trend_data_id) DO UPDATE
                                SET relevance_score = GREATEST(
                                    trend_keywords.relevance_score, EXCLUDED.relevance_score
                                )
                            RETURNING *
                            """,
                            keyword_row["id"],
                            trend_id,
                            clamp_unit(relevance),
                        )
                        associations.append(_row_to_association(row))

            logger.debug(f"Attached {len(associations)} keywords to trend {trend_id}")
            return associations

        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(f"Trend record {trend_id} does not exist: {e}")
        except Exception as e:
            logger.error(f"Failed to attach keywords to trend {trend_id}: {e}")
            raise StorageError(f"Failed to attach keywords: {e}")

    async def get_trend_keywords(self, trend_id: UUID) -> List[KeywordAssociation]:
        try:
            rows = await self.pool.fetch(
                """
                SELECT * FROM trend_keywords
                WHERE trend_data_id = $1
                ORDER BY relevance_score DESC
                """,
                trend_id,
            )
            return [_row_to_association(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to get keywords for trend {trend_id}: {e}")
            raise StorageError(f"Failed to get trend keywords: {e}")


class PostgreSQLIngestionMetricsRepository(BaseIngestionMetricsRepository):
    """PostgreSQL implementation of IngestionMetricsRepository."""

    def __init__(self, pool: Pool):
        self.pool = pool

    async def create(self, metrics: IngestionMetrics) -> UUID:
        try:
            return await self.pool.fetchval(
                """
                INSERT INTO ingestion_metrics (
                    id, source_type, records_processed, records_failed,
                    processing_duration_ms, error_details, batch_timestamp
                ) VALUES (
                    COALESCE($1, uuid_generate_v4()), $2, $3, $4, $5, $6::jsonb, $7
                )
                RETURNING id
                """,
                metrics.id,
                metrics.source_type.value,
                metrics.records_processed,
                metrics.records_failed,
                metrics.processing_duration_ms,
                _to_jsonb(metrics.error_details),
                metrics.batch_timestamp,
            )

        except Exception as e:
            logger.error(f"Failed to save ingestion metrics: {e}")
            raise StorageError(f"Failed to save ingestion metrics: {e}")

    async def list_recent(self, limit: int = 50) -> List[IngestionMetrics]:
        try:
            rows = await self.pool.fetch(
                "SELECT * FROM ingestion_metrics ORDER BY batch_timestamp DESC LIMIT $1",
                limit,
            )
            return [_row_to_metrics(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to list ingestion metrics: {e}")
            raise StorageError(f"Failed to list ingestion metrics: {e}")
