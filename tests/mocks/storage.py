"""
Mock storage implementations for testing.

These mocks provide in-memory implementations of the storage interfaces.
Each repository can be told to fail on chosen calls to exercise the
orchestrator's per-result error handling.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID, uuid4

from trend_monitor.processing.keywords import canonicalize_keyword
from trend_monitor.storage.interfaces import (
    BaseIngestionMetricsRepository,
    BaseKeywordRepository,
    BaseRawIngestionRepository,
    BaseTrendDataRepository,
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
    TrendKeywordView,
    TrendRecord,
    TrendView,
)


class FailureInjector:
    """
    Raises ``StorageError`` on selected write calls.

    Args:
        fail_on_calls: 1-based numbers of the write calls that fail
        fail_always: Fail every write call
    """

    def __init__(self, fail_on_calls: Iterable[int] = (), fail_always: bool = False):
        self.fail_on_calls = set(fail_on_calls)
        self.fail_always = fail_always
        self.calls = 0

    def check(self, operation: str) -> None:
        self.calls += 1
        if self.fail_always or self.calls in self.fail_on_calls:
            raise StorageError(f"Injected failure in {operation} (call {self.calls})")


class MockRawIngestionRepository(BaseRawIngestionRepository):
    """In-memory mock implementation of RawIngestionRepository."""

    def __init__(self, failures: Optional[FailureInjector] = None, fail_updates: bool = False):
        self.records: Dict[UUID, RawIngestionRecord] = {}
        self.failures = failures or FailureInjector()
        self.fail_updates = fail_updates

    async def create(self, record: RawIngestionRecord) -> UUID:
        self.failures.check("raw create")
        record_id = record.id or uuid4()
        self.records[record_id] = record.model_copy(update={"id": record_id})
        return record_id

    async def get(self, record_id: UUID) -> Optional[RawIngestionRecord]:
        return self.records.get(record_id)

    async def update_status(
        self,
        record_id: UUID,
        status: ProcessingStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        if self.fail_updates:
            raise StorageError("Injected failure in raw update")
        record = self.records.get(record_id)
        if record is None:
            return False
        self.records[record_id] = record.model_copy(
            update={
                "processing_status": status,
                "processed_at": processed_at or record.processed_at,
            }
        )
        return True


class MockTrendDataRepository(BaseTrendDataRepository):
    """In-memory mock implementation of TrendDataRepository."""

    def __init__(
        self,
        raw: MockRawIngestionRepository,
        failures: Optional[FailureInjector] = None,
    ):
        self.raw = raw
        self.records: Dict[UUID, TrendRecord] = {}
        self.failures = failures or FailureInjector()
        self.keywords: Optional["MockKeywordRepository"] = None

    async def create(self, record: TrendRecord) -> UUID:
        self.failures.check("trend create")
        if record.raw_data_id not in self.raw.records:
            raise IntegrityError(f"Raw record {record.raw_data_id} does not exist")
        record_id = record.id or uuid4()
        self.records[record_id] = record.model_copy(update={"id": record_id})
        return record_id

    async def get(self, record_id: UUID) -> Optional[TrendRecord]:
        return self.records.get(record_id)

    async def search_by_keyword(self, keyword: str, limit: int = 20) -> List[TrendView]:
        needle = canonicalize_keyword(keyword)
        views = []
        for record in self.records.values():
            associations = await self.keywords.get_trend_keywords(record.id)
            texts = [self.keywords.text_of(a.keyword_id) for a in associations]
            if not any(needle in text for text in texts):
                continue
            views.append(
                TrendView(
                    id=record.id,
                    content_summary=record.content_summary,
                    sentiment=record.sentiment,
                    confidence_score=record.confidence_score,
                    mention_count=record.mention_count,
                    source_type=record.source_type,
                    timestamp_original=record.timestamp_original,
                    keywords=[
                        TrendKeywordView(
                            keyword=self.keywords.text_of(a.keyword_id),
                            relevance_score=a.relevance_score,
                        )
                        for a in associations
                    ],
                )
            )
        views.sort(key=lambda v: v.timestamp_original, reverse=True)
        return views[:limit]


class MockKeywordRepository(BaseKeywordRepository):
    """In-memory mock implementation of KeywordRepository."""

    def __init__(
        self,
        trends: MockTrendDataRepository,
        failures: Optional[FailureInjector] = None,
    ):
        self.trends = trends
        self.keywords: Dict[str, Keyword] = {}
        self.associations: Dict[Tuple[UUID, UUID], KeywordAssociation] = {}
        self.failures = failures or FailureInjector()

    def text_of(self, keyword_id: UUID) -> str:
        for keyword in self.keywords.values():
            if keyword.id == keyword_id:
                return keyword.keyword
        raise KeyError(keyword_id)

    async def get_or_create(self, keyword: str, category: Optional[str] = None) -> Keyword:
        text = canonicalize_keyword(keyword)
        if not text:
            raise StorageError("Keyword text must not be empty")
        if text not in self.keywords:
            self.keywords[text] = Keyword(id=uuid4(), keyword=text, category=category)
        return self.keywords[text]

    async def get_by_text(self, keyword: str) -> Optional[Keyword]:
        return self.keywords.get(canonicalize_keyword(keyword))

    async def add_trend_keywords(
        self, trend_id: UUID, keywords: Sequence[Tuple[str, float]]
    ) -> List[KeywordAssociation]:
        self.failures.check("add trend keywords")
        if trend_id not in self.trends.records:
            raise IntegrityError(f"Trend record {trend_id} does not exist")

        # Stage everything first so a failure leaves no partial state
        staged_keywords = dict(self.keywords)
        staged_associations = dict(self.associations)
        created = []
        for text, relevance in keywords:
            text = canonicalize_keyword(text)
            if not text:
                continue
            if text not in staged_keywords:
                staged_keywords[text] = Keyword(id=uuid4(), keyword=text)
            keyword = staged_keywords[text]
            key = (keyword.id, trend_id)
            existing = staged_associations.get(key)
            score = max(relevance, existing.relevance_score) if existing else relevance
            association = KeywordAssociation(
                id=existing.id if existing else uuid4(),
                keyword_id=keyword.id,
                trend_data_id=trend_id,
                relevance_score=score,
            )
            staged_associations[key] = association
            created.append(association)

        self.keywords = staged_keywords
        self.associations = staged_associations
        return created

    async def get_trend_keywords(self, trend_id: UUID) -> List[KeywordAssociation]:
        found = [a for (_, t), a in self.associations.items() if t == trend_id]
        return sorted(found, key=lambda a: a.relevance_score, reverse=True)


class MockIngestionMetricsRepository(BaseIngestionMetricsRepository):
    """In-memory mock implementation of IngestionMetricsRepository."""

    def __init__(self, failures: Optional[FailureInjector] = None):
        self.rows: List[IngestionMetrics] = []
        self.failures = failures or FailureInjector()

    async def create(self, metrics: IngestionMetrics) -> UUID:
        self.failures.check("metrics create")
        row = metrics.model_copy(update={"id": metrics.id or uuid4()})
        self.rows.append(row)
        return row.id

    async def list_recent(self, limit: int = 50) -> List[IngestionMetrics]:
        rows = sorted(self.rows, key=lambda m: m.batch_timestamp, reverse=True)
        return rows[:limit]


def create_mock_gateway(
    raw_failures: Optional[FailureInjector] = None,
    trend_failures: Optional[FailureInjector] = None,
    keyword_failures: Optional[FailureInjector] = None,
    metrics_failures: Optional[FailureInjector] = None,
    fail_raw_updates: bool = False,
) -> StorageGateway:
    """Build a gateway of wired-together in-memory repositories."""
    raw = MockRawIngestionRepository(raw_failures, fail_updates=fail_raw_updates)
    trends = MockTrendDataRepository(raw, trend_failures)
    keywords = MockKeywordRepository(trends, keyword_failures)
    trends.keywords = keywords
    metrics = MockIngestionMetricsRepository(metrics_failures)
    return StorageGateway(raw=raw, trends=trends, keywords=keywords, metrics=metrics)
