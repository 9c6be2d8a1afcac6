"""
Storage layer interface contracts.

This module defines Protocol classes that specify the contract for the
persistence gateway, the abstract bases the implementations derive from,
and the storage exception hierarchy.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Protocol, Sequence, Tuple
from uuid import UUID

from trend_monitor.types import (
    IngestionMetrics,
    Keyword,
    KeywordAssociation,
    ProcessingStatus,
    RawIngestionRecord,
    TrendRecord,
    TrendView,
)


# ============================================================================
# Repository Interfaces (Protocol-based for type checking)
# ============================================================================


class RawIngestionRepository(Protocol):
    """Interface for raw ingestion record persistence."""

    async def create(self, record: RawIngestionRecord) -> UUID:
        """
        Insert a raw ingestion record.

        Args:
            record: The record to insert

        Returns:
            UUID of the inserted record

        Raises:
            StorageError: If the insert fails
        """
        ...

    async def get(self, record_id: UUID) -> Optional[RawIngestionRecord]:
        """
        Retrieve a raw record by ID.

        Args:
            record_id: UUID of the record

        Returns:
            The record if found, None otherwise
        """
        ...

    async def update_status(
        self,
        record_id: UUID,
        status: ProcessingStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        """
        Move a raw record to a new processing status.

        Args:
            record_id: UUID of the record
            status: New status
            processed_at: Completion time, set when the record is completed

        Returns:
            True if updated, False if not found
        """
        ...


class TrendDataRepository(Protocol):
    """Interface for analyzed trend record persistence."""

    async def create(self, record: TrendRecord) -> UUID:
        """
        Insert a trend record.

        Args:
            record: The record to insert; its raw record must exist

        Returns:
            UUID of the inserted record

        Raises:
            IntegrityError: If the referenced raw record does not exist
            StorageError: If the insert fails
        """
        ...

    async def get(self, record_id: UUID) -> Optional[TrendRecord]:
        """Retrieve a trend record by ID."""
        ...

    async def search_by_keyword(self, keyword: str, limit: int = 20) -> List[TrendView]:
        """
        Find trend records whose keywords contain a substring.

        Args:
            keyword: Case-insensitive substring to match against keywords
            limit: Maximum number of records

        Returns:
            Matching records with their keywords, newest original timestamp
            first
        """
        ...


class KeywordRepository(Protocol):
    """Interface for keywords and keyword associations."""

    async def get_or_create(self, keyword: str, category: Optional[str] = None) -> Keyword:
        """
        Return the keyword with the given canonical text, creating it if needed.

        Args:
            keyword: Keyword text; canonicalised before lookup
            category: Category for newly created keywords

        Returns:
            The stored keyword
        """
        ...

    async def get_by_text(self, keyword: str) -> Optional[Keyword]:
        """Retrieve a keyword by its canonical text."""
        ...

    async def add_trend_keywords(
        self, trend_id: UUID, keywords: Sequence[Tuple[str, float]]
    ) -> List[KeywordAssociation]:
        """
        Attach keywords to a trend record in one atomic operation.

        Missing keywords are created. Either every association is stored or
        none is.

        Args:
            trend_id: UUID of the trend record
            keywords: (keyword text, relevance) pairs

        Returns:
            The stored associations

        Raises:
            IntegrityError: If the trend record does not exist
            StorageError: If the operation fails
        """
        ...

    async def get_trend_keywords(self, trend_id: UUID) -> List[KeywordAssociation]:
        """Associations attached to a trend record."""
        ...


class IngestionMetricsRepository(Protocol):
    """Interface for per-source ingestion metrics."""

    async def create(self, metrics: IngestionMetrics) -> UUID:
        """Insert one metrics row."""
        ...

    async def list_recent(self, limit: int = 50) -> List[IngestionMetrics]:
        """Most recent metrics rows, newest batch first."""
        ...


class StorageGateway:
    """The repositories the ingestion orchestrator writes through."""

    def __init__(
        self,
        raw: RawIngestionRepository,
        trends: TrendDataRepository,
        keywords: KeywordRepository,
        metrics: IngestionMetricsRepository,
    ):
        self.raw = raw
        self.trends = trends
        self.keywords = keywords
        self.metrics = metrics


# ============================================================================
# Abstract Base Classes (for implementations)
# ============================================================================


class BaseRawIngestionRepository(ABC):
    """Abstract base class for raw ingestion repository implementations."""

    @abstractmethod
    async def create(self, record: RawIngestionRecord) -> UUID:
        pass

    @abstractmethod
    async def get(self, record_id: UUID) -> Optional[RawIngestionRecord]:
        pass

    @abstractmethod
    async def update_status(
        self,
        record_id: UUID,
        status: ProcessingStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        pass


class BaseTrendDataRepository(ABC):
    """Abstract base class for trend data repository implementations."""

    @abstractmethod
    async def create(self, record: TrendRecord) -> UUID:
        pass

    @abstractmethod
    async def get(self, record_id: UUID) -> Optional[TrendRecord]:
        pass

    @abstractmethod
    async def search_by_keyword(self, keyword: str, limit: int = 20) -> List[TrendView]:
        pass


class BaseKeywordRepository(ABC):
    """Abstract base class for keyword repository implementations."""

    @abstractmethod
    async def get_or_create(self, keyword: str, category: Optional[str] = None) -> Keyword:
        pass

    @abstractmethod
    async def get_by_text(self, keyword: str) -> Optional[Keyword]:
        pass

    @abstractmethod
    async def add_trend_keywords(
        self, trend_id: UUID, keywords: Sequence[Tuple[str, float]]
    ) -> List[KeywordAssociation]:
        pass

    @abstractmethod
    async def get_trend_keywords(self, trend_id: UUID) -> List[KeywordAssociation]:
        pass


class BaseIngestionMetricsRepository(ABC):
    """Abstract base class for ingestion metrics repository implementations."""

    @abstractmethod
    async def create(self, metrics: IngestionMetrics) -> UUID:
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 50) -> List[IngestionMetrics]:
        pass


# ============================================================================
# Exceptions
# ============================================================================


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class ConnectionError(StorageError):
    """Exception for connection failures."""

    pass


class IntegrityError(StorageError):
    """Exception for data integrity violations."""

    pass


class NotFoundError(StorageError):
    """Exception when resource is not found."""

    pass
