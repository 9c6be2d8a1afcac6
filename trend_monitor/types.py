"""
Shared type definitions for the trend monitor.

This module contains the models passed between the source adapters, the text
analyzers, the ingestion orchestrator and the persistence gateway.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def clamp_unit(value: float) -> float:
    """Clamp a score into the closed interval [0, 1]."""
    return max(0.0, min(1.0, float(value)))


# ============================================================================
# Enums
# ============================================================================


class SourceType(str, Enum):
    """Type of content source."""

    NEWS = "news"
    REDDIT = "reddit"
    HACKERNEWS = "hackernews"
    YLE = "yle"
    HS = "hs"
    ILTALEHTI = "iltalehti"
    SUOMI24 = "suomi24"


class ProcessingStatus(str, Enum):
    """Processing state of a raw ingestion record."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Sentiment(str, Enum):
    """Overall polarity of a text."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Language(str, Enum):
    """Languages recognised by the language detector."""

    FINNISH = "fi"
    SWEDISH = "sv"
    ENGLISH = "en"


class ErrorType(str, Enum):
    """Per-result error kinds reported in an ingestion summary."""

    RAW_STORAGE = "raw_storage"
    TREND_STORAGE = "trend_storage"
    KEYWORD_STORAGE = "keyword_storage"
    PROCESSING = "processing"


class TrendDirection(str, Enum):
    """Direction of a mention-count forecast."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# ============================================================================
# Adapter Models
# ============================================================================


class SearchResult(BaseModel):
    """A piece of content fetched by a source adapter, before analysis."""

    title: str
    content: str = ""
    url: str
    source: SourceType
    published_at: datetime
    author: Optional[str] = None
    engagement: Optional[Dict[str, Any]] = None
    language: Optional[Language] = None
    region: Optional[str] = None
    city: Optional[str] = None

    class Config:
        frozen = True

    @property
    def analysis_text(self) -> str:
        """Text used for sentiment, language and location analysis."""
        return self.content or self.title

    @property
    def full_text(self) -> str:
        """Title and content joined, used for keyword extraction."""
        return f"{self.title} {self.content or ''}"


class AdapterMetadata(BaseModel):
    """Metadata for a source adapter."""

    name: str
    source_type: SourceType
    description: str
    enabled: bool = True
    max_results: int = 10

    class Config:
        frozen = True


# ============================================================================
# Analysis Models
# ============================================================================


class SentimentResult(BaseModel):
    """Output of a sentiment scorer."""

    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: float = 0.5
    emotions: List[str] = Field(default_factory=list)
    intensity: float = 1.0

    class Config:
        frozen = True


class LocationData(BaseModel):
    """Best location match found in a text."""

    region: Optional[str] = None
    city: Optional[str] = None
    confidence: float = 0.0

    class Config:
        frozen = True

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        return clamp_unit(value)


class ExtractedKeyword(BaseModel):
    """A keyword with its heuristic relevance to a text."""

    keyword: str
    relevance: float
    is_compound: bool = False

    class Config:
        frozen = True


class AnalysisResult(BaseModel):
    """Combined output of all text analyzers for one search result."""

    sentiment: Sentiment
    confidence: float
    emotions: List[str] = Field(default_factory=list)
    intensity: float = 1.0
    language: Language
    location: LocationData = Field(default_factory=LocationData)
    keywords: List[ExtractedKeyword] = Field(default_factory=list)


class DataPoint(BaseModel):
    """A single observation in a mention-count time series."""

    value: float
    timestamp: datetime


class TrendPrediction(BaseModel):
    """Linear forecast of a mention-count time series."""

    forecast: List[int] = Field(default_factory=list)
    confidence: float = 0.0
    timeframe: str
    trend: TrendDirection = TrendDirection.STABLE


# ============================================================================
# Persisted Records
# ============================================================================


class RawIngestionRecord(BaseModel):
    """Persisted copy of a search result plus its processing status."""

    id: Optional[UUID] = None
    source_type: SourceType
    source_url: Optional[str] = None
    raw_content: Dict[str, Any]
    metadata: Dict[str, Any] = Field(default_factory=dict)
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    ingested_at: datetime = Field(default_factory=utcnow)
    processed_at: Optional[datetime] = None


class TrendRecord(BaseModel):
    """Analyzed representation of a search result."""

    id: Optional[UUID] = None
    raw_data_id: UUID
    content_summary: str
    sentiment: Sentiment
    confidence_score: float
    mention_count: int = Field(1, ge=0)
    engagement_metrics: Dict[str, Any] = Field(default_factory=dict)
    source_type: SourceType
    timestamp_original: datetime
    location_data: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("confidence_score")
    @classmethod
    def clamp_confidence_score(cls, value: float) -> float:
        return clamp_unit(value)


class Keyword(BaseModel):
    """A canonicalised keyword, unique by text."""

    id: Optional[UUID] = None
    keyword: str
    category: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class KeywordAssociation(BaseModel):
    """Relevance-scored link between a keyword and a trend record."""

    id: Optional[UUID] = None
    keyword_id: UUID
    trend_data_id: UUID
    relevance_score: float

    @field_validator("relevance_score")
    @classmethod
    def clamp_relevance_score(cls, value: float) -> float:
        return clamp_unit(value)


class IngestionMetrics(BaseModel):
    """Per-source aggregate for one search invocation."""

    id: Optional[UUID] = None
    source_type: SourceType
    records_processed: int = 0
    records_failed: int = 0
    processing_duration_ms: int = 0
    error_details: List[Dict[str, Any]] = Field(default_factory=list)
    batch_timestamp: datetime = Field(default_factory=utcnow)


# ============================================================================
# Summary Models
# ============================================================================


class KeywordRelevance(BaseModel):
    """Keyword entry attached to a trend summary."""

    keyword: str
    relevance: float

    @field_validator("relevance")
    @classmethod
    def clamp_relevance(cls, value: float) -> float:
        return clamp_unit(value)


class IngestionError(BaseModel):
    """A per-result error recorded during one search invocation."""

    type: ErrorType
    error: str
    result: str
    source: Optional[str] = None


class TrendSummary(BaseModel):
    """Per-result entry in an ingestion summary."""

    id: UUID
    content_summary: str
    sentiment: Sentiment
    confidence_score: float
    mention_count: int
    source_type: SourceType
    timestamp_original: datetime
    keywords: List[KeywordRelevance] = Field(default_factory=list)
    emotions: Optional[List[str]] = None
    language: Optional[Language] = None
    region: Optional[str] = None
    city: Optional[str] = None


class IngestionSummary(BaseModel):
    """Result of one search invocation."""

    success: bool = True
    results: List[TrendSummary] = Field(default_factory=list)
    total_found: int = 0
    total_processed: int = 0
    total_failed: int = 0
    processing_time_ms: int = 0
    sources_searched: List[str] = Field(default_factory=list)
    errors: Optional[List[IngestionError]] = None


class TrendKeywordView(BaseModel):
    """A stored keyword association, as read back for the dashboard."""

    keyword: str
    relevance_score: float


class TrendView(BaseModel):
    """A stored trend record with its keywords, as read by the dashboard."""

    id: UUID
    content_summary: str
    sentiment: Sentiment
    confidence_score: float
    mention_count: int
    source_type: SourceType
    timestamp_original: datetime
    keywords: List[TrendKeywordView] = Field(default_factory=list)
