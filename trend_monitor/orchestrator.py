"""
Ingestion orchestrator for one keyword search.

A search runs in four stages:

1. Dispatch: validate the keyword and start the timer
2. Fetch: query every enabled source adapter concurrently and merge the
   results in adapter order
3. Process: for each result, sequentially, store the raw record, analyze
   the text, store the trend record, attach keywords and mark the raw
   record completed
4. Summarize: write per-source ingestion metrics and build the summary

Per-result failures are recorded in the summary and never abort the search.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from trend_monitor.collectors import build_adapters
from trend_monitor.config import Settings
from trend_monitor.ingestion.base import SourceAdapter
from trend_monitor.observability.logging import log_context
from trend_monitor.observability.metrics import (
    record_adapter_results,
    record_failed,
    record_processed,
    search_duration,
    searches_counter,
)
from trend_monitor.processing import TextAnalyzer, canonicalize_keyword, create_analyzer
from trend_monitor.storage.interfaces import StorageGateway
from trend_monitor.types import (
    AnalysisResult,
    ErrorType,
    IngestionError,
    IngestionMetrics,
    IngestionSummary,
    KeywordRelevance,
    ProcessingStatus,
    RawIngestionRecord,
    SearchResult,
    SourceType,
    TrendRecord,
    TrendSummary,
    utcnow,
)

logger = logging.getLogger(__name__)

SEARCHED_KEYWORD_RELEVANCE = 1.0


class KeywordRequiredError(ValueError):
    """Raised when a search is started without a keyword."""

    def __init__(self, message: str = "Keyword is required"):
        super().__init__(message)


class IngestionAbortedError(Exception):
    """
    Raised when a search fails outside the per-result loop.

    Carries the counts gathered before the failure; the failure itself is
    counted in ``total_failed``.
    """

    def __init__(self, details: str, total_processed: int = 0, total_failed: int = 0):
        super().__init__(details)
        self.details = details
        self.total_processed = total_processed
        self.total_failed = total_failed


class _SourceStats:
    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.errors: List[IngestionError] = []


class _SearchRun:
    """Mutable bookkeeping for one search invocation."""

    def __init__(self):
        self.results: List[TrendSummary] = []
        self.errors: List[IngestionError] = []
        self.total_processed = 0
        self.total_failed = 0
        self.sources: "OrderedDict[SourceType, _SourceStats]" = OrderedDict()

    def stats_for(self, source: SourceType) -> _SourceStats:
        if source not in self.sources:
            self.sources[source] = _SourceStats()
        return self.sources[source]

    def add_result(self, source: SourceType, summary: TrendSummary) -> None:
        self.results.append(summary)
        self.total_processed += 1
        self.stats_for(source).processed += 1
        record_processed(source.value)

    def add_error(
        self,
        source: SourceType,
        error_type: ErrorType,
        error: Exception,
        label: str,
        counts_as_failure: bool = True,
    ) -> None:
        entry = IngestionError(
            type=error_type, error=str(error), result=label, source=source.value
        )
        self.errors.append(entry)
        stats = self.stats_for(source)
        stats.errors.append(entry)
        if counts_as_failure:
            self.total_failed += 1
            stats.failed += 1
            record_failed(source.value, error_type.value)


def _describe(item: Any) -> str:
    if isinstance(item, SearchResult):
        return item.title
    title = getattr(item, "title", None)
    if title is None and isinstance(item, dict):
        title = item.get("title")
    return str(title) if title else repr(item)[:100]


def mention_count(engagement: Optional[Dict[str, Any]]) -> int:
    """Comment count, else like count, else 1."""
    engagement = engagement or {}
    for key in ("comments", "likes"):
        value = engagement.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return int(value)
    return 1


def keyword_relevances(search_keyword: str, analysis: AnalysisResult) -> List[Tuple[str, float]]:
    """
    Keywords to attach to a trend record.

    The searched keyword comes first at relevance 1.0, followed by the
    extracted keywords with duplicates of it dropped.
    """
    searched = canonicalize_keyword(search_keyword)
    pairs = [(searched, SEARCHED_KEYWORD_RELEVANCE)]
    seen = {searched}
    for extracted in analysis.keywords:
        text = canonicalize_keyword(extracted.keyword)
        if not text or text in seen:
            continue
        seen.add(text)
        pairs.append((text, extracted.relevance))
    return pairs


class TrendIngestionOrchestrator:
    """
    Runs keyword searches across the enabled source adapters and persists
    what they find.

    Args:
        settings: Process configuration
        storage: Repositories to write through
        adapters: Source adapters in dispatch order; built from settings
            when omitted
        analyzer: Text analyzer; built from settings when omitted
    """

    def __init__(
        self,
        settings: Settings,
        storage: StorageGateway,
        adapters: Optional[Sequence[SourceAdapter]] = None,
        analyzer: Optional[TextAnalyzer] = None,
    ):
        self.settings = settings
        self.storage = storage
        self.adapters = list(adapters) if adapters is not None else build_adapters(settings)
        self.analyzer = analyzer or create_analyzer(settings)

        logger.info(
            f"TrendIngestionOrchestrator initialized with adapters: "
            f"{[a.name for a in self.adapters]}"
        )

    async def search(self, keyword: str) -> IngestionSummary:
        """
        Search all sources for a keyword, analyze and persist the results.

        Args:
            keyword: The user's search keyword

        Returns:
            Summary of the search

        Raises:
            KeywordRequiredError: If the keyword is empty or whitespace
            IngestionAbortedError: If the search fails outside per-result
                processing
        """
        if not isinstance(keyword, str) or not keyword.strip():
            searches_counter.labels(status="rejected").inc()
            raise KeywordRequiredError()

        keyword = keyword.strip()
        started = time.monotonic()
        batch_timestamp = utcnow()
        run = _SearchRun()

        with log_context(keyword=keyword):
            logger.info(f"Starting search across {len(self.adapters)} sources")
            try:
                fetched = await self._fetch_all(keyword)

                for adapter, item in fetched:
                    await self._process_result(adapter, item, keyword, run)

                elapsed = time.monotonic() - started
                duration_ms = int(elapsed * 1000)

                if self.settings.record_ingestion_metrics:
                    await self._record_metrics(run, duration_ms, batch_timestamp)

            except Exception as e:
                searches_counter.labels(status="aborted").inc()
                logger.error(f"Search aborted: {e}", exc_info=True)
                raise IngestionAbortedError(
                    str(e),
                    total_processed=run.total_processed,
                    total_failed=run.total_failed + 1,
                ) from e

            searches_counter.labels(status="success").inc()
            search_duration.observe(elapsed)
            logger.info(
                f"Processed {run.total_processed} results, {run.total_failed} failed, "
                f"in {duration_ms}ms"
            )

        return IngestionSummary(
            success=True,
            results=run.results,
            total_found=len(fetched),
            total_processed=run.total_processed,
            total_failed=run.total_failed,
            processing_time_ms=duration_ms,
            sources_searched=[adapter.name for adapter in self.adapters],
            errors=run.errors or None,
        )

    async def _fetch_all(self, keyword: str) -> List[Tuple[SourceAdapter, Any]]:
        """Query all adapters concurrently; merge in adapter order."""

        async def run_adapter(adapter: SourceAdapter) -> List[Any]:
            try:
                return list(await adapter.search(keyword))
            except Exception as e:
                # SourceAdapter.search already contains failures; this covers
                # adapters that do not derive from it
                logger.error(f"Adapter {adapter.name} raised: {e}", exc_info=True)
                return []

        batches = await asyncio.gather(*(run_adapter(a) for a in self.adapters))

        merged: List[Tuple[SourceAdapter, Any]] = []
        for adapter, batch in zip(self.adapters, batches):
            record_adapter_results(adapter.name, len(batch))
            merged.extend((adapter, item) for item in batch)

        logger.info(f"Found {len(merged)} total results")
        return merged

    async def _process_result(
        self, adapter: SourceAdapter, item: Any, keyword: str, run: _SearchRun
    ) -> None:
        source = item.source if isinstance(item, SearchResult) else adapter.metadata.source_type
        label = _describe(item)

        try:
            if not isinstance(item, SearchResult):
                raise TypeError(
                    f"{adapter.name} returned {type(item).__name__}, expected SearchResult"
                )

            try:
                raw_id = await self.storage.raw.create(
                    RawIngestionRecord(
                        source_type=item.source,
                        source_url=item.url,
                        raw_content=item.model_dump(mode="json"),
                        metadata={
                            "keyword": keyword,
                            "search_timestamp": utcnow().isoformat(),
                            "author": item.author,
                            "engagement": item.engagement,
                        },
                        processing_status=ProcessingStatus.PENDING,
                    )
                )
            except Exception as e:
                logger.error(f"Error storing raw data for '{label}': {e}")
                run.add_error(source, ErrorType.RAW_STORAGE, e, label)
                return

            analysis = self.analyzer.analyze(item.analysis_text, item.full_text, keyword)
            location = analysis.location

            record = TrendRecord(
                raw_data_id=raw_id,
                content_summary=item.title,
                sentiment=analysis.sentiment,
                confidence_score=analysis.confidence,
                mention_count=mention_count(item.engagement),
                engagement_metrics={**(item.engagement or {}), "emotions": analysis.emotions},
                source_type=item.source,
                timestamp_original=item.published_at,
                location_data=location.model_dump(),
            )

            try:
                trend_id = await self.storage.trends.create(record)
            except Exception as e:
                logger.error(f"Error storing trend data for '{label}': {e}")
                run.add_error(source, ErrorType.TREND_STORAGE, e, label)
                return

            keywords = keyword_relevances(keyword, analysis)
            try:
                await self.storage.keywords.add_trend_keywords(trend_id, keywords)
            except Exception as e:
                logger.error(f"Error adding keywords for '{label}': {e}")
                run.add_error(
                    source, ErrorType.KEYWORD_STORAGE, e, label, counts_as_failure=False
                )

            try:
                await self.storage.raw.update_status(
                    raw_id, ProcessingStatus.COMPLETED, processed_at=utcnow()
                )
            except Exception as e:
                logger.warning(f"Could not mark raw record {raw_id} completed: {e}")

            run.add_result(
                source,
                TrendSummary(
                    id=trend_id,
                    content_summary=record.content_summary,
                    sentiment=record.sentiment,
                    confidence_score=record.confidence_score,
                    mention_count=record.mention_count,
                    source_type=record.source_type,
                    timestamp_original=record.timestamp_original,
                    keywords=[KeywordRelevance(keyword=k, relevance=r) for k, r in keywords],
                    emotions=analysis.emotions,
                    language=analysis.language,
                    region=location.region,
                    city=location.city,
                ),
            )

        except Exception as e:
            logger.error(f"Error processing result '{label}': {e}", exc_info=True)
            run.add_error(source, ErrorType.PROCESSING, e, label)

    async def _record_metrics(self, run: _SearchRun, duration_ms: int, batch_timestamp) -> None:
        """Write one metrics row per source that contributed results."""
        for source, stats in run.sources.items():
            metrics = IngestionMetrics(
                source_type=source,
                records_processed=stats.processed,
                records_failed=stats.failed,
                processing_duration_ms=duration_ms,
                error_details=[e.model_dump(mode="json") for e in stats.errors],
                batch_timestamp=batch_timestamp,
            )
            try:
                await self.storage.metrics.create(metrics)
            except Exception as e:
                logger.warning(f"Failed to record ingestion metrics for {source.value}: {e}")
