"""
Source adapter doubles for orchestrator and API tests.
"""

from typing import Any, List, Optional

from trend_monitor.ingestion.base import CollectionError, SourceAdapter
from trend_monitor.types import AdapterMetadata, SourceType


class StaticAdapter(SourceAdapter):
    """Adapter returning a fixed list of results and recording its calls."""

    def __init__(
        self,
        results: List[Any],
        name: str = "static",
        source_type: SourceType = SourceType.NEWS,
    ):
        self.metadata = AdapterMetadata(
            name=name, source_type=source_type, description="Static test adapter"
        )
        super().__init__()
        self.results = results
        self.calls: List[str] = []

    async def fetch(self, keyword: str) -> List[Any]:
        self.calls.append(keyword)
        return list(self.results)


class FailingAdapter(SourceAdapter):
    """Adapter whose fetch always fails."""

    def __init__(self, name: str = "failing", error: Optional[Exception] = None):
        self.metadata = AdapterMetadata(
            name=name, source_type=SourceType.REDDIT, description="Failing test adapter"
        )
        super().__init__()
        self.error = error or CollectionError("source unavailable")
        self.calls: List[str] = []

    async def fetch(self, keyword: str) -> List[Any]:
        self.calls.append(keyword)
        raise self.error
