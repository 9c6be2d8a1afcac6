"""
Hacker News adapter.

Searches stories through the Algolia Hacker News search API.
"""

import logging
from typing import Any, Dict, List, Optional

from trend_monitor.collectors.utils import clean_html, parse_iso_datetime, truncate
from trend_monitor.ingestion.base import SourceAdapter, register_adapter
from trend_monitor.types import AdapterMetadata, SearchResult, SourceType

logger = logging.getLogger(__name__)

SEARCH_URL = "https://hn.algolia.com/api/v1/search"
ITEM_URL = "https://news.ycombinator.com/item?id={}"
STORY_TEXT_MAX_CHARS = 1000


@register_adapter
class HackerNewsAdapter(SourceAdapter):
    """Adapter for Hacker News stories above a minimum point threshold."""

    metadata = AdapterMetadata(
        name="hackernews",
        source_type=SourceType.HACKERNEWS,
        description="Stories from Hacker News via Algolia search",
        max_results=10,
    )

    async def fetch(self, keyword: str) -> List[SearchResult]:
        params = {
            "query": keyword,
            "tags": "story",
            "hitsPerPage": self.settings.hackernews_max_results * 2,
        }
        data = await self._get_json(SEARCH_URL, params=params)

        results = []
        for hit in (data or {}).get("hits", []):
            result = self._parse_hit(hit)
            if result is not None:
                results.append(result)
            if len(results) >= self.settings.hackernews_max_results:
                break

        return results

    def _parse_hit(self, hit: Dict[str, Any]) -> Optional[SearchResult]:
        try:
            title = (hit.get("title") or "").strip()
            points = int(hit.get("points") or 0)

            if not title or points < self.settings.hackernews_min_points:
                return None

            object_id = hit.get("objectID", "")
            return SearchResult(
                title=title,
                content=truncate(clean_html(hit.get("story_text") or ""), STORY_TEXT_MAX_CHARS),
                url=hit.get("url") or ITEM_URL.format(object_id),
                source=SourceType.HACKERNEWS,
                published_at=parse_iso_datetime(hit.get("created_at")),
                author=hit.get("author"),
                engagement={
                    "points": points,
                    "comments": int(hit.get("num_comments") or 0),
                },
            )

        except Exception as e:
            logger.warning(f"Failed to parse Hacker News story: {e}")
            return None
