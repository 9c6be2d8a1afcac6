"""
News search adapter.

Searches the newsapi.org ``everything`` endpoint for articles from the last
week mentioning the keyword.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from trend_monitor.collectors.utils import parse_iso_datetime, truncate
from trend_monitor.ingestion.base import CollectionError, SourceAdapter, register_adapter
from trend_monitor.types import AdapterMetadata, SearchResult, SourceType, utcnow

logger = logging.getLogger(__name__)

REMOVED_MARKER = "[Removed]"


@register_adapter
class NewsAPIAdapter(SourceAdapter):
    """
    Adapter for a news search API.

    Requires ``NEWS_API_KEY``; without one it returns no results and makes
    no request.
    """

    metadata = AdapterMetadata(
        name="news",
        source_type=SourceType.NEWS,
        description="Articles from the last 7 days via newsapi.org",
        max_results=10,
    )

    async def fetch(self, keyword: str) -> List[SearchResult]:
        api_key = self.settings.news_api_key
        if not api_key:
            logger.info("News API key not configured, skipping news search")
            return []

        since = utcnow() - timedelta(days=self.settings.news_lookback_days)
        params = {
            "q": keyword,
            "from": since.date().isoformat(),
            "sortBy": "publishedAt",
            "pageSize": self.settings.news_page_size,
        }
        data = await self._get_json(
            self.settings.news_api_url, params=params, headers={"X-Api-Key": api_key}
        )

        if not isinstance(data, dict) or data.get("status") == "error":
            message = data.get("message") if isinstance(data, dict) else "malformed response"
            raise CollectionError(f"News API error: {message}")

        results = []
        for article in data.get("articles") or []:
            result = self._parse_article(article)
            if result is not None:
                results.append(result)
            if len(results) >= self.settings.news_page_size:
                break

        return results

    def _parse_article(self, article: Dict[str, Any]) -> Optional[SearchResult]:
        try:
            title = (article.get("title") or "").strip()
            url = article.get("url") or ""

            if not title or not url or title == REMOVED_MARKER:
                return None

            content = article.get("description") or article.get("content") or ""
            if content == REMOVED_MARKER:
                content = ""

            return SearchResult(
                title=title,
                content=truncate(content, self.settings.news_content_max_chars),
                url=url,
                source=SourceType.NEWS,
                published_at=parse_iso_datetime(article.get("publishedAt")),
                author=article.get("author"),
                engagement={"outlet": (article.get("source") or {}).get("name")},
            )

        except Exception as e:
            logger.warning(f"Failed to parse news article: {e}")
            return None
