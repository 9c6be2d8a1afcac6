"""
Reddit adapter.

Searches r/all and a configured list of subreddits through Reddit's public
JSON search endpoints.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from trend_monitor.collectors.utils import from_unix, truncate
from trend_monitor.ingestion.base import CollectionError, SourceAdapter, register_adapter
from trend_monitor.types import AdapterMetadata, SearchResult, SourceType

logger = logging.getLogger(__name__)

REDDIT_BASE_URL = "https://www.reddit.com"
SELFTEXT_MAX_CHARS = 1000


@register_adapter
class RedditAdapter(SourceAdapter):
    """
    Adapter for Reddit search.

    Queries r/all first, then each configured subreddit. Posts below the
    minimum score and NSFW posts are dropped; each sub-source contributes at
    most ``reddit_per_source_limit`` posts and the adapter at most
    ``reddit_max_results``.
    """

    metadata = AdapterMetadata(
        name="reddit",
        source_type=SourceType.REDDIT,
        description="Posts from r/all and configured subreddits",
        max_results=10,
    )

    def _sub_sources(self, keyword: str) -> List[tuple]:
        limit = self.settings.reddit_per_source_limit * 2
        sources = [
            (
                "all",
                f"{REDDIT_BASE_URL}/search.json",
                {"q": keyword, "sort": "relevance", "t": "week", "limit": limit},
            )
        ]
        for subreddit in self.settings.reddit_subreddits:
            sources.append(
                (
                    subreddit,
                    f"{REDDIT_BASE_URL}/r/{subreddit}/search.json",
                    {"q": keyword, "restrict_sr": 1, "sort": "new", "t": "month", "limit": limit},
                )
            )
        return sources

    async def fetch(self, keyword: str) -> List[SearchResult]:
        results: List[SearchResult] = []
        seen_urls = set()

        for name, url, params in self._sub_sources(keyword):
            if len(results) >= self.settings.reddit_max_results:
                break

            try:
                data = await self._get_json(url, params=params)
            except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(f"Skipping r/{name}: {e}")
                continue

            listing = data.get("data") if isinstance(data, dict) else None
            children = listing.get("children") if isinstance(listing, dict) else None
            if not isinstance(children, list):
                logger.warning(f"Skipping r/{name}: unexpected response shape")
                continue

            taken = 0
            for post in children:
                if taken >= self.settings.reddit_per_source_limit:
                    break
                if len(results) >= self.settings.reddit_max_results:
                    break

                if not isinstance(post, dict):
                    continue
                result = self._parse_post(post.get("data") or {})
                if result is None or result.url in seen_urls:
                    continue

                seen_urls.add(result.url)
                results.append(result)
                taken += 1

        return results

    def _parse_post(self, p: Dict[str, Any]) -> Optional[SearchResult]:
        try:
            title = (p.get("title") or "").strip()
            score = int(p.get("score") or 0)

            if not title or p.get("over_18", False):
                return None
            if score < self.settings.reddit_min_score:
                return None

            return SearchResult(
                title=title,
                content=truncate(p.get("selftext") or "", SELFTEXT_MAX_CHARS),
                url=REDDIT_BASE_URL + p.get("permalink", ""),
                source=SourceType.REDDIT,
                published_at=from_unix(p.get("created_utc")),
                author=p.get("author"),
                engagement={
                    "score": score,
                    "comments": int(p.get("num_comments") or 0),
                    "upvote_ratio": float(p.get("upvote_ratio") or 0.0),
                    "subreddit": p.get("subreddit", ""),
                },
            )

        except Exception as e:
            logger.warning(f"Failed to parse Reddit post: {e}")
            return None
