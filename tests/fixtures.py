"""
Test fixtures and sample data for development and testing.

This module provides factories for search results and raw API payloads.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from trend_monitor.config import Settings
from trend_monitor.types import DataPoint, Language, SearchResult, SourceType


# ============================================================================
# Settings
# ============================================================================


def create_test_settings(**overrides) -> Settings:
    """Settings with metrics recording on and a news API key configured."""
    values = {"news_api_key": "test-key", "record_ingestion_metrics": True}
    values.update(overrides)
    return Settings(**values)


# ============================================================================
# Sample Search Results
# ============================================================================


def create_sample_result(
    title: str = "Sample trending item",
    content: str = "",
    source: SourceType = SourceType.NEWS,
    url: Optional[str] = None,
    engagement: Optional[Dict[str, Any]] = None,
    language: Optional[Language] = None,
) -> SearchResult:
    """Create a sample search result."""
    return SearchResult(
        title=title,
        content=content,
        url=url or f"https://example.com/{abs(hash(title)) % 100000}",
        source=source,
        published_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        author="Test Author",
        engagement=engagement,
        language=language,
    )


def create_news_result() -> SearchResult:
    return create_sample_result(
        title="News: sustainable packaging herättää keskustelua",
        source=SourceType.NEWS,
        engagement={"outlet": "Example Times"},
    )


def create_reddit_result() -> SearchResult:
    return create_sample_result(
        title="Launch thread",
        content="This is an amazing amazing product, best launch ever",
        source=SourceType.REDDIT,
        url="https://www.reddit.com/r/Finland/comments/abc/launch_thread/",
        engagement={"score": 120, "comments": 34, "subreddit": "Finland"},
    )


# ============================================================================
# Raw API Payloads
# ============================================================================


def news_api_payload() -> Dict[str, Any]:
    return {
        "status": "ok",
        "totalResults": 3,
        "articles": [
            {
                "source": {"id": None, "name": "Example Times"},
                "author": "Jane Writer",
                "title": "Sustainable packaging goes mainstream",
                "description": "Retailers adopt sustainable packaging.",
                "content": "Longer body text",
                "url": "https://example.com/a1",
                "publishedAt": "2024-01-15T08:00:00Z",
            },
            {
                "source": {"id": None, "name": "[Removed]"},
                "title": "[Removed]",
                "description": "[Removed]",
                "url": "https://removed.com",
                "publishedAt": "2024-01-15T08:00:00Z",
            },
            {
                "source": {"id": None, "name": "No Url"},
                "title": "Missing url",
                "description": "Dropped",
                "url": None,
                "publishedAt": "2024-01-15T08:00:00Z",
            },
        ],
    }


def reddit_listing(*posts: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}}


def reddit_post(
    title: str = "Sustainable packaging in Finland",
    score: int = 50,
    permalink: str = "/r/Finland/comments/1/post/",
    over_18: bool = False,
) -> Dict[str, Any]:
    return {
        "title": title,
        "selftext": "What do you think about it?",
        "permalink": permalink,
        "author": "poster",
        "created_utc": 1705305600,
        "score": score,
        "num_comments": 12,
        "upvote_ratio": 0.95,
        "subreddit": "Finland",
        "over_18": over_18,
    }


def hackernews_payload() -> Dict[str, Any]:
    return {
        "hits": [
            {
                "objectID": "101",
                "title": "Sustainable packaging startup raises seed",
                "url": "https://startup.example/news",
                "author": "hnuser",
                "points": 150,
                "num_comments": 40,
                "created_at": "2024-01-15T09:00:00Z",
                "story_text": None,
            },
            {
                "objectID": "102",
                "title": "Ask HN: packaging?",
                "url": None,
                "author": "asker",
                "points": 3,
                "num_comments": 1,
                "created_at": "2024-01-15T09:00:00Z",
                "story_text": "Low score",
            },
        ]
    }


RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Uutiset</title>
    <item>
      <title>Kestävä pakkaus yleistyy Tampereella</title>
      <link>https://example.fi/uutiset/1</link>
      <description>&lt;p&gt;Kaupat siirtyvät kestävä pakkaus -ratkaisuihin.&lt;/p&gt;</description>
      <pubDate>Mon, 15 Jan 2024 08:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Sää viilenee</title>
      <link>https://example.fi/uutiset/2</link>
      <description>Ei liity hakuun.</description>
      <pubDate>Mon, 15 Jan 2024 07:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


# ============================================================================
# Time Series
# ============================================================================


def create_series(values, start: Optional[datetime] = None):
    """Daily data points for the given values."""
    start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        DataPoint(value=v, timestamp=start + timedelta(days=i)) for i, v in enumerate(values)
    ]
