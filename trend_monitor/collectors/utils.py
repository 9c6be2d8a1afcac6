"""
Helpers shared by the source adapters.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Union

from bs4 import BeautifulSoup

from trend_monitor.types import utcnow

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def parse_iso_datetime(value: Optional[str]) -> datetime:
    """
    Parse an ISO 8601 timestamp, falling back to the current time.

    Args:
        value: Timestamp such as ``2024-01-15T10:00:00Z``

    Returns:
        Timezone-aware datetime
    """
    if not value:
        return utcnow()

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        logger.debug(f"Could not parse timestamp: {value}")
        return utcnow()

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def from_unix(value: Union[int, float, None]) -> datetime:
    """Convert a unix timestamp to a UTC datetime, or now if missing."""
    if not value:
        return utcnow()
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


def clean_html(html_content: str) -> str:
    """
    Remove HTML tags and collapse whitespace.

    Args:
        html_content: HTML string

    Returns:
        Plain text with HTML removed
    """
    if not html_content:
        return ""

    try:
        soup = BeautifulSoup(html_content, "html.parser")
        text = soup.get_text(separator=" ", strip=True)
    except Exception as e:
        logger.warning(f"Error cleaning HTML: {e}")
        text = html_content

    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, max_chars: int) -> str:
    """Cap text at ``max_chars`` characters."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip()


def mentions(keyword: str, *texts: Optional[str]) -> bool:
    """True if any of the texts contains the keyword, case-insensitively."""
    needle = keyword.lower()
    return any(needle in (text or "").lower() for text in texts)
