"""
Source adapters.

Importing this package registers every adapter with the ``AdapterRegistry``.
Adapters run in the order given by ``Settings.enabled_adapters``.

Usage:
    from trend_monitor.collectors import build_adapters

    adapters = build_adapters(settings)
"""

import logging
from typing import List

from trend_monitor.collectors.hackernews import HackerNewsAdapter
from trend_monitor.collectors.news import NewsAPIAdapter
from trend_monitor.collectors.reddit import RedditAdapter
from trend_monitor.collectors.regional import (
    HSAdapter,
    IltalehtiAdapter,
    RegionalFeedAdapter,
    Suomi24Adapter,
    YLEAdapter,
)
from trend_monitor.config import Settings
from trend_monitor.ingestion.base import AdapterRegistry, SourceAdapter

logger = logging.getLogger(__name__)


def build_adapters(settings: Settings) -> List[SourceAdapter]:
    """
    Build the enabled adapters for a process.

    Args:
        settings: Process configuration

    Returns:
        Adapter instances in dispatch order
    """
    adapters = AdapterRegistry.build(settings)
    logger.info(f"Enabled adapters: {[a.name for a in adapters]}")
    return adapters


__all__ = [
    "build_adapters",
    "HackerNewsAdapter",
    "HSAdapter",
    "IltalehtiAdapter",
    "NewsAPIAdapter",
    "RedditAdapter",
    "RegionalFeedAdapter",
    "Suomi24Adapter",
    "YLEAdapter",
]
