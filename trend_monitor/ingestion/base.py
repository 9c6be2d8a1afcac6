"""
Base classes for source adapters.

This module defines the abstract interface every source adapter implements,
the registry adapters are collected into, and the HTTP helpers they share.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

import aiohttp

from trend_monitor.config import Settings
from trend_monitor.observability.metrics import record_adapter_failure
from trend_monitor.types import AdapterMetadata, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class CollectionError(Exception):
    """Exception raised when a source cannot be queried or parsed."""

    pass


class SourceAdapter(ABC):
    """
    Abstract base class for source adapters.

    An adapter queries one external content source for a keyword and
    normalizes what it finds into ``SearchResult`` objects. ``search`` never
    raises: transport and parse failures are logged and yield an empty list,
    so one broken source cannot abort a whole search.

    Adapters hold no mutable state between calls and open their own HTTP
    session per call, so any number of them can run concurrently.
    """

    # Adapter metadata (must be overridden by subclasses)
    metadata: AdapterMetadata

    def __init__(self, settings: Optional[Settings] = None):
        if not hasattr(self, "metadata"):
            raise NotImplementedError(
                f"{self.__class__.__name__} must define 'metadata' attribute"
            )
        self.settings = settings or Settings()

    @property
    def name(self) -> str:
        return self.metadata.name

    async def search(self, keyword: str) -> List[SearchResult]:
        """
        Search the source for a keyword.

        Args:
            keyword: The user's search keyword

        Returns:
            Normalized results, or an empty list if the source failed
        """
        try:
            results = await self.fetch(keyword)
        except asyncio.TimeoutError:
            logger.error(f"{self.name} request timed out")
            record_adapter_failure(self.name)
            await self.on_error(CollectionError("request timed out"))
            return []
        except Exception as e:
            logger.error(f"Error searching {self.name}: {e}", exc_info=True)
            record_adapter_failure(self.name)
            await self.on_error(e)
            return []

        await self.on_success(results)
        return results

    @abstractmethod
    async def fetch(self, keyword: str) -> List[SearchResult]:
        """
        Query the source and normalize its response.

        Args:
            keyword: The user's search keyword

        Returns:
            Normalized results

        Raises:
            CollectionError: If the source cannot be queried or parsed
        """
        pass

    async def on_success(self, results: List[SearchResult]) -> None:
        """Hook called after a successful search."""
        logger.info(f"Found {len(results)} results from {self.name}")

    async def on_error(self, error: Exception) -> None:
        """Hook called when a search fails."""
        pass

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": self.settings.http_user_agent}

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            CollectionError: If the response status is not 200
        """
        timeout = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(
                url, params=params, headers={**self._headers(), **(headers or {})}
            ) as resp:
                if resp.status != 200:
                    raise CollectionError(f"{self.name} returned status {resp.status}")
                return await resp.json(content_type=None)

    async def _get_text(self, url: str) -> str:
        """
        GET a URL and return its body as text.

        Raises:
            CollectionError: If the response status is not 200
        """
        timeout = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=self._headers()) as resp:
                if resp.status != 200:
                    raise CollectionError(f"{self.name} returned status {resp.status}")
                return await resp.text()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ({self.metadata.name})>"


class AdapterRegistry:
    """
    Registry of available source adapter classes.

    Adapters register their class at import time; instances are built per
    process from an explicit ``Settings`` object via ``build``.
    """

    _adapters: Dict[str, Type[SourceAdapter]] = {}

    @classmethod
    def register(cls, adapter_class: Type[SourceAdapter]) -> None:
        """
        Register an adapter class.

        Args:
            adapter_class: The adapter class to register

        Raises:
            ValueError: If the class has no metadata or its name is taken
        """
        metadata = getattr(adapter_class, "metadata", None)
        if metadata is None:
            raise ValueError(
                f"Failed to register adapter {adapter_class.__name__}: missing metadata"
            )

        name = metadata.name
        existing = cls._adapters.get(name)
        if existing is not None and existing is not adapter_class:
            raise ValueError(f"Adapter '{name}' is already registered")

        cls._adapters[name] = adapter_class

    @classmethod
    def get_adapter_class(cls, name: str) -> Optional[Type[SourceAdapter]]:
        return cls._adapters.get(name)

    @classmethod
    def get_adapter_names(cls) -> List[str]:
        return list(cls._adapters.keys())

    @classmethod
    def build(cls, settings: Settings) -> List[SourceAdapter]:
        """
        Instantiate the adapters enabled in settings, in dispatch order.

        Unknown names are logged and skipped; adapters whose metadata marks
        them disabled are left out.

        Args:
            settings: Process configuration

        Returns:
            Adapter instances in the order of ``settings.enabled_adapters``
        """
        adapters = []
        for name in settings.enabled_adapters:
            adapter_class = cls._adapters.get(name)
            if adapter_class is None:
                logger.warning(f"Unknown adapter '{name}' in configuration, skipping")
                continue
            if not adapter_class.metadata.enabled:
                logger.info(f"Adapter '{name}' is disabled, skipping")
                continue
            adapters.append(adapter_class(settings))
        return adapters

    @classmethod
    def unregister(cls, name: str) -> bool:
        if name in cls._adapters:
            del cls._adapters[name]
            return True
        return False


def register_adapter(adapter_class: Type[SourceAdapter]) -> Type[SourceAdapter]:
    """
    Decorator for auto-registering source adapters.

    Usage:
        @register_adapter
        class MyAdapter(SourceAdapter):
            ...
    """
    AdapterRegistry.register(adapter_class)
    return adapter_class
