"""
Ingestion layer for the trend monitor.

This package provides the source adapter contract and registry. Concrete
adapters live in ``trend_monitor.collectors``.
"""

from trend_monitor.ingestion.base import (
    AdapterRegistry,
    CollectionError,
    SourceAdapter,
    register_adapter,
)

__all__ = [
    "AdapterRegistry",
    "CollectionError",
    "SourceAdapter",
    "register_adapter",
]
