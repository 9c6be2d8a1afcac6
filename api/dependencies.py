"""
FastAPI dependency injection providers.

This module provides dependency injection functions for the persistence
gateway and the ingestion orchestrator built at startup.
"""

from fastapi import HTTPException, status

from trend_monitor.orchestrator import TrendIngestionOrchestrator
from trend_monitor.storage.interfaces import StorageGateway


async def get_storage() -> StorageGateway:
    """
    Get the persistence gateway from application state.

    Raises:
        HTTPException: If storage is not initialized
    """
    from api.main import app_state

    if app_state.storage is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage not initialized",
        )

    return app_state.storage


async def get_orchestrator() -> TrendIngestionOrchestrator:
    """
    Get the ingestion orchestrator from application state.

    Raises:
        HTTPException: If the orchestrator is not initialized
    """
    from api.main import app_state

    if app_state.orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ingestion orchestrator not initialized",
        )

    return app_state.orchestrator
