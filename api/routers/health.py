"""
Health check endpoints for monitoring API and service status.
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from api import __version__
from api.schemas.common import HealthCheckResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=Dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Quick health check endpoint that always returns 200 OK if API is running.",
)
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Does not check dependencies; suitable for load balancer checks.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }


@router.get(
    "/ready",
    response_model=HealthCheckResponse,
    summary="Readiness check",
    description="Reports whether the database and orchestrator are available.",
)
async def readiness_check():
    from api.main import app_state

    services = {
        "database": app_state.db_pool is not None and app_state.db_pool.pool is not None,
        "orchestrator": app_state.orchestrator is not None,
    }
    ready = all(services.values())
    body = HealthCheckResponse(
        status="healthy" if ready else "degraded",
        version=__version__,
        timestamp=datetime.utcnow().isoformat() + "Z",
        services=services,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


@router.get(
    "/liveness",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def liveness_check() -> Dict[str, Any]:
    return {"alive": True}
