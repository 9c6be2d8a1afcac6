"""
Keyword search endpoint.

Runs one ingestion search across all enabled sources and returns the
ingestion summary. Rate limited per client address.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_orchestrator
from api.schemas.common import SearchErrorResponse
from api.schemas.trends import SearchTrendsRequest
from trend_monitor.config import DEFAULT_SEARCH_RATE_LIMIT
from trend_monitor.observability.metrics import track_api_request
from trend_monitor.orchestrator import (
    IngestionAbortedError,
    KeywordRequiredError,
    TrendIngestionOrchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Search"])

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


def search_rate_limit() -> str:
    from api.main import app_state

    if app_state.settings is None:
        return DEFAULT_SEARCH_RATE_LIMIT
    return app_state.settings.search_rate_limit


@router.post(
    "/search-trends",
    status_code=status.HTTP_200_OK,
    summary="Search sources for a keyword",
    description="Fetch, analyze and store results for a keyword from all enabled sources.",
    responses={
        400: {"model": SearchErrorResponse},
        500: {"model": SearchErrorResponse},
    },
)
@limiter.limit(search_rate_limit)
@track_api_request("/api/v1/search-trends", method="POST")
async def search_trends(
    request: Request,
    search_request: Optional[SearchTrendsRequest] = None,
    orchestrator: TrendIngestionOrchestrator = Depends(get_orchestrator),
):
    """
    Search all enabled sources for a keyword.

    Returns the ingestion summary. Per-result failures are reported in
    ``errors`` and do not fail the request.
    """
    keyword = search_request.keyword if search_request else None

    try:
        summary = await orchestrator.search(keyword)
    except KeywordRequiredError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )
    except IngestionAbortedError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=SearchErrorResponse(
                error="Internal server error",
                details=e.details,
                total_processed=e.total_processed,
                total_failed=e.total_failed,
            ).model_dump(),
        )
    except Exception as e:
        logger.error(f"Search failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=SearchErrorResponse(
                error="Internal server error",
                details=str(e),
                total_processed=0,
                total_failed=1,
            ).model_dump(),
        )

    content = summary.model_dump(mode="json")
    if content["errors"] is None:
        del content["errors"]
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.options("/search-trends", include_in_schema=False)
async def search_trends_preflight() -> Response:
    """Answer bare OPTIONS requests; CORS preflights are handled by middleware."""
    return Response(status_code=status.HTTP_200_OK)
