"""
Trend endpoints for the dashboard read path.

Lists stored trend records by keyword and forecasts mention counts.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_storage
from api.schemas.trends import ForecastRequest, TrendListResponse
from trend_monitor.processing import predict_trend
from trend_monitor.storage.interfaces import StorageError, StorageGateway
from trend_monitor.types import TrendPrediction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trends", tags=["Trends"])


@router.get(
    "",
    response_model=TrendListResponse,
    status_code=status.HTTP_200_OK,
    summary="List trends by keyword",
    description="Stored trend records whose keywords contain the given text, newest first.",
)
async def list_trends(
    keyword: str = Query("", max_length=200, description="Keyword substring"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of trends"),
    storage: StorageGateway = Depends(get_storage),
) -> TrendListResponse:
    try:
        trends = await storage.trends.search_by_keyword(keyword, limit=limit)
    except StorageError as e:
        logger.error(f"Failed to list trends for '{keyword}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load trends",
        )

    return TrendListResponse(trends=trends, total=len(trends), keyword=keyword)


@router.post(
    "/forecast",
    response_model=TrendPrediction,
    status_code=status.HTTP_200_OK,
    summary="Forecast mention counts",
    description="Linear forecast of a daily mention-count series.",
)
async def forecast_trend(forecast_request: ForecastRequest) -> TrendPrediction:
    return predict_trend(forecast_request.history, weeks_ahead=forecast_request.weeks_ahead)
