"""
API schemas for request and response models.

This module defines Pydantic models used for API serialization.
"""

from api.schemas.common import ErrorResponse, HealthCheckResponse, SearchErrorResponse
from api.schemas.trends import ForecastRequest, SearchTrendsRequest, TrendListResponse

__all__ = [
    # Common
    "ErrorResponse",
    "HealthCheckResponse",
    "SearchErrorResponse",
    # Trends
    "ForecastRequest",
    "SearchTrendsRequest",
    "TrendListResponse",
]
