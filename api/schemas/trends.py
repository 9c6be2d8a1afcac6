"""
Request and response schemas for the search and trend endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from trend_monitor.types import DataPoint, TrendView


class SearchTrendsRequest(BaseModel):
    """Body of a keyword search."""

    keyword: Optional[str] = Field(None, description="Keyword to search for")

    class Config:
        json_schema_extra = {"example": {"keyword": "sustainable packaging"}}


class TrendListResponse(BaseModel):
    """Stored trend records matching a keyword."""

    trends: List[TrendView] = Field(..., description="Matching trend records, newest first")
    total: int = Field(..., ge=0, description="Number of records returned")
    keyword: str = Field(..., description="Keyword substring searched for")


class ForecastRequest(BaseModel):
    """Mention-count history to forecast."""

    history: List[DataPoint] = Field(..., description="Daily observations, oldest first")
    weeks_ahead: int = Field(4, ge=1, le=52, description="Weeks to forecast")

    class Config:
        json_schema_extra = {
            "example": {
                "history": [
                    {"value": 3, "timestamp": "2024-01-01T00:00:00Z"},
                    {"value": 5, "timestamp": "2024-01-02T00:00:00Z"},
                    {"value": 8, "timestamp": "2024-01-03T00:00:00Z"},
                ],
                "weeks_ahead": 2,
            }
        }
