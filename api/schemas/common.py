"""
Common API schemas used across endpoints.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: str = Field(..., description="Error code")
    timestamp: str = Field(..., description="ISO 8601 timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Service Unavailable",
                "detail": "Storage not initialized",
                "code": "HTTP_503",
                "timestamp": "2024-01-15T10:30:00Z",
            }
        }


class SearchErrorResponse(BaseModel):
    """Error body returned by the search endpoint."""

    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="What went wrong")
    total_processed: Optional[int] = Field(None, description="Results stored before the failure")
    total_failed: Optional[int] = Field(None, description="Results failed, including the abort")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Internal server error",
                "details": "connection reset",
                "total_processed": 3,
                "total_failed": 1,
            }
        }


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    services: Dict[str, bool] = Field(..., description="Status of dependent services")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "timestamp": "2024-01-15T10:30:00Z",
                "services": {"database": True},
            }
        }
