"""
FastAPI main application for the Trend Monitor API.

This module initializes the FastAPI app, configures middleware, error handlers,
and includes all API routers.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.routers import health, metrics, search, trends
from api.schemas.common import ErrorResponse
from trend_monitor.config import Settings
from trend_monitor.observability.logging import setup_logging
from trend_monitor.orchestrator import TrendIngestionOrchestrator
from trend_monitor.storage import (
    PostgreSQLConnectionPool,
    StorageGateway,
    build_gateway,
    init_schema,
)

logger = logging.getLogger(__name__)

CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# Process configuration, read once at import
settings = Settings.from_env()


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware whose accepted preflight responses have an empty body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != status.HTTP_200_OK:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=status.HTTP_200_OK, headers=headers)


# Application state
class AppState:
    """Application state container."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.db_pool: Optional[PostgreSQLConnectionPool] = None
        self.storage: Optional[StorageGateway] = None
        self.orchestrator: Optional[TrendIngestionOrchestrator] = None
        self.started_at: Optional[datetime] = None


app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.

    Loads settings, opens the database pool and builds the orchestrator.
    The API still starts when the database is unreachable; endpoints that
    need it answer 503.
    """
    # Startup
    app_state.settings = settings
    setup_logging(level=app_state.settings.log_level, json_format=app_state.settings.log_json)
    logger.info("Starting Trend Monitor API...")
    app_state.started_at = datetime.utcnow()

    try:
        app_state.db_pool = PostgreSQLConnectionPool(**app_state.settings.postgres_config())
        pool = await app_state.db_pool.connect()
        await init_schema(pool)
        app_state.storage = build_gateway(pool)
        app_state.orchestrator = TrendIngestionOrchestrator(app_state.settings, app_state.storage)
        logger.info("Database connection pool initialized")

    except Exception as e:
        logger.warning(f"Database connection failed: {e}")
        logger.info("API will start but database-dependent endpoints will return 503")

    logger.info("API startup complete")

    yield

    # Shutdown
    logger.info("Shutting down Trend Monitor API...")

    if app_state.db_pool:
        try:
            await app_state.db_pool.close()
        except Exception as e:
            logger.error(f"Error closing database pool: {e}")

    app_state.storage = None
    app_state.orchestrator = None
    logger.info("API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Trend Monitor API",
    description="""
    ## Brand and Trend Monitoring

    Searches news, Reddit, Hacker News and Finnish outlets for a keyword,
    scores each result for sentiment, emotion, language, location and
    keywords, and stores the results for dashboards.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.state.limiter = search.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# CORS middleware configuration
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=CORS_ALLOWED_HEADERS,
)


# Exception handlers

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with consistent error response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            detail=str(exc.detail),
            code=f"HTTP_{exc.status_code}",
            timestamp=datetime.utcnow().isoformat() + "Z",
        ).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="Validation Error",
            detail=str(exc),
            code="VALIDATION_ERROR",
            timestamp=datetime.utcnow().isoformat() + "Z",
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            detail="An unexpected error occurred",
            code="INTERNAL_ERROR",
            timestamp=datetime.utcnow().isoformat() + "Z",
        ).model_dump(),
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """API root endpoint providing basic information."""
    return {
        "name": "Trend Monitor API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "search_trends": "/api/v1/search-trends",
            "trends": "/api/v1/trends",
            "forecast": "/api/v1/trends/forecast",
            "health": "/api/v1/health",
            "metrics": "/metrics",
        },
    }


# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(search.router, prefix="/api/v1")
app.include_router(trends.router, prefix="/api/v1")
app.include_router(metrics.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
    )
