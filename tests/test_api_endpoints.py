"""
Integration tests for FastAPI REST API endpoints.

Tests the search, trends, health and metrics routers. The lifespan is not
run, so the orchestrator and storage are supplied through dependency
overrides.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_orchestrator, get_storage
from api.main import EmptyPreflightCORSMiddleware, app, settings
from api.routers import search
from tests.fixtures import create_news_result, create_reddit_result, create_test_settings
from tests.mocks import StaticAdapter, create_mock_gateway
from trend_monitor.orchestrator import IngestionAbortedError, TrendIngestionOrchestrator
from trend_monitor.storage.interfaces import StorageError
from trend_monitor.types import SourceType


# Fixtures

@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    search.limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def storage():
    return create_mock_gateway()


@pytest.fixture
def orchestrator(storage):
    adapters = [
        StaticAdapter([create_news_result()], name="news"),
        StaticAdapter([create_reddit_result()], name="reddit", source_type=SourceType.REDDIT),
    ]
    return TrendIngestionOrchestrator(create_test_settings(), storage, adapters=adapters)


@pytest.fixture
def wired_client(client, orchestrator, storage):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_storage] = lambda: storage
    return client


# ============================================================================
# Root and Health
# ============================================================================


def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Trend Monitor API"
    assert data["endpoints"]["search_trends"] == "/api/v1/search-trends"


def test_health_check(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert data["timestamp"].endswith("Z")


def test_liveness_check(client):
    response = client.get("/api/v1/health/liveness")

    assert response.status_code == 200
    assert response.json() == {"alive": True}


def test_readiness_without_database(client):
    response = client.get("/api/v1/health/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "degraded"
    assert data["services"] == {"database": False, "orchestrator": False}


# ============================================================================
# Search
# ============================================================================


def test_search_returns_summary(wired_client, storage):
    response = wired_client.post("/api/v1/search-trends", json={"keyword": "sustainable packaging"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["total_found"] == 2
    assert data["total_processed"] == 2
    assert data["total_failed"] == 0
    assert data["sources_searched"] == ["news", "reddit"]
    assert "errors" not in data

    news, reddit = data["results"]
    assert news["sentiment"] == "neutral"
    assert news["keywords"][0] == {"keyword": "sustainable packaging", "relevance": 1.0}
    assert reddit["sentiment"] == "positive"
    assert reddit["mention_count"] == 34
    assert len(storage.trends.records) == 2


@pytest.mark.parametrize("body", [{"keyword": ""}, {"keyword": "   "}, {}])
def test_search_requires_keyword(wired_client, orchestrator, body):
    response = wired_client.post("/api/v1/search-trends", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Keyword is required"}
    assert orchestrator.adapters[0].calls == []


def test_search_without_body(wired_client):
    response = wired_client.post("/api/v1/search-trends")

    assert response.status_code == 400
    assert response.json() == {"error": "Keyword is required"}


def test_search_aborted(client):
    orchestrator = MagicMock()
    orchestrator.search = AsyncMock(
        side_effect=IngestionAbortedError("db gone", total_processed=2, total_failed=1)
    )
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    response = client.post("/api/v1/search-trends", json={"keyword": "packaging"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "details": "db gone",
        "total_processed": 2,
        "total_failed": 1,
    }


def test_search_unavailable_without_orchestrator(client):
    response = client.post("/api/v1/search-trends", json={"keyword": "packaging"})

    assert response.status_code == 503
    assert response.json()["code"] == "HTTP_503"


def test_search_options(client):
    response = client.options("/api/v1/search-trends")

    assert response.status_code == 200


def test_search_cors_preflight(client):
    response = client.options(
        "/api/v1/search-trends",
        headers={
            "Origin": "https://dashboard.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type,apikey",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert response.content == b""


def test_rejected_preflight_keeps_error_body(client):
    response = client.options(
        "/api/v1/search-trends",
        headers={
            "Origin": "https://dashboard.example",
            "Access-Control-Request-Method": "DELETE",
        },
    )

    assert response.status_code == 400
    assert response.content != b""


def test_cors_uses_process_settings():
    cors = next(m for m in app.user_middleware if m.cls is EmptyPreflightCORSMiddleware)

    assert cors.kwargs["allow_origins"] == settings.cors_origins


# ============================================================================
# Trends
# ============================================================================


def test_list_trends_after_search(wired_client):
    wired_client.post("/api/v1/search-trends", json={"keyword": "sustainable packaging"})

    response = wired_client.get("/api/v1/trends", params={"keyword": "packaging"})

    assert response.status_code == 200
    data = response.json()
    assert data["keyword"] == "packaging"
    assert data["total"] == 2
    keywords = [k["keyword"] for k in data["trends"][0]["keywords"]]
    assert "sustainable packaging" in keywords


def test_list_trends_limit_validation(wired_client):
    response = wired_client.get("/api/v1/trends", params={"limit": 0})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_list_trends_storage_error(client):
    storage = MagicMock()
    storage.trends.search_by_keyword = AsyncMock(side_effect=StorageError("down"))
    app.dependency_overrides[get_storage] = lambda: storage

    response = client.get("/api/v1/trends", params={"keyword": "packaging"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to load trends"


def test_forecast_endpoint(client):
    history = [
        {"value": v, "timestamp": f"2024-01-0{i + 1}T00:00:00Z"}
        for i, v in enumerate([1, 2, 3, 4, 5])
    ]

    response = client.post(
        "/api/v1/trends/forecast", json={"history": history, "weeks_ahead": 1}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["forecast"] == [6, 7, 8, 9, 10, 11, 12]
    assert data["trend"] == "increasing"
    assert data["timeframe"] == "1 weeks"


def test_forecast_rejects_bad_horizon(client):
    response = client.post("/api/v1/trends/forecast", json={"history": [], "weeks_ahead": 0})

    assert response.status_code == 422


# ============================================================================
# Metrics
# ============================================================================


def test_metrics_endpoint(wired_client):
    wired_client.post("/api/v1/search-trends", json={"keyword": "sustainable packaging"})

    response = wired_client.get("/metrics")

    assert response.status_code == 200
    assert "trend_searches_total" in response.text
    assert "records_processed_total" in response.text


# ============================================================================
# Lifespan
# ============================================================================


@pytest.mark.asyncio
async def test_lifespan_reuses_process_settings_without_database():
    from api.main import app_state, lifespan

    pool = MagicMock()
    pool.connect = AsyncMock(side_effect=ConnectionError("refused"))
    pool.close = AsyncMock()

    try:
        with patch("api.main.PostgreSQLConnectionPool", return_value=pool):
            async with lifespan(app):
                assert app_state.settings is settings
                assert app_state.orchestrator is None
        pool.close.assert_awaited_once()
    finally:
        app_state.settings = None
        app_state.db_pool = None
