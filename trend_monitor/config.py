"""
Process-level configuration for the trend monitor.

Settings are read once from the environment (and an optional ``.env`` file)
into an explicit ``Settings`` object that is passed to the orchestrator,
the adapters and the API at startup.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

DEFAULT_ADAPTERS = "news,reddit,hackernews,yle,hs,iltalehti,suomi24"
DEFAULT_SUBREDDITS = "Finland,Suomi"
DEFAULT_SEARCH_RATE_LIMIT = "30/minute"


def _csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Configuration for one trend monitor process."""

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "trends"
    postgres_user: str = "trend_user"
    postgres_password: str = "trend_password"
    postgres_min_pool: int = 2
    postgres_max_pool: int = 10

    # Source adapters, in dispatch order
    enabled_adapters: List[str] = Field(default_factory=lambda: _csv(DEFAULT_ADAPTERS))
    news_api_key: Optional[str] = None
    news_api_url: str = "https://newsapi.org/v2/everything"
    news_lookback_days: int = 7
    news_page_size: int = 10
    news_content_max_chars: int = 500
    reddit_subreddits: List[str] = Field(default_factory=lambda: _csv(DEFAULT_SUBREDDITS))
    reddit_min_score: int = 5
    reddit_per_source_limit: int = 5
    reddit_max_results: int = 10
    hackernews_min_points: int = 10
    hackernews_max_results: int = 10
    regional_max_results: int = 5
    http_user_agent: str = "TrendMonitor/1.0 (brand and trend monitoring)"

    # Analysis
    language_detector: str = "indicator"

    # Orchestrator
    record_ingestion_metrics: bool = True

    # API
    search_rate_limit: str = DEFAULT_SEARCH_RATE_LIMIT
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        frozen = True

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Returns:
            Settings populated from the process environment, with defaults
            for anything unset
        """
        env = os.environ
        return cls(
            postgres_host=env.get("POSTGRES_HOST", "localhost"),
            postgres_port=int(env.get("POSTGRES_PORT", "5432")),
            postgres_db=env.get("POSTGRES_DB", "trends"),
            postgres_user=env.get("POSTGRES_USER", "trend_user"),
            postgres_password=env.get("POSTGRES_PASSWORD", "trend_password"),
            postgres_min_pool=int(env.get("POSTGRES_MIN_POOL", "2")),
            postgres_max_pool=int(env.get("POSTGRES_MAX_POOL", "10")),
            enabled_adapters=_csv(env.get("ENABLED_ADAPTERS", DEFAULT_ADAPTERS)),
            news_api_key=env.get("NEWS_API_KEY") or None,
            news_api_url=env.get("NEWS_API_URL", "https://newsapi.org/v2/everything"),
            news_lookback_days=int(env.get("NEWS_LOOKBACK_DAYS", "7")),
            news_page_size=int(env.get("NEWS_PAGE_SIZE", "10")),
            news_content_max_chars=int(env.get("NEWS_CONTENT_MAX_CHARS", "500")),
            reddit_subreddits=_csv(env.get("REDDIT_SUBREDDITS", DEFAULT_SUBREDDITS)),
            reddit_min_score=int(env.get("REDDIT_MIN_SCORE", "5")),
            reddit_per_source_limit=int(env.get("REDDIT_PER_SOURCE_LIMIT", "5")),
            reddit_max_results=int(env.get("REDDIT_MAX_RESULTS", "10")),
            hackernews_min_points=int(env.get("HACKERNEWS_MIN_POINTS", "10")),
            hackernews_max_results=int(env.get("HACKERNEWS_MAX_RESULTS", "10")),
            regional_max_results=int(env.get("REGIONAL_MAX_RESULTS", "5")),
            http_user_agent=env.get(
                "HTTP_USER_AGENT", "TrendMonitor/1.0 (brand and trend monitoring)"
            ),
            language_detector=env.get("LANGUAGE_DETECTOR", "indicator"),
            record_ingestion_metrics=_bool(env.get("RECORD_INGESTION_METRICS", "true")),
            search_rate_limit=env.get("SEARCH_RATE_LIMIT", DEFAULT_SEARCH_RATE_LIMIT),
            cors_origins=_csv(env.get("CORS_ORIGINS", "*")),
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_json=_bool(env.get("LOG_JSON", "true")),
        )

    def postgres_config(self) -> dict:
        """Keyword arguments for ``PostgreSQLConnectionPool``."""
        return {
            "host": self.postgres_host,
            "port": self.postgres_port,
            "database": self.postgres_db,
            "user": self.postgres_user,
            "password": self.postgres_password,
            "min_size": self.postgres_min_pool,
            "max_size": self.postgres_max_pool,
        }
