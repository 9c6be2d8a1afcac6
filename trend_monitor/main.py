"""
Command-line entry point: run one keyword search against PostgreSQL.

Usage:
    python -m trend_monitor.main "sustainable packaging"
    python -m trend_monitor.main --init-schema "kestävä kehitys"
"""

import argparse
import asyncio
import json
import logging
import sys

from trend_monitor.config import Settings
from trend_monitor.observability.logging import setup_logging
from trend_monitor.orchestrator import (
    IngestionAbortedError,
    KeywordRequiredError,
    TrendIngestionOrchestrator,
)
from trend_monitor.storage import PostgreSQLConnectionPool, build_gateway, init_schema

logger = logging.getLogger(__name__)


async def run_search(keyword: str, settings: Settings, create_schema: bool = False) -> int:
    """Run one search and print the summary as JSON."""
    db_pool = PostgreSQLConnectionPool(**settings.postgres_config())
    pool = await db_pool.connect()
    try:
        if create_schema:
            await init_schema(pool)

        orchestrator = TrendIngestionOrchestrator(settings, build_gateway(pool))
        try:
            summary = await orchestrator.search(keyword)
        except KeywordRequiredError as e:
            print(json.dumps({"error": str(e)}))
            return 2
        except IngestionAbortedError as e:
            print(json.dumps({
                "error": "Internal server error",
                "details": e.details,
                "total_processed": e.total_processed,
                "total_failed": e.total_failed,
            }))
            return 1

        print(summary.model_dump_json(indent=2, exclude_none=True))
        return 0
    finally:
        await db_pool.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Search sources for a keyword and store the trends")
    parser.add_argument("keyword", help="Keyword to search for")
    parser.add_argument(
        "--init-schema", action="store_true", help="Create database tables before searching"
    )
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    return asyncio.run(run_search(args.keyword, settings, create_schema=args.init_schema))


if __name__ == "__main__":
    sys.exit(main())
