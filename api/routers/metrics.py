"""
Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST

from trend_monitor.observability.metrics import get_metrics

router = APIRouter(prefix="/metrics", tags=["Monitoring"])


@router.get("", response_class=Response)
async def prometheus_metrics():
    """
    Expose Prometheus metrics from the application registry.

    Example metrics exposed:
        - trend_searches_total{status="success"} 12
        - adapter_results_total{source="reddit"} 48
        - records_failed_total{source="news",error_type="raw_storage"} 1
    """
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)
