"""
Prometheus scrape endpoint.
"""

from fastapi import APIRouter, Depends, Response

from api.src.dependencies import get_metrics
from shared.metrics import CONTENT_TYPE_LATEST, HTTPMetrics

router = APIRouter(tags=["Monitoring"])


@router.get("/metrics", response_class=Response, summary="Prometheus metrics")
async def prometheus_metrics(metrics: HTTPMetrics = Depends(get_metrics)) -> Response:
    """
    Expose the application's metrics registry in Prometheus text format.
    """
    return Response(content=metrics.render(), media_type=CONTENT_TYPE_LATEST)
