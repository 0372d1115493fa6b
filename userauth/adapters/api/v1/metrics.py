"""Prometheus scrape endpoint.

Served outside the versioned API prefix, at ``/prometheus`` and the
conventional ``/metrics``.
"""

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter(tags=["metrics"])


@router.get("/prometheus", summary="Prometheus metrics")
@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
