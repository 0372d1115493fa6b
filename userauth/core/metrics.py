"""Prometheus metrics for the HTTP layer.

Request counters and latencies live in the default ``prometheus_client``
registry next to its process and platform collectors, and are scraped from
``/prometheus`` (see `userauth.adapters.api.v1.metrics`).
"""

import time

from fastapi import Request
from prometheus_client import Counter, Histogram

HTTP_REQUESTS = Counter(
    "userauth_http_requests_total",
    "HTTP requests handled, by method, route template and status code.",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "userauth_http_request_duration_seconds",
    "Time spent handling HTTP requests, by method and route template.",
    ["method", "route"],
)


def route_label(request: Request) -> str:
    """The matched route template (``/api/v1/user/{user_id}``), never the raw
    path, so label cardinality stays bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


async def record_metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    route = route_label(request)
    HTTP_REQUESTS.labels(request.method, route, str(response.status_code)).inc()
    HTTP_REQUEST_DURATION.labels(request.method, route).observe(time.perf_counter() - start)
    return response
