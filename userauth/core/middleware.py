"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components: CORS, rate limiting, compression, security headers, metrics and
request logging.
"""

import time
from typing import Callable, Dict

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from userauth.core.config.settings import settings
from userauth.core.metrics import record_metrics_middleware

logger = structlog.get_logger("userauth.requests")

GZIP_MINIMUM_SIZE = 1000

# helmet's defaults
SECURITY_HEADERS: Dict[str, str] = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

CONTENT_SECURITY_POLICY = (
    "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
    "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
    "object-src 'none';script-src 'self';script-src-attr 'none';"
    "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
)

# Swagger UI and ReDoc load their assets from a CDN
CSP_EXEMPT_PREFIXES = ("/docs", "/redoc")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the standard security headers to every response.

    Headers a route has already set are left untouched.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if not request.url.path.startswith(CSP_EXEMPT_PREFIXES):
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        return response


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Starlette runs the middleware added last first, so request logging and
    metrics see the final status code and security headers are set on
    compressed and rate-limited responses alike.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    # CORS middleware configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting middleware
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(SecurityHeadersMiddleware)

    app.middleware("http")(record_metrics_middleware)
    if not settings.is_test:
        app.middleware("http")(log_requests_middleware)


async def log_requests_middleware(request: Request, call_next):
    """Logs method, path, status and duration of every request."""
    start = time.perf_counter()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else "unknown",
    )
    response = await call_next(request)
    logger.info(
        "request_completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response
