from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into the API's JSON error envelope::

    {"type": "<ErrorType>", "message": "<text>", "details": <any>}
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette import status
from structlog import get_logger

from userauth.core.config.settings import settings
from userauth.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    EmailServiceError,
    PermissionError,
    UserAuthError,
    ValidationError,
)

__all__ = [
    "error_response",
    "authentication_error_handler",
    "permission_error_handler",
    "validation_error_handler",
    "request_validation_error_handler",
    "conflict_error_handler",
    "email_service_error_handler",
    "database_error_handler",
    "rate_limit_exception_handler",
    "application_error_handler",
    "unhandled_exception_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def error_response(
    status_code: int,
    error_type: str,
    message: str,
    details: Any = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Builds a JSON error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"type": error_type, "message": message, "details": details},
        headers=headers,
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`."""
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=_client_host(request),
        path=request.url.path,
    )
    return error_response(
        status.HTTP_401_UNAUTHORIZED,
        exc.error_type,
        exc.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    """Handles `PermissionError`, returning a `403 Forbidden`."""
    logger.warning(
        "Permission denied",
        error=exc.code,
        client_ip=_client_host(request),
        path=request.url.path,
    )
    return error_response(status.HTTP_403_FORBIDDEN, exc.error_type, exc.message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError` and `DTOValidationError`, returning a `400 Bad Request`.

    Field level problems are carried in ``details``.
    """
    return error_response(status.HTTP_400_BAD_REQUEST, exc.error_type, exc.message, exc.details)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Renders FastAPI's own body/query validation failures like DTO failures."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "body",
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "ValidationError", "Validation failed", details)


async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Handles `ConflictError`, returning a `409 Conflict`."""
    return error_response(status.HTTP_409_CONFLICT, exc.error_type, exc.message, exc.details)


async def email_service_error_handler(request: Request, exc: EmailServiceError) -> JSONResponse:
    """Handles `EmailServiceError`, returning a `503 Service Unavailable`."""
    logger.error(
        "Email service interaction failed",
        error_message=str(exc),
        client_ip=_client_host(request),
        path=request.url.path,
    )
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc.error_type, exc.message)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, hiding driver details from the client."""
    logger.critical(
        "A critical database error occurred",
        error_message=str(exc),
        path=request.url.path,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, exc.error_type, "A database error occurred."
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handles exceptions raised by slowapi when a rate limit is exceeded."""
    logger.warning(
        "rate_limit_exceeded",
        client_ip=_client_host(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS, "TooManyRequestsError", "Too many requests, please try again later."
    )


async def application_error_handler(request: Request, exc: UserAuthError) -> JSONResponse:
    """Fallback for application errors without a more specific handler."""
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, exc.error_type, "An unexpected error occurred."
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort handler. Exposes the message and stack only in development."""
    logger.error(
        "Unhandled exception",
        error_message=str(exc),
        error_class=type(exc).__name__,
        path=request.url.path,
        exc_info=exc,
    )
    details = None
    message = "An unexpected error occurred."
    if settings.is_development:
        message = str(exc) or message
        details = {"stack": traceback.format_exception(type(exc), exc, exc.__traceback__)}
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", message, details)


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so subclasses such
    as `DTOValidationError` and `TemplateRenderError` reach the handler of
    their nearest registered ancestor.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(EmailServiceError, email_service_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(UserAuthError, application_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
