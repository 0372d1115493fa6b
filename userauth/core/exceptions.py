from __future__ import annotations

"""Centralized, structured exception hierarchy for the API.

Every application error carries a machine-readable ``code`` and a
human-readable ``message``. Each class also names the ``error_type`` that the
HTTP layer puts in the ``type`` field of the JSON error body, so the mapping
from exception to response lives in one place (`userauth.core.handlers`).
"""

from typing import Any, Dict, Final, List, Optional

__all__: Final = [
    "UserAuthError",
    "AuthenticationError",
    "PermissionError",
    "ValidationError",
    "DTOValidationError",
    "ConflictError",
    "DatabaseError",
    "EmailServiceError",
    "TemplateRenderError",
    "ConfigurationError",
]


class UserAuthError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging
                       and for the response body.
        code (str): A unique, machine-readable error code.
        details: Optional structured payload returned to the client.
    """

    error_type: str = "InternalServerError"

    def __init__(self, message: str, code: str = "generic_error", details: Any = None):
        self.message = message
        self.code = code
        self.details = details
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors
# ---------------------------------------------------------------------------


class AuthenticationError(UserAuthError):
    """Raised when a request cannot be authenticated. Maps to `401 Unauthorized`."""

    error_type = "UnauthorizedError"

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class PermissionError(UserAuthError):
    """Raised when an authenticated user lacks the role for an action.

    Maps to `403 Forbidden`.
    """

    error_type = "ForbiddenError"

    def __init__(self, message: str, code: str = "permission_denied"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors (map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(UserAuthError):
    """Raised for general data validation failures."""

    error_type = "ValidationError"

    def __init__(self, message: str, code: str = "validation_error", details: Any = None):
        super().__init__(message, code, details)


class DTOValidationError(ValidationError):
    """Raised when input data does not satisfy a DTO's rules.

    Carries one entry per offending field so that clients can highlight
    each problem next to the input it belongs to.
    """

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        self.errors = errors
        super().__init__(message, "dto_validation_error", details=errors)

    def get_formatted_errors(self) -> Dict[str, List[str]]:
        """Groups error messages by field name."""
        formatted: Dict[str, List[str]] = {}
        for error in self.errors:
            formatted.setdefault(error["field"], []).append(error["message"])
        return formatted


# ---------------------------------------------------------------------------
# Resource state errors
# ---------------------------------------------------------------------------


class ConflictError(UserAuthError):
    """Raised when a write would violate a uniqueness rule. Maps to `409`.

    Attributes:
        field: The unique field that collided (e.g. ``email``), if known.
    """

    error_type = "ConflictError"

    def __init__(
        self, message: str = "Resource already exists", code: str = "conflict", field: Optional[str] = None
    ):
        super().__init__(message, code, {"field": field} if field else None)
        self.field = field


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------


class DatabaseError(UserAuthError):
    """Raised when a MongoDB or Redis call fails."""

    def __init__(self, message: str, code: str = "database_error", details: Optional[Any] = None):
        super().__init__(message, code, details)


class EmailServiceError(UserAuthError):
    """Raised when the email service cannot render or deliver a message.

    Maps to `503 Service Unavailable`.
    """

    error_type = "ServiceUnavailableError"

    def __init__(self, message: str, code: str = "email_service_error"):
        super().__init__(message, code)


class TemplateRenderError(EmailServiceError):
    """Raised when an email template cannot be rendered."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)


class ConfigurationError(UserAuthError):
    """Raised when the runtime configuration cannot be used."""

    def __init__(self, message: str, code: str = "configuration_error"):
        super().__init__(message, code)
