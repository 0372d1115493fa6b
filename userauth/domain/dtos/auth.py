"""Input DTOs for the authentication flows."""

from typing import Optional

from pydantic import EmailStr, Field

from .base import BaseDTO

JWT_PATTERN = r"^[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*$"


class AuthenticateUserDTO(BaseDTO):
    """Credentials for ``POST /auth/login``."""

    email: EmailStr = Field(..., examples=["john@example.com"])
    password: str = Field(..., min_length=1, examples=["Str0ngP@ss"])


class EmailUserDTO(BaseDTO):
    """A bare email address (forgot password, resend verification)."""

    email: EmailStr = Field(..., examples=["john@example.com"])


class LogoutRequestDTO(BaseDTO):
    """Both tokens of a session.

    The fields are optional so that a missing token reaches the logout
    operation, which reports it as an invalid-token outcome. A token that is
    present must be well formed.
    """

    access_token: Optional[str] = Field(default=None, pattern=JWT_PATTERN)
    refresh_token: Optional[str] = Field(default=None, min_length=1)


class ResetPasswordDTO(BaseDTO):
    token: str = Field(..., min_length=1, description="Password reset token received via email")
    new_password: str = Field(..., alias="password", min_length=8, max_length=100)
