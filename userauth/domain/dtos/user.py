"""Input DTOs for the user CRUD operations."""

import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import EmailStr, Field, field_validator

from userauth.domain.entities import Gender, UserRole

from .base import BaseDTO

PASSWORD_PATTERN = re.compile(r"^(?=.*\d)(?=.*[A-Z])(?=.*[a-z])(?=.*[!@#$%^&*])[\w!@#$%^&*]{8,}$")
PASSWORD_RULES_MESSAGE = (
    "Password must be at least 8 characters and include uppercase, "
    "lowercase, number and special character"
)


def _check_password(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULES_MESSAGE)
    return value


def _coerce_birth_date(value: Any) -> Any:
    # Unparseable dates are dropped rather than rejected
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000).date()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


class CreateUserDTO(BaseDTO):
    """Payload for registering a user."""

    name: str = Field(..., min_length=1, pattern=r"^[a-zA-Z0-9]+$", examples=["johndoe"])
    email: EmailStr = Field(..., examples=["john@example.com"])
    username: str = Field(..., min_length=1, max_length=50, examples=["john_doe"])
    password: str = Field(..., examples=["Str0ngP@ss"])
    repeat_password: str = Field(..., min_length=1, examples=["Str0ngP@ss"])
    role: UserRole = UserRole.USER
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return _check_password(value)

    @field_validator("birth_date", mode="before")
    @classmethod
    def _parse_birth_date(cls, value: Any) -> Any:
        return _coerce_birth_date(value)


class UpdateUserDTO(BaseDTO):
    """Partial update of a user. Unset fields are left untouched."""

    name: Optional[str] = Field(default=None, min_length=1, pattern=r"^[a-zA-Z0-9 ]+$")
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    password: Optional[str] = None
    role: Optional[UserRole] = None
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None
    is_verified: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_password(value)

    @field_validator("birth_date", mode="before")
    @classmethod
    def _parse_birth_date(cls, value: Any) -> Any:
        return _coerce_birth_date(value)

    def to_update_dict(self) -> Dict[str, Any]:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True, mode="python")


class GetUserInputDTO(BaseDTO):
    id: str = Field(..., min_length=1)


class GetAllUsersInputDTO(BaseDTO):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
