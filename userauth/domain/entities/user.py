from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    """Represents the role of a user within the system.

    Attributes:
        ADMIN: Confers administrative privileges (user updates and deletions).
        USER: Represents a standard user with regular access rights.
    """

    ADMIN = "admin"
    USER = "user"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON-BINARY"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """Represents a User entity and acts as an Aggregate Root.

    The entity is a plain record. ``password`` holds the bcrypt hash and is
    only populated by the repository read that explicitly asks for it
    (`IUserRepository.find_by_email_with_password`); it is excluded from
    every serialization.

    Attributes:
        id: uuid4 string identifier.
        name: Display name.
        email: Unique email address.
        username: Unique login handle.
        password: The bcrypt hash, when loaded.
        role: Role used by the authorization guard.
        birth_date: Optional date of birth.
        gender: Optional gender.
        is_verified: Whether the email address has been confirmed. Unverified
            users cannot log in or request a password reset.
        created_at: Creation timestamp (UTC).
        updated_at: Last update timestamp (UTC).
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    email: EmailStr
    username: str
    password: Optional[str] = Field(default=None, exclude=True, repr=False)
    role: UserRole = UserRole.USER
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None
    is_verified: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
