from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .user import utc_now


class TokenType(str, Enum):
    """The purpose a stored or signed token was issued for."""

    ACCESS = "ACCESS"
    REFRESH = "REFRESH"
    VERIFICATION = "VERIFICATION"
    RESET_PASSWORD = "RESET_PASSWORD"


class Token(BaseModel):
    """A token record owned by a user.

    The record references its user by id only; deleting a user does not
    cascade here (token cleanup is driven by the ``UserDeleted`` domain event).

    A token is valid iff it is not revoked and ``now < expires_at``. At the
    exact instant ``now == expires_at`` it is already expired.
    """

    id: str
    user_id: str
    token: str
    type: TokenType
    expires_at: datetime
    is_revoked: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("expires_at", "created_at", "updated_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        # MongoDB hands back naive UTC datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return now >= self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return not self.is_revoked and not self.is_expired(now)
