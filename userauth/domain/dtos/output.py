"""Output DTOs returned by operations and serialized by the HTTP layer."""

import math
from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, computed_field

from userauth.domain.entities import Gender, Token, TokenType, User, UserRole

T = TypeVar("T")


class UserResponseDTO(BaseModel):
    """Public view of a user. Never carries the password hash."""

    id: str
    name: str
    email: str
    username: str
    role: UserRole
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None
    is_verified: bool = False

    @classmethod
    def from_entity(cls, user: User) -> "UserResponseDTO":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            username=user.username,
            role=user.role,
            birth_date=user.birth_date,
            gender=user.gender,
            is_verified=user.is_verified,
        )


class TokenResponseDTO(BaseModel):
    id: str
    user_id: str
    token: str
    type: TokenType
    expires_at: datetime
    is_revoked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, token: Token) -> "TokenResponseDTO":
        return cls(**token.model_dump())

    def to_entity(self) -> Token:
        return Token(**self.model_dump(exclude_none=True))


class PaginationDTO(BaseModel, Generic[T]):
    body: List[T]
    total: int
    page: int
    limit: int

    @computed_field
    @property
    def last_page(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
