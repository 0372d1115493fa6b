"""Input DTOs for token records."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from userauth.domain.entities import TokenType

from .base import BaseDTO


class CreateTokenDTO(BaseDTO):
    user_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
    type: TokenType
    expires_at: datetime
    is_revoked: bool = False


class UpdateTokenDTO(BaseDTO):
    token: Optional[str] = None
    type: Optional[TokenType] = None
    expires_at: Optional[datetime] = None
    is_revoked: Optional[bool] = None
