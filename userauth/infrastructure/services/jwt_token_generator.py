"""JWT signing and verification with PyJWT."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode

from userauth.core.config.settings import Settings, settings
from userauth.domain.entities import TokenType
from userauth.domain.interfaces import IJWTTokenGenerator

logger = structlog.get_logger(__name__)

TOKEN_TYPE_CLAIM = "tokenType"


class JWTTokenGenerator(IJWTTokenGenerator):
    """HS256 JWTs signed with ``JWT_SECRET``.

    Every token carries a ``tokenType`` claim so an access token cannot be
    replayed where a refresh token is expected, and vice versa.
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        self._secret = config.JWT_SECRET.get_secret_value()
        self._algorithm = config.JWT_ALGORITHM

    def generate(self, payload: Dict[str, Any], token_type: TokenType, expires_in_seconds: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            **payload,
            TOKEN_TYPE_CLAIM: token_type.value,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in_seconds),
        }
        return jwt_encode(claims, self._secret, algorithm=self._algorithm)

    def validate(self, token: str, token_type: TokenType) -> Optional[Dict[str, Any]]:
        try:
            payload = jwt_decode(token, self._secret, algorithms=[self._algorithm])
        except PyJWTError as e:
            logger.debug("JWT validation failed", error=str(e), expected_type=token_type.value)
            return None

        if payload.get(TOKEN_TYPE_CLAIM) != token_type.value:
            logger.debug(
                "JWT type mismatch",
                expected_type=token_type.value,
                actual_type=payload.get(TOKEN_TYPE_CLAIM),
            )
            return None
        return payload
