"""Credential login issuing an access and a refresh JWT."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.dtos import AuthenticateUserDTO
from userauth.domain.entities import TokenType
from userauth.domain.interfaces import IJWTTokenGenerator, IPasswordHasher, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class LoginUser(BaseOperation):
    """Authenticates a user by email and password.

    The checks run in a fixed order: unknown email, wrong password, then
    unverified account. Tokens are only signed once all three pass.

    Outputs:
        SUCCESS: dict with ``user_id``, ``access_token``,
            ``access_token_expires``, ``refresh_token`` and
            ``refresh_token_expires`` (aware UTC datetimes).
        USER_NOT_FOUND, INVALID_CREDENTIALS, ACCOUNT_NOT_VERIFIED: message.
        ERROR: `OperationError` with code ``LOGIN_FAILED``.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_token_generator: IJWTTokenGenerator,
        config: Optional[Settings] = None,
    ):
        super().__init__(
            ["SUCCESS", "ERROR", "INVALID_CREDENTIALS", "USER_NOT_FOUND", "ACCOUNT_NOT_VERIFIED"],
            logger,
        )
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.jwt_token_generator = jwt_token_generator
        self.config = config or settings

    async def execute(self, credentials: AuthenticateUserDTO) -> None:
        try:
            user = await self.user_repository.find_by_email_with_password(credentials.email)
            if user is None:
                self.emit_output("USER_NOT_FOUND", f"User with email {credentials.email} not found")
                return

            if not user.password or not self.password_hasher.compare(credentials.password, user.password):
                self.emit_output("INVALID_CREDENTIALS", "Invalid email or password.")
                return

            if not user.is_verified:
                self.emit_output("ACCOUNT_NOT_VERIFIED", "Please verify your email before logging in.")
                return

            access_ttl = self.config.ACCESS_TOKEN_TTL_SECONDS
            refresh_ttl = self.config.REFRESH_TOKEN_TTL_SECONDS
            now = datetime.now(timezone.utc)

            access_token = self.jwt_token_generator.generate(
                {"userId": user.id, "email": user.email, "role": user.role.value},
                TokenType.ACCESS,
                access_ttl,
            )
            refresh_token = self.jwt_token_generator.generate(
                {"userId": user.id}, TokenType.REFRESH, refresh_ttl
            )

            self.emit_success(
                {
                    "user_id": user.id,
                    "access_token": access_token,
                    "access_token_expires": now + timedelta(seconds=access_ttl),
                    "refresh_token": refresh_token,
                    "refresh_token_expires": now + timedelta(seconds=refresh_ttl),
                }
            )
        except Exception as exc:
            self.fail("LOGIN_FAILED", "Login failed", exc)
