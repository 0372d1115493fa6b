from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.dtos import CreateTokenDTO, EmailUserDTO, TokenResponseDTO, UserResponseDTO
from userauth.domain.entities import TokenType
from userauth.domain.events import ForgotPasswordEvent
from userauth.domain.interfaces import ITokenGenerator, ITokenRepository, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class ForgotPassword(BaseOperation):
    """Issues a password reset token for a verified user.

    The email itself is sent by the ``ForgotPassword`` event subscriber, so
    ``SUCCESS`` only means the token was stored and the event published.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        token_repository: ITokenRepository,
        token_generator: ITokenGenerator,
        config: Optional[Settings] = None,
    ):
        super().__init__(["SUCCESS", "ERROR", "USER_NOT_FOUND", "ACCOUNT_NOT_VERIFIED"], logger)
        self.user_repository = user_repository
        self.token_repository = token_repository
        self.token_generator = token_generator
        self.config = config or settings

    async def execute(self, request: EmailUserDTO) -> None:
        try:
            user = await self.user_repository.find_by_email(request.email)
            if user is None:
                self.emit_output("USER_NOT_FOUND", f"User with email {request.email} not found")
                return

            if not user.is_verified:
                self.emit_output(
                    "ACCOUNT_NOT_VERIFIED", "Please verify your email before resetting your password."
                )
                return

            expires_at = datetime.now(timezone.utc) + timedelta(
                minutes=self.config.JWT_RESET_PASSWORD_EXPIRATION_MINUTES
            )
            token = await self.token_repository.create(
                CreateTokenDTO(
                    user_id=user.id,
                    token=self.token_generator.generate(),
                    type=TokenType.RESET_PASSWORD,
                    expires_at=expires_at,
                )
            )

            self.publish_domain_event(
                ForgotPasswordEvent(
                    user=UserResponseDTO.from_entity(user),
                    token=TokenResponseDTO.from_entity(token),
                )
            )
            self.emit_success({"message": "Password reset link sent to your email"})
        except Exception as exc:
            self.fail("FORGOT_PASSWORD_FAILED", "Failed to process forgot password request", exc)
