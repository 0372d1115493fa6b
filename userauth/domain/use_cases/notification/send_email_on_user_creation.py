"""Verification email delivery.

Runs automatically on ``TokenCreated`` and also backs the "resend
verification email" endpoint, which passes a bare `EmailUserDTO`.
"""

from datetime import datetime, timezone
from typing import Optional, Union

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.dtos import EmailUserDTO, UserResponseDTO
from userauth.domain.entities import TokenType
from userauth.domain.events import TokenCreatedEvent
from userauth.domain.interfaces import IEmailService, ITokenRepository, IUserRepository
from userauth.domain.use_cases.base import EventDrivenOperation

logger = structlog.get_logger(__name__)

VERIFICATION_TEMPLATE = "email-verification-token"


class SendEmailOnUserCreation(EventDrivenOperation):
    """Emails the newest active verification link to a user.

    The user is always re-read by email, so an account verified in the
    meantime is reported as ``USER_ALREADY_VERIFIED`` instead of mailed.

    Outputs:
        SUCCESS / USER_ALREADY_VERIFIED: ``{"user_id", "email"}``.
        USER_NOT_FOUND, TOKEN_NOT_FOUND, AVAILABILITY_ERROR: message.
        ERROR: `OperationError` with code ``REPOSITORY_ERROR``,
            ``EMAIL_SERVICE_VERIFY_FAILED`` or ``EMAIL_SEND_FAILED``.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        token_repository: ITokenRepository,
        email_service: IEmailService,
        config: Optional[Settings] = None,
    ):
        super().__init__(
            [
                "SUCCESS",
                "ERROR",
                "AVAILABILITY_ERROR",
                "USER_NOT_FOUND",
                "TOKEN_NOT_FOUND",
                "USER_ALREADY_VERIFIED",
            ],
            logger,
        )
        self.user_repository = user_repository
        self.token_repository = token_repository
        self.email_service = email_service
        self.config = config or settings

    def bootstrap(self) -> None:
        self.subscribe_guarded("TokenCreated", self._on_token_created)

    async def _on_token_created(self, event: TokenCreatedEvent) -> None:
        await self.execute(event.user)

    async def execute(self, user_input: Union[UserResponseDTO, EmailUserDTO]) -> None:
        try:
            user = await self.user_repository.find_by_email(user_input.email)
            tokens = await self.token_repository.find_by_user_id(user.id) if user else []
        except Exception as exc:
            self.fail("REPOSITORY_ERROR", "Failed to load user or verification token", exc)
            return

        if user is None:
            self.emit_output("USER_NOT_FOUND", f"User with email {user_input.email} not found")
            return

        if user.is_verified:
            self.emit_output("USER_ALREADY_VERIFIED", {"user_id": user.id, "email": user.email})
            return

        verification_tokens = [token for token in tokens if token.type == TokenType.VERIFICATION]
        if not verification_tokens:
            self.emit_output("TOKEN_NOT_FOUND", f"No active verification token for user {user.id}")
            return
        token = max(verification_tokens, key=lambda t: t.created_at)

        try:
            available = await self.email_service.verify()
        except Exception as exc:
            self.fail("EMAIL_SERVICE_VERIFY_FAILED", "Email service verification failed", exc)
            return

        if not available:
            self.emit_output("AVAILABILITY_ERROR", "Email service is not available")
            return

        verification_url = (
            f"{self.config.BASE_URL}{self.config.API_PREFIX}/auth/verify-email?token={token.token}"
        )
        try:
            await self.email_service.send_email(
                to=user.email,
                subject=f"{self.config.EMAIL_SUBJECT_PREFIX} Validate Your User Account",
                template=VERIFICATION_TEMPLATE,
                context={
                    "name": user.name,
                    "verification_url": verification_url,
                    "expires_in_minutes": self.config.JWT_VERIFY_EMAIL_EXPIRATION_MINUTES,
                    "current_year": datetime.now(timezone.utc).year,
                },
            )
        except Exception as exc:
            self.fail("EMAIL_SEND_FAILED", f"Failed to send verification email to {user.email}", exc)
            return

        self.emit_success({"user_id": user.id, "email": user.email})
