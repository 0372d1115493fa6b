"""Confirmation of an email address through a verification link."""

import structlog

from userauth.domain.entities import TokenType
from userauth.domain.interfaces import ITokenRepository, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class VerifyEmail(BaseOperation):
    """Marks the owner of a verification token as verified.

    The token record is single use. It is deleted on success and also when
    it turns out to be expired, orphaned or redundant (owner already
    verified). Unknown tokens and tokens of another type are left alone.

    Outputs:
        SUCCESS / ALREADY_VERIFIED: ``{"user_id": ...}``.
        TOKEN_NOT_FOUND, TOKEN_EXPIRED, USER_NOT_FOUND: message.
        ERROR: `OperationError` with code ``EMAIL_VERIFICATION_FAILED``.
    """

    def __init__(self, token_repository: ITokenRepository, user_repository: IUserRepository):
        super().__init__(
            [
                "SUCCESS",
                "ERROR",
                "TOKEN_NOT_FOUND",
                "USER_NOT_FOUND",
                "TOKEN_EXPIRED",
                "ALREADY_VERIFIED",
            ],
            logger,
        )
        self.token_repository = token_repository
        self.user_repository = user_repository

    async def execute(self, token_value: str) -> None:
        try:
            token = await self.token_repository.find_by_token(token_value)
            if token is None or token.type != TokenType.VERIFICATION:
                self.emit_output("TOKEN_NOT_FOUND", "Invalid or expired verification link.")
                return

            if token.is_expired():
                await self.token_repository.delete(token.id)
                self.emit_output("TOKEN_EXPIRED", "Verification link has expired. Please request a new one.")
                return

            user = await self.user_repository.find_by_id(token.user_id)
            if user is None:
                await self.token_repository.delete(token.id)
                self.emit_output("USER_NOT_FOUND", "User associated with this verification link no longer exists.")
                return

            if user.is_verified:
                await self.token_repository.delete(token.id)
                self.emit_output("ALREADY_VERIFIED", {"user_id": user.id})
                return

            await self.user_repository.update(user.id, {"is_verified": True})
            await self.token_repository.delete(token.id)
            self.emit_success({"user_id": user.id})
        except Exception as exc:
            self.fail("EMAIL_VERIFICATION_FAILED", "Email verification failed", exc)
