import structlog

from userauth.domain.dtos import ResetPasswordDTO
from userauth.domain.entities import TokenType
from userauth.domain.interfaces import IPasswordHasher, ITokenRepository, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class ResetPassword(BaseOperation):
    """Sets a new password using a reset token from `ForgotPassword`.

    Expired tokens are deleted. The token is consumed once the password has
    been changed.
    """

    def __init__(
        self,
        token_repository: ITokenRepository,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
    ):
        super().__init__(
            ["SUCCESS", "ERROR", "TOKEN_NOT_FOUND", "TOKEN_EXPIRED", "INVALID_TOKEN"], logger
        )
        self.token_repository = token_repository
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    async def execute(self, request: ResetPasswordDTO) -> None:
        try:
            token = await self.token_repository.find_by_token(request.token)
            if token is None:
                self.emit_output("TOKEN_NOT_FOUND", "Invalid or expired password reset link.")
                return

            if token.type != TokenType.RESET_PASSWORD:
                self.emit_output("INVALID_TOKEN", "Invalid password reset link.")
                return

            if token.is_expired():
                await self.token_repository.delete(token.id)
                self.emit_output("TOKEN_EXPIRED", "Password reset link has expired. Please request a new one.")
                return

            user = await self.user_repository.find_by_id(token.user_id)
            if user is None:
                self.emit_output("INVALID_TOKEN", "Invalid password reset link.")
                return

            await self.user_repository.update(
                user.id, {"password": self.password_hasher.hash(request.new_password)}
            )
            await self.token_repository.delete(token.id)
            self.emit_success({"message": "Password has been reset successfully.", "user_id": user.id})
        except Exception as exc:
            self.fail("RESET_PASSWORD_FAILED", "Failed to reset password", exc)
