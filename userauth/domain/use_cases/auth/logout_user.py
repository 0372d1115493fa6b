import asyncio
from typing import Optional

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.dtos import LogoutRequestDTO
from userauth.domain.entities import TokenType
from userauth.domain.interfaces import IJWTTokenGenerator, ITokenBlackList
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)

INVALID_TOKENS_MESSAGE = "Invalid or missing tokens provided."


class LogoutUser(BaseOperation):
    """Ends a session by blacklisting its access and refresh tokens.

    The refresh token must be a valid REFRESH JWT of the same user as the
    access token, otherwise nothing is blacklisted and ``INVALID_TOKEN`` is
    emitted. Each token stays blacklisted for its own maximum lifetime. Both
    writes run concurrently; if either fails the whole logout reports
    ``ERROR`` (code ``LOGOUT_FAILED``).
    """

    def __init__(
        self,
        token_blacklist: ITokenBlackList,
        jwt_token_generator: IJWTTokenGenerator,
        config: Optional[Settings] = None,
    ):
        super().__init__(["SUCCESS", "ERROR", "INVALID_TOKEN"], logger)
        self.token_blacklist = token_blacklist
        self.jwt_token_generator = jwt_token_generator
        self.config = config or settings

    async def execute(self, tokens: LogoutRequestDTO, user_id: Optional[str] = None) -> None:
        """Args:
        tokens: The session's access and refresh tokens.
        user_id: Owner of the access token, when the caller has already
            authenticated it.
        """
        try:
            if not tokens.access_token or not tokens.refresh_token:
                self.emit_output("INVALID_TOKEN", INVALID_TOKENS_MESSAGE)
                return

            payload = self.jwt_token_generator.validate(tokens.refresh_token, TokenType.REFRESH)
            if not payload or (user_id is not None and payload.get("userId") != user_id):
                self.logger.warning("Logout with an invalid refresh token", user_id=user_id)
                self.emit_output("INVALID_TOKEN", INVALID_TOKENS_MESSAGE)
                return

            await asyncio.gather(
                self.token_blacklist.add(tokens.access_token, self.config.ACCESS_TOKEN_TTL_SECONDS),
                self.token_blacklist.add(tokens.refresh_token, self.config.REFRESH_TOKEN_TTL_SECONDS),
            )
            self.emit_success({"message": "Successfully logged out."})
        except Exception as exc:
            self.fail("LOGOUT_FAILED", "Logout failed", exc)
