"""Verification token creation, triggered by ``UserCreated``."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.dtos import CreateTokenDTO, TokenResponseDTO
from userauth.domain.entities import TokenType
from userauth.domain.events import TokenCreatedEvent, UserCreatedEvent
from userauth.domain.interfaces import ITokenGenerator, ITokenRepository
from userauth.domain.use_cases.base import EventDrivenOperation

logger = structlog.get_logger(__name__)


class CreateTokenOnUserCreation(EventDrivenOperation):
    """Stores a verification token for every newly registered user.

    On success a `TokenCreatedEvent` is published as a child of the
    triggering event, which in turn makes the verification email go out.

    Outputs:
        SUCCESS: ``{"user": UserResponseDTO, "created_token": TokenResponseDTO}``.
        ERROR: `OperationError` with code ``TOKEN_CREATION_FAILED``.
    """

    def __init__(
        self,
        token_repository: ITokenRepository,
        token_generator: ITokenGenerator,
        config: Optional[Settings] = None,
    ):
        super().__init__(["SUCCESS", "ERROR"], logger)
        self.token_repository = token_repository
        self.token_generator = token_generator
        self.config = config or settings

    def bootstrap(self) -> None:
        self.subscribe_guarded("UserCreated", self.execute)

    async def execute(self, event: UserCreatedEvent) -> None:
        try:
            expires_at = datetime.now(timezone.utc) + timedelta(
                minutes=self.config.JWT_VERIFY_EMAIL_EXPIRATION_MINUTES
            )
            token = await self.token_repository.create(
                CreateTokenDTO(
                    user_id=event.user.id,
                    token=self.token_generator.generate(),
                    type=TokenType.VERIFICATION,
                    expires_at=expires_at,
                )
            )

            self.publish_domain_event(TokenCreatedEvent(user=event.user, metadata=event.child_metadata()))
            self.emit_success({"user": event.user, "created_token": TokenResponseDTO.from_entity(token)})
        except Exception as exc:
            self.fail("TOKEN_CREATION_FAILED", f"Failed to create token for user {event.user.id}", exc)
