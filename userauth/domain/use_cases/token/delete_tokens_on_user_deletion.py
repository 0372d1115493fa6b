import structlog

from userauth.domain.events import UserDeletedEvent
from userauth.domain.interfaces import ITokenRepository
from userauth.domain.use_cases.base import EventDrivenOperation

logger = structlog.get_logger(__name__)


class DeleteTokensOnUserDeletion(EventDrivenOperation):
    """Removes the active tokens of a user that is being deleted.

    Outputs: ``TOKEN_DELETED`` (number of deleted tokens), ``TOKEN_NOT_FOUND``
    and ``ERROR`` (code ``TOKEN_DELETION_FAILED``).
    """

    def __init__(self, token_repository: ITokenRepository):
        super().__init__(["TOKEN_DELETED", "TOKEN_NOT_FOUND", "ERROR"], logger)
        self.token_repository = token_repository

    def bootstrap(self) -> None:
        self.subscribe_guarded("UserDeleted", self.execute)

    async def execute(self, event: UserDeletedEvent) -> None:
        try:
            tokens = await self.token_repository.find_by_user_id(event.user_id)
            if not tokens:
                self.emit_output("TOKEN_NOT_FOUND", f"No tokens found for user {event.user_id}")
                return

            for token in tokens:
                await self.token_repository.delete(token.id)

            self.logger.info("User tokens deleted", user_id=event.user_id, count=len(tokens))
            self.emit_output("TOKEN_DELETED", len(tokens))
        except Exception as exc:
            self.fail("TOKEN_DELETION_FAILED", f"Failed to delete tokens for user {event.user_id}", exc)
