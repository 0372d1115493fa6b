import structlog

from userauth.domain.events import UserDeletedEvent
from userauth.domain.interfaces import IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class DeleteUser(BaseOperation):
    """Deletes a user after announcing it with `UserDeletedEvent`.

    The event is published before the delete so the token cleanup can run
    while the user's tokens are still reachable by ``user_id``.
    """

    def __init__(self, user_repository: IUserRepository):
        super().__init__(["SUCCESS", "ERROR", "NOTFOUND_ERROR", "VALIDATION_ERROR"], logger)
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> None:
        try:
            if not user_id:
                self.emit_output("VALIDATION_ERROR", "User id is required.")
                return

            user = await self.user_repository.find_by_id(user_id)
            if user is None:
                self.emit_output("NOTFOUND_ERROR", f"User with id {user_id} not found")
                return

            self.publish_domain_event(UserDeletedEvent(user_id=user.id))
            await self.user_repository.delete(user.id)
            self.emit_success("Deletion was successful")
        except Exception as exc:
            self.fail("DELETE_USER_FAILED", "Failed to delete user", exc)
