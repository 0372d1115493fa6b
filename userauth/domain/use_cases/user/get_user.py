import structlog

from userauth.domain.dtos import GetUserInputDTO, UserResponseDTO
from userauth.domain.interfaces import IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class GetUser(BaseOperation):
    """Fetches one user by id, falling back to a lookup by email.

    Outputs: ``SUCCESS`` (`UserResponseDTO`), ``NOTFOUND_ERROR`` and ``ERROR``
    (code ``GET_USER_FAILED``).
    """

    def __init__(self, user_repository: IUserRepository):
        super().__init__(["SUCCESS", "ERROR", "NOTFOUND_ERROR"], logger)
        self.user_repository = user_repository

    async def execute(self, user_input: GetUserInputDTO) -> None:
        try:
            user = await self.user_repository.find_by_id(user_input.id)
            if user is None:
                user = await self.user_repository.find_by_email(user_input.id)

            if user is None:
                self.emit_output("NOTFOUND_ERROR", f"User with id {user_input.id} not found")
                return

            self.emit_success(UserResponseDTO.from_entity(user))
        except Exception as exc:
            self.fail("GET_USER_FAILED", "Failed to get user", exc)
