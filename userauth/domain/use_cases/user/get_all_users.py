import structlog

from userauth.domain.dtos import GetAllUsersInputDTO, PaginationDTO, UserResponseDTO
from userauth.domain.interfaces import IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class GetAllUsers(BaseOperation):
    """Lists users one page at a time.

    Outputs: ``SUCCESS`` (`PaginationDTO` of `UserResponseDTO`) and ``ERROR``
    (code ``GET_USERS_ERROR``).
    """

    def __init__(self, user_repository: IUserRepository):
        super().__init__(["SUCCESS", "ERROR"], logger)
        self.user_repository = user_repository

    async def execute(self, pagination: GetAllUsersInputDTO) -> None:
        try:
            users, total = await self.user_repository.find_all(pagination.page, pagination.limit)
            self.emit_success(
                PaginationDTO[UserResponseDTO](
                    body=[UserResponseDTO.from_entity(user) for user in users],
                    total=total,
                    page=pagination.page,
                    limit=pagination.limit,
                )
            )
        except Exception as exc:
            self.fail("GET_USERS_ERROR", "Failed to get users", exc)
