"""Registration of a new user."""

from typing import Optional

import structlog

from userauth.core.exceptions import ConflictError
from userauth.domain.dtos import CreateUserDTO, UserResponseDTO
from userauth.domain.events import UserCreatedEvent
from userauth.domain.interfaces import IPasswordHasher, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class CreateUser(BaseOperation):
    """Registers a user and publishes `UserCreatedEvent`.

    Outputs:
        SUCCESS: `UserResponseDTO` of the stored user.
        VALIDATION_ERROR: The two passwords differ.
        USER_EXISTS: The email or the username is already in use.
        ERROR: `OperationError` with code ``CREATE_USER_FAILED``.

    Publishing the event starts the verification chain: a verification token
    is created, then the verification email is sent.
    """

    def __init__(self, user_repository: IUserRepository, password_hasher: IPasswordHasher):
        super().__init__(["SUCCESS", "ERROR", "VALIDATION_ERROR", "USER_EXISTS"], logger)
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    @staticmethod
    def _exists_message(user_data: CreateUserDTO, field: Optional[str]) -> str:
        if field == "username":
            return f"Username {user_data.username} is already taken."
        return f"User with email {user_data.email} already exists."

    async def execute(self, user_data: CreateUserDTO) -> None:
        try:
            if user_data.password != user_data.repeat_password:
                self.emit_output("VALIDATION_ERROR", "Passwords do not match.")
                return

            if await self.user_repository.find_by_email(user_data.email):
                self.emit_output("USER_EXISTS", self._exists_message(user_data, "email"))
                return

            if await self.user_repository.find_by_username(user_data.username):
                self.emit_output("USER_EXISTS", self._exists_message(user_data, "username"))
                return

            hashed_password = self.password_hasher.hash(user_data.password)
            try:
                user = await self.user_repository.create(
                    user_data.model_copy(update={"password": hashed_password, "repeat_password": hashed_password})
                )
            except ConflictError as exc:
                # a concurrent registration won the unique index
                self.emit_output("USER_EXISTS", self._exists_message(user_data, exc.field))
                return
            created = UserResponseDTO.from_entity(user)

            self.publish_domain_event(UserCreatedEvent(user=created))
            self.emit_success(created)
        except Exception as exc:
            self.fail("CREATE_USER_FAILED", "Failed to create user", exc)
