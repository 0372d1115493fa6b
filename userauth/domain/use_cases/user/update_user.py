"""Partial update of an existing user."""

import structlog

from userauth.core.exceptions import ConflictError
from userauth.domain.dtos import UpdateUserDTO, UserResponseDTO
from userauth.domain.interfaces import IPasswordHasher, IUserRepository
from userauth.domain.use_cases.base import BaseOperation

logger = structlog.get_logger(__name__)


class UpdateUser(BaseOperation):
    """Applies the fields present in an `UpdateUserDTO` to a user.

    Email and username uniqueness are only checked when the value actually
    changes, so re-sending the current email is not a conflict. A new
    password is hashed before it is stored. A unique index violation raised
    by the store (a concurrent write) is reported the same way as a conflict
    found up front.

    Outputs:
        SUCCESS: The updated `UserResponseDTO`.
        VALIDATION_ERROR: Nothing to update.
        USER_NOT_FOUND: No user has the given id.
        EMAIL_TAKEN / USERNAME_TAKEN: Another user already owns the value.
        ERROR: `OperationError` with code ``UPDATE_USER_FAILED``.
    """

    def __init__(self, user_repository: IUserRepository, password_hasher: IPasswordHasher):
        super().__init__(
            ["SUCCESS", "ERROR", "VALIDATION_ERROR", "USER_NOT_FOUND", "EMAIL_TAKEN", "USERNAME_TAKEN"],
            logger,
        )
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    async def execute(self, user_id: str, user_data: UpdateUserDTO) -> None:
        try:
            changes = user_data.to_update_dict()
            if not changes:
                self.emit_output("VALIDATION_ERROR", "No fields provided for update.")
                return

            user = await self.user_repository.find_by_id(user_id)
            if user is None:
                self.emit_output("USER_NOT_FOUND", f"User with id {user_id} not found")
                return

            email = changes.get("email")
            if email and email != user.email and await self.user_repository.find_by_email(email):
                self.emit_output("EMAIL_TAKEN", f"Email {email} is already in use.")
                return

            username = changes.get("username")
            if (
                username
                and username != user.username
                and await self.user_repository.find_by_username(username)
            ):
                self.emit_output("USERNAME_TAKEN", f"Username {username} is already taken.")
                return

            if "password" in changes:
                changes["password"] = self.password_hasher.hash(changes["password"])

            try:
                updated = await self.user_repository.update(user_id, changes)
            except ConflictError as exc:
                if exc.field == "email":
                    self.emit_output("EMAIL_TAKEN", f"Email {email} is already in use.")
                else:
                    self.emit_output("USERNAME_TAKEN", f"Username {username} is already taken.")
                return
            if updated is None:
                self.emit_output("USER_NOT_FOUND", f"User with id {user_id} not found")
                return

            self.emit_success(UserResponseDTO.from_entity(updated))
        except Exception as exc:
            self.fail("UPDATE_USER_FAILED", "Failed to update user", exc)
