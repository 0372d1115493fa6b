"""Repository interfaces for abstracting data persistence in the domain layer.

The operations depend on these abstract base classes only; the MongoDB
adapters live in `userauth.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from userauth.domain.dtos import CreateTokenDTO, CreateUserDTO, UpdateTokenDTO
from userauth.domain.entities import Token, User


class IUserRepository(ABC):
    """An interface defining the contract for user persistence operations.

    Every read except `find_by_email_with_password` returns users without
    the password hash.
    """

    @abstractmethod
    async def create(self, user_data: CreateUserDTO) -> User:
        """Stores a new user.

        Args:
            user_data: Validated registration data whose ``password`` is
                already hashed.

        Returns:
            The stored `User`, with its generated id.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_email_with_password(self, email: str) -> Optional[User]:
        """Like `find_by_email` but keeps the password hash on the entity."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, page: int, limit: int) -> Tuple[List[User], int]:
        """Returns one page of users and the total number of users.

        Args:
            page: 1-based page number.
            limit: Page size.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, data: Dict[str, Any]) -> Optional[User]:
        """Applies a partial update.

        Returns:
            The updated `User`, or `None` when no user has ``user_id``.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Deletes a user. Returns whether a user was removed."""
        raise NotImplementedError


class ITokenRepository(ABC):
    """An interface defining the contract for token persistence operations."""

    @abstractmethod
    async def create(self, token_data: CreateTokenDTO) -> Token:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, token_id: str) -> Optional[Token]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> List[Token]:
        """Returns the user's tokens that are neither revoked nor expired."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[Token]:
        raise NotImplementedError

    @abstractmethod
    async def update(self, token_id: str, token_data: UpdateTokenDTO) -> Optional[Token]:
        raise NotImplementedError

    @abstractmethod
    async def revoke(self, token_id: str) -> Optional[Token]:
        """Marks a token as revoked and returns it, or `None` if unknown."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, token_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def remove_expired(self) -> int:
        """Deletes every expired or revoked token and returns how many went."""
        raise NotImplementedError
