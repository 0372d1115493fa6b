"""Service interfaces used by the operations.

Concrete implementations live in `userauth.infrastructure.services`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from userauth.domain.entities import TokenType


class IPasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def compare(self, password: str, hashed_password: str) -> bool:
        raise NotImplementedError


class IJWTTokenGenerator(ABC):
    """Signs and verifies JWTs that carry a ``tokenType`` claim."""

    @abstractmethod
    def generate(self, payload: Dict[str, Any], token_type: TokenType, expires_in_seconds: int) -> str:
        raise NotImplementedError

    @abstractmethod
    def validate(self, token: str, token_type: TokenType) -> Optional[Dict[str, Any]]:
        """Returns the payload, or `None` if the token is invalid, expired or
        of another type."""
        raise NotImplementedError


class ITokenGenerator(ABC):
    """Generates opaque random tokens (verification and reset links)."""

    @abstractmethod
    def generate(self) -> str:
        raise NotImplementedError


class ITokenBlackList(ABC):
    @abstractmethod
    async def add(self, token: str, ttl_seconds: int) -> None:
        raise NotImplementedError

    @abstractmethod
    async def is_blacklisted(self, token: str) -> bool:
        raise NotImplementedError


class IEmailService(ABC):
    @abstractmethod
    async def verify(self) -> bool:
        """Checks that the email transport is reachable."""
        raise NotImplementedError

    @abstractmethod
    async def send_email(
        self, to: str, subject: str, template: str, context: Dict[str, Any]
    ) -> None:
        """Renders ``template`` with ``context`` and sends it to ``to``.

        Raises:
            EmailServiceError: If the message cannot be delivered.
        """
        raise NotImplementedError
