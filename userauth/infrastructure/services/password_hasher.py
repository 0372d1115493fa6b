"""Password hashing with passlib's bcrypt backend."""

from typing import Optional

from passlib.context import CryptContext

from userauth.core.config.settings import settings
from userauth.domain.interfaces import IPasswordHasher


class PasswordHasher(IPasswordHasher):
    """bcrypt hashing with the configured work factor (10 rounds by default)."""

    def __init__(self, rounds: Optional[int] = None):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds or settings.BCRYPT_ROUNDS,
        )

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def compare(self, password: str, hashed_password: str) -> bool:
        """Constant-time check of ``password`` against a bcrypt hash.

        A malformed hash counts as a mismatch.
        """
        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            return False
