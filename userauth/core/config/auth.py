"""JWT and token lifetime settings.
"""

import logging

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for JWT signing and for the lifetime of every token
    type the API issues.

    Security Note:
        - JWT_SECRET signs every access and refresh token (HS256). It must be a
          long random string, stored securely and rotated regularly.
        - Short verification and reset lifetimes limit the window in which a
          leaked link can be replayed.
    """

    JWT_SECRET: SecretStr
    JWT_ALGORITHM: str = Field(default="HS256", pattern="^HS(256|384|512)$")
    JWT_ACCESS_EXPIRATION_MINUTES: int = Field(ge=1, default=30)
    JWT_REFRESH_EXPIRATION_DAYS: int = Field(ge=1, default=30)
    JWT_RESET_PASSWORD_EXPIRATION_MINUTES: int = Field(ge=1, le=1440, default=10)
    JWT_VERIFY_EMAIL_EXPIRATION_MINUTES: int = Field(ge=1, le=10080, default=10)

    BCRYPT_ROUNDS: int = Field(ge=4, le=31, default=10)

    @model_validator(mode="after")
    def _validate_jwt_secret(self) -> "AuthSettings":
        """Rejects empty secrets and warns about weak ones outside development.

        Raises:
            ValueError: If JWT_SECRET is empty.
        """
        secret = self.JWT_SECRET.get_secret_value()
        if not secret:
            error_msg = "JWT_SECRET must not be empty."
            logger.error(error_msg)
            raise ValueError(error_msg)

        if len(secret) < 32 and getattr(self, "APP_ENV", "development") in ("staging", "production"):
            logger.warning("JWT_SECRET is shorter than 32 characters.")
        return self

    @property
    def ACCESS_TOKEN_TTL_SECONDS(self) -> int:
        return self.JWT_ACCESS_EXPIRATION_MINUTES * 60

    @property
    def REFRESH_TOKEN_TTL_SECONDS(self) -> int:
        return self.JWT_REFRESH_EXPIRATION_DAYS * 86400
