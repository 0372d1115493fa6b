"""
Redis settings for the token blacklist and rate limiting storage.
"""
import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class RedisSettings(BaseSettings):
    """
    Defines settings for the Redis connection.

    Security Note:
        - REDIS_PASSWORD must be set in production to prevent unauthorized access.
    """
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = Field(ge=1, le=65535, default=6379)
    REDIS_PASSWORD: SecretStr = SecretStr("")
    REDIS_DB: int = Field(ge=0, default=0)
    REDIS_SSL: bool = False
    REDIS_URL: str = ""

    # Rate limiting settings
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_AUTH: str = "20/minute"
    RATE_LIMIT_STORAGE_URL: str = ""

    @model_validator(mode="after")
    def validate_redis_password(self) -> "RedisSettings":
        """
        Ensures REDIS_PASSWORD is set for staging/production environments.

        Raises:
            ValueError: If password is not set in staging/production.
        """
        app_env = getattr(self, "APP_ENV", "development")
        if app_env in ("staging", "production") and not self.REDIS_PASSWORD.get_secret_value():
            logger.error(f"REDIS_PASSWORD must be set in {app_env} environment.")
            raise ValueError("REDIS_PASSWORD must be set in staging/production environments")
        return self

    @field_validator("REDIS_URL", mode="after")
    @classmethod
    def assemble_redis_url(cls, v: str, info: ValidationInfo) -> str:
        """
        Assembles the Redis connection URL if not provided explicitly.

        Args:
            v: Explicitly provided URL or empty string.
            info: Validation context with other field values.

        Returns:
            Assembled or provided Redis URL.
        """
        if v:
            return v

        values = info.data
        protocol = "rediss" if values.get("REDIS_SSL") else "redis"
        redis_password = values.get("REDIS_PASSWORD")
        secret = redis_password.get_secret_value() if redis_password else ""
        password = f":{secret}@" if secret else ""

        url = (
            f"{protocol}://{password}{values.get('REDIS_HOST')}:"
            f"{values.get('REDIS_PORT')}/{values.get('REDIS_DB', 0)}"
        )
        logger.debug("Assembled REDIS_URL (password masked for security).")
        return url

    @field_validator("RATE_LIMIT_STORAGE_URL", mode="after")
    @classmethod
    def assemble_rate_limit_storage_url(cls, v: str, info: ValidationInfo) -> str:
        """Uses the main Redis URL when no rate limit storage is given."""
        if v:
            return v
        return info.data.get("REDIS_URL", "")

    @field_validator("RATE_LIMIT_DEFAULT", "RATE_LIMIT_AUTH")
    @classmethod
    def validate_rate_limit_format(cls, value: str) -> str:
        """
        Validates the format of rate limit strings (e.g., '100/minute').

        Raises:
            ValueError: If format is invalid.
        """
        try:
            count, period = value.split("/")
        except ValueError:
            raise ValueError(f"Invalid rate limit format: {value}. Must be 'count/period'.")
        if not count.isdigit() or int(count) <= 0:
            raise ValueError("Rate limit count must be a positive integer.")
        if period not in ("second", "minute", "hour", "day"):
            raise ValueError("Rate limit period must be second, minute, hour, or day.")
        return value
