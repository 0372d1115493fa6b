"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, database, redis, auth, email, storage) into a single, accessible
`Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.
Missing or invalid values abort startup.

Environment Support:
- Development: Uses .env, emails are logged instead of sent
- Test: Uses .env.test, emails are logged instead of sent
- Staging: Uses .env.staging, SMTP credentials required
- Production: Uses .env.production, SMTP credentials required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .redis import RedisSettings
from .storage import StorageSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(
    AppSettings, DatabaseSettings, RedisSettings, AuthSettings, EmailSettings, StorageSettings
):
    """The main settings class that aggregates all application configurations.

    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
        - Build throwaway instances with `Settings(**overrides)` in tests.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True

        if env == "development":
            self.DEBUG = True

        logger.info(
            f"Application running in {env} environment "
            f"(email test mode: {self.EMAIL_TEST_MODE}, debug: {self.DEBUG})"
        )

    def validate_required_fields(self) -> None:
        """Validates that all required environment variables are set.

        Raises:
            ValueError: If a required field is missing or the SMTP
                configuration is unusable outside development and test.
        """
        required_fields = ["PROJECT_NAME", "MONGODB_URL", "REDIS_HOST", "REDIS_PORT", "JWT_SECRET"]

        missing_fields = [field for field in required_fields if not getattr(self, field, None)]
        if missing_fields:
            error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        try:
            self.validate_smtp_config()
        except ValueError as e:
            logger.error(f"Email configuration error: {e}")
            raise
        logger.info("All required environment variables are set.")

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def is_test(self) -> bool:
        return self.APP_ENV == "test"


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        settings_instance = Settings(_env_file=env_file)
    elif Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
        settings_instance = Settings()
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
        settings_instance = Settings()

    return settings_instance


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
