"""Email configuration settings.

This module defines the SMTP parameters used to send verification and
password reset emails, along with the template directory and the test mode
switch that logs emails instead of delivering them.
"""

from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Attributes:
        SMTP_HOST: SMTP server hostname
        SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for SSL)
        SMTP_USERNAME: SMTP authentication username
        SMTP_PASSWORD: SMTP authentication password (SecretStr)
        SMTP_USE_TLS: Upgrade the connection with STARTTLS
        SMTP_USE_SSL: Connect over implicit SSL
        EMAIL_FROM: Default sender email address
        EMAIL_FROM_NAME: Default sender name
        EMAIL_TEMPLATES_DIR: Directory containing email templates
        EMAIL_SUBJECT_PREFIX: Prefix prepended to every subject line
        EMAIL_TEST_MODE: Log emails instead of sending them
    """

    SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    SMTP_USERNAME: Optional[str] = Field(default=None, description="SMTP authentication username")
    SMTP_PASSWORD: Optional[SecretStr] = Field(default=None, description="SMTP authentication password")
    SMTP_USE_TLS: bool = Field(default=True, description="Enable STARTTLS")
    SMTP_USE_SSL: bool = Field(default=False, description="Enable implicit SSL")
    SMTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    EMAIL_FROM: EmailStr = Field(default="support@example.com", description="Default sender address")
    EMAIL_FROM_NAME: str = Field(default="UserAuth", description="Default sender name")
    EMAIL_SUBJECT_PREFIX: str = Field(default="[UserAuth]")

    EMAIL_TEMPLATES_DIR: str = Field(
        default="userauth/templates/email",
        description="Directory containing email templates",
    )

    EMAIL_TEST_MODE: bool = Field(
        default=False,
        description="Enable test mode (emails logged instead of sent)",
    )

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {"production", "staging"}:
            return

        if not self.SMTP_USERNAME or not self.SMTP_PASSWORD:
            raise ValueError("SMTP_USERNAME and SMTP_PASSWORD are required in production")

        if self.SMTP_USE_TLS and self.SMTP_USE_SSL:
            raise ValueError("Cannot enable both SMTP_USE_TLS and SMTP_USE_SSL simultaneously")
