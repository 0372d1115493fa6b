"""
Application-specific settings.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings: project name, environment, public
    server address, API version and CORS origins.

    Security Note:
        - Ensure ALLOWED_ORIGINS is explicitly set to trusted domains in production
          to prevent unauthorized cross-origin requests.
        - DOCS_PASSWORD protects the Swagger UI outside development.
    """
    PROJECT_NAME: str = "userauth-api"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "User management and authentication REST API."
    APP_ENV: str = Field(default="development", pattern="^(development|test|staging|production)$")
    DEBUG: bool = False

    PROTOCOL: str = Field(default="http", pattern="^(http|https)$")
    HOST: str = "localhost"
    PORT: int = Field(ge=1, le=65535, default=3000)
    API_VERSION: str = Field(default="v1", pattern=r"^v\d+$")
    API_WORKERS: int = Field(ge=1, default=1)
    RELOAD: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:3000")

    DOCS_USERNAME: str = "admin"
    DOCS_PASSWORD: str = ""

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of origins into a list.

        Args:
            v: Input value as a string or list of origins.

        Returns:
            List of stripped origin strings.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def BASE_URL(self) -> str:
        """Public base URL used to build links sent by email."""
        default_port = {"http": 80, "https": 443}[self.PROTOCOL]
        if self.PORT == default_port:
            return f"{self.PROTOCOL}://{self.HOST}"
        return f"{self.PROTOCOL}://{self.HOST}:{self.PORT}"

    @property
    def API_PREFIX(self) -> str:
        return f"/api/{self.API_VERSION}"
