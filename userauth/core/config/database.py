"""
MongoDB connection settings.
"""
import logging
from urllib.parse import urlparse

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Defines settings for connecting to MongoDB.

    Security Note:
        - MONGODB_URL may embed credentials and must never be logged or
          committed to version control.
    Performance Note:
        - Tune MONGODB_MAX_POOL_SIZE based on application load; motor shares
          one pool per client.
    """
    MONGODB_URL: str
    MONGODB_DB: str = ""
    MONGODB_DEBUG: bool = False
    MONGODB_MAX_POOL_SIZE: int = Field(ge=1, default=100)
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(ge=100, default=5000)

    @field_validator("MONGODB_URL")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URL must start with mongodb:// or mongodb+srv://")
        return v

    @field_validator("MONGODB_DB", mode="after")
    @classmethod
    def assemble_db_name(cls, v: str, info: ValidationInfo) -> str:
        """
        Derives the database name from the URL path when not given explicitly.

        Args:
            v: Explicitly provided database name or empty string.
            info: Validation context with other field values.

        Returns:
            The database name.
        """
        if v:
            return v
        url = info.data.get("MONGODB_URL") or ""
        name = urlparse(url).path.lstrip("/")
        if not name:
            logger.debug("MONGODB_URL has no database path, using default name.")
            return "userauth"
        return name
