"""
File storage settings (local disk or S3).
"""
from typing import Literal, Optional

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings


class StorageSettings(BaseSettings):
    """
    Selects the storage backend for uploaded files.

    When STORAGE_TYPE is ``s3`` the bucket, region and AWS credentials are
    mandatory; ``local`` needs nothing else.
    """
    STORAGE_TYPE: Literal["s3", "local"] = "local"
    LOCAL_STORAGE_PATH: str = "uploads"
    BUCKET_NAME: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[SecretStr] = None
    AWS_DEFAULT_REGION: Optional[str] = None

    @model_validator(mode="after")
    def _require_s3_settings(self) -> "StorageSettings":
        if self.STORAGE_TYPE != "s3":
            return self
        missing = [
            name
            for name in ("BUCKET_NAME", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"STORAGE_TYPE=s3 requires: {', '.join(missing)}")
        return self
