"""
Service configuration, read from the environment (and ``.env``) with
pydantic-settings. Every field is set through the upper-case alias shown.
"""
from functools import lru_cache
from typing import List, Optional, Set

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_PROVIDERS = {"local", "minio", "s3"}

# Images are echoed back as base64 data URIs in the PATCH `image_url` form
# field, which Starlette caps at 1 MiB
MAX_IMAGE_SIZE = 750 * 1024


class Settings(BaseSettings):
    """Environment-driven settings for the workspace service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    app_name: str = Field(default="Workspace Membership Service", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_description: str = Field(
        default="Workspaces, memberships and invite codes",
        alias="APP_DESCRIPTION",
    )
    environment: str = Field(default="production", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    allowed_origins: List[str] = Field(default=["http://localhost:3000"], alias="ALLOWED_ORIGINS")

    # Document store
    database_url: str = Field(default="sqlite+aiosqlite:///./workspaces.db", alias="DATABASE_URL")

    # Bearer tokens issued by the identity provider
    secret_key: str = Field(alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Invites
    invite_code_length: int = Field(default=6, ge=1, le=64, alias="INVITE_CODE_LENGTH")

    # Blob store for workspace images
    storage_provider: str = Field(default="local", alias="STORAGE_PROVIDER")
    storage_max_image_size: int = Field(
        default=MAX_IMAGE_SIZE, gt=0, le=MAX_IMAGE_SIZE, alias="STORAGE_MAX_IMAGE_SIZE",
    )
    storage_allowed_image_types: str = Field(
        default="image/png,image/jpeg,image/jpg,image/svg+xml,image/gif,image/webp",
        alias="STORAGE_ALLOWED_IMAGE_TYPES",
    )
    images_bucket_name: str = Field(default="images", alias="IMAGES_BUCKET_NAME")
    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR")

    minio_endpoint: str = Field(default="localhost:9000", alias="MINIO_ENDPOINT")
    minio_access_key: str = Field(default="minioadmin", alias="MINIO_ACCESS_KEY")
    minio_secret_key: str = Field(default="minioadmin", alias="MINIO_SECRET_KEY")
    minio_secure: bool = Field(default=False, alias="MINIO_SECURE")
    minio_region: Optional[str] = Field(default=None, alias="MINIO_REGION")

    aws_access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    s3_endpoint_url: Optional[str] = Field(default=None, alias="S3_ENDPOINT_URL")

    # Logging: "json" or "console"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @field_validator("storage_provider")
    @classmethod
    def validate_storage_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in STORAGE_PROVIDERS:
            raise ValueError(f"STORAGE_PROVIDER must be one of {sorted(STORAGE_PROVIDERS)}")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_image_types(self) -> Set[str]:
        """``STORAGE_ALLOWED_IMAGE_TYPES`` parsed into lower-case content types."""
        return {
            content_type.strip().lower()
            for content_type in self.storage_allowed_image_types.split(",")
            if content_type.strip()
        }


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
