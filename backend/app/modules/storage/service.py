"""
Storage service layer.

Selects the configured blob store driver and turns uploaded images into
servable URLs for workspaces.
"""

import base64
from functools import lru_cache
from typing import Optional

from app.core.config import Settings, get_settings
from app.core.exceptions import InfrastructureException, ValidationException
from app.core.metrics import record_storage_operation
from fastapi import UploadFile
from structlog import get_logger

from .drivers import BaseBlobStore, LocalBlobStore, MinIOBlobStore, S3BlobStore

logger = get_logger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/png"


def create_blob_store(settings: Settings) -> BaseBlobStore:
    """Build the blob store driver named by ``STORAGE_PROVIDER``."""
    provider = settings.storage_provider.lower()

    if provider == "local":
        return LocalBlobStore(settings.upload_dir)
    if provider == "minio":
        return MinIOBlobStore(
            bucket_name=settings.images_bucket_name,
            endpoint=settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
            region=settings.minio_region,
        )
    if provider == "s3":
        return S3BlobStore(
            bucket_name=settings.images_bucket_name,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            endpoint_url=settings.s3_endpoint_url,
        )

    raise ValueError(f"Unsupported storage provider: {settings.storage_provider}")


@lru_cache()
def get_blob_store() -> BaseBlobStore:
    """Process-wide blob store, used as a FastAPI dependency."""
    return create_blob_store(get_settings())


class ImageService:
    """Uploads workspace images and returns them as data URIs."""

    def __init__(self, blob_store: BaseBlobStore, settings: Optional[Settings] = None):
        self.blob_store = blob_store
        self.settings = settings or get_settings()

    def _validate(self, content_type: str, size: int) -> None:
        if content_type not in self.settings.allowed_image_types:
            raise ValidationException(
                "Unsupported image type",
                details={"content_type": content_type}
            )
        if size == 0:
            raise ValidationException("Image is empty")
        if size > self.settings.storage_max_image_size:
            raise ValidationException(
                "Image is too large",
                details={"size": size, "max_size": self.settings.storage_max_image_size}
            )

    async def upload_image(self, upload: UploadFile) -> str:
        """
        Store an uploaded image and return it as a data URI.

        The blob is written to the store and read back, so the URI encodes
        exactly what the store holds.

        Args:
            upload: Image file from a multipart form

        Returns:
            ``data:<content type>;base64,<content>``

        Raises:
            ValidationException: If the image type or size is not accepted
            InfrastructureException: If the blob store fails
        """
        content_type = (upload.content_type or DEFAULT_IMAGE_CONTENT_TYPE).lower()
        data = await upload.read()
        self._validate(content_type, len(data))

        try:
            file_id = await self.blob_store.store(data, content_type)
            stored = await self.blob_store.retrieve(file_id)
        except Exception as e:
            record_storage_operation("upload_image", success=False)
            logger.error(
                "Image upload failed",
                provider=self.blob_store.provider,
                error=str(e),
            )
            raise InfrastructureException("blob_store", "Failed to store image") from e

        record_storage_operation("upload_image", bytes_transferred=len(stored))
        logger.info("Image uploaded", file_id=file_id, size=len(stored), content_type=content_type)

        encoded = base64.b64encode(stored).decode("ascii")
        return f"data:{content_type};base64,{encoded}"
