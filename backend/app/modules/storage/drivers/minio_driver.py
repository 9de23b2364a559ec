"""
MinIO blob store driver.

The minio client is synchronous, so every call runs in the default executor.
"""

import io
from typing import Optional

from minio import Minio
from minio.error import S3Error
from structlog import get_logger

from .base import BaseBlobStore, BlobNotFoundError

logger = get_logger(__name__)


class MinIOBlobStore(BaseBlobStore):
    """MinIO blob store keeping all blobs in a single bucket."""

    provider = "minio"

    def __init__(
        self,
        bucket_name: str,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = True,
        region: Optional[str] = None
    ):
        """
        Initialize MinIO blob store.

        Args:
            bucket_name: Bucket holding the blobs
            endpoint: MinIO server endpoint
            access_key: MinIO access key
            secret_key: MinIO secret key
            secure: Whether to use HTTPS
            region: MinIO region (optional)
        """
        self.client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region
        )
        self.bucket_name = bucket_name
        self._bucket_ready = False

    async def _ensure_bucket_exists(self) -> None:
        """Ensure the bucket exists."""
        if self._bucket_ready:
            return

        if not await self.run_sync(self.client.bucket_exists, self.bucket_name):
            await self.run_sync(self.client.make_bucket, self.bucket_name)
            logger.info("Created MinIO bucket", bucket=self.bucket_name)
        self._bucket_ready = True

    async def store(self, data: bytes, content_type: str = "application/octet-stream") -> str:
        await self._ensure_bucket_exists()

        file_id = self.generate_file_id()
        try:
            await self.run_sync(
                self.client.put_object,
                self.bucket_name,
                file_id,
                io.BytesIO(data),
                len(data),
                content_type=content_type,
            )
        except S3Error as e:
            logger.error("Failed to upload blob to MinIO", error=str(e), file_id=file_id)
            raise

        logger.info("Blob uploaded to MinIO", file_id=file_id, size=len(data))
        return file_id

    def _read_object(self, file_id: str) -> bytes:
        response = self.client.get_object(self.bucket_name, file_id)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    async def retrieve(self, file_id: str) -> bytes:
        try:
            return await self.run_sync(self._read_object, file_id)
        except S3Error as e:
            if e.code == "NoSuchKey":
                raise BlobNotFoundError(file_id) from e
            logger.error("Failed to download blob from MinIO", error=str(e), file_id=file_id)
            raise
