"""
AWS S3 blob store driver.

boto3 calls are blocking and run in the default executor.
"""

from typing import Optional

import boto3
from botocore.exceptions import ClientError
from structlog import get_logger

from .base import BaseBlobStore, BlobNotFoundError

logger = get_logger(__name__)


class S3BlobStore(BaseBlobStore):
    """S3 (or S3-compatible) blob store keeping all blobs in one bucket."""

    provider = "s3"

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None
    ):
        """
        Initialize S3 blob store.

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key (optional, can use IAM roles)
            aws_secret_access_key: AWS secret key (optional, can use IAM roles)
            region_name: AWS region
            endpoint_url: Custom S3 endpoint (for S3-compatible services)
        """
        self.bucket_name = bucket_name

        session = boto3.Session(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region_name
        )
        self.s3_client = session.client('s3', endpoint_url=endpoint_url)

    async def store(self, data: bytes, content_type: str = "application/octet-stream") -> str:
        file_id = self.generate_file_id()
        try:
            await self.run_sync(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=file_id,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            logger.error("Failed to upload blob to S3", error=str(e), file_id=file_id)
            raise

        logger.info("Blob uploaded to S3", file_id=file_id, size=len(data))
        return file_id

    def _read_object(self, file_id: str) -> bytes:
        response = self.s3_client.get_object(Bucket=self.bucket_name, Key=file_id)
        return response['Body'].read()

    async def retrieve(self, file_id: str) -> bytes:
        try:
            return await self.run_sync(self._read_object, file_id)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('NoSuchKey', '404'):
                raise BlobNotFoundError(file_id) from e
            logger.error("Failed to download blob from S3", error=str(e), file_id=file_id)
            raise
