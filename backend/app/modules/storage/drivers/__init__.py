"""
Blob store drivers package.

Contains implementations of different storage backends.
"""

from .base import BaseBlobStore, BlobNotFoundError
from .local_driver import LocalBlobStore
from .minio_driver import MinIOBlobStore
from .s3_driver import S3BlobStore

__all__ = [
    "BaseBlobStore",
    "BlobNotFoundError",
    "LocalBlobStore",
    "MinIOBlobStore",
    "S3BlobStore",
]
