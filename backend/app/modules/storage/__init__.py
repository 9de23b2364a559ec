"""
Storage module.

Blob store drivers (local filesystem, MinIO, AWS S3) and the image upload
service used by workspaces.
"""

from .drivers import BaseBlobStore, LocalBlobStore, MinIOBlobStore, S3BlobStore
from .service import ImageService, create_blob_store, get_blob_store

__all__ = [
    "BaseBlobStore",
    "LocalBlobStore",
    "MinIOBlobStore",
    "S3BlobStore",
    "ImageService",
    "create_blob_store",
    "get_blob_store",
]
