"""
Local filesystem blob store driver.

Stores blobs as flat files under a root directory. Used for development
and tests; production deployments use MinIO or S3.
"""

from pathlib import Path
from typing import Union

from structlog import get_logger

from .base import BaseBlobStore, BlobNotFoundError

logger = get_logger(__name__)


class LocalBlobStore(BaseBlobStore):
    """Blob store backed by a directory on the local filesystem."""

    provider = "local"

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)

    def _path_for(self, file_id: str) -> Path:
        # File ids are generated hex strings; reject anything path-like
        if not file_id or not file_id.isalnum():
            raise BlobNotFoundError(file_id)
        return self.root_dir / file_id

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def store(self, data: bytes, content_type: str = "application/octet-stream") -> str:
        file_id = self.generate_file_id()
        await self.run_sync(self._write, self._path_for(file_id), data)

        logger.info("Blob stored locally", file_id=file_id, size=len(data), content_type=content_type)
        return file_id

    async def retrieve(self, file_id: str) -> bytes:
        path = self._path_for(file_id)
        try:
            return await self.run_sync(path.read_bytes)
        except FileNotFoundError as e:
            raise BlobNotFoundError(file_id) from e
