"""
Base blob store interface.

Defines the contract that all blob store drivers must implement: store raw
bytes and get back an opaque file id, then retrieve the same bytes by id.
"""

import asyncio
from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable
from uuid import uuid4


class BlobNotFoundError(Exception):
    """Raised when a file id does not resolve to a stored blob."""
    pass


class BaseBlobStore(ABC):
    """Abstract base class for blob store drivers."""

    provider: str = "base"

    @staticmethod
    def generate_file_id() -> str:
        """Generate a unique file id."""
        return uuid4().hex

    @staticmethod
    async def run_sync(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking client call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    @abstractmethod
    async def store(self, data: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Store a blob.

        Args:
            data: Raw file content
            content_type: MIME type of the content

        Returns:
            The id under which the blob can be retrieved
        """
        pass

    @abstractmethod
    async def retrieve(self, file_id: str) -> bytes:
        """
        Retrieve a stored blob.

        Args:
            file_id: Id returned by ``store``

        Returns:
            The stored bytes

        Raises:
            BlobNotFoundError: If nothing is stored under ``file_id``
        """
        pass
