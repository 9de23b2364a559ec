"""
Shared test fixtures and utilities for the test suite.

This module provides common fixtures for database sessions, the document
store, a local blob store, the workspace service, bearer tokens and an
HTTP client bound to the application.
"""
import io
import os
from typing import AsyncGenerator, Callable, Dict

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-workspace-tests")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STORAGE_PROVIDER", "local")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.models import Base
from app.core.security import create_access_token
from app.modules.storage.drivers import LocalBlobStore
from app.modules.storage.service import ImageService, get_blob_store
from app.modules.workspace.models import Member, Workspace  # noqa: F401
from app.modules.workspace.service import WorkspaceService
from app.modules.workspace.store import DocumentStore
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers

# Test database URL for in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Smallest valid PNG: signature plus IHDR, IDAT and IEND chunks
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={
            "check_same_thread": False,
        },
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Clean up
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def document_store(db_session) -> DocumentStore:
    """Document store over the test session."""
    return DocumentStore(db_session)


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    """Blob store writing into a per-test temporary directory."""
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def image_service(blob_store) -> ImageService:
    """Image service backed by the local blob store."""
    return ImageService(blob_store, get_settings())


@pytest.fixture
def workspace_service(document_store, image_service) -> WorkspaceService:
    """Workspace service over the real document and blob stores."""
    return WorkspaceService(
        store=document_store,
        image_service=image_service,
        invite_code_length=6,
    )


def make_upload(
    data: bytes = PNG_BYTES,
    filename: str = "logo.png",
    content_type: str = "image/png",
) -> UploadFile:
    """Build an ``UploadFile`` as FastAPI would hand it to an endpoint."""
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def upload_factory() -> Callable[..., UploadFile]:
    """Factory for in-memory image uploads."""
    return make_upload


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """Factory for bearer headers carrying a given user id."""

    def _headers(user_id: str) -> Dict[str, str]:
        token = create_access_token({"sub": user_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def test_app(session_factory, blob_store):
    """Application with the database and blob store pointed at test resources."""
    from main import create_application

    app = create_application()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the application in-process."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
