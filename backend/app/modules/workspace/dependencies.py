"""
Workspace dependencies.

This module wires the document store, blob store and workspace service
into request handlers, and turns multipart form fields into validated
schemas.
"""
from typing import Optional

from app.core.config import get_settings
from app.core.database import get_db_session
from app.modules.storage.drivers import BaseBlobStore
from app.modules.storage.service import ImageService, get_blob_store
from fastapi import Depends, Form
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from .schemas import WorkspaceCreate, WorkspaceUpdate
from .service import WorkspaceService
from .store import DocumentStore


async def get_document_store(
    db: AsyncSession = Depends(get_db_session)
) -> DocumentStore:
    """Document store bound to the request's database session."""
    return DocumentStore(db)


async def get_workspace_service(
    store: DocumentStore = Depends(get_document_store),
    blob_store: BaseBlobStore = Depends(get_blob_store),
) -> WorkspaceService:
    """Workspace service for the current request."""
    settings = get_settings()
    return WorkspaceService(
        store=store,
        image_service=ImageService(blob_store, settings),
        invite_code_length=settings.invite_code_length,
    )


async def workspace_create_form(name: str = Form(...)) -> WorkspaceCreate:
    """
    Validate the workspace creation form.

    Raises:
        RequestValidationError: Rendered as a 400 validation error
    """
    try:
        return WorkspaceCreate(name=name)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


async def workspace_update_form(
    name: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
) -> WorkspaceUpdate:
    """
    Validate the workspace update form.

    Raises:
        RequestValidationError: Rendered as a 400 validation error
    """
    try:
        return WorkspaceUpdate(name=name, image_url=image_url)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
