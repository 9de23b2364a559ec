"""
Workspace schemas.

This module defines Pydantic models for workspace requests and responses.
Every successful response body is wrapped in ``{"data": ...}``.
"""
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from app.core.validators import CommonValidators
from pydantic import BaseModel, Field, field_validator

DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    """Envelope for successful responses."""

    data: DataT


class WorkspaceCreate(BaseModel):
    """Schema for workspace creation."""

    name: str = Field(..., min_length=1, max_length=255, description="Workspace name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate workspace name."""
        return CommonValidators.validate_workspace_name(v)


class WorkspaceUpdate(BaseModel):
    """Schema for workspace updates."""

    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New workspace name")
    image_url: Optional[str] = Field(None, description="Existing image URL to keep, empty to clear")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate workspace name."""
        if v is not None:
            return CommonValidators.validate_workspace_name(v)
        return v

    @field_validator('image_url')
    @classmethod
    def validate_image_url(cls, v):
        """Normalize the image URL."""
        return CommonValidators.normalize_image_url(v)


class JoinWorkspaceRequest(BaseModel):
    """Schema for joining a workspace with its invite code."""

    code: str = Field(..., description="Invite code")

    @field_validator('code')
    @classmethod
    def validate_code(cls, v):
        """Validate invite code."""
        return CommonValidators.validate_invite_code(v)


class WorkspaceResponse(BaseModel):
    """Schema for workspace response."""

    id: UUID = Field(..., description="Workspace ID")
    name: str = Field(..., description="Workspace name")
    image_url: Optional[str] = Field(None, description="Workspace image URL")
    user_id: str = Field(..., description="Creator user ID")
    invite_code: str = Field(..., description="Current invite code")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class WorkspaceListResponse(BaseModel):
    """Schema for workspace list response."""

    documents: List[WorkspaceResponse] = Field(default_factory=list, description="Workspaces, newest first")
    total: int = Field(0, description="Number of workspaces")


class WorkspaceDeletedResponse(BaseModel):
    """Schema for workspace deletion response."""

    id: UUID = Field(..., description="ID of the deleted workspace")
