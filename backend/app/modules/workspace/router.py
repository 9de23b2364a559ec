"""
Workspace router.

This module provides API endpoints for workspaces, invite codes and joining.
"""
from typing import Optional
from uuid import UUID

from app.core.exceptions import ResourceNotFoundException
from app.modules.auth.dependencies import get_current_user
from app.modules.auth.schemas import AuthenticatedUser
from fastapi import APIRouter, Depends, File, UploadFile, status

from .dependencies import (
    get_workspace_service,
    workspace_create_form,
    workspace_update_form,
)
from .schemas import (
    DataResponse,
    JoinWorkspaceRequest,
    WorkspaceCreate,
    WorkspaceDeletedResponse,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from .service import WorkspaceService

router = APIRouter(prefix="/workspaces")


@router.get(
    "",
    response_model=DataResponse[WorkspaceListResponse],
    summary="List workspaces",
    description="List the workspaces the current user is a member of, newest first.",
)
async def list_workspaces(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """List workspaces for the current user."""
    workspaces = await service.list_user_workspaces(current_user.user_id)

    return DataResponse(
        data=WorkspaceListResponse(
            documents=[WorkspaceResponse.model_validate(ws) for ws in workspaces.documents],
            total=workspaces.total,
        )
    )


@router.post(
    "",
    response_model=DataResponse[WorkspaceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create new workspace",
    description="Create a new workspace. The creator becomes its admin.",
)
async def create_workspace(
    workspace_data: WorkspaceCreate = Depends(workspace_create_form),
    image: Optional[UploadFile] = File(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Create a new workspace."""
    workspace = await service.create_workspace(
        user_id=current_user.user_id,
        name=workspace_data.name,
        image=image,
    )
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.get(
    "/{workspace_id}",
    response_model=DataResponse[WorkspaceResponse],
    summary="Get workspace",
    description="Get a workspace the current user is a member of.",
)
async def get_workspace(
    workspace_id: UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Get workspace details."""
    workspace = await service.get_workspace(current_user.user_id, workspace_id)
    if workspace is None:
        raise ResourceNotFoundException("Workspace", workspace_id)

    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.patch(
    "/{workspace_id}",
    response_model=DataResponse[WorkspaceResponse],
    summary="Update workspace",
    description="Update workspace name and image. Requires admin role.",
)
async def update_workspace(
    workspace_id: UUID,
    workspace_data: WorkspaceUpdate = Depends(workspace_update_form),
    image: Optional[UploadFile] = File(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Update workspace."""
    workspace = await service.update_workspace(
        user_id=current_user.user_id,
        workspace_id=workspace_id,
        name=workspace_data.name,
        image=image,
        image_url=workspace_data.image_url,
    )
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.delete(
    "/{workspace_id}",
    response_model=DataResponse[WorkspaceDeletedResponse],
    summary="Delete workspace",
    description="Delete a workspace. Requires admin role. Memberships are not removed.",
)
async def delete_workspace(
    workspace_id: UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Delete workspace."""
    deleted_id = await service.delete_workspace(current_user.user_id, workspace_id)
    return DataResponse(data=WorkspaceDeletedResponse(id=deleted_id))


@router.post(
    "/{workspace_id}/reset-invite-code",
    response_model=DataResponse[WorkspaceResponse],
    summary="Reset invite code",
    description="Generate a new invite code, invalidating the previous one. Requires admin role.",
)
async def reset_invite_code(
    workspace_id: UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Reset workspace invite code."""
    workspace = await service.reset_invite_code(current_user.user_id, workspace_id)
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.post(
    "/{workspace_id}/join",
    response_model=DataResponse[WorkspaceResponse],
    summary="Join workspace",
    description="Join a workspace as a member using its invite code.",
)
async def join_workspace(
    workspace_id: UUID,
    join_data: JoinWorkspaceRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Join workspace with an invite code."""
    workspace = await service.join_workspace(
        user_id=current_user.user_id,
        workspace_id=workspace_id,
        code=join_data.code,
    )
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))
