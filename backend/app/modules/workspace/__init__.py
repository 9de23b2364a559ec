"""
Workspace module.

This module handles workspaces, memberships, invite codes and the join flow.
"""

from .models import Member, MemberRole, Workspace
from .schemas import (
    JoinWorkspaceRequest,
    WorkspaceCreate,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from .service import WorkspaceService

__all__ = [
    "Member",
    "MemberRole",
    "Workspace",
    "JoinWorkspaceRequest",
    "WorkspaceCreate",
    "WorkspaceListResponse",
    "WorkspaceResponse",
    "WorkspaceUpdate",
    "WorkspaceService",
]
