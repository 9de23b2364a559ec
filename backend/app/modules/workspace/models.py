"""
Workspace models.

This module defines the database models for workspaces and memberships.
"""
from enum import Enum
from typing import Optional
from uuid import UUID

from app.core.models import BaseModel
from sqlalchemy import String, Text, UniqueConstraint, Uuid
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column


class MemberRole(str, Enum):
    """Role of a member within a workspace."""
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Workspace(BaseModel):
    """A named collaboration container joined through its invite code."""

    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Workspace name"
    )

    image_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Data URI or external URL of the workspace image"
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Identity of the user who created the workspace"
    )

    invite_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Current admission token"
    )

    def __repr__(self) -> str:
        """String representation of the Workspace model."""
        return f"<Workspace(id={self.id}, name='{self.name}', user_id={self.user_id})>"


class Member(BaseModel):
    """Binding between one user and one workspace, carrying a role."""

    __tablename__ = "members"

    # Back-reference only: deleting a workspace leaves its members in place
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
        comment="ID of the workspace"
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="ID of the user"
    )

    role: Mapped[MemberRole] = mapped_column(
        SQLEnum(MemberRole, native_enum=False, length=20),
        nullable=False,
        comment="Member role"
    )

    __table_args__ = (
        UniqueConstraint('workspace_id', 'user_id', name='uq_member_workspace_user'),
    )

    def __repr__(self) -> str:
        """String representation of the Member model."""
        return f"<Member(workspace_id={self.workspace_id}, user_id={self.user_id}, role={self.role})>"
