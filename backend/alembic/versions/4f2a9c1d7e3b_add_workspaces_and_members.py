"""Add workspaces and members tables

Revision ID: 4f2a9c1d7e3b
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '4f2a9c1d7e3b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'workspaces',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False, comment="Workspace name"),
        sa.Column('image_url', sa.Text(), nullable=True, comment="Data URI or external URL of the workspace image"),
        sa.Column('user_id', sa.String(255), nullable=False, comment="Identity of the user who created the workspace"),
        sa.Column('invite_code', sa.String(64), nullable=False, comment="Current admission token"),
    )
    op.create_index('ix_workspaces_created_at', 'workspaces', ['created_at'])
    op.create_index('ix_workspaces_user_id', 'workspaces', ['user_id'])

    # No foreign key to workspaces: memberships outlive deleted workspaces
    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False, comment="ID of the workspace"),
        sa.Column('user_id', sa.String(255), nullable=False, comment="ID of the user"),
        sa.Column(
            'role',
            sa.Enum('ADMIN', 'MEMBER', name='memberrole', native_enum=False, length=20),
            nullable=False,
            comment="Member role"
        ),
        sa.UniqueConstraint('workspace_id', 'user_id', name='uq_member_workspace_user'),
    )
    op.create_index('ix_members_created_at', 'members', ['created_at'])
    op.create_index('ix_members_workspace_id', 'members', ['workspace_id'])
    op.create_index('ix_members_user_id', 'members', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_members_user_id', table_name='members')
    op.drop_index('ix_members_workspace_id', table_name='members')
    op.drop_index('ix_members_created_at', table_name='members')
    op.drop_table('members')

    op.drop_index('ix_workspaces_user_id', table_name='workspaces')
    op.drop_index('ix_workspaces_created_at', table_name='workspaces')
    op.drop_table('workspaces')
