"""
Workspace service.

This module provides business logic for workspaces, memberships and
invite codes on top of the document store.
"""
from typing import Optional
from uuid import UUID

from app.core.config import get_settings
from app.core.exceptions import (
    AlreadyMemberException,
    InfrastructureException,
    InvalidInviteCodeException,
    ResourceNotFoundException,
)
from app.core.metrics import record_workspace_operation
from app.modules.storage.service import ImageService
from fastapi import UploadFile
from structlog import get_logger

from .invite_codes import generate_invite_code
from .models import Member, MemberRole, Workspace
from .permissions import require_role
from .store import (
    DocumentList,
    DocumentNotFoundError,
    DocumentStore,
    DuplicateDocumentError,
)

logger = get_logger(__name__)


class WorkspaceService:
    """Service class for workspace operations."""

    def __init__(
        self,
        store: DocumentStore,
        image_service: Optional[ImageService] = None,
        invite_code_length: Optional[int] = None,
    ):
        self.store = store
        self.image_service = image_service
        self.invite_code_length = invite_code_length or get_settings().invite_code_length

    async def get_member(self, workspace_id: UUID, user_id: str) -> Optional[Member]:
        """
        Get the membership linking a user to a workspace.

        Args:
            workspace_id: Workspace ID
            user_id: User ID

        Returns:
            The membership if one exists, None otherwise
        """
        members = await self.store.list_documents(
            Member,
            Member.workspace_id == workspace_id,
            Member.user_id == user_id,
        )
        return members.documents[0] if members.documents else None

    async def list_user_workspaces(self, user_id: str) -> DocumentList[Workspace]:
        """
        List workspaces the user is a member of, newest first.

        Any failure degrades to an empty list so a listing never errors.

        Args:
            user_id: User to list workspaces for

        Returns:
            Workspaces and their count
        """
        try:
            members = await self.store.list_documents(Member, Member.user_id == user_id)
            if members.total == 0:
                return DocumentList()

            workspace_ids = list({member.workspace_id for member in members.documents})

            return await self.store.list_documents(
                Workspace,
                Workspace.id.in_(workspace_ids),
                order_by=Workspace.created_at.desc(),
            )
        except Exception as e:
            logger.warning("Listing workspaces failed, returning empty list", user_id=user_id, error=str(e))
            return DocumentList()

    async def get_workspace(self, user_id: str, workspace_id: UUID) -> Optional[Workspace]:
        """
        Get a workspace visible to the user.

        Returns:
            The workspace when the user is a member, None otherwise
        """
        try:
            if await self.get_member(workspace_id, user_id) is None:
                return None
            return await self.store.get_document(Workspace, workspace_id)
        except (DocumentNotFoundError, InfrastructureException) as e:
            logger.warning("Workspace lookup failed", workspace_id=workspace_id, user_id=user_id, error=str(e))
            return None

    async def create_workspace(
        self,
        user_id: str,
        name: str,
        image: Optional[UploadFile] = None,
    ) -> Workspace:
        """
        Create a new workspace with its creator as admin.

        The workspace and the admin membership are written in the same
        unit of work; if the membership insert fails the workspace is
        discarded before the error is re-raised.

        Args:
            user_id: Creator user ID
            name: Workspace name
            image: Optional image upload

        Returns:
            Created workspace
        """
        image_url = await self._upload_image(image) if image is not None else None

        workspace = await self.store.create_document(
            Workspace,
            name=name,
            user_id=user_id,
            image_url=image_url,
            invite_code=generate_invite_code(self.invite_code_length),
        )
        workspace_id = workspace.id

        try:
            await self.store.create_document(
                Member,
                workspace_id=workspace_id,
                user_id=user_id,
                role=MemberRole.ADMIN,
            )
        except Exception:
            record_workspace_operation("create", success=False)
            await self._discard_workspace(workspace_id)
            raise

        record_workspace_operation("create")
        logger.info("Workspace created", workspace_id=workspace_id, user_id=user_id)
        return workspace

    async def update_workspace(
        self,
        user_id: str,
        workspace_id: UUID,
        name: Optional[str] = None,
        image: Optional[UploadFile] = None,
        image_url: Optional[str] = None,
    ) -> Workspace:
        """
        Update workspace name and image. Requires ADMIN.

        A new upload replaces the image; otherwise ``image_url`` is written
        as given, so omitting it clears the image.

        Args:
            user_id: Requesting user ID
            workspace_id: Workspace to update
            name: New name, unchanged when None
            image: New image upload
            image_url: Existing image URL to keep

        Returns:
            Updated workspace
        """
        await self._require_admin(workspace_id, user_id)

        fields = {"image_url": await self._upload_image(image) if image is not None else (image_url or None)}
        if name is not None:
            fields["name"] = name

        try:
            workspace = await self.store.update_document(Workspace, workspace_id, **fields)
        except DocumentNotFoundError:
            raise ResourceNotFoundException("Workspace", workspace_id)

        record_workspace_operation("update")
        logger.info("Workspace updated", workspace_id=workspace_id, user_id=user_id, fields=sorted(fields))
        return workspace

    async def delete_workspace(self, user_id: str, workspace_id: UUID) -> UUID:
        """
        Delete a workspace. Requires ADMIN.

        Memberships referencing the workspace are left in place.

        Returns:
            ID of the deleted workspace
        """
        await self._require_admin(workspace_id, user_id)

        try:
            await self.store.delete_document(Workspace, workspace_id)
        except DocumentNotFoundError:
            raise ResourceNotFoundException("Workspace", workspace_id)

        record_workspace_operation("delete")
        logger.info("Workspace deleted", workspace_id=workspace_id, user_id=user_id)
        return workspace_id

    async def reset_invite_code(self, user_id: str, workspace_id: UUID) -> Workspace:
        """
        Replace the workspace's invite code. Requires ADMIN.

        The previous code stops admitting members as soon as this is written.

        Returns:
            Workspace carrying the new code
        """
        await self._require_admin(workspace_id, user_id)

        try:
            workspace = await self.store.update_document(
                Workspace,
                workspace_id,
                invite_code=generate_invite_code(self.invite_code_length),
            )
        except DocumentNotFoundError:
            raise ResourceNotFoundException("Workspace", workspace_id)

        record_workspace_operation("reset_invite_code")
        logger.info("Invite code reset", workspace_id=workspace_id, user_id=user_id)
        return workspace

    async def join_workspace(self, user_id: str, workspace_id: UUID, code: str) -> Workspace:
        """
        Admit a user into a workspace as MEMBER.

        Args:
            user_id: Joining user ID
            workspace_id: Workspace to join
            code: Invite code supplied by the user

        Returns:
            The joined workspace

        Raises:
            AlreadyMemberException: If the user is already a member
            ResourceNotFoundException: If the workspace does not exist
            InvalidInviteCodeException: If the code does not match
        """
        if await self.get_member(workspace_id, user_id) is not None:
            record_workspace_operation("join", success=False)
            raise AlreadyMemberException()

        try:
            workspace = await self.store.get_document(Workspace, workspace_id)
        except DocumentNotFoundError:
            record_workspace_operation("join", success=False)
            raise ResourceNotFoundException("Workspace", workspace_id)

        if workspace.invite_code != code:
            record_workspace_operation("join", success=False)
            raise InvalidInviteCodeException()

        try:
            await self.store.create_document(
                Member,
                workspace_id=workspace_id,
                user_id=user_id,
                role=MemberRole.MEMBER,
            )
        except DuplicateDocumentError:
            # A concurrent join for the same user won the insert
            record_workspace_operation("join", success=False)
            raise AlreadyMemberException()

        record_workspace_operation("join")
        logger.info("Member joined workspace", workspace_id=workspace_id, user_id=user_id)
        return workspace

    async def _require_admin(self, workspace_id: UUID, user_id: str) -> Member:
        member = await self.get_member(workspace_id, user_id)
        return require_role(member, MemberRole.ADMIN)

    async def _upload_image(self, image: UploadFile) -> str:
        if self.image_service is None:
            raise RuntimeError("Image uploads are not configured")
        return await self.image_service.upload_image(image)

    async def _discard_workspace(self, workspace_id: UUID) -> None:
        """Remove a workspace whose admin membership could not be written."""
        try:
            await self.store.delete_document(Workspace, workspace_id)
        except DocumentNotFoundError:
            # Already gone with the rolled back transaction
            return
        except InfrastructureException as e:
            logger.error("Failed to discard orphaned workspace", workspace_id=workspace_id, error=str(e))
            return
        logger.warning("Discarded workspace without admin membership", workspace_id=workspace_id)
