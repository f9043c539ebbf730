"""
Workspace service.

The backend calls workspaces "organizations"; every path here lives under
``/organizations`` except the invitee-side ``/invitations`` routes.
"""

from typing import Any, Dict, List, Optional
import logging

from ..models import (
    CreditBalance,
    CreditTransaction,
    Envelope,
    GenerationStats,
    MessageResponse,
    ModelGeneration,
    Organization,
    OrganizationInvitation,
    OrganizationMember,
)
from .base import BaseService, check_success, path_segment, unwrap

logger = logging.getLogger(__name__)


def _org_path(workspace_id: str, *parts: str) -> str:
    segments = ["/organizations", path_segment(workspace_id)]
    segments.extend(parts)
    return "/".join(segments)


class WorkspacesService(BaseService):
    """Workspace CRUD, membership, invitations, credits and usage."""

    # Workspaces

    async def create_workspace(
        self,
        name: str,
        description: Optional[str] = None,
        logo: Optional[str] = None,
    ) -> Organization:
        params: Dict[str, Any] = {"name": name}
        if description is not None:
            params["description"] = description
        if logo is not None:
            params["logo"] = logo

        envelope = await self.client.post("/organizations", params, response_model=Envelope[Organization])
        workspace = unwrap(envelope, "Failed to create workspace")
        logger.info(f"Created workspace {workspace.id}")
        return workspace

    async def list_workspaces(self) -> List[Organization]:
        envelope = await self.client.get("/organizations", response_model=Envelope[List[Organization]])
        return unwrap(envelope, "Failed to fetch workspaces")

    async def get_workspace(self, workspace_id: str) -> Organization:
        envelope = await self.client.get(_org_path(workspace_id), response_model=Envelope[Organization])
        return unwrap(envelope, "Failed to fetch workspace details")

    async def update_workspace(
        self,
        workspace_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        logo: Optional[str] = None,
    ) -> Organization:
        """Replace the editable fields; a None value is sent as null and clears the field."""
        envelope = await self.client.put(
            _org_path(workspace_id),
            {"name": name, "description": description, "logo": logo},
            response_model=Envelope[Organization],
        )
        return unwrap(envelope, "Failed to update workspace")

    async def delete_workspace(self, workspace_id: str) -> None:
        response = await self.client.delete(_org_path(workspace_id), response_model=MessageResponse)
        check_success(response, "Failed to delete workspace")

    # Members

    async def list_members(self, workspace_id: str) -> List[OrganizationMember]:
        envelope = await self.client.get(
            _org_path(workspace_id, "members"), response_model=Envelope[List[OrganizationMember]],
        )
        return unwrap(envelope, "Failed to fetch members")

    async def update_member_role(self, workspace_id: str, user_id: str, role: str) -> OrganizationMember:
        envelope = await self.client.put(
            _org_path(workspace_id, "members", path_segment(user_id)),
            {"role": role},
            response_model=Envelope[OrganizationMember],
        )
        return unwrap(envelope, "Failed to update member role")

    async def remove_member(self, workspace_id: str, user_id: str) -> None:
        response = await self.client.delete(
            _org_path(workspace_id, "members", path_segment(user_id)), response_model=MessageResponse,
        )
        check_success(response, "Failed to remove member")

    async def leave_workspace(self, workspace_id: str) -> None:
        response = await self.client.post(_org_path(workspace_id, "leave"), response_model=MessageResponse)
        check_success(response, "Failed to leave workspace")

    # Invitations (inviter side)

    async def create_invitation(self, workspace_id: str, email: str, role: str) -> OrganizationInvitation:
        envelope = await self.client.post(
            _org_path(workspace_id, "invitations"),
            {"email": email, "role": role},
            response_model=Envelope[OrganizationInvitation],
        )
        return unwrap(envelope, "Failed to create invitation")

    async def list_invitations(self, workspace_id: str) -> List[OrganizationInvitation]:
        envelope = await self.client.get(
            _org_path(workspace_id, "invitations"), response_model=Envelope[List[OrganizationInvitation]],
        )
        return unwrap(envelope, "Failed to fetch invitations")

    async def revoke_invitation(self, workspace_id: str, invite_id: str) -> None:
        response = await self.client.delete(
            _org_path(workspace_id, "invitations", path_segment(invite_id)), response_model=MessageResponse,
        )
        check_success(response, "Failed to revoke invitation")

    async def resend_invitation(self, workspace_id: str, invite_id: str) -> None:
        response = await self.client.post(
            _org_path(workspace_id, "invitations", path_segment(invite_id), "resend"),
            response_model=MessageResponse,
        )
        check_success(response, "Failed to resend invitation")

    # Invitations (invitee side)

    async def get_invitation(self, token: str) -> OrganizationInvitation:
        envelope = await self.client.get(
            f"/invitations/{path_segment(token)}", response_model=Envelope[OrganizationInvitation],
        )
        return unwrap(envelope, "Failed to fetch invitation")

    async def accept_invitation(self, token: str) -> Organization:
        envelope = await self.client.post(
            f"/invitations/{path_segment(token)}/accept", response_model=Envelope[Organization],
        )
        return unwrap(envelope, "Failed to accept invitation")

    async def list_pending_invitations(self) -> List[OrganizationInvitation]:
        envelope = await self.client.get("/invitations", response_model=Envelope[List[OrganizationInvitation]])
        return unwrap(envelope, "Failed to fetch pending invitations")

    # Credits and usage

    async def get_workspace_credits(self, workspace_id: str) -> CreditBalance:
        envelope = await self.client.get(
            _org_path(workspace_id, "credits"), response_model=Envelope[CreditBalance],
        )
        return unwrap(envelope, "Failed to fetch workspace credits")

    async def get_workspace_credit_transactions(
        self,
        workspace_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        type: Optional[str] = None,
    ) -> List[CreditTransaction]:
        envelope = await self.client.get(
            _org_path(workspace_id, "credits", "transactions"),
            {"limit": limit, "offset": offset, "type": type},
            response_model=Envelope[List[CreditTransaction]],
        )
        return unwrap(envelope, "Failed to fetch transactions")

    async def get_workspace_generations(
        self,
        workspace_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        type: Optional[str] = None,
    ) -> List[ModelGeneration]:
        envelope = await self.client.get(
            _org_path(workspace_id, "generations"),
            {"limit": limit, "offset": offset, "type": type},
            response_model=Envelope[List[ModelGeneration]],
        )
        return unwrap(envelope, "Failed to fetch generations")

    async def get_workspace_generation_stats(self, workspace_id: str) -> GenerationStats:
        envelope = await self.client.get(
            _org_path(workspace_id, "generations", "stats"), response_model=Envelope[GenerationStats],
        )
        return unwrap(envelope, "Failed to fetch generation stats")
