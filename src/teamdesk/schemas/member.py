"""Member and invitation schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr

from src.teamdesk.models import MembershipRole, MembershipStatus


class InviteCreateRequest(BaseModel):
    """Request to invite someone to the company."""

    email: EmailStr
    role: Literal["admin", "viewer"] = "viewer"


class RoleUpdateRequest(BaseModel):
    """Request to switch a member between admin and viewer."""

    role: Literal["admin", "viewer"]


class MembershipRead(BaseModel):
    """Read model for a membership row."""

    id: UUID
    tenant_id: UUID
    user_id: UUID | None
    role: str
    status: str
    invited_email: str | None
    invited_by: UUID | None
    accepted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class InviteResponse(BaseModel):
    """Response after creating or resending an invitation.

    warnings is non-empty when the invitation was saved but the email
    could not be delivered.
    """

    membership: MembershipRead
    warnings: list[str] = []
    message: str = "Invitation sent successfully"


class RosterEntryRead(BaseModel):
    """One line of the member directory."""

    membership_id: UUID | None
    user_id: UUID | None
    role: MembershipRole
    status: MembershipStatus
    display_name: str
    contact_address: str | None
    avatar_url: str | None
    invited_by: UUID | None
    created_at: datetime
    synthesized: bool = False

    model_config = {"from_attributes": True}


class RosterResponse(BaseModel):
    """Response for listing company members."""

    members: list[RosterEntryRead]
    total: int


class MemberRemovedResponse(BaseModel):
    """Response after removing a member or cancelling an invitation."""

    message: str = "Member removed successfully"
