"""Company member management endpoints (require X-Tenant-ID and X-Actor-ID)."""

from uuid import UUID

from fastapi import APIRouter, status

from src.teamdesk.api.dependencies import ActorId, RosterServiceDep, TeamServiceDep
from src.teamdesk.schemas.member import (
    InviteCreateRequest,
    InviteResponse,
    MemberRemovedResponse,
    MembershipRead,
    RoleUpdateRequest,
    RosterEntryRead,
    RosterResponse,
)
from src.teamdesk.services import InviteResult

router = APIRouter(prefix="/members", tags=["members"])


def _invite_response(result: InviteResult) -> InviteResponse:
    return InviteResponse(
        membership=MembershipRead.model_validate(result.membership),
        warnings=result.warnings,
        message=(
            "Invitation sent successfully"
            if result.delivered
            else "Invitation saved, but delivery failed"
        ),
    )


@router.get(
    "",
    response_model=RosterResponse,
    summary="List members",
    description="List the company's members and pending invitations, owner included.",
)
async def list_members(actor_id: ActorId, roster_service: RosterServiceDep) -> RosterResponse:
    """List the roster for the company."""
    entries = await roster_service.list_roster(actor_id)
    return RosterResponse(
        members=[RosterEntryRead.model_validate(entry) for entry in entries],
        total=len(entries),
    )


@router.post(
    "/invitations",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite member",
    description="Create a pending invitation and email it. Owner or admin role required.",
)
async def create_invitation(
    request: InviteCreateRequest,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> InviteResponse:
    """Invite someone to the company."""
    result = await team_service.invite(request.email, request.role, actor_id)
    return _invite_response(result)


@router.post(
    "/invitations/{membership_id}/resend",
    response_model=InviteResponse,
    summary="Resend invitation",
    description="Send a pending invitation's email again. Owner or admin role required.",
)
async def resend_invitation(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> InviteResponse:
    result = await team_service.resend_invitation(membership_id, actor_id)
    return _invite_response(result)


@router.patch(
    "/{membership_id}",
    response_model=MembershipRead,
    summary="Change member role",
    description="Switch a member between admin and viewer. Owner or admin role required.",
)
async def change_member_role(
    membership_id: UUID,
    request: RoleUpdateRequest,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    """Change a member's role."""
    membership = await team_service.change_role(membership_id, request.role, actor_id)
    return MembershipRead.model_validate(membership)


@router.delete(
    "/{membership_id}",
    response_model=MemberRemovedResponse,
    summary="Remove member",
    description=(
        "Remove a member or cancel a pending invitation. "
        "Removing an already-removed id succeeds. Owner or admin role required."
    ),
)
async def remove_member(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MemberRemovedResponse:
    """Remove a member from the company."""
    await team_service.remove_member(membership_id, actor_id)
    return MemberRemovedResponse()
