"""Invitee-side endpoints: accept or decline an invitation addressed to the actor."""

from uuid import UUID

from fastapi import APIRouter

from src.teamdesk.api.dependencies import ActorId, TeamServiceDep
from src.teamdesk.schemas.member import MembershipRead

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post(
    "/{membership_id}/accept",
    response_model=MembershipRead,
    summary="Accept invitation",
    description="Join the company. The actor's email must match the invited address.",
)
async def accept_invitation(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    membership = await team_service.accept_invitation(membership_id, actor_id)
    return MembershipRead.model_validate(membership)


@router.post(
    "/{membership_id}/decline",
    response_model=MembershipRead,
    summary="Decline invitation",
    description="Decline an invitation; it is kept as a declined record.",
)
async def decline_invitation(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    membership = await team_service.decline_invitation(membership_id, actor_id)
    return MembershipRead.model_validate(membership)
