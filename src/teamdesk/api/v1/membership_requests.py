"""Membership requests: a user asks to join, an owner or admin reviews."""

from uuid import UUID

from fastapi import APIRouter, status

from src.teamdesk.api.dependencies import ActorId, TeamServiceDep
from src.teamdesk.schemas.member import MembershipRead

router = APIRouter(prefix="/membership-requests", tags=["membership-requests"])


@router.post(
    "",
    response_model=MembershipRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request membership",
    description="Ask to join the company as a viewer. The request stays pending until reviewed.",
)
async def request_membership(
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    membership = await team_service.request_membership(actor_id)
    return MembershipRead.model_validate(membership)


@router.post(
    "/{membership_id}/approve",
    response_model=MembershipRead,
    summary="Approve membership request",
    description="Accept the requester as a viewer. Owner or admin only.",
)
async def approve_membership_request(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    membership = await team_service.review_membership_request(membership_id, True, actor_id)
    return MembershipRead.model_validate(membership)


@router.post(
    "/{membership_id}/reject",
    response_model=MembershipRead,
    summary="Reject membership request",
    description="Turn the request down; it is kept as a rejected record.",
)
async def reject_membership_request(
    membership_id: UUID,
    actor_id: ActorId,
    team_service: TeamServiceDep,
) -> MembershipRead:
    membership = await team_service.review_membership_request(membership_id, False, actor_id)
    return MembershipRead.model_validate(membership)
