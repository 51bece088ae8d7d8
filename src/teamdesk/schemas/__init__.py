from src.teamdesk.schemas.member import (
    InviteCreateRequest,
    InviteResponse,
    MemberRemovedResponse,
    MembershipRead,
    RoleUpdateRequest,
    RosterEntryRead,
    RosterResponse,
)

__all__ = [
    "InviteCreateRequest",
    "InviteResponse",
    "MemberRemovedResponse",
    "MembershipRead",
    "RoleUpdateRequest",
    "RosterEntryRead",
    "RosterResponse",
]
