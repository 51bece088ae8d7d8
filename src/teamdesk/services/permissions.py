"""Role-based permission evaluation for team management.

Pure functions: the caller resolves the actor's role first and passes it in,
nothing here touches the database.
"""

from enum import Enum
from uuid import UUID

from src.teamdesk.core.exceptions import Forbidden
from src.teamdesk.models import Membership, MembershipRole, MembershipStatus, Tenant


class TeamAction(str, Enum):
    """Actions gated by the actor's role."""

    VIEW_ROSTER = "view_roster"
    INVITE = "invite"
    CHANGE_ROLE = "change_role"
    REMOVE_MEMBER = "remove_member"
    RESEND_INVITATION = "resend_invitation"
    REVIEW_REQUEST = "review_request"


_ALLOWED: dict[MembershipRole, frozenset[TeamAction]] = {
    MembershipRole.OWNER: frozenset(TeamAction),
    MembershipRole.ADMIN: frozenset(TeamAction),
    MembershipRole.VIEWER: frozenset({TeamAction.VIEW_ROSTER}),
}

_DENIAL_MESSAGES = {
    TeamAction.VIEW_ROSTER: "view the member list",
    TeamAction.INVITE: "invite members",
    TeamAction.CHANGE_ROLE: "change member roles",
    TeamAction.REMOVE_MEMBER: "remove members",
    TeamAction.RESEND_INVITATION: "resend invitations",
    TeamAction.REVIEW_REQUEST: "review membership requests",
}


def is_allowed(role: MembershipRole | None, action: TeamAction) -> bool:
    """Return True if role may perform action. No role means no access."""
    if role is None:
        return False
    return action in _ALLOWED[role]


def ensure_allowed(role: MembershipRole | None, action: TeamAction) -> None:
    """Raise Forbidden unless role may perform action."""
    if is_allowed(role, action):
        return
    who = f"{role.value}s" if role is not None else "non-members"
    raise Forbidden(f"{who.capitalize()} may not {_DENIAL_MESSAGES[action]}")


def resolve_actor_role(
    tenant: Tenant, actor_id: UUID, membership: Membership | None
) -> MembershipRole | None:
    """Resolve the actor's effective role in a company.

    The founding user is always owner. Otherwise only an accepted membership
    grants a role; a stored owner row on anyone else counts as admin.
    """
    if tenant.is_owner(actor_id):
        return MembershipRole.OWNER
    if membership is None or membership.status != MembershipStatus.ACCEPTED.value:
        return None
    role = membership.role_enum
    if role == MembershipRole.OWNER:
        return MembershipRole.ADMIN
    return role
