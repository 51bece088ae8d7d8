"""Shared enums for models."""

from enum import Enum


class MembershipRole(str, Enum):
    """Role within a company.

    OWNER is derived from company ownership and never assigned by mutations.
    """

    OWNER = "owner"
    ADMIN = "admin"
    VIEWER = "viewer"


class MembershipStatus(str, Enum):
    """Membership lifecycle status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    REJECTED = "rejected"  # membership request turned down by an admin


# Roles an invitation or role change may set
ASSIGNABLE_ROLES = frozenset({MembershipRole.ADMIN, MembershipRole.VIEWER})

# Statuses that block a second membership for the same target
NON_TERMINAL_STATUSES = frozenset({MembershipStatus.PENDING, MembershipStatus.ACCEPTED})


def parse_assignable_role(role: "str | MembershipRole") -> MembershipRole:
    """Coerce role to an assignable MembershipRole or raise InvalidRole."""
    from src.teamdesk.core.exceptions import InvalidRole

    try:
        parsed = MembershipRole(role)
    except ValueError:
        raise InvalidRole(f"Unknown role '{role}'; expected admin or viewer") from None
    if parsed not in ASSIGNABLE_ROLES:
        raise InvalidRole(f"Role '{parsed.value}' cannot be assigned; expected admin or viewer")
    return parsed
