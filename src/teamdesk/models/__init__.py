"""Model exports.

Import from here: `from src.teamdesk.models import Membership, Tenant`
"""

from src.teamdesk.models.enums import (
    ASSIGNABLE_ROLES,
    NON_TERMINAL_STATUSES,
    MembershipRole,
    MembershipStatus,
    parse_assignable_role,
)
from src.teamdesk.models.membership import Membership, normalize_contact_address
from src.teamdesk.models.tenant import Tenant
from src.teamdesk.models.user import User

__all__ = [
    # Enums
    "ASSIGNABLE_ROLES",
    "NON_TERMINAL_STATUSES",
    "MembershipRole",
    "MembershipStatus",
    "parse_assignable_role",
    # Models
    "Membership",
    "normalize_contact_address",
    "Tenant",
    "User",
]
