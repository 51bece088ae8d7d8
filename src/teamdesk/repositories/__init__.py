"""Repository layer - data access abstraction."""

from src.teamdesk.repositories.base import BaseRepository
from src.teamdesk.repositories.identity import Identity, IdentityDirectory, UserRepository
from src.teamdesk.repositories.membership import MembershipRepository
from src.teamdesk.repositories.roster_view import RosterViewRepository, RosterViewRow
from src.teamdesk.repositories.tenant import TenantRegistry, TenantRepository

__all__ = [
    # Base
    "BaseRepository",
    # Collaborator contracts
    "Identity",
    "IdentityDirectory",
    "TenantRegistry",
    # Repositories
    "MembershipRepository",
    "RosterViewRepository",
    "RosterViewRow",
    "TenantRepository",
    "UserRepository",
]
