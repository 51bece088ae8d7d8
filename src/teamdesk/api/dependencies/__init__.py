"""FastAPI dependency injection definitions."""

from src.teamdesk.api.dependencies.actor import ActorId, get_actor_id
from src.teamdesk.api.dependencies.db import DBSession, get_db_session
from src.teamdesk.api.dependencies.repositories import (
    MembershipRepo,
    RosterViewRepo,
    TenantRepo,
    UserRepo,
    get_membership_repository,
    get_roster_view_repository,
    get_tenant_repository,
    get_user_repository,
)
from src.teamdesk.api.dependencies.services import (
    RosterServiceDep,
    TeamServiceDep,
    get_notifier,
    get_roster_service,
    get_team_service,
)
from src.teamdesk.api.dependencies.tenant import ValidatedTenant, get_validated_tenant

__all__ = [
    # Actor
    "ActorId",
    "get_actor_id",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "MembershipRepo",
    "RosterViewRepo",
    "TenantRepo",
    "UserRepo",
    "get_membership_repository",
    "get_roster_view_repository",
    "get_tenant_repository",
    "get_user_repository",
    # Services
    "RosterServiceDep",
    "TeamServiceDep",
    "get_notifier",
    "get_roster_service",
    "get_team_service",
    # Tenant
    "ValidatedTenant",
    "get_validated_tenant",
]
