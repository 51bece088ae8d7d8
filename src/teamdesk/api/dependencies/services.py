"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.teamdesk.api.dependencies.db import DBSession
from src.teamdesk.api.dependencies.repositories import (
    MembershipRepo,
    RosterViewRepo,
    TenantRepo,
    UserRepo,
)
from src.teamdesk.api.dependencies.tenant import ValidatedTenant
from src.teamdesk.core.notifications import EmailNotifier, Notifier
from src.teamdesk.services import RosterService, TeamService


def get_notifier() -> Notifier:
    """Get invitation notifier (overridden in tests)."""
    return EmailNotifier()


def get_team_service(
    membership_repo: MembershipRepo,
    tenant_repo: TenantRepo,
    user_repo: UserRepo,
    notifier: Annotated[Notifier, Depends(get_notifier)],
    session: DBSession,
    tenant: ValidatedTenant,
) -> TeamService:
    """Get team service with repositories and tenant context."""
    return TeamService(membership_repo, tenant_repo, user_repo, notifier, session, tenant.id)


def get_roster_service(
    roster_view_repo: RosterViewRepo,
    membership_repo: MembershipRepo,
    tenant_repo: TenantRepo,
    user_repo: UserRepo,
    session: DBSession,
    tenant: ValidatedTenant,
) -> RosterService:
    """Get roster service with repositories and tenant context."""
    return RosterService(
        roster_view_repo, membership_repo, tenant_repo, user_repo, session, tenant.id
    )


TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
RosterServiceDep = Annotated[RosterService, Depends(get_roster_service)]
