"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.teamdesk.api.dependencies.db import DBSession
from src.teamdesk.repositories import (
    MembershipRepository,
    RosterViewRepository,
    TenantRepository,
    UserRepository,
)


def get_membership_repository(session: DBSession) -> MembershipRepository:
    return MembershipRepository(session)


def get_tenant_repository(session: DBSession) -> TenantRepository:
    return TenantRepository(session)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_roster_view_repository(session: DBSession) -> RosterViewRepository:
    return RosterViewRepository(session)


MembershipRepo = Annotated[MembershipRepository, Depends(get_membership_repository)]
TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
RosterViewRepo = Annotated[RosterViewRepository, Depends(get_roster_view_repository)]
