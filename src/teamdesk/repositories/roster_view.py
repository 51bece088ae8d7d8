"""Aggregated roster read - memberships joined with company and identities."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from src.teamdesk.models import Membership, Tenant, User
from src.teamdesk.repositories.identity import Identity


@dataclass(frozen=True)
class RosterViewRow:
    """One membership with its company and resolved identities."""

    membership: Membership
    tenant: Tenant
    member: Identity | None
    owner: Identity | None


class RosterViewRepository:
    """Primary roster read path: a single joined SELECT per company."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch(self, tenant_id: UUID) -> list[RosterViewRow]:
        """Fetch memberships with identity projections attached, oldest first.

        Returns an empty list when the company has no membership rows.
        """
        member = aliased(User, name="member")
        owner = aliased(User, name="owner")
        query = (
            select(Membership, Tenant, member, owner)
            .join(Tenant, Tenant.id == Membership.tenant_id)  # type: ignore[arg-type]
            .outerjoin(member, member.id == Membership.user_id)  # type: ignore[arg-type]
            .outerjoin(owner, owner.id == Tenant.owner_user_id)  # type: ignore[arg-type]
            .where(Membership.tenant_id == tenant_id)
            .order_by(
                Membership.created_at.asc(),  # type: ignore[attr-defined]
                Membership.id.asc(),  # type: ignore[attr-defined]
            )
        )
        result = await self.session.execute(query)
        return [
            RosterViewRow(
                membership=membership,
                tenant=tenant,
                member=Identity.from_user(member_user) if member_user else None,
                owner=Identity.from_user(owner_user) if owner_user else None,
            )
            for membership, tenant, member_user, owner_user in result.all()
        ]
