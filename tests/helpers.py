"""Shared test helpers: fake collaborators and data setup."""

import threading
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamdesk.core.exceptions import DeliveryFailed
from src.teamdesk.models import Membership, Tenant, User
from tests.factories import MembershipFactory, TenantFactory, UserFactory


@dataclass
class SentInvitation:
    contact_address: str
    tenant_name: str
    role: str
    inviter_label: str
    accept_link: str


@dataclass
class FakeNotifier:
    """Records invitations instead of sending them.

    mode: "ok" delivers, "fail" returns False, "raise" raises DeliveryFailed.
    threads holds the ident of the thread each send ran on.
    """

    mode: str = "ok"
    sent: list[SentInvitation] = field(default_factory=list)
    threads: list[int] = field(default_factory=list)

    def send_invitation(
        self,
        contact_address: str,
        tenant_name: str,
        role: str,
        inviter_label: str,
        accept_link: str,
    ) -> bool:
        self.sent.append(
            SentInvitation(contact_address, tenant_name, role, inviter_label, accept_link)
        )
        self.threads.append(threading.get_ident())
        if self.mode == "raise":
            raise DeliveryFailed("Mail provider rejected the message")
        return self.mode == "ok"


@dataclass
class Company:
    """A company with its founding user."""

    tenant: Tenant
    owner: User

    @property
    def id(self) -> UUID:
        return self.tenant.id


async def create_company(session: AsyncSession, **tenant_kwargs) -> Company:
    """Create a founding user and their company (committed)."""
    owner = UserFactory.build(full_name="Olivia Owner")
    session.add(owner)
    await session.flush()
    tenant = TenantFactory.build(owner_user_id=owner.id, **tenant_kwargs)
    session.add(tenant)
    await session.commit()
    return Company(tenant=tenant, owner=owner)


async def add_member(
    session: AsyncSession,
    company: Company,
    role: str = "viewer",
    **user_kwargs,
) -> tuple[User, Membership]:
    """Create a user with an accepted membership in company (committed)."""
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.flush()
    membership = MembershipFactory.build(
        tenant_id=company.id,
        user_id=user.id,
        role=role,
        invited_email=user.email,
        invited_by=company.owner.id,
    )
    session.add(membership)
    await session.commit()
    return user, membership
