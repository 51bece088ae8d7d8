"""Repository for company memberships and invitations."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from src.teamdesk.core.exceptions import DuplicateInvitation, Forbidden, NotFound
from src.teamdesk.models import (
    NON_TERMINAL_STATUSES,
    Membership,
    MembershipRole,
    MembershipStatus,
    normalize_contact_address,
    parse_assignable_role,
)
from src.teamdesk.models.base import utc_now
from src.teamdesk.repositories.base import BaseRepository

_NON_TERMINAL_VALUES = [s.value for s in NON_TERMINAL_STATUSES]


class MembershipRepository(BaseRepository[Membership]):
    """Authoritative store of who belongs to a company, in which role and status.

    Uniqueness of non-terminal rows is checked here before insert and
    enforced again by partial unique indexes, so a racing insert surfaces
    as DuplicateInvitation rather than a second row.
    """

    model = Membership

    async def get(self, membership_id: UUID) -> Membership | None:
        return await self.get_by_id(membership_id)

    async def list_memberships(self, tenant_id: UUID) -> list[Membership]:
        """List all memberships for a company, any status, oldest first."""
        result = await self.session.execute(
            select(Membership)
            .where(Membership.tenant_id == tenant_id)
            .order_by(
                Membership.created_at.asc(),  # type: ignore[attr-defined]
                Membership.id.asc(),  # type: ignore[attr-defined]
            )
        )
        return list(result.scalars().all())

    async def get_active_for_subject(self, tenant_id: UUID, user_id: UUID) -> Membership | None:
        """Get the pending/accepted membership held by a user in a company."""
        result = await self.session.execute(
            select(Membership).where(
                Membership.tenant_id == tenant_id,
                Membership.user_id == user_id,
                Membership.status.in_(_NON_TERMINAL_VALUES),  # type: ignore[attr-defined]
            )
        )
        return result.scalars().first()

    async def has_active_for_subject(self, tenant_id: UUID, user_id: UUID) -> bool:
        """Check if user has a pending/accepted membership in company."""
        membership = await self.get_active_for_subject(tenant_id, user_id)
        return membership is not None

    async def get_active_for_address(self, tenant_id: UUID, address: str) -> Membership | None:
        """Get the pending/accepted membership targeting an invited address."""
        result = await self.session.execute(
            select(Membership).where(
                Membership.tenant_id == tenant_id,
                Membership.invited_email == normalize_contact_address(address),
                Membership.status.in_(_NON_TERMINAL_VALUES),  # type: ignore[attr-defined]
            )
        )
        return result.scalars().first()

    async def create_invitation(
        self,
        tenant_id: UUID,
        contact_address: str,
        role: str | MembershipRole,
        inviter_id: UUID | None,
        subject_id: UUID | None = None,
    ) -> Membership:
        """Insert a pending invitation (flush, no commit).

        subject_id, when the address already belongs to a known user, is only
        used for the duplicate check; the row's subject stays empty until the
        invitee accepts.

        Raises:
            InvalidRole: role is not admin or viewer
            DuplicateInvitation: a pending/accepted row already targets the
                address or the subject
        """
        parsed_role = parse_assignable_role(role)
        address = normalize_contact_address(contact_address)

        if await self.get_active_for_address(tenant_id, address):
            raise DuplicateInvitation(f"{address} is already invited to this company")
        if subject_id is not None and await self.has_active_for_subject(tenant_id, subject_id):
            raise DuplicateInvitation(f"{address} is already a member of this company")

        membership = Membership(
            tenant_id=tenant_id,
            role=parsed_role.value,
            status=MembershipStatus.PENDING.value,
            invited_email=address,
            invited_by=inviter_id,
        )
        try:
            await self.save(membership)
        except IntegrityError as e:
            raise DuplicateInvitation(f"{address} is already invited to this company") from e
        return membership

    async def create_request(
        self, tenant_id: UUID, user_id: UUID, contact_address: str
    ) -> Membership:
        """Insert a pending viewer row raised by the user themself (flush, no commit).

        Raises:
            DuplicateInvitation: the user is already a member, already asked,
                or already has a pending invitation to accept instead
        """
        address = normalize_contact_address(contact_address)

        existing = await self.get_active_for_subject(tenant_id, user_id)
        if existing is not None:
            if existing.status == MembershipStatus.ACCEPTED.value:
                raise DuplicateInvitation("You are already a member of this company")
            raise DuplicateInvitation("You already have a pending request for this company")
        if await self.get_active_for_address(tenant_id, address):
            raise DuplicateInvitation("You already have a pending invitation to this company")

        membership = Membership(
            tenant_id=tenant_id,
            user_id=user_id,
            role=MembershipRole.VIEWER.value,
            status=MembershipStatus.PENDING.value,
            invited_email=address,
            invited_by=None,
        )
        try:
            await self.save(membership)
        except IntegrityError as e:
            raise DuplicateInvitation("You already have a pending request for this company") from e
        return membership

    async def update_role(self, membership_id: UUID, new_role: str | MembershipRole) -> Membership:
        """Switch a membership between admin and viewer (flush, no commit).

        Raises:
            NotFound: no such membership
            Forbidden: the membership holds the owner role
            InvalidRole: new_role is not admin or viewer
        """
        membership = await self.get(membership_id)
        if membership is None:
            raise NotFound("Membership not found")
        if membership.role == MembershipRole.OWNER.value:
            raise Forbidden("The owner's role cannot be changed")
        parsed_role = parse_assignable_role(new_role)

        membership.role = parsed_role.value
        membership.updated_at = utc_now()
        return await self.save(membership)

    async def remove(self, membership_id: UUID) -> None:
        """Hard-delete a membership. A missing id is already removed.

        Raises:
            Forbidden: the membership holds the owner role
        """
        membership = await self.get(membership_id)
        if membership is None:
            return
        if membership.role == MembershipRole.OWNER.value:
            raise Forbidden("The owner cannot be removed")
        await self.delete(membership)

    async def mark_accepted(self, membership: Membership, user_id: UUID) -> Membership:
        """Resolve a pending invitation to the accepting user."""
        now = utc_now()
        membership.status = MembershipStatus.ACCEPTED.value
        membership.user_id = user_id
        membership.accepted_at = now
        membership.updated_at = now
        return await self.save(membership)

    async def mark_declined(self, membership: Membership) -> Membership:
        """Mark a pending invitation as declined by the invitee."""
        membership.status = MembershipStatus.DECLINED.value
        membership.updated_at = utc_now()
        return await self.save(membership)

    async def mark_rejected(self, membership: Membership) -> Membership:
        """Mark a membership request as turned down by an owner or admin."""
        membership.status = MembershipStatus.REJECTED.value
        membership.updated_at = utc_now()
        return await self.save(membership)
