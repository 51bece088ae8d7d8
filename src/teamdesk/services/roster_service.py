"""Member directory assembly.

The roster is read through one aggregated query when possible. When that
query fails or comes back empty, it is rebuilt from granular reads: company,
memberships, then one batched identity lookup. Both paths feed the same
merge so they produce the same entries.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamdesk.core.config import get_settings
from src.teamdesk.core.exceptions import DirectoryUnavailable, NotFound
from src.teamdesk.core.logging import get_logger
from src.teamdesk.models import Membership, MembershipRole, MembershipStatus, Tenant
from src.teamdesk.repositories import (
    Identity,
    IdentityDirectory,
    MembershipRepository,
    RosterViewRepository,
    TenantRegistry,
)
from src.teamdesk.services.permissions import TeamAction, ensure_allowed, resolve_actor_role

logger = get_logger(__name__)

# Failures that send the roster down the granular path
_READ_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class RosterEntry:
    """Display-ready roster line."""

    membership_id: UUID | None
    user_id: UUID | None
    role: MembershipRole
    status: MembershipStatus
    display_name: str
    contact_address: str | None
    avatar_url: str | None
    invited_by: UUID | None
    created_at: datetime
    synthesized: bool = False


def _placeholder_name(contact_address: str | None, fallback: str) -> str:
    if contact_address and contact_address.split("@")[0]:
        return contact_address.split("@")[0]
    return fallback


def _display_role(tenant: Tenant, membership: Membership) -> MembershipRole:
    if tenant.is_owner(membership.user_id) and membership.is_non_terminal:
        return MembershipRole.OWNER
    role = membership.role_enum
    # Only the founding user is owner; other stored owner rows read as admin
    return MembershipRole.ADMIN if role == MembershipRole.OWNER else role


def merge_roster(
    tenant: Tenant,
    memberships: Sequence[Membership],
    identities: Mapping[UUID, Identity],
) -> list[RosterEntry]:
    """Merge membership rows with identities into roster entries.

    A synthesized owner entry comes first when the founding user has no
    pending/accepted row; other rows keep the order they were given in.
    """
    entries: list[RosterEntry] = []

    founder_has_row = any(
        tenant.is_owner(m.user_id) and m.is_non_terminal for m in memberships
    )
    if not founder_has_row:
        owner = identities.get(tenant.owner_user_id)
        contact = owner.contact_address if owner else None
        entries.append(
            RosterEntry(
                membership_id=None,
                user_id=tenant.owner_user_id,
                role=MembershipRole.OWNER,
                status=MembershipStatus.ACCEPTED,
                display_name=(owner.display_name if owner else None)
                or _placeholder_name(contact, "Owner"),
                contact_address=contact,
                avatar_url=owner.avatar_url if owner else None,
                invited_by=None,
                created_at=tenant.created_at,
                synthesized=True,
            )
        )

    for membership in memberships:
        role = _display_role(tenant, membership)
        identity = identities.get(membership.user_id) if membership.user_id else None
        contact = identity.contact_address if identity else membership.invited_email
        fallback = "Owner" if role == MembershipRole.OWNER else "Member"
        entries.append(
            RosterEntry(
                membership_id=membership.id,
                user_id=membership.user_id,
                role=role,
                status=membership.status_enum,
                display_name=(identity.display_name if identity else None)
                or _placeholder_name(contact, fallback),
                contact_address=contact,
                avatar_url=identity.avatar_url if identity else None,
                invited_by=membership.invited_by,
                created_at=membership.created_at,
            )
        )
    return entries


class RosterService:
    """Read-only roster assembly for one company."""

    def __init__(
        self,
        roster_view_repo: RosterViewRepository,
        membership_repo: MembershipRepository,
        tenant_registry: TenantRegistry,
        identity_directory: IdentityDirectory,
        session: AsyncSession,
        tenant_id: UUID,
    ):
        self.roster_view_repo = roster_view_repo
        self.membership_repo = membership_repo
        self.tenant_registry = tenant_registry
        self.identity_directory = identity_directory
        self.session = session
        self.tenant_id = tenant_id

    async def list_roster(self, actor_id: UUID) -> list[RosterEntry]:
        """Return the roster if the actor may view it."""
        try:
            tenant = await self.tenant_registry.get_tenant(self.tenant_id)
            if tenant is None:
                raise NotFound("Company not found")
            membership = await self.membership_repo.get_active_for_subject(
                self.tenant_id, actor_id
            )
        except _READ_ERRORS as e:
            await self.session.rollback()
            logger.error("Failed to resolve actor role", error=str(e))
            raise DirectoryUnavailable("Member directory is unavailable") from e

        ensure_allowed(resolve_actor_role(tenant, actor_id, membership), TeamAction.VIEW_ROSTER)
        return await self.assemble(self.tenant_id)

    async def assemble(self, tenant_id: UUID) -> list[RosterEntry]:
        """Build the roster, falling back to granular reads once if needed."""
        if get_settings().roster_primary_view_enabled:
            try:
                entries = await self.assemble_primary(tenant_id)
            except _READ_ERRORS as e:
                logger.warning("Primary roster read failed", error=str(e))
                await self.session.rollback()
                entries = None
            if entries is not None:
                return entries
        return await self.assemble_fallback(tenant_id)

    async def assemble_primary(self, tenant_id: UUID) -> list[RosterEntry] | None:
        """Aggregated path. Returns None when the view has no rows for the company."""
        rows = await self.roster_view_repo.fetch(tenant_id)
        if not rows:
            logger.info("Primary roster read returned no rows", tenant_id=str(tenant_id))
            return None

        tenant = rows[0].tenant
        identities: dict[UUID, Identity] = {}
        for row in rows:
            if row.member is not None:
                identities[row.member.id] = row.member
        if rows[0].owner is not None:
            identities[rows[0].owner.id] = rows[0].owner
        return merge_roster(tenant, [row.membership for row in rows], identities)

    async def assemble_fallback(self, tenant_id: UUID) -> list[RosterEntry]:
        """Granular path: company, memberships, then one batched identity lookup.

        Raises:
            NotFound: company does not exist
            DirectoryUnavailable: company or membership read failed
        """
        try:
            tenant = await self.tenant_registry.get_tenant(tenant_id)
            if tenant is None:
                raise NotFound("Company not found")
            memberships = await self.membership_repo.list_memberships(tenant_id)
        except _READ_ERRORS as e:
            logger.error("Fallback roster read failed", error=str(e))
            raise DirectoryUnavailable("Member directory is unavailable") from e

        subject_ids = {tenant.owner_user_id}
        subject_ids.update(m.user_id for m in memberships if m.user_id is not None)
        try:
            identities = await self.identity_directory.batch_lookup(subject_ids)
        except Exception as e:
            # Names are cosmetic; any directory failure degrades to placeholders
            logger.warning("Identity lookup failed, using placeholders", error=str(e))
            identities = {}

        return merge_roster(tenant, memberships, identities)
