"""Team membership and invitation workflow."""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamdesk.core.config import get_settings
from src.teamdesk.core.exceptions import (
    DeliveryFailed,
    DuplicateInvitation,
    Forbidden,
    InvalidInvitationState,
    NotFound,
    TeamError,
)
from src.teamdesk.core.logging import get_logger, loggable_email
from src.teamdesk.core.notifications import Notifier
from src.teamdesk.models import Membership, MembershipRole, Tenant, normalize_contact_address
from src.teamdesk.repositories import IdentityDirectory, MembershipRepository, TenantRegistry
from src.teamdesk.services.permissions import TeamAction, ensure_allowed, resolve_actor_role

logger = get_logger(__name__)


@dataclass
class InviteResult:
    """Outcome of an invitation send; warnings carry non-fatal delivery problems."""

    membership: Membership
    warnings: list[str] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return not self.warnings


class TeamService:
    """Membership mutations for one company.

    Every actor-initiated operation resolves the actor's current role and
    checks it before the store is touched.
    """

    def __init__(
        self,
        membership_repo: MembershipRepository,
        tenant_registry: TenantRegistry,
        identity_directory: IdentityDirectory,
        notifier: Notifier,
        session: AsyncSession,
        tenant_id: UUID,
    ):
        self.membership_repo = membership_repo
        self.tenant_registry = tenant_registry
        self.identity_directory = identity_directory
        self.notifier = notifier
        self.session = session
        self.tenant_id = tenant_id

    async def _get_tenant(self) -> Tenant:
        tenant = await self.tenant_registry.get_tenant(self.tenant_id)
        if tenant is None:
            raise NotFound("Company not found")
        return tenant

    async def _authorize(self, actor_id: UUID, action: TeamAction) -> Tenant:
        """Check the actor may perform action in this company. Returns the company."""
        tenant = await self._get_tenant()
        membership = await self.membership_repo.get_active_for_subject(self.tenant_id, actor_id)
        ensure_allowed(resolve_actor_role(tenant, actor_id, membership), action)
        return tenant

    async def _get_in_tenant(self, membership_id: UUID) -> Membership | None:
        membership = await self.membership_repo.get(membership_id)
        if membership is None or membership.tenant_id != self.tenant_id:
            return None
        return membership

    async def invite(
        self, contact_address: str, role: str | MembershipRole, actor_id: UUID
    ) -> InviteResult:
        """Create a pending invitation and attempt delivery once.

        The invitation stays committed when delivery fails; the failure is
        returned as a warning on the result.
        """
        address = normalize_contact_address(contact_address)
        try:
            tenant = await self._authorize(actor_id, TeamAction.INVITE)

            existing = await self.identity_directory.get_by_email(address)
            if existing is not None and tenant.is_owner(existing.id):
                raise DuplicateInvitation(f"{address} already owns this company")

            membership = await self.membership_repo.create_invitation(
                self.tenant_id,
                address,
                role,
                inviter_id=actor_id,
                subject_id=existing.id if existing else None,
            )
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise

        logger.info(
            "Invitation created",
            membership_id=str(membership.id),
            role=membership.role,
            invited_email=loggable_email(address),
        )
        warnings = await self._deliver(tenant, membership, actor_id)
        return InviteResult(membership=membership, warnings=warnings)

    async def resend_invitation(self, membership_id: UUID, actor_id: UUID) -> InviteResult:
        """Attempt delivery of a pending invitation again."""
        tenant = await self._authorize(actor_id, TeamAction.RESEND_INVITATION)
        membership = await self._get_in_tenant(membership_id)
        if membership is None:
            raise NotFound("Invitation not found")
        if not membership.is_pending or membership.invited_email is None:
            raise InvalidInvitationState("Invitation already processed")
        if membership.is_membership_request:
            raise InvalidInvitationState("Membership requests are reviewed, not resent")

        logger.info("Invitation resent", membership_id=str(membership.id))
        warnings = await self._deliver(tenant, membership, actor_id)
        return InviteResult(membership=membership, warnings=warnings)

    async def change_role(
        self, membership_id: UUID, new_role: str | MembershipRole, actor_id: UUID
    ) -> Membership:
        """Switch a member between admin and viewer."""
        try:
            tenant = await self._authorize(actor_id, TeamAction.CHANGE_ROLE)
            membership = await self._get_in_tenant(membership_id)
            if membership is None:
                raise NotFound("Membership not found")
            if tenant.is_owner(membership.user_id):
                raise Forbidden("The company owner's role cannot be changed")

            old_role = membership.role
            membership = await self.membership_repo.update_role(membership_id, new_role)
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to change member role", error=str(e))
            raise

        logger.info(
            "Member role changed",
            membership_id=str(membership.id),
            old_role=old_role,
            new_role=membership.role,
        )
        return membership

    async def remove_member(self, membership_id: UUID, actor_id: UUID) -> None:
        """Remove a member or cancel an invitation (hard delete).

        Removing an id that no longer exists in this company succeeds silently.
        """
        try:
            tenant = await self._authorize(actor_id, TeamAction.REMOVE_MEMBER)
            membership = await self._get_in_tenant(membership_id)
            if membership is None:
                logger.info("Member already removed", membership_id=str(membership_id))
                return
            if tenant.is_owner(membership.user_id):
                raise Forbidden("The company owner cannot be removed")

            await self.membership_repo.remove(membership_id)
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to remove member", error=str(e))
            raise

        logger.info("Member removed", membership_id=str(membership_id), status=membership.status)

    async def accept_invitation(self, membership_id: UUID, user_id: UUID) -> Membership:
        """Resolve a pending invitation to the invitee's identity."""
        try:
            membership = await self._get_invitation_for(membership_id, user_id)
            tenant = await self._get_tenant()
            if tenant.is_owner(user_id) or await self.membership_repo.has_active_for_subject(
                self.tenant_id, user_id
            ):
                raise DuplicateInvitation("You already belong to this company")

            membership = await self.membership_repo.mark_accepted(membership, user_id)
            await self.session.commit()

        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateInvitation("You already belong to this company") from e
        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", error=str(e))
            raise

        logger.info("Invitation accepted", membership_id=str(membership.id), user_id=str(user_id))
        return membership

    async def decline_invitation(self, membership_id: UUID, user_id: UUID) -> Membership:
        """Invitee declines; the row is kept as a declined marker."""
        try:
            membership = await self._get_invitation_for(membership_id, user_id)
            membership = await self.membership_repo.mark_declined(membership)
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to decline invitation", error=str(e))
            raise

        logger.info("Invitation declined", membership_id=str(membership.id), user_id=str(user_id))
        return membership

    async def request_membership(self, actor_id: UUID) -> Membership:
        """Ask to join the company as a viewer. An owner or admin reviews the request."""
        try:
            tenant = await self._get_tenant()
            if tenant.is_owner(actor_id):
                raise DuplicateInvitation("You are already a member of this company")
            identity = (await self.identity_directory.batch_lookup([actor_id])).get(actor_id)
            if identity is None:
                raise NotFound("User not found")

            membership = await self.membership_repo.create_request(
                self.tenant_id, actor_id, identity.contact_address
            )
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to request membership", error=str(e))
            raise

        logger.info("Membership requested", membership_id=str(membership.id), user_id=str(actor_id))
        return membership

    async def review_membership_request(
        self, membership_id: UUID, approve: bool, actor_id: UUID
    ) -> Membership:
        """Approve (accepted) or reject (rejected) a pending membership request."""
        try:
            await self._authorize(actor_id, TeamAction.REVIEW_REQUEST)
            membership = await self._get_in_tenant(membership_id)
            if membership is None:
                raise NotFound("Membership request not found")
            if not membership.is_pending:
                raise InvalidInvitationState("Membership request already processed")
            if not membership.is_membership_request:
                raise InvalidInvitationState("Invitations are answered by the invitee")

            if approve:
                membership = await self.membership_repo.mark_accepted(
                    membership, membership.user_id
                )
            else:
                membership = await self.membership_repo.mark_rejected(membership)
            await self.session.commit()

        except TeamError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to review membership request", error=str(e))
            raise

        logger.info(
            "Membership request reviewed",
            membership_id=str(membership.id),
            status=membership.status,
            reviewer_id=str(actor_id),
        )
        return membership

    async def _get_invitation_for(self, membership_id: UUID, user_id: UUID) -> Membership:
        """Load a pending invitation addressed to user_id.

        Raises:
            NotFound: no such invitation in this company, or unknown user
            InvalidInvitationState: invitation is no longer pending
            Forbidden: invitation was sent to another address
        """
        membership = await self._get_in_tenant(membership_id)
        if membership is None:
            raise NotFound("Invitation not found")
        if not membership.is_pending:
            raise InvalidInvitationState("Invitation already processed")
        if membership.is_membership_request:
            raise InvalidInvitationState("Membership requests are reviewed by an owner or admin")

        identity = (await self.identity_directory.batch_lookup([user_id])).get(user_id)
        if identity is None:
            raise NotFound("User not found")
        if normalize_contact_address(identity.contact_address) != membership.invited_email:
            raise Forbidden("This invitation was sent to a different address")
        return membership

    async def _inviter_label(self, actor_id: UUID) -> str:
        """Name shown as the sender; a failed lookup falls back to a generic label."""
        try:
            inviter = (await self.identity_directory.batch_lookup([actor_id])).get(actor_id)
        except Exception as e:
            logger.warning("Inviter lookup failed", actor_id=str(actor_id), error=str(e))
            inviter = None
        if inviter is None:
            return "A team member"
        return inviter.display_name or inviter.contact_address

    async def _deliver(self, tenant: Tenant, membership: Membership, actor_id: UUID) -> list[str]:
        """Make exactly one delivery attempt. Returns warnings, empty on success.

        Runs after the invitation is committed, so nothing here may raise.
        """
        address = membership.invited_email or ""
        accept_link = f"{get_settings().app_url}/accept-invitation?id={membership.id}"
        inviter_label = await self._inviter_label(actor_id)

        try:
            # The notifier bounds its own send time
            delivered = self.notifier.send_invitation(
                address,
                tenant.name,
                membership.role,
                inviter_label,
                accept_link,
            )
        except DeliveryFailed as e:
            logger.warning(
                "Invitation delivery failed", membership_id=str(membership.id), error=e.detail
            )
            delivered = False
        except Exception as e:
            logger.error(
                "Invitation delivery raised", membership_id=str(membership.id), error=str(e)
            )
            delivered = False
        else:
            if not delivered:
                logger.warning("Invitation delivery failed", membership_id=str(membership.id))

        if delivered:
            return []
        return [f"Invitation saved, but the email to {address} could not be delivered"]
