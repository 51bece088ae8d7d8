"""Company membership model - members and invitations share one table."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.teamdesk.models.base import utc_now
from src.teamdesk.models.enums import MembershipRole, MembershipStatus

_NON_TERMINAL = "status IN ('pending', 'accepted')"


class Membership(SQLModel, table=True):
    """Relationship between a person and a company.

    An invitation is a pending row with invited_email set and user_id NULL
    until the invitee resolves their identity.

    A membership request is a pending row the user raised themself: user_id
    set, invited_by NULL.
    """

    __tablename__ = "company_memberships"
    __table_args__ = (
        # At most one pending/accepted row per (company, address) and (company, user)
        Index(
            "uq_company_memberships_active_email",
            "tenant_id",
            "invited_email",
            unique=True,
            postgresql_where=text(f"{_NON_TERMINAL} AND invited_email IS NOT NULL"),
            sqlite_where=text(f"{_NON_TERMINAL} AND invited_email IS NOT NULL"),
        ),
        Index(
            "uq_company_memberships_active_user",
            "tenant_id",
            "user_id",
            unique=True,
            postgresql_where=text(f"{_NON_TERMINAL} AND user_id IS NOT NULL"),
            sqlite_where=text(f"{_NON_TERMINAL} AND user_id IS NOT NULL"),
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="companies.id", index=True)
    user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    role: str = Field(default=MembershipRole.VIEWER.value, max_length=20)
    status: str = Field(default=MembershipStatus.PENDING.value, max_length=20)
    invited_email: str | None = Field(default=None, max_length=255)
    invited_by: UUID | None = Field(default=None, foreign_key="users.id")
    accepted_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> MembershipRole:
        """Get role as MembershipRole enum."""
        return MembershipRole(self.role)

    @property
    def status_enum(self) -> MembershipStatus:
        """Get status as MembershipStatus enum."""
        return MembershipStatus(self.status)

    @property
    def is_pending(self) -> bool:
        return self.status == MembershipStatus.PENDING.value

    @property
    def is_membership_request(self) -> bool:
        return self.is_pending and self.user_id is not None and self.invited_by is None

    @property
    def is_non_terminal(self) -> bool:
        """Pending or accepted rows block a second membership for the same target."""
        return self.status in (MembershipStatus.PENDING.value, MembershipStatus.ACCEPTED.value)


def normalize_contact_address(address: str) -> str:
    """Normalize an invited address for storage and comparison."""
    return address.strip().lower()
