"""User and membership factories for test data generation."""

from uuid import UUID

from polyfactory import Use

from src.teamdesk.models import Membership, MembershipRole, MembershipStatus, User
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    full_name = "Test User"
    avatar_url = None
    created_at = Use(utc_now)

    @classmethod
    def nameless(cls, **kwargs):
        """Create a user with no display name."""
        return cls.build(full_name=None, **kwargs)


class MembershipFactory(BaseFactory):
    """Factory for generating Membership test data (accepted viewer by default)."""

    __model__ = Membership

    id = Use(generate_uuid)
    # FK fields - must be set explicitly
    tenant_id = None
    user_id = None
    invited_by = None
    role = MembershipRole.VIEWER.value
    status = MembershipStatus.ACCEPTED.value
    invited_email = None
    accepted_at = Use(utc_now)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        """Create an accepted admin membership."""
        return cls.build(role=MembershipRole.ADMIN.value, **kwargs)

    @classmethod
    def viewer(cls, **kwargs):
        """Create an accepted viewer membership."""
        return cls.build(role=MembershipRole.VIEWER.value, **kwargs)

    @classmethod
    def pending(cls, email: str, **kwargs):
        """Create a pending invitation for an address."""
        return cls.build(
            status=MembershipStatus.PENDING.value,
            invited_email=email,
            user_id=None,
            accepted_at=None,
            **kwargs,
        )

    @classmethod
    def declined(cls, email: str, **kwargs):
        """Create a declined invitation marker."""
        return cls.build(
            status=MembershipStatus.DECLINED.value,
            invited_email=email,
            accepted_at=None,
            **kwargs,
        )

    @classmethod
    def stored_owner(cls, user_id: UUID, **kwargs):
        """Create an explicit owner-role row."""
        return cls.build(role=MembershipRole.OWNER.value, user_id=user_id, **kwargs)

    @classmethod
    def request(cls, user_id: UUID, email: str, **kwargs):
        """Create a pending membership request raised by the user."""
        return cls.build(
            status=MembershipStatus.PENDING.value,
            user_id=user_id,
            invited_email=email,
            invited_by=None,
            accepted_at=None,
            **kwargs,
        )
