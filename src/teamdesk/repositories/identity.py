"""Identity directory - read-only user projections for display."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from sqlmodel import select

from src.teamdesk.models import User, normalize_contact_address
from src.teamdesk.repositories.base import BaseRepository


@dataclass(frozen=True)
class Identity:
    """Display data for a subject, owned by the identity collaborator."""

    id: UUID
    contact_address: str
    display_name: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            id=user.id,
            contact_address=user.email,
            display_name=user.full_name,
            avatar_url=user.avatar_url,
        )


class IdentityDirectory(Protocol):
    """Identity lookups used by the roster and invitation workflow."""

    async def batch_lookup(self, subject_ids: Iterable[UUID]) -> dict[UUID, Identity]: ...

    async def get_by_email(self, address: str) -> Identity | None: ...


class UserRepository(BaseRepository[User]):
    """Identity directory backed by the users table."""

    model = User

    async def get_by_email(self, address: str) -> Identity | None:
        """Get identity by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == normalize_contact_address(address))
        )
        user = result.scalar_one_or_none()
        return Identity.from_user(user) if user else None

    async def batch_lookup(self, subject_ids: Iterable[UUID]) -> dict[UUID, Identity]:
        """Look up many identities in one query. Unknown ids are omitted."""
        ids = set(subject_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(User).where(User.id.in_(ids))  # type: ignore[attr-defined]
        )
        return {user.id: Identity.from_user(user) for user in result.scalars().all()}
