"""Company model - the tenant every membership is scoped to."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.teamdesk.models.base import utc_now


class Tenant(SQLModel, table=True):
    """Company registry.

    The founding user (owner_user_id) is always the implicit owner,
    whether or not a membership row exists for them.
    """

    __tablename__ = "companies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, index=True)
    owner_user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

    def is_owner(self, user_id: UUID | None) -> bool:
        """Check if user_id is the founding user."""
        return user_id is not None and user_id == self.owner_user_id
