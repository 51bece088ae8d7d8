"""User model - identity projection owned by the profile directory."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.teamdesk.models.base import utc_now


class User(SQLModel, table=True):
    """User identity and display data. Read-only for the membership core."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
