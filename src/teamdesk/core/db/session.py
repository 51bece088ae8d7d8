"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.teamdesk.core.db.engine import get_engine


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        engine: Optional engine override for testing.

    Yields:
        AsyncSession with expire_on_commit disabled, so rows stay readable
        after the service layer commits.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
