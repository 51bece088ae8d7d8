"""Integration test fixtures for database and HTTP client operations.

Runs against an in-memory SQLite database (aiosqlite, one shared connection)
so no PostgreSQL server is needed. Uses polyfactory for test data.
"""

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.teamdesk.api.dependencies import get_notifier
from src.teamdesk.core import db
from src.teamdesk.main import create_app
from src.teamdesk.repositories import (
    MembershipRepository,
    RosterViewRepository,
    TenantRepository,
    UserRepository,
)
from src.teamdesk.services import RosterService, TeamService
from tests.helpers import Company, FakeNotifier, create_company

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory database with all tables, installed as the app engine."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    db.set_engine(test_engine)
    yield test_engine
    db.set_engine(None)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    Tests must call `await session.commit()` to persist setup data.
    """
    async with AsyncSession(engine, expire_on_commit=False, autoflush=False) as session:
        yield session


@pytest.fixture
async def service_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for the services under test, separate from the setup session.

    Services roll back on errors, which expires every object in their session;
    keeping setup objects in db_session leaves them readable afterwards.
    """
    async with AsyncSession(engine, expire_on_commit=False, autoflush=False) as session:
        yield session


@pytest.fixture
async def company(db_session: AsyncSession) -> Company:
    """Company with a founding user and no membership rows."""
    return await create_company(db_session)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_team_service(
    service_session: AsyncSession, notifier: FakeNotifier
) -> Callable[[Company], TeamService]:
    """Build a TeamService for a company over the service session."""

    def _make(company: Company) -> TeamService:
        return TeamService(
            MembershipRepository(service_session),
            TenantRepository(service_session),
            UserRepository(service_session),
            notifier,
            service_session,
            company.id,
        )

    return _make


@pytest.fixture
def make_roster_service(service_session: AsyncSession) -> Callable[[Company], RosterService]:
    """Build a RosterService for a company over the service session."""

    def _make(company: Company) -> RosterService:
        return RosterService(
            RosterViewRepository(service_session),
            MembershipRepository(service_session),
            TenantRepository(service_session),
            UserRepository(service_session),
            service_session,
            company.id,
        )

    return _make


@pytest.fixture
async def client(
    engine: AsyncEngine, company: Company, notifier: FakeNotifier
) -> AsyncGenerator[AsyncClient]:
    """Create test client with tenant header and a recording notifier."""
    app = create_app()
    app.dependency_overrides[get_notifier] = lambda: notifier
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Tenant-ID": str(company.id)},
    ) as client:
        yield client
