"""Shared fixtures: in-memory SQLite database, API client, users and a hall."""

from collections.abc import AsyncGenerator
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import hallbook.models  # noqa: F401
from hallbook.database import Base, get_db
from hallbook.main import app
from hallbook.models import Hall, User
from hallbook.services.booking_service import BookingService
from tests.factories import NOW, make_hall, make_user


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def admin(db) -> User:
    return await make_user(db, "Ada Admin", "admin@college.edu", role="admin")


@pytest.fixture
async def faculty(db) -> User:
    return await make_user(db, "Frank Faculty", "frank@college.edu")


@pytest.fixture
async def other_faculty(db) -> User:
    return await make_user(db, "Olivia Other", "olivia@college.edu")


@pytest.fixture
async def hall(db) -> Hall:
    return await make_hall(db)


@pytest.fixture
def service() -> BookingService:
    """Booking service pinned to a fixed clock, with the default slot policy."""
    return BookingService(clock=lambda: NOW, pending_blocks_slot=False)


@pytest.fixture
def future_day() -> date:
    """A date safely in the future for requests going through the real clock."""
    return date.today() + timedelta(days=7)
