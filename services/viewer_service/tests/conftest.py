"""
Pytest configuration and fixtures.

Tests run against an in-memory SQLite database (aiosqlite) seeded with a
small event log, and call the API through httpx's ASGI transport.
"""

import os
from contextlib import asynccontextmanager

# Must be set before eventviewer.core.db creates its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventviewer.core.db import Base, get_db
from eventviewer.main import app
from eventviewer.models import Event


# =============================================================================
# SEED DATA
# =============================================================================
# 2021-01-01 00:00:00 UTC = 1609459200

DAY = 86400
JAN_1 = 1609459200

SEED_EVENTS = [
    dict(id=1, timestamp=JAN_1, severity=2, widget="w1", gadget="g1", sampler="s1", message="disk full"),
    dict(id=2, timestamp=JAN_1 + 60, severity=1, widget="w1", gadget="g1", sampler="s2", message="cpu high"),
    dict(id=3, timestamp=JAN_1 + DAY, severity=0, widget="w1", gadget="g2", sampler="s1", message="recovered"),
    dict(id=4, timestamp=JAN_1 + 2 * DAY, severity=-1, widget="w2", gadget="g3", sampler="s3", message=None),
    dict(id=5, timestamp=JAN_1 + 3 * DAY, severity=2, widget=None, gadget=None, sampler=None, message="orphan"),
]


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
async def engine():
    """A fresh in-memory database with the events table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def empty_session(engine):
    """Session on a database with no events."""
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
async def db_session(empty_session: AsyncSession):
    """Session on a database seeded with SEED_EVENTS."""
    empty_session.add_all(Event(**fields) for fields in SEED_EVENTS)
    await empty_session.commit()
    yield empty_session


# =============================================================================
# HTTP CLIENT FIXTURES
# =============================================================================


@asynccontextmanager
async def _client_for(session: AsyncSession):
    """Point get_db at `session` for the lifetime of the client."""
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def client(db_session: AsyncSession):
    """API client backed by the seeded database."""
    async with _client_for(db_session) as ac:
        yield ac


@pytest.fixture
async def empty_client(empty_session: AsyncSession):
    """API client backed by an empty database."""
    async with _client_for(empty_session) as ac:
        yield ac
