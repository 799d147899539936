"""
Database connection and session management.

SQLAlchemy 2.0 async pattern:
- Engine: manages the connection pool
- AsyncSessionLocal: factory for creating database sessions
- Base: parent class for the ORM models

The viewer only ever reads. Tables are owned and migrated elsewhere.
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from eventviewer.core.config import settings


# =============================================================================
# DATABASE ENGINE
# =============================================================================
# - echo=settings.debug: log every SQL statement when debugging
# - pool_pre_ping=True: test connections before handing them out

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)


# =============================================================================
# SESSION FACTORY
# =============================================================================
# expire_on_commit=False keeps loaded events usable after the session ends,
# which matters because responses are serialized after the dependency exits.

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# =============================================================================
# DEPENDENCY: GET DATABASE SESSION
# =============================================================================


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides one database session per request.

    Usage in a route:
        @router.get("/events")
        async def list_events(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        yield session
