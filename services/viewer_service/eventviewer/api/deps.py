"""
FastAPI dependencies for the event routes.

- get_time_range: resolves the optional ?start=&end= pair once per request
- get_event_repository: wraps the request's session in an EventRepository
"""

from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from eventviewer.core.db import get_db
from eventviewer.filters import INT64_MAX, INT64_MIN, TimeRange, resolve_time_range
from eventviewer.repository import EventRepository


# =============================================================================
# TIME RANGE
# =============================================================================
# Declared as a dependency so every route gets the same query parameters,
# the same validation (non-integers and values outside int64 are rejected
# with 422) and the same resolution into a TimeRange.


def get_time_range(
    start: Optional[int] = Query(
        default=None,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Only include events at or after this time (epoch seconds)",
    ),
    end: Optional[int] = Query(
        default=None,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Only include events at or before this time (epoch seconds)",
    ),
) -> TimeRange:
    """Resolve the optional start/end query parameters."""
    return resolve_time_range(start, end)


# =============================================================================
# REPOSITORY
# =============================================================================


async def get_event_repository(
    db: AsyncSession = Depends(get_db),
) -> EventRepository:
    """
    Provide an EventRepository bound to this request's session.

    Tests override this dependency to inject a failing store.
    """
    return EventRepository(db)
