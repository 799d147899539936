"""
Read-only access to the events table.

EventRepository is the only place SQL is built. Every query takes an already
resolved TimeRange, so routes never branch on which bounds were supplied.

Each query runs under the configured timeout. Driver and SQL errors are
re-raised as StoreError so the API can answer with a 5xx instead of leaking
database details.
"""

import asyncio
import logging
import re
from typing import Any, Optional, Sequence, Union

from sqlalchemy import Select, String, cast, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventviewer.core.config import settings
from eventviewer.core.errors import StoreError, StoreTimeoutError
from eventviewer.filters import TimeRange, Unbounded, time_range_conditions
from eventviewer.models import Event

logger = logging.getLogger(__name__)

ORDINAL_PATTERN = re.compile(r"-?[0-9]{1,9}")


class EventRepository:
    """Queries against the events table for one request's session."""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None) -> None:
        self.db = db
        self.timeout = settings.query_timeout_seconds if timeout is None else timeout

    # =========================================================================
    # EXECUTION
    # =========================================================================

    async def _execute(self, operation: str, query: Select[Any]):
        logger.debug("Running %s", operation)
        try:
            if self.timeout:
                return await asyncio.wait_for(self.db.execute(query), timeout=self.timeout)
            return await self.db.execute(query)
        except asyncio.TimeoutError as exc:
            raise StoreTimeoutError(operation, self.timeout) from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"{operation} failed: {exc.__class__.__name__}") from exc

    async def _events(self, operation: str, *conditions: Any) -> Sequence[Event]:
        query = (
            select(Event)
            .where(*conditions)
            .order_by(Event.timestamp.asc(), Event.id.asc())
        )
        result = await self._execute(operation, query)
        return result.scalars().all()

    async def _count(self, operation: str, expression: Any, *conditions: Any) -> int:
        query = select(expression).select_from(Event).where(*conditions)
        result = await self._execute(operation, query)
        return int(result.scalar_one())

    # =========================================================================
    # EVENT LISTS
    # =========================================================================

    async def find_all(self) -> Sequence[Event]:
        """Every stored event."""
        return await self._events("find_all")

    async def find_events_in_range(self, time_range: TimeRange) -> Sequence[Event]:
        """Events whose timestamp falls inside the range."""
        if isinstance(time_range, Unbounded):
            return await self.find_all()
        return await self._events(
            "find_events_in_range",
            *time_range_conditions(Event.timestamp, time_range),
        )

    async def find_events_in_range_by_entity(
        self,
        widget: str,
        gadget: str,
        sampler: str,
        time_range: TimeRange,
    ) -> Sequence[Event]:
        """Events logged by one widget/gadget/sampler inside the range."""
        return await self._events(
            "find_events_in_range_by_entity",
            Event.widget == widget,
            Event.gadget == gadget,
            Event.sampler == sampler,
            *time_range_conditions(Event.timestamp, time_range),
        )

    # =========================================================================
    # COUNTS
    # =========================================================================

    async def count_events(self, time_range: TimeRange) -> int:
        return await self._count(
            "count_events",
            func.count(Event.id),
            *time_range_conditions(Event.timestamp, time_range),
        )

    async def count_events_by_severity(
        self,
        time_range: TimeRange,
        severity: Union[int, str],
    ) -> int:
        """
        Count events with a given severity inside the range.

        `severity` is normally an ordinal from resolve_severity(). Unknown
        labels arrive as raw strings: short ASCII integers such as "2" or "-1"
        still match the ordinal, anything else (" 2", "1_0", full-width
        digits) is compared against the column's text form.
        """
        conditions = time_range_conditions(Event.timestamp, time_range)
        if isinstance(severity, str):
            if ORDINAL_PATTERN.fullmatch(severity):
                severity = int(severity)
            else:
                conditions.append(cast(Event.severity, String) == severity)
        if isinstance(severity, int):
            conditions.append(Event.severity == severity)
        return await self._count("count_events_by_severity", func.count(Event.id), *conditions)

    async def count_distinct_widgets(self, time_range: TimeRange) -> int:
        return await self._count(
            "count_distinct_widgets",
            func.count(distinct(Event.widget)),
            *time_range_conditions(Event.timestamp, time_range),
        )

    async def count_distinct_gadgets(self, time_range: TimeRange) -> int:
        return await self._count(
            "count_distinct_gadgets",
            func.count(distinct(Event.gadget)),
            *time_range_conditions(Event.timestamp, time_range),
        )

    async def count_distinct_samplers(self, time_range: TimeRange) -> int:
        return await self._count(
            "count_distinct_samplers",
            func.count(distinct(Event.sampler)),
            *time_range_conditions(Event.timestamp, time_range),
        )

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================

    async def all_timestamps(self) -> list[int]:
        """Timestamps of every stored event, for the calendar visual."""
        result = await self._execute("all_timestamps", select(Event.timestamp))
        return [int(ts) for ts in result.scalars().all()]
