"""
Event query routes.

Read-only endpoints consumed by the d3.js dashboards:
- event lists (all events, by time range, by widget/gadget/sampler)
- counts (events, events by severity, distinct widgets/gadgets/samplers)
- visual payloads (calendar, zoomable sunburst, collapsible tree)

Every route taking ?start=&end= receives an already resolved TimeRange
from the get_time_range dependency.
"""

from typing import Sequence, Union

from fastapi import APIRouter, Depends, Path, Response

from eventviewer.api.deps import get_event_repository, get_time_range
from eventviewer.filters import INT64_MAX, INT64_MIN, Bounded, TimeRange, resolve_severity
from eventviewer.models import Event
from eventviewer.repository import EventRepository
from eventviewer.schemas.event import CalendarRecord, EventResponse, HierarchyNode
from eventviewer.shaping import (
    VisualKind,
    bucket_by_day,
    calendar_records,
    format_visual,
    list_response,
)

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)

EMPTY_LIST_RESPONSES = {204: {"description": "No events matched"}}


# =============================================================================
# LIST EVENTS
# =============================================================================


@router.get(
    "",
    response_model=list[EventResponse],
    responses=EMPTY_LIST_RESPONSES,
    summary="List events, optionally within a time range",
)
async def list_events(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> Union[Sequence[Event], Response]:
    """
    List events ordered by timestamp.

    Returns 204 No Content when no event matches.
    """
    events = await repo.find_events_in_range(time_range)
    return list_response(events)


# =============================================================================
# VISUALS
# =============================================================================
# NOTE: these fixed paths must be registered before /{severity}/count and
# the other parameterized routes below.


@router.get(
    "/zoomableSunburstJSON",
    response_model=HierarchyNode,
    summary="Event hierarchy for a d3.js zoomable sunburst",
)
async def get_zoomable_sunburst(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> HierarchyNode:
    """Widget -> gadget -> sampler event counts, rooted at "flare"."""
    events = await repo.find_events_in_range(time_range)
    return format_visual(VisualKind.ZOOMABLE_SUNBURST, events)


@router.get(
    "/collapsibleTreeJSON",
    response_model=HierarchyNode,
    summary="Event hierarchy for a d3.js collapsible tree",
)
async def get_collapsible_tree(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> HierarchyNode:
    """Widget -> gadget -> sampler event counts, rooted at "Widgets"."""
    events = await repo.find_events_in_range(time_range)
    return format_visual(VisualKind.COLLAPSIBLE_TREE, events)


@router.get(
    "/calendarJSON",
    response_model=list[CalendarRecord],
    summary="Events per day for a d3.js calendar",
)
async def get_calendar(
    repo: EventRepository = Depends(get_event_repository),
) -> list[CalendarRecord]:
    """
    Count every stored event per UTC calendar day.

    The calendar always covers the whole event log; it takes no time range.
    """
    timestamps = await repo.all_timestamps()
    return calendar_records(bucket_by_day(timestamps))


# =============================================================================
# EVENTS BETWEEN TWO TIMES
# =============================================================================


@router.get(
    "/start/{start}/end/{end}",
    response_model=list[EventResponse],
    responses=EMPTY_LIST_RESPONSES,
    summary="List events between two times",
)
async def list_events_between(
    start: int = Path(
        ...,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Lower bound, epoch seconds (inclusive)",
    ),
    end: int = Path(
        ...,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Upper bound, epoch seconds (inclusive)",
    ),
    repo: EventRepository = Depends(get_event_repository),
) -> Union[Sequence[Event], Response]:
    """Both bounds are required here; non-numeric or out-of-range values get 422."""
    events = await repo.find_events_in_range(Bounded(start=start, end=end))
    return list_response(events)


# =============================================================================
# COUNTS
# =============================================================================


@router.get(
    "/count",
    response_model=int,
    summary="Count events",
)
async def count_events(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> int:
    return await repo.count_events(time_range)


@router.get(
    "/widgets/count",
    response_model=int,
    summary="Count distinct widgets that logged events",
)
async def count_widgets(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> int:
    return await repo.count_distinct_widgets(time_range)


@router.get(
    "/gadgets/count",
    response_model=int,
    summary="Count distinct gadgets that logged events",
)
async def count_gadgets(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> int:
    return await repo.count_distinct_gadgets(time_range)


@router.get(
    "/samplers/count",
    response_model=int,
    summary="Count distinct samplers that logged events",
)
@router.get("/samples/count", response_model=int, include_in_schema=False)
async def count_samplers(
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> int:
    return await repo.count_distinct_samplers(time_range)


# =============================================================================
# EVENTS BY WIDGET / GADGET / SAMPLER
# =============================================================================


@router.get(
    "/widgets/{widget}/gadgets/{gadget}/samplers/{sampler}",
    response_model=list[EventResponse],
    responses=EMPTY_LIST_RESPONSES,
    summary="List events logged by one sampler",
)
async def list_events_by_entity(
    widget: str,
    gadget: str,
    sampler: str,
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> Union[Sequence[Event], Response]:
    events = await repo.find_events_in_range_by_entity(widget, gadget, sampler, time_range)
    return list_response(events)


# =============================================================================
# COUNT BY SEVERITY
# =============================================================================
# Registered last: {severity} would otherwise swallow widgets/gadgets/samplers.


@router.get(
    "/{severity}/count",
    response_model=int,
    summary="Count events of one severity",
)
async def count_events_by_severity(
    severity: str = Path(
        ...,
        description="critical, warning, OK or undefined (case-sensitive)",
    ),
    time_range: TimeRange = Depends(get_time_range),
    repo: EventRepository = Depends(get_event_repository),
) -> int:
    """
    Count events with the given severity.

    Unknown labels are passed to the store unchanged.
    """
    return await repo.count_events_by_severity(time_range, resolve_severity(severity))
