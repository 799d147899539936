"""
Response shaping for event query results.

Turns raw rows from the repository into the payloads the d3.js front-ends
consume:
- event lists (with 204 No Content for an empty match)
- calendar histograms: events counted per UTC day
- widget -> gadget -> sampler hierarchies for sunburst and tree visuals
"""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from fastapi import Response, status

from eventviewer.models import Event
from eventviewer.schemas.event import CalendarRecord, HierarchyLeaf, HierarchyNode

UNASSIGNED = "unassigned"
CALENDAR_DATE_FORMAT = "%Y%m%d"


# =============================================================================
# LISTS
# =============================================================================


def list_response(events: Sequence[Event]) -> Union[Sequence[Event], Response]:
    """Return the events, or an empty 204 response if nothing matched."""
    if not events:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return events


# =============================================================================
# CALENDAR
# =============================================================================


def calendar_date(timestamp: int) -> str:
    """Convert epoch seconds to a YYYYMMDD string, always in UTC."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(CALENDAR_DATE_FORMAT)


def bucket_by_day(timestamps: Iterable[int]) -> dict[str, int]:
    """
    Count timestamps per UTC calendar day.

    Args:
        timestamps: Epoch-second timestamps, in any order

    Returns:
        Mapping of YYYYMMDD -> number of timestamps on that day
    """
    return dict(Counter(calendar_date(ts) for ts in timestamps))


def calendar_records(buckets: dict[str, int]) -> list[CalendarRecord]:
    """Day buckets as records, oldest day first."""
    return [
        CalendarRecord(date=day, value=count)
        for day, count in sorted(buckets.items())
    ]


# =============================================================================
# HIERARCHY (SUNBURST / TREE)
# =============================================================================


class VisualKind(str, Enum):
    """Hierarchical d3.js visuals and the root label each one expects."""

    ZOOMABLE_SUNBURST = "zoomableSunburst"
    COLLAPSIBLE_TREE = "collapsibleTree"

    @property
    def root_name(self) -> str:
        if self is VisualKind.ZOOMABLE_SUNBURST:
            return "flare"
        return "Widgets"


def _entity_key(value: Optional[str]) -> Optional[str]:
    """None for a missing id. Empty ids count as missing."""
    return value or None


def _by_id(item: tuple[Optional[str], Any]) -> tuple[bool, str]:
    """Sort key: real ids by name, the missing-id group last."""
    key = item[0]
    return (key is None, key or "")


def _node_name(key: Optional[str]) -> str:
    return UNASSIGNED if key is None else key


def build_hierarchy(root_name: str, events: Iterable[Event]) -> HierarchyNode:
    """
    Roll events up into a widget -> gadget -> sampler tree.

    Every internal node is one distinct entity id with its children sorted
    by name. Each sampler leaf carries the number of events logged for that
    (widget, gadget, sampler) triple. Missing ids form their own group,
    named "unassigned" and placed after the real ids, so no event is
    dropped from the totals. The group is kept apart from a real entity
    that happens to be called "unassigned".
    """
    counts = Counter(
        (_entity_key(e.widget), _entity_key(e.gadget), _entity_key(e.sampler))
        for e in events
    )

    tree: dict[Optional[str], dict[Optional[str], dict[Optional[str], int]]] = {}
    for (widget, gadget, sampler), count in counts.items():
        tree.setdefault(widget, {}).setdefault(gadget, {})[sampler] = count

    return HierarchyNode(
        name=root_name,
        children=[
            HierarchyNode(
                name=_node_name(widget),
                children=[
                    HierarchyNode(
                        name=_node_name(gadget),
                        children=[
                            HierarchyLeaf(name=_node_name(sampler), value=count)
                            for sampler, count in sorted(samplers.items(), key=_by_id)
                        ],
                    )
                    for gadget, samplers in sorted(gadgets.items(), key=_by_id)
                ],
            )
            for widget, gadgets in sorted(tree.items(), key=_by_id)
        ],
    )


def format_visual(kind: VisualKind, events: Iterable[Event]) -> HierarchyNode:
    """Build the hierarchy for a visual, rooted at the label it expects."""
    return build_hierarchy(kind.root_name, events)
