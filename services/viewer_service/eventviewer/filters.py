"""
Query filter resolution.

Every endpoint accepts the same optional `start`/`end` pair. Instead of each
route checking which of the two is present, the pair is resolved once into a
`TimeRange`, one of four explicit shapes:

- Unbounded: no bounds at all
- StartOnly: events at or after `start`
- EndOnly: events at or before `end`
- Bounded: events between `start` and `end`, both inclusive

Ordering is not validated. A range with start > end is passed to the store
as-is and simply matches nothing.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from sqlalchemy import ColumnElement


# =============================================================================
# TIME RANGE
# =============================================================================

# Timestamps are stored as 64-bit integers; anything outside is bad input.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Unbounded:
    """No time restriction."""


@dataclass(frozen=True)
class StartOnly:
    start: int


@dataclass(frozen=True)
class EndOnly:
    end: int


@dataclass(frozen=True)
class Bounded:
    start: int
    end: int


TimeRange = Union[Unbounded, StartOnly, EndOnly, Bounded]


def resolve_time_range(start: Optional[int] = None, end: Optional[int] = None) -> TimeRange:
    """
    Resolve an optional start/end pair into its canonical shape.

    Args:
        start: Lower bound in epoch seconds, or None
        end: Upper bound in epoch seconds, or None

    Returns:
        Exactly one of Unbounded, StartOnly, EndOnly or Bounded
    """
    if start is not None and end is not None:
        return Bounded(start=start, end=end)
    if start is not None:
        return StartOnly(start=start)
    if end is not None:
        return EndOnly(end=end)
    return Unbounded()


def time_range_conditions(column: Any, time_range: TimeRange) -> list[ColumnElement[bool]]:
    """
    Translate a TimeRange into WHERE clauses on `column`.

    Returns an empty list for Unbounded, so callers can always
    `.where(*conditions)`.
    """
    if isinstance(time_range, Bounded):
        return [column >= time_range.start, column <= time_range.end]
    if isinstance(time_range, StartOnly):
        return [column >= time_range.start]
    if isinstance(time_range, EndOnly):
        return [column <= time_range.end]
    if isinstance(time_range, Unbounded):
        return []
    raise TypeError(f"Unsupported time range: {time_range!r}")


# =============================================================================
# SEVERITY
# =============================================================================

SEVERITY_ORDINALS: dict[str, int] = {
    "critical": 2,
    "warning": 1,
    "OK": 0,
    "undefined": -1,
}


def resolve_severity(label: str) -> Union[int, str]:
    """
    Map a severity label to its ordinal.

    Labels are case-sensitive. Anything that isn't one of the four known
    labels is returned unchanged, so the store can still match raw values.
    """
    return SEVERITY_ORDINALS.get(label, label)
