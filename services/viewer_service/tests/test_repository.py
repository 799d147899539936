"""
Tests for EventRepository against the seeded in-memory database.

These verify:
1. Time ranges are inclusive on both ends
2. Counts agree with the matching list queries
3. Store failures and timeouts surface as StoreError
"""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from eventviewer.core.errors import StoreError, StoreTimeoutError
from eventviewer.filters import Bounded, EndOnly, StartOnly, Unbounded
from eventviewer.repository import EventRepository

from conftest import DAY, JAN_1, SEED_EVENTS


@pytest.fixture
def repo(db_session):
    return EventRepository(db_session)


# =============================================================================
# EVENT LISTS
# =============================================================================


class TestFindEvents:

    async def test_find_all(self, repo):
        events = await repo.find_all()
        assert [e.id for e in events] == [1, 2, 3, 4, 5]

    async def test_unbounded_matches_find_all(self, repo):
        assert await repo.find_events_in_range(Unbounded()) == await repo.find_all()

    async def test_bounds_are_inclusive(self, repo):
        events = await repo.find_events_in_range(Bounded(start=JAN_1, end=JAN_1 + DAY))
        assert [e.id for e in events] == [1, 2, 3]

    async def test_start_only(self, repo):
        events = await repo.find_events_in_range(StartOnly(start=JAN_1 + DAY))
        assert [e.id for e in events] == [3, 4, 5]

    async def test_end_only(self, repo):
        events = await repo.find_events_in_range(EndOnly(end=JAN_1 + 60))
        assert [e.id for e in events] == [1, 2]

    async def test_start_after_end_is_empty(self, repo):
        events = await repo.find_events_in_range(Bounded(start=JAN_1 + DAY, end=JAN_1))
        assert list(events) == []

    async def test_by_entity(self, repo):
        events = await repo.find_events_in_range_by_entity("w1", "g1", "s1", Unbounded())
        assert [e.id for e in events] == [1]

    async def test_by_entity_in_range(self, repo):
        events = await repo.find_events_in_range_by_entity(
            "w1", "g1", "s1", StartOnly(start=JAN_1 + 1)
        )
        assert list(events) == []

    async def test_by_entity_requires_full_match(self, repo):
        """s1 exists under g2 too, but only w1/g2/s1 should match."""
        events = await repo.find_events_in_range_by_entity("w1", "g2", "s1", Unbounded())
        assert [e.id for e in events] == [3]


# =============================================================================
# COUNTS
# =============================================================================


class TestCounts:

    @pytest.mark.parametrize(
        "time_range",
        [
            Unbounded(),
            StartOnly(start=JAN_1 + DAY),
            EndOnly(end=JAN_1 + 60),
            Bounded(start=JAN_1, end=JAN_1 + DAY),
            Bounded(start=JAN_1 + DAY, end=JAN_1),
        ],
    )
    async def test_count_matches_list(self, repo, time_range):
        """A count always equals the length of the corresponding list."""
        events = await repo.find_events_in_range(time_range)
        assert await repo.count_events(time_range) == len(events)

    async def test_count_by_severity(self, repo):
        assert await repo.count_events_by_severity(Unbounded(), 2) == 2
        assert await repo.count_events_by_severity(Unbounded(), 1) == 1
        assert await repo.count_events_by_severity(Unbounded(), 0) == 1
        assert await repo.count_events_by_severity(Unbounded(), -1) == 1

    async def test_count_by_severity_in_range(self, repo):
        assert await repo.count_events_by_severity(StartOnly(start=JAN_1 + 1), 2) == 1

    async def test_count_by_numeric_string_severity(self, repo):
        assert await repo.count_events_by_severity(Unbounded(), "2") == 2

    @pytest.mark.parametrize("label", [" 2", "2 ", "1_0", "\uff12", "+2", "2.0", "9" * 30])
    async def test_count_by_non_plain_integer_label(self, repo, label):
        """Only short ASCII integers are read as ordinals; other labels match as text."""
        assert await repo.count_events_by_severity(Unbounded(), label) == 0

    async def test_count_by_negative_numeric_string_severity(self, repo):
        assert await repo.count_events_by_severity(Unbounded(), "-1") == 1

    async def test_count_by_unknown_severity(self, repo):
        """Unknown labels are compared as text and match nothing here."""
        assert await repo.count_events_by_severity(Unbounded(), "bogus") == 0

    async def test_distinct_entities(self, repo):
        # NULL ids (event 5) are not counted
        assert await repo.count_distinct_widgets(Unbounded()) == 2
        assert await repo.count_distinct_gadgets(Unbounded()) == 3
        assert await repo.count_distinct_samplers(Unbounded()) == 3

    async def test_distinct_entities_in_range(self, repo):
        time_range = EndOnly(end=JAN_1 + 60)
        assert await repo.count_distinct_widgets(time_range) == 1
        assert await repo.count_distinct_gadgets(time_range) == 1
        assert await repo.count_distinct_samplers(time_range) == 2

    async def test_empty_database(self, empty_session):
        repo = EventRepository(empty_session)
        assert await repo.count_events(Unbounded()) == 0
        assert await repo.count_distinct_widgets(Unbounded()) == 0
        assert list(await repo.find_all()) == []
        assert await repo.all_timestamps() == []


class TestTimestamps:

    async def test_all_timestamps(self, repo):
        timestamps = await repo.all_timestamps()
        assert sorted(timestamps) == sorted(e["timestamp"] for e in SEED_EVENTS)


# =============================================================================
# FAILURES
# =============================================================================


class SlowSession:
    async def execute(self, query):
        await asyncio.sleep(5)


class BrokenSession:
    async def execute(self, query):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestFailures:

    async def test_timeout(self):
        repo = EventRepository(SlowSession(), timeout=0.01)

        with pytest.raises(StoreTimeoutError) as exc_info:
            await repo.count_events(Unbounded())

        assert exc_info.value.operation == "count_events"
        assert isinstance(exc_info.value, StoreError)

    async def test_database_error_is_wrapped(self):
        repo = EventRepository(BrokenSession())

        with pytest.raises(StoreError) as exc_info:
            await repo.find_all()

        assert "find_all" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_zero_timeout_disables_it(self, db_session):
        repo = EventRepository(db_session, timeout=0)
        assert await repo.count_events(Unbounded()) == len(SEED_EVENTS)
