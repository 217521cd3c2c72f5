"""Daily Usage Tracker: quota counting against pluggable storage.

Tests:
    - Counts within a day, resets on a new day
    - Never writes past the limit
    - Missing, unavailable, corrupt or raising storage degrades to "allowed"
"""

import json

import pytest

from knowyouremoji.core.usage_tracker import STORAGE_KEY, DailyUsageTracker

from tests.services.fake_stores import MemoryStorage


class _Clock:
    def __init__(self, day="2026-03-01"):
        self.day = day

    def __call__(self):
        return self.day


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def clock():
    return _Clock()


def test_fresh_tracker_allows_full_quota(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=3, today=clock)
    assert tracker.used_count() == 0
    assert tracker.remaining_uses() == 3
    assert tracker.can_use() is True


def test_record_use_counts_down_and_persists_shape(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=3, today=clock)
    assert tracker.record_use() == 2
    assert tracker.record_use() == 1
    assert json.loads(storage.items[STORAGE_KEY]) == {"count": 2, "date": "2026-03-01"}


def test_limit_reached_does_not_write(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=2, today=clock)
    tracker.record_use()
    tracker.record_use()
    before = storage.items[STORAGE_KEY]
    assert tracker.can_use() is False
    assert tracker.record_use() == 0
    assert storage.items[STORAGE_KEY] == before


def test_new_day_resets_count(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=1, today=clock)
    tracker.record_use()
    assert tracker.can_use() is False
    clock.day = "2026-03-02"
    assert tracker.used_count() == 0
    assert tracker.record_use() == 0
    assert json.loads(storage.items[STORAGE_KEY])["date"] == "2026-03-02"


def test_reset_clears_state(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=1, today=clock)
    tracker.record_use()
    tracker.reset()
    assert STORAGE_KEY not in storage.items
    assert tracker.can_use() is True


def test_zero_and_negative_limits(storage, clock):
    assert DailyUsageTracker(storage, max_uses=0, today=clock).can_use() is False
    tracker = DailyUsageTracker(storage, max_uses=-5, today=clock)
    assert tracker.max_uses == 0
    assert tracker.remaining_uses() == 0


@pytest.mark.parametrize("raw", [
    "not json",
    json.dumps([1, 2]),
    json.dumps({"count": "two", "date": "2026-03-01"}),
    json.dumps({"count": 1}),
    json.dumps({"count": True, "date": "2026-03-01"}),
])
def test_corrupt_data_counts_as_unused(storage, clock, raw):
    storage.items[STORAGE_KEY] = raw
    tracker = DailyUsageTracker(storage, max_uses=3, today=clock)
    assert tracker.used_count() == 0
    assert tracker.can_use() is True


def test_no_storage_allows_use():
    tracker = DailyUsageTracker(None, max_uses=3)
    assert tracker.can_use() is True
    assert tracker.record_use() == 2
    tracker.reset()


def test_unavailable_storage_allows_use_without_writing(clock):
    storage = MemoryStorage(available=False)
    tracker = DailyUsageTracker(storage, max_uses=3, today=clock)
    assert tracker.record_use() == 2
    assert storage.items == {}


def test_raising_storage_never_propagates(clock):
    tracker = DailyUsageTracker(MemoryStorage(fail=True), max_uses=3, today=clock)
    assert tracker.can_use() is True
    assert tracker.remaining_uses() == 3
    assert tracker.record_use() == 2
    tracker.reset()


def test_three_uses_then_locked_until_date_changes(storage, clock):
    tracker = DailyUsageTracker(storage, max_uses=3, today=clock)
    assert [tracker.record_use() for _ in range(3)] == [2, 1, 0]
    assert tracker.record_use() == 0
    assert tracker.used_count() == 3
    assert tracker.can_use() is False
    clock.day = "2026-03-02"
    assert tracker.can_use() is True
