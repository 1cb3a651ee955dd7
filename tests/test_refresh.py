"""Tests for the cached query and live refresh layer."""

import pytest

from src.schedule_grid.refresh import (
    SCHEDULES_UPDATED,
    LiveSchedule,
    LocalEventBus,
    ScheduleQuery,
    filter_key,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CountingFetch:
    def __init__(self, records):
        self.records = records
        self.calls = []

    def __call__(self, **filters):
        self.calls.append(filters)
        return list(self.records)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetch(schedule_records):
    return CountingFetch(schedule_records)


@pytest.fixture
def query(fetch, clock):
    return ScheduleQuery(fetch, stale_time=120, clock=clock)


def test_filter_key_ignores_empty_values():
    assert filter_key({"year": "1", "course": "BSIT", "room": None}) == (
        ("course", "BSIT"),
        ("year", "1"),
    )


def test_serves_cache_until_stale(query, fetch, clock):
    first = query.get(course="BSIT")
    clock.now = 119
    assert query.get(course="BSIT") is first
    assert len(fetch.calls) == 1

    clock.now = 121
    query.get(course="BSIT")
    assert len(fetch.calls) == 2


def test_cache_is_per_filter_set(query, fetch):
    query.get(course="BSIT")
    query.get(course="BSCS")
    query.get(course="BSIT", section=None)
    assert fetch.calls == [{"course": "BSIT"}, {"course": "BSCS"}]


def test_invalidate_one_filter_set(query, fetch):
    query.get(course="BSIT")
    query.get(course="BSCS")
    query.invalidate({"course": "BSIT"})
    query.get(course="BSIT")
    query.get(course="BSCS")
    assert len(fetch.calls) == 3


def test_invalidate_all(query, fetch):
    query.get(course="BSIT")
    query.get(course="BSCS")
    query.invalidate()
    query.get(course="BSIT")
    query.get(course="BSCS")
    assert len(fetch.calls) == 4


def test_fetch_superseded_by_invalidation_is_not_cached(clock, schedule_records):
    calls = []

    def fetch(**filters):
        calls.append(filters)
        if len(calls) == 1:
            # An update arrives while the first request is in flight
            query.invalidate()
        return schedule_records

    query = ScheduleQuery(fetch, stale_time=120, clock=clock)
    assert len(query.get()) == 3
    query.get()
    query.get()
    assert len(calls) == 2


def test_event_bus_publish_and_unsubscribe():
    bus = LocalEventBus()
    seen = []
    unsubscribe = bus.subscribe("ping", seen.append)
    assert bus.publish("ping", 1) == 1
    unsubscribe()
    unsubscribe()
    assert bus.publish("ping", 2) == 0
    assert seen == [1]


def test_live_schedule_invalidates_on_update(query, fetch, morning_slots):
    bus = LocalEventBus()
    live = LiveSchedule(query, bus)
    live.start()
    live.start()

    grid = live.grid(morning_slots, ["Monday"], course="BSIT")
    assert grid.column("monday")[0].kind == "block_start"
    live.grid(morning_slots, ["Monday"], course="BSIT")
    assert len(fetch.calls) == 1

    assert bus.publish(SCHEDULES_UPDATED, {"action": "update"}) == 1
    live.grid(morning_slots, ["Monday"], course="BSIT")
    assert len(fetch.calls) == 2


def test_live_schedule_stop_unsubscribes(query, fetch, morning_slots):
    bus = LocalEventBus()
    live = LiveSchedule(query, bus)
    live.start()
    assert live.running
    live.stop()
    assert not live.running

    live.grid(morning_slots, ["Monday"])
    assert bus.publish(SCHEDULES_UPDATED) == 0
    live.grid(morning_slots, ["Monday"])
    assert len(fetch.calls) == 1


def test_stale_time_defaults_to_settings(monkeypatch, fetch):
    monkeypatch.setenv("SCHEDULE_STALE_TIME_SECONDS", "5")
    assert ScheduleQuery(fetch).stale_time == 5


def test_live_schedule_strict_policy_with_24hour_labels(query):
    live = LiveSchedule(query, LocalEventBus(), meridiem_policy="strict")
    labels = ["07:00 - 07:30", "07:30 - 08:00", "08:00 - 08:30", "08:30 - 09:00"]
    grid = live.grid(labels, ["Monday"])
    assert len(grid.slots) == 4
    assert grid.column("monday")[0].kind == "block_start"
