"""Tests for iCalendar export."""

from datetime import date

import pytest

from src.schedule_grid.ical import build_calendar, export_ical, next_weekday

# A Monday
REFERENCE = date(2026, 10, 19)


def test_next_weekday():
    assert next_weekday("monday", REFERENCE) == REFERENCE
    assert next_weekday("thursday", REFERENCE) == date(2026, 10, 22)
    assert next_weekday("sunday", date(2026, 10, 20)) == date(2026, 10, 25)


def test_one_event_per_meeting_day(schedule_records):
    calendar = build_calendar(schedule_records[:1], reference=REFERENCE)
    events = sorted(calendar.events, key=lambda e: e.begin)
    assert len(events) == 2
    assert events[0].begin.date() == REFERENCE
    assert events[1].begin.date() == date(2026, 10, 22)
    assert events[0].name == "Programming 1"
    assert events[0].location == "Room: 301"
    assert (events[0].end - events[0].begin).total_seconds() == 2 * 3600
    assert events[0].uid == "schedule-s1-monday@class-scheduling.local"
    assert "Instructor: Jane Cruz" in events[0].description
    assert "Section: A" in events[0].description


def test_export_emits_one_rrule_per_meeting_day(schedule_records):
    text = export_ical(schedule_records, reference=REFERENCE)
    assert text.count("RRULE:") == 5
    assert "RRULE:FREQ=WEEKLY;BYDAY=MO;COUNT=52" in text
    assert "RRULE:FREQ=WEEKLY;BYDAY=WE;COUNT=52" in text
    assert "BYDAY=SA" not in text


def test_weeks_sets_recurrence_count(schedule_records):
    text = export_ical(schedule_records[2:], reference=REFERENCE, weeks=18)
    assert "RRULE:FREQ=WEEKLY;BYDAY=WE;COUNT=18" in text


def test_entries_without_days_or_times_are_skipped(schedule_records):
    records = [{"day": "TBA", "time": "8:00 AM - 9:00 AM"}, {"day": "Monday", "time": "?"}]
    calendar = build_calendar([*records, schedule_records[2]], reference=REFERENCE)
    assert len(calendar.events) == 1


def test_export_nothing_raises():
    with pytest.raises(ValueError, match="No schedules to export"):
        export_ical([{"day": "TBA", "time": "8:00 AM - 9:00 AM"}])
    with pytest.raises(ValueError):
        export_ical([])


def test_calendar_name(schedule_records):
    text = export_ical(schedule_records[:1], reference=REFERENCE, calendar_name="BSIT 1-A")
    assert "X-WR-CALNAME:BSIT 1-A" in text
