"""iCalendar export of class schedules.

Each (schedule, meeting day) pair becomes one weekly recurring event, so a
"Monday/Thursday" class produces two events. Events start on the next
occurrence of their weekday on or after the reference date.
"""

from datetime import date, datetime, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from ics import Calendar, Event
from ics.grammar.parse import ContentLine

from src.schedule_grid.config import MeridiemPolicy
from src.schedule_grid.days import WEEKDAYS
from src.schedule_grid.logging import get_logger
from src.schedule_grid.models import NormalizedSchedule
from src.schedule_grid.normalize import normalize_entries

log = get_logger(__name__)

ICAL_DAYS: dict[str, str] = {
    "monday": "MO",
    "tuesday": "TU",
    "wednesday": "WE",
    "thursday": "TH",
    "friday": "FR",
    "saturday": "SA",
    "sunday": "SU",
}

UID_DOMAIN = "class-scheduling.local"


def next_weekday(day: str, from_date: date) -> date:
    """Next date falling on `day` (canonical name), from_date inclusive."""
    target = WEEKDAYS.index(day)
    return from_date + timedelta(days=(target - from_date.weekday()) % 7)


def _description(entry: NormalizedSchedule) -> str:
    e = entry.entry
    parts = [
        f"{label}: {value}"
        for label, value in (
            ("Course", e.course),
            ("Year", e.year),
            ("Section", e.section),
            ("Instructor", e.instructor),
        )
        if value
    ]
    return "\n".join(parts)


def _build_event(
    entry: NormalizedSchedule,
    day: str,
    index: int,
    *,
    reference: date,
    weeks: int,
    tz: ZoneInfo,
) -> Event:
    first = next_weekday(day, reference)
    midnight = datetime(first.year, first.month, first.day, tzinfo=tz)

    event = Event(
        name=entry.entry.subject or "Class",
        begin=midnight + timedelta(minutes=entry.start_minutes),
        end=midnight + timedelta(minutes=entry.end_minutes),
        uid=f"schedule-{entry.entry.id or index}-{day}@{UID_DOMAIN}",
    )
    description = _description(entry)
    if description:
        event.description = description
    if entry.entry.room:
        event.location = f"Room: {entry.entry.room}"
    event.extra.append(
        ContentLine(name="RRULE", value=f"FREQ=WEEKLY;BYDAY={ICAL_DAYS[day]};COUNT={weeks}")
    )
    return event


def build_calendar(
    entries: Iterable[Any],
    *,
    calendar_name: str = "Class Schedule",
    reference: date | None = None,
    weeks: int = 52,
    timezone: str = "UTC",
    meridiem_policy: MeridiemPolicy = "24hour",
) -> Calendar:
    """Build a calendar with one weekly recurring event per meeting day.

    Args:
        entries: Schedule records; unparseable ones are skipped.
        calendar_name: Shown by calendar apps as the calendar title.
        reference: Date the recurrences start from (default: today).
        weeks: Number of weekly occurrences per event.
        timezone: IANA zone the class times are expressed in.
    """
    reference = reference or date.today()
    tz = ZoneInfo(timezone)

    calendar = Calendar()
    calendar.extra.append(ContentLine(name="X-WR-CALNAME", value=calendar_name))
    for index, entry in enumerate(normalize_entries(entries, meridiem_policy=meridiem_policy)):
        if not entry.days:
            log.debug("ical_skipped", reason="no_days", id=entry.entry.id)
            continue
        for day in WEEKDAYS:
            if entry.meets_on(day):
                calendar.events.add(
                    _build_event(entry, day, index, reference=reference, weeks=weeks, tz=tz)
                )
    return calendar


def export_ical(entries: Iterable[Any], **kwargs: Any) -> str:
    """Serialize schedules to .ics text.

    Raises:
        ValueError: If no schedule could be turned into an event.
    """
    calendar = build_calendar(entries, **kwargs)
    if not calendar.events:
        raise ValueError("No schedules to export")
    log.info("ical_exported", events=len(calendar.events))
    return calendar.serialize()
