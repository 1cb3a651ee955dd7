"""Turn raw schedule records into NormalizedSchedule views.

The data source may hand back malformed records (missing day or time,
unparseable ranges, wrong types). Each bad record is skipped and logged at
debug level; the rest of the batch is still normalized.
"""

from typing import Any, Iterable

from pydantic import ValidationError

from src.schedule_grid.config import MeridiemPolicy
from src.schedule_grid.days import normalize_day_tokens
from src.schedule_grid.logging import get_logger
from src.schedule_grid.models import NormalizedSchedule, ScheduleEntry
from src.schedule_grid.timeparse import parse_time_range

log = get_logger(__name__)


def coerce_entry(record: Any) -> ScheduleEntry | None:
    """Validate a record into a ScheduleEntry, or None if it cannot be."""
    if isinstance(record, ScheduleEntry):
        return record
    if isinstance(record, NormalizedSchedule):
        return record.entry
    if not isinstance(record, dict):
        log.debug("schedule_skipped", reason="not_a_mapping", type=type(record).__name__)
        return None
    try:
        return ScheduleEntry.model_validate(record)
    except ValidationError as e:
        log.debug("schedule_skipped", reason="invalid_record", errors=e.error_count())
        return None


def normalize_entry(
    entry: ScheduleEntry, *, meridiem_policy: MeridiemPolicy = "24hour"
) -> NormalizedSchedule | None:
    """Parse an entry's day descriptor and time range.

    Returns None when the time range does not parse or does not run forwards.
    An entry with no recognised days is kept (it simply never matches a day).
    """
    parsed = parse_time_range(entry.time, meridiem_policy=meridiem_policy)
    if parsed is None:
        log.debug("schedule_skipped", reason="unparseable_time", id=entry.id, time=entry.time)
        return None
    start, end = parsed
    if start >= end:
        log.debug("schedule_skipped", reason="inverted_time", id=entry.id, time=entry.time)
        return None
    return NormalizedSchedule(
        entry=entry,
        days=normalize_day_tokens(entry.day),
        start_minutes=start,
        end_minutes=end,
    )


def normalize_entries(
    records: Iterable[Any], *, meridiem_policy: MeridiemPolicy = "24hour"
) -> list[NormalizedSchedule]:
    """Normalize a batch of records, keeping input order and skipping bad ones.

    Records that are already NormalizedSchedule pass through untouched.
    """
    normalized: list[NormalizedSchedule] = []
    for record in records:
        if isinstance(record, NormalizedSchedule):
            normalized.append(record)
            continue
        entry = coerce_entry(record)
        if entry is None:
            continue
        result = normalize_entry(entry, meridiem_policy=meridiem_policy)
        if result is not None:
            normalized.append(result)
    return normalized
