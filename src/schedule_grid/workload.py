"""Instructor workload summary: classes and teaching hours per day."""

from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from src.schedule_grid.config import MeridiemPolicy
from src.schedule_grid.days import TEACHING_DAYS, display_day
from src.schedule_grid.normalize import coerce_entry, normalize_entries


class DayLoad(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: str  # display name, e.g. "Monday"
    classes: int
    hours: float


class WorkloadSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_classes: int
    total_hours: float
    busiest_day: str  # "N/A" when nothing is scheduled
    daily_breakdown: tuple[DayLoad, ...]


def filter_by_instructor(entries: Iterable[Any], instructor: str) -> list[Any]:
    """Keep the records taught by an instructor (case-insensitive name match)."""
    wanted = instructor.strip().lower()
    kept = []
    for record in entries:
        entry = coerce_entry(record)
        if entry is not None and (entry.instructor or "").strip().lower() == wanted:
            kept.append(record)
    return kept


def summarize_workload(
    entries: Iterable[Any],
    *,
    days: Sequence[str] = TEACHING_DAYS,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> WorkloadSummary:
    """Summarize teaching load over the week.

    A class meeting on several days counts once per day it meets. Records
    whose time cannot be parsed are left out. total_classes counts distinct
    schedules, not meetings.
    """
    normalized = normalize_entries(entries, meridiem_policy=meridiem_policy)

    breakdown = []
    for day in days:
        day_entries = [e for e in normalized if e.meets_on(day)]
        minutes = sum(e.duration_minutes for e in day_entries)
        breakdown.append(
            DayLoad(day=display_day(day), classes=len(day_entries), hours=round(minutes / 60, 2))
        )

    total_hours = round(sum(d.hours for d in breakdown), 2)
    busiest = max(breakdown, key=lambda d: d.hours, default=None)
    busiest_day = busiest.day if busiest is not None and busiest.hours > 0 else "N/A"

    return WorkloadSummary(
        total_classes=len(normalized),
        total_hours=total_hours,
        busiest_day=busiest_day,
        daily_breakdown=tuple(breakdown),
    )
