"""Schedule conflict checks.

A prospective schedule conflicts with an existing one when both belong to
the same section, room or instructor, meet on at least one common day and
their time ranges overlap. These checks run before a schedule is created or
updated; the grid itself never resolves conflicts.
"""

from itertools import combinations
from typing import Any, Iterable, Literal, Sequence

from pydantic import BaseModel, ConfigDict

from src.schedule_grid.config import MeridiemPolicy
from src.schedule_grid.days import WEEKDAYS
from src.schedule_grid.models import NormalizedSchedule, ScheduleEntry
from src.schedule_grid.normalize import coerce_entry, normalize_entries, normalize_entry
from src.schedule_grid.timeparse import ranges_overlap

ConflictScope = Literal["section", "room", "instructor"]

DEFAULT_SCOPES: tuple[ConflictScope, ...] = ("section", "room", "instructor")


class Conflict(BaseModel):
    """Two schedules that cannot both happen."""

    model_config = ConfigDict(frozen=True)

    scope: ConflictScope | None  # None when reported regardless of scope
    day: str
    entry: ScheduleEntry
    other: ScheduleEntry


def _same(value: str | None, other: str | None) -> bool:
    if not value or not other:
        return False
    return value.strip().lower() == other.strip().lower()


def _shared_days(a: NormalizedSchedule, b: NormalizedSchedule) -> list[str]:
    return [day for day in WEEKDAYS if day in a.days and day in b.days]


def _overlap(a: NormalizedSchedule, b: NormalizedSchedule) -> bool:
    return ranges_overlap(a.start_minutes, a.end_minutes, b.start_minutes, b.end_minutes)


def find_conflicts(
    candidate: Any,
    existing: Iterable[Any],
    *,
    scopes: Sequence[ConflictScope] = DEFAULT_SCOPES,
    exclude_id: str | None = None,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> list[Conflict]:
    """Find existing schedules that clash with a candidate.

    Args:
        candidate: Record or ScheduleEntry about to be created or updated.
        existing: Current schedules.
        scopes: Fields that make two schedules compete for the same resource.
        exclude_id: Id to ignore (the schedule being updated).

    Returns:
        One Conflict per (existing entry, first matching scope, first shared day).
        An unparseable candidate has no conflicts.
    """
    entry = coerce_entry(candidate)
    if entry is None:
        return []
    new = normalize_entry(entry, meridiem_policy=meridiem_policy)
    if new is None:
        return []

    conflicts: list[Conflict] = []
    for other in normalize_entries(existing, meridiem_policy=meridiem_policy):
        if exclude_id is not None and other.entry.id == exclude_id:
            continue
        scope = next(
            (s for s in scopes if _same(getattr(new.entry, s), getattr(other.entry, s))),
            None,
        )
        if scope is None:
            continue
        days = _shared_days(new, other)
        if not days or not _overlap(new, other):
            continue
        conflicts.append(Conflict(scope=scope, day=days[0], entry=new.entry, other=other.entry))
    return conflicts


def find_overlaps(
    entries: Iterable[Any],
    *,
    scopes: Sequence[ConflictScope] | None = None,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> list[Conflict]:
    """Report every pair of entries that overlap on a shared day.

    With scopes=None any two overlapping entries are reported, which is what
    a single grid view (one section, one room) cares about: the later entry
    of each pair is hidden wherever the earlier one already claims a slot.
    """
    normalized = normalize_entries(entries, meridiem_policy=meridiem_policy)
    overlaps: list[Conflict] = []
    for a, b in combinations(normalized, 2):
        if not _overlap(a, b):
            continue
        scope: ConflictScope | None = None
        if scopes is not None:
            scope = next(
                (s for s in scopes if _same(getattr(a.entry, s), getattr(b.entry, s))),
                None,
            )
            if scope is None:
                continue
        for day in _shared_days(a, b):
            overlaps.append(Conflict(scope=scope, day=day, entry=a.entry, other=b.entry))
    return overlaps
