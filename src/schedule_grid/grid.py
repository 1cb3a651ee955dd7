"""Schedule grid reconciliation.

Maps schedule entries onto a fixed grid of time slots and decides, for every
(day, slot) cell, whether it is empty, starts a block spanning N slots, or is
covered by a block that started earlier.

Matching uses containment, not overlap: a slot belongs to a class only if the
class period wholly encloses it. A class must also start on a slot boundary:
one whose first enclosed slot begins after the class start (e.g. 7:15 AM on
a half-hour grid) is not aligned and does not appear on the grid at all.

When two entries on the same day claim the same slot, the one earlier in
input order wins and the other is hidden for that slot. There is no conflict
resolution here; see conflicts.find_overlaps() to report such cases.
"""

from typing import Any, Iterable, Sequence

from src.schedule_grid.config import MeridiemPolicy
from src.schedule_grid.days import canonical_day
from src.schedule_grid.logging import get_logger
from src.schedule_grid.models import (
    NormalizedSchedule,
    RenderCell,
    ScheduleGrid,
    TimeSlot,
)
from src.schedule_grid.normalize import normalize_entries
from src.schedule_grid.slots import parse_time_slots

log = get_logger(__name__)


def _coerce_slots(slots: Sequence[TimeSlot | str]) -> list[TimeSlot]:
    """Slots renumbered by position, so cell i is always slots[i].

    Labels are generated by slots.generate_time_slots, so they are parsed
    with the lenient policy whatever policy applies to schedule data.
    """
    parsed: list[TimeSlot] = []
    for slot in slots:
        if isinstance(slot, TimeSlot):
            parsed.append(slot)
        else:
            parsed.extend(parse_time_slots([slot], meridiem_policy="24hour"))
    return [
        slot if slot.index == i else slot.model_copy(update={"index": i})
        for i, slot in enumerate(parsed)
    ]


def _day_key(day: str) -> str:
    return canonical_day(day) or day.strip().lower()


def _first_matching_slot(entry: NormalizedSchedule, slots: list[TimeSlot]) -> int | None:
    for i, slot in enumerate(slots):
        if entry.contains(slot.start_minutes, slot.end_minutes):
            return i
    return None


def _is_aligned(entry: NormalizedSchedule, slots: list[TimeSlot]) -> bool:
    first = _first_matching_slot(entry, slots)
    return first is not None and slots[first].start_minutes == entry.start_minutes


def _span_from(entry: NormalizedSchedule, slots: list[TimeSlot], start: int) -> int:
    span = 0
    for slot in slots[start:]:
        if not entry.contains(slot.start_minutes, slot.end_minutes):
            break
        span += 1
    return span


def _reconcile_day(
    day: str, slots: list[TimeSlot], entries: list[NormalizedSchedule]
) -> tuple[RenderCell, ...]:
    day_entries = [e for e in entries if e.meets_on(day) and _is_aligned(e, slots)]
    covered: set[int] = set()
    cells: list[RenderCell] = []

    for i, slot in enumerate(slots):
        if i in covered:
            cells.append(RenderCell.covered())
            continue

        match = next(
            (e for e in day_entries if e.contains(slot.start_minutes, slot.end_minutes)),
            None,
        )
        if match is None:
            cells.append(RenderCell.empty())
            continue

        # Only the entry's first matching slot starts a block, whatever the scan order
        if _first_matching_slot(match, slots) != i:
            cells.append(RenderCell.covered())
            continue

        span = _span_from(match, slots, i)
        covered.update(range(i + 1, i + span))
        cells.append(RenderCell.block_start(match.entry, span))

    return tuple(cells)


def reconcile(
    slots: Sequence[TimeSlot | str],
    entries: Iterable[Any],
    days: Iterable[str],
    *,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> ScheduleGrid:
    """Build the rendering plan for a grid of days x slots.

    Args:
        slots: Ordered TimeSlot objects or "<start> - <end>" slot labels.
        entries: Raw records, ScheduleEntry or NormalizedSchedule objects.
            Records that cannot be parsed are left off the grid.
        days: Day columns to build ("Monday", "mon", ...).
        meridiem_policy: How entry times without AM/PM are read. Slot labels
            are always parsed leniently.

    Returns:
        ScheduleGrid with one tuple of RenderCell per day, in slot order.
    """
    grid_slots = _coerce_slots(slots)
    normalized = normalize_entries(entries, meridiem_policy=meridiem_policy)

    day_keys: list[str] = []
    for day in days:
        key = _day_key(day)
        if key not in day_keys:
            day_keys.append(key)

    cells = {day: _reconcile_day(day, grid_slots, normalized) for day in day_keys}

    log.debug(
        "grid_reconciled",
        slots=len(grid_slots),
        days=len(day_keys),
        entries=len(normalized),
    )
    return ScheduleGrid(slots=tuple(grid_slots), days=tuple(day_keys), cells=cells)


def reconcile_by(
    slots: Sequence[TimeSlot | str],
    entries: Iterable[Any],
    days: Iterable[str],
    key: str,
    columns: Iterable[str],
    *,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> dict[str, ScheduleGrid]:
    """Build one grid per column value of an entry field.

    Used for the section-column calendar (key="section") and the room
    schedule (key="room"): each column only sees the entries whose field
    equals the column value.
    """
    normalized = normalize_entries(entries, meridiem_policy=meridiem_policy)
    grid_slots = _coerce_slots(slots)
    day_list = list(days)

    grids: dict[str, ScheduleGrid] = {}
    for column in columns:
        wanted = column.strip()
        column_entries = [
            entry
            for entry in normalized
            if (getattr(entry.entry, key, None) or "").strip() == wanted
        ]
        grids[column] = reconcile(grid_slots, column_entries, day_list)
    return grids
