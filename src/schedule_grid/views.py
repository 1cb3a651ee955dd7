"""Alternate schedule renderers: list, table and cards grouped by day.

These views do not quantize onto slots. They group normalized entries by
weekday, sort by start time and produce one row per entry. Text formatting
for the CLI (grid and table) lives here as well.
"""

from typing import Iterable, Sequence

from src.schedule_grid.config import TimeDisplayFormat
from src.schedule_grid.days import WEEKDAYS, canonical_day, display_day
from src.schedule_grid.models import NormalizedSchedule, ScheduleGrid
from src.schedule_grid.timeparse import format_time_range

_MISSING = "-"


def group_by_day(
    entries: Iterable[NormalizedSchedule], days: Sequence[str] = WEEKDAYS
) -> dict[str, list[NormalizedSchedule]]:
    """Group entries by canonical day, each day sorted by start time.

    Multi-day entries appear under every day they meet. The sort is stable,
    so entries starting at the same time keep their input order.
    """
    day_keys = [canonical_day(day) or day.lower() for day in days]
    grouped: dict[str, list[NormalizedSchedule]] = {day: [] for day in day_keys}
    for entry in entries:
        for day in day_keys:
            if entry.meets_on(day):
                grouped[day].append(entry)
    for day_entries in grouped.values():
        day_entries.sort(key=lambda e: e.start_minutes)
    return grouped


def _row(entry: NormalizedSchedule, fmt: TimeDisplayFormat) -> dict[str, str]:
    e = entry.entry
    return {
        "time": format_time_range(entry.start_minutes, entry.end_minutes, fmt),
        "subject": e.subject or _MISSING,
        "instructor": e.instructor or _MISSING,
        "room": e.room or _MISSING,
        "section": e.section or _MISSING,
    }


def table_rows(
    entries: Iterable[NormalizedSchedule],
    *,
    days: Sequence[str] = WEEKDAYS,
    fmt: TimeDisplayFormat = "12hour",
) -> list[dict[str, str]]:
    """One row per (day, entry), days in week order, with a Day column."""
    rows = []
    for day, day_entries in group_by_day(entries, days).items():
        for entry in day_entries:
            rows.append({"day": display_day(day), **_row(entry, fmt)})
    return rows


def list_rows(
    entries: Iterable[NormalizedSchedule], *, fmt: TimeDisplayFormat = "12hour"
) -> list[dict[str, str]]:
    """Flat list sorted by start time, one row per entry regardless of days."""
    ordered = sorted(entries, key=lambda e: e.start_minutes)
    return [{**_row(entry, fmt), "day": entry.entry.day or _MISSING} for entry in ordered]


def card_rows(
    entries: Iterable[NormalizedSchedule],
    *,
    days: Sequence[str] = WEEKDAYS,
    fmt: TimeDisplayFormat = "12hour",
) -> dict[str, list[dict[str, str]]]:
    """Cards grouped under display day names; days without classes are omitted."""
    cards: dict[str, list[dict[str, str]]] = {}
    for day, day_entries in group_by_day(entries, days).items():
        if day_entries:
            cards[display_day(day)] = [_row(entry, fmt) for entry in day_entries]
    return cards


def format_table(rows: list[dict[str, str]], headers: Sequence[str]) -> str:
    """Format rows as a fixed-width text table.

    Headers are row keys; the column title is the capitalized key.
    """
    if not rows:
        return "(no classes scheduled)"

    titles = [h.capitalize() for h in headers]
    widths = [len(t) for t in titles]
    for row in rows:
        for i, key in enumerate(headers):
            widths[i] = max(widths[i], len(row.get(key, "")))

    header_line = " | ".join(t.ljust(widths[i]) for i, t in enumerate(titles))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(row.get(key, "").ljust(widths[i]) for i, key in enumerate(headers))
        for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])


def format_grid(grid: ScheduleGrid, *, cell_width: int = 18) -> str:
    """Render a ScheduleGrid as text, one column per day.

    Block starts show the subject (and span when longer than one slot),
    covered cells show a continuation mark, empty cells are blank.
    """
    time_width = max([len("Time")] + [len(slot.label) for slot in grid.slots])
    header = " | ".join(
        ["Time".ljust(time_width)] + [display_day(d).ljust(cell_width) for d in grid.days]
    )
    separator = "-+-".join(["-" * time_width] + ["-" * cell_width for _ in grid.days])
    lines = [header, separator]

    for slot in grid.slots:
        parts = [slot.label.ljust(time_width)]
        for day in grid.days:
            cell = grid.cell(day, slot.index)
            if cell.kind == "block_start":
                text = cell.entry.subject or "Class"
                if cell.span > 1:
                    text = f"{text} (x{cell.span})"
            elif cell.kind == "covered":
                text = "  |"
            else:
                text = ""
            parts.append(text[:cell_width].ljust(cell_width))
        lines.append(" | ".join(parts))
    return "\n".join(lines)
