"""Display time slot generation.

Slots are generated as "<start> - <end>" label strings in the configured
display format. The label is also the form that gets re-parsed into minute
offsets, so formatting and parsing must stay exact inverses.
"""

from typing import Iterable

from src.schedule_grid.config import MeridiemPolicy, SlotConfig, TimeDisplayFormat
from src.schedule_grid.models import TimeSlot
from src.schedule_grid.timeparse import (
    MINUTES_PER_DAY,
    RANGE_SEPARATOR,
    format_time_range,
    parse_clock_time,
)


def generate_time_slots(
    start_hour: int = 7,
    end_hour: int = 21,
    slot_duration_minutes: int = 30,
    fmt: TimeDisplayFormat = "12hour",
) -> list[str]:
    """Generate slot labels from start_hour (inclusive) to end_hour (exclusive).

    Example:
        >>> generate_time_slots(7, 8, 30)
        ['7:00 AM - 7:30 AM', '7:30 AM - 8:00 AM']
    """
    if slot_duration_minutes <= 0:
        raise ValueError(f"slot_duration_minutes must be positive, got {slot_duration_minutes}")
    return [
        format_time_range(minutes, minutes + slot_duration_minutes, fmt)
        for minutes in range(start_hour * 60, end_hour * 60, slot_duration_minutes)
    ]


def _parse_slot_bound(text: str, meridiem_policy: MeridiemPolicy) -> int | None:
    # "24:00" only ever appears as the end of the last slot of a day
    if text == "24:00":
        return MINUTES_PER_DAY
    return parse_clock_time(text, meridiem_policy=meridiem_policy)


def parse_time_slots(
    labels: Iterable[str], *, meridiem_policy: MeridiemPolicy = "24hour"
) -> list[TimeSlot]:
    """Parse slot labels into TimeSlot objects, keeping their order.

    A slot ending at midnight ("11:30 PM - 12:00 AM") ends at minute 1440.
    Labels that do not parse are skipped; indices stay contiguous.
    """
    slots: list[TimeSlot] = []
    for label in labels:
        parts = label.split(RANGE_SEPARATOR) if isinstance(label, str) else []
        if len(parts) != 2:
            continue
        start = _parse_slot_bound(parts[0].strip(), meridiem_policy)
        end = _parse_slot_bound(parts[1].strip(), meridiem_policy)
        if start is None or end is None:
            continue
        if end <= start:
            end += MINUTES_PER_DAY
        slots.append(
            TimeSlot(index=len(slots), start_minutes=start, end_minutes=end, label=label)
        )
    return slots


def build_time_slots(config: SlotConfig) -> list[TimeSlot]:
    """Generate and parse the slots for one grid view configuration."""
    labels = generate_time_slots(
        config.start_hour,
        config.end_hour,
        config.slot_duration_minutes,
        config.time_display_format,
    )
    return parse_time_slots(labels)
