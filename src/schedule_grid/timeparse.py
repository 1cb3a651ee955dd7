"""Clock time and time range parsing.

Schedule times are free text ("8:00 AM - 10:00 AM", "8:00am", "08:00").
Everything here works in integer minutes from midnight and returns None
instead of raising when input cannot be parsed.
"""

import re

from src.schedule_grid.config import MeridiemPolicy, TimeDisplayFormat

RANGE_SEPARATOR = " - "

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])?$")


def parse_clock_time(
    text: object, *, meridiem_policy: MeridiemPolicy = "24hour"
) -> int | None:
    """Parse a clock time into minutes since midnight.

    Accepts H:MM or HH:MM with an optional AM/PM marker (any case, with or
    without a space before it). Without a marker the hour is read as 24-hour
    time, unless meridiem_policy is "strict", in which case it is rejected.

    Returns:
        Minutes in [0, 1439], or None if the text is not a valid time.
    """
    if not isinstance(text, str):
        return None
    match = _CLOCK_RE.match(text.strip())
    if match is None:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3)

    if minute > 59:
        return None

    if meridiem is None:
        if meridiem_policy == "strict" or hour > 23:
            return None
    else:
        if not 1 <= hour <= 12:
            return None
        meridiem = meridiem.upper()
        if meridiem == "AM" and hour == 12:
            hour = 0
        elif meridiem == "PM" and hour != 12:
            hour += 12

    return hour * 60 + minute


def parse_time_range(
    text: object, *, meridiem_policy: MeridiemPolicy = "24hour"
) -> tuple[int, int] | None:
    """Parse "<start> - <end>" into (start_minutes, end_minutes).

    Does not check that end is after start; callers decide what to do with
    inverted or empty ranges.
    """
    if not isinstance(text, str):
        return None
    parts = text.split(RANGE_SEPARATOR)
    if len(parts) != 2:
        return None
    start = parse_clock_time(parts[0].strip(), meridiem_policy=meridiem_policy)
    end = parse_clock_time(parts[1].strip(), meridiem_policy=meridiem_policy)
    if start is None or end is None:
        return None
    return start, end


def minutes_to_time_string(minutes: int, fmt: TimeDisplayFormat = "12hour") -> str:
    """Format minutes since midnight as "8:00 AM" (12hour) or "08:00" (24hour).

    Minute 1440 (the end of the last slot of a day) formats as "12:00 AM"
    or "24:00".
    """
    hours, mins = divmod(minutes, 60)
    if fmt == "24hour":
        return f"{hours:02d}:{mins:02d}"
    hours %= 24
    display_hour = 12 if hours % 12 == 0 else hours % 12
    meridiem = "PM" if hours >= 12 else "AM"
    return f"{display_hour}:{mins:02d} {meridiem}"


def format_time_range(start: int, end: int, fmt: TimeDisplayFormat = "12hour") -> str:
    return f"{minutes_to_time_string(start, fmt)}{RANGE_SEPARATOR}{minutes_to_time_string(end, fmt)}"


def standardize_time(
    text: str | None,
    fmt: TimeDisplayFormat = "12hour",
    *,
    meridiem_policy: MeridiemPolicy = "24hour",
) -> str:
    """Reformat a time or range string into the target display format.

    Ranges are reformatted on both ends. Text that does not parse is
    returned unchanged.
    """
    if not text:
        return ""
    parsed = parse_time_range(text, meridiem_policy=meridiem_policy)
    if parsed is not None:
        return format_time_range(parsed[0], parsed[1], fmt)
    minutes = parse_clock_time(text, meridiem_policy=meridiem_policy)
    if minutes is None:
        return text
    return minutes_to_time_string(minutes, fmt)


def ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """True if [start1, end1) and [start2, end2) share any time."""
    return start1 < end2 and start2 < end1
