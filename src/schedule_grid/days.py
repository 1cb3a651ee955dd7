"""Weekday token normalization.

Schedule day descriptors combine several weekdays in one string
("Monday/Thursday", "Mon/Wed", "Tuesday, Friday"). They are reduced to a set
of canonical lowercase weekday names, which is the key used for grouping and
grid matching.
"""

import re

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Teaching week shown on grids and workload reports
TEACHING_DAYS: tuple[str, ...] = WEEKDAYS[:6]

_DAY_ALIASES: dict[str, str] = {
    "mon": "monday",
    "tue": "tuesday",
    "tues": "tuesday",
    "wed": "wednesday",
    "weds": "wednesday",
    "thu": "thursday",
    "thur": "thursday",
    "thurs": "thursday",
    "fri": "friday",
    "sat": "saturday",
    "sun": "sunday",
    **{day: day for day in WEEKDAYS},
}

_SPLIT_RE = re.compile(r"[^A-Za-z]+")


def normalize_day_tokens(text: object) -> frozenset[str]:
    """Expand a day descriptor into canonical weekday names.

    Splits on any non-letter character and maps each token through the alias
    table, ignoring case. Unknown tokens are dropped, so a descriptor with no
    recognised day yields an empty set.

    Examples:
        >>> sorted(normalize_day_tokens("Mon/Wed"))
        ['monday', 'wednesday']
        >>> normalize_day_tokens("xyz")
        frozenset()
    """
    if not isinstance(text, str):
        return frozenset()
    days = set()
    for token in _SPLIT_RE.split(text):
        day = _DAY_ALIASES.get(token.lower())
        if day is not None:
            days.add(day)
    return frozenset(days)


def canonical_day(text: str) -> str | None:
    """Canonical name for a single day token, or None if unrecognised."""
    return _DAY_ALIASES.get(text.strip().lower())


def display_day(day: str) -> str:
    """'monday' -> 'Monday'."""
    return day.capitalize()
