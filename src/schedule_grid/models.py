"""Pydantic models for schedule data and grid rendering plans.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Models are frozen: a fetch result is an immutable snapshot for one render pass.
"""

from typing import Any, Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Alternate field names found in records from older endpoints and imports,
# mapped onto the canonical ScheduleEntry field.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("_id",),
    "subject": ("subjectName", "courseTitle"),
    "instructor": ("instructorName",),
    "room": ("roomName",),
    "section": ("sectionName",),
    "day": ("dayName",),
    "course": ("courseCode",),
    "units": ("creditUnits",),
}


class ScheduleEntry(BaseModel):
    """One recurring class meeting as supplied by the schedule API.

    Mirrors a Schedule document: day is a free-text day descriptor
    ("Monday/Thursday", "Mon/Wed") and time a free-text range
    ("8:00 AM - 10:00 AM"). Descriptive fields may be missing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None  # opaque identifier from the data source
    subject: str | None = None
    instructor: str | None = None
    room: str | None = None
    section: str | None = None
    course: str | None = None
    year: str | None = None
    day: str | None = None
    time: str | None = None
    units: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _fold_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        folded = dict(data)
        for field, aliases in _FIELD_ALIASES.items():
            if folded.get(field) in (None, ""):
                for alias in aliases:
                    if folded.get(alias) not in (None, ""):
                        folded[field] = folded[alias]
                        break
        if folded.get("time") in (None, "") and folded.get("startTime") and folded.get("endTime"):
            folded["time"] = f"{folded['startTime']} - {folded['endTime']}"
        # Numbers (units, year, ids) arrive as JSON numbers from some endpoints
        for field in cls.model_fields:
            value = folded.get(field)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                folded[field] = str(value)
        return folded


class NormalizedSchedule(BaseModel):
    """Derived view of a ScheduleEntry with days and times parsed.

    Invariant: start_minutes < end_minutes.
    """

    model_config = ConfigDict(frozen=True)

    entry: ScheduleEntry
    days: frozenset[str]  # canonical lowercase weekday names
    start_minutes: int = Field(ge=0, le=1440)
    end_minutes: int = Field(ge=0, le=1440)

    @model_validator(mode="after")
    def _check_order(self) -> "NormalizedSchedule":
        if self.start_minutes >= self.end_minutes:
            raise ValueError("start_minutes must be before end_minutes")
        return self

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def contains(self, start_minutes: int, end_minutes: int) -> bool:
        """True if [start_minutes, end_minutes) lies wholly inside this class period."""
        return self.start_minutes <= start_minutes and end_minutes <= self.end_minutes

    def meets_on(self, day: str) -> bool:
        return day in self.days


class TimeSlot(BaseModel):
    """A fixed-width interval of the display grid."""

    model_config = ConfigDict(frozen=True)

    index: int
    start_minutes: int
    end_minutes: int
    label: str  # "7:00 AM - 7:30 AM", the form the slot was generated in


CellKind = Literal["empty", "covered", "block_start"]


class RenderCell(BaseModel):
    """Rendering instruction for one (day, slot) pair.

    - empty: nothing scheduled here
    - covered: part of a block started in an earlier slot, draw nothing
    - block_start: first slot of a block spanning `span` slots
    """

    model_config = ConfigDict(frozen=True)

    kind: CellKind
    entry: ScheduleEntry | None = None
    span: int = 0

    @classmethod
    def empty(cls) -> "RenderCell":
        return cls(kind="empty")

    @classmethod
    def covered(cls) -> "RenderCell":
        return cls(kind="covered")

    @classmethod
    def block_start(cls, entry: ScheduleEntry, span: int) -> "RenderCell":
        if span < 1:
            raise ValueError(f"block span must be at least 1, got {span}")
        return cls(kind="block_start", entry=entry, span=span)


class ScheduleGrid(BaseModel):
    """Rendering plan for a whole grid: one column of cells per day."""

    model_config = ConfigDict(frozen=True)

    slots: tuple[TimeSlot, ...]
    days: tuple[str, ...]
    cells: dict[str, tuple[RenderCell, ...]]

    def cell(self, day: str, index: int) -> RenderCell:
        return self.cells[day][index]

    def column(self, day: str) -> tuple[RenderCell, ...]:
        return self.cells[day]

    def blocks(self) -> Iterator[tuple[str, TimeSlot, RenderCell]]:
        """Yield (day, first slot, cell) for every block in the grid."""
        for day in self.days:
            for slot, cell in zip(self.slots, self.cells[day]):
                if cell.kind == "block_start":
                    yield day, slot, cell
