"""Schedule grid reconciler for the class scheduling system.

Parses free-text schedule records (day descriptors, time ranges), lays them
onto a grid of fixed time slots and produces a per-cell rendering plan, plus
the list/table views, conflict checks, workload summaries and iCalendar
export built on the same normalized data.
"""

from src.schedule_grid.config import SLOT_PRESETS, GridSettings, SlotConfig, get_settings
from src.schedule_grid.grid import reconcile, reconcile_by
from src.schedule_grid.models import (
    NormalizedSchedule,
    RenderCell,
    ScheduleEntry,
    ScheduleGrid,
    TimeSlot,
)
from src.schedule_grid.normalize import normalize_entries
from src.schedule_grid.slots import build_time_slots, generate_time_slots, parse_time_slots

__all__ = [
    "reconcile",
    "reconcile_by",
    "generate_time_slots",
    "parse_time_slots",
    "build_time_slots",
    "normalize_entries",
    "ScheduleEntry",
    "NormalizedSchedule",
    "TimeSlot",
    "RenderCell",
    "ScheduleGrid",
    "SlotConfig",
    "SLOT_PRESETS",
    "GridSettings",
    "get_settings",
]
