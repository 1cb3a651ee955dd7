"""Render class schedules as a time-slot grid, list, workload report or .ics file.

Reads schedules from the scheduling API (--api) or from a JSON export
(--file), reconciles them onto the configured slot grid and prints the
result on stdout. Diagnostics go to stderr.

Run with: python scripts/render_schedule.py --file data/schedules.json
API:      python scripts/render_schedule.py --api --course BSIT --year "1st Year"
Sections: python scripts/render_schedule.py --file data/schedules.json --by section
Hourly:   python scripts/render_schedule.py --file data/schedules.json --preset general
List:     python scripts/render_schedule.py --file data/schedules.json --list
Workload: python scripts/render_schedule.py --api --instructor "Jane Cruz" --workload
Clashes:  python scripts/render_schedule.py --file data/schedules.json --conflicts
Calendar: python scripts/render_schedule.py --api --section A --ical out/section-a.ics

Connection and logging settings come from SCHEDULE_* environment variables
(or .env): SCHEDULE_API_BASE_URL, SCHEDULE_API_TOKEN, SCHEDULE_LOG_LEVEL, ...

Exit codes:
  0 = success (output on stdout, or .ics file written)
  1 = error (message on stderr)
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.schedule_grid.client import (  # noqa: E402
    SCHEDULE_FILTERS,
    ScheduleClient,
    load_schedules_file,
)
from src.schedule_grid.config import (  # noqa: E402
    DEFAULT_PRESET,
    SLOT_PRESETS,
    SlotConfig,
    get_settings,
)
from src.schedule_grid.conflicts import find_overlaps  # noqa: E402
from src.schedule_grid.days import TEACHING_DAYS, canonical_day, display_day  # noqa: E402
from src.schedule_grid.errors import ScheduleError  # noqa: E402
from src.schedule_grid.grid import reconcile, reconcile_by  # noqa: E402
from src.schedule_grid.ical import export_ical  # noqa: E402
from src.schedule_grid.logging import get_logger, setup_logging_from_settings  # noqa: E402
from src.schedule_grid.models import ScheduleEntry  # noqa: E402
from src.schedule_grid.normalize import normalize_entries  # noqa: E402
from src.schedule_grid.slots import build_time_slots  # noqa: E402
from src.schedule_grid.timeparse import standardize_time  # noqa: E402
from src.schedule_grid.views import format_grid, format_table, table_rows  # noqa: E402
from src.schedule_grid.workload import filter_by_instructor, summarize_workload  # noqa: E402

log = get_logger("render_schedule")

TABLE_HEADERS = ("day", "time", "subject", "instructor", "room", "section")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Render class schedules as a grid, list, workload report or iCalendar file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--api",
        action="store_true",
        help="Fetch schedules from the scheduling API (SCHEDULE_API_BASE_URL).",
    )
    source_group.add_argument(
        "--file",
        type=str,
        help="Read schedules from a JSON export (array or {schedules: [...]}).",
    )

    for field in SCHEDULE_FILTERS:
        parser.add_argument(f"--{field}", type=str, default=None, help=f"Only this {field}.")

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--grid",
        action="store_true",
        help="Time-slot grid, one column per day (default).",
    )
    mode_group.add_argument(
        "--list",
        action="store_true",
        help="Table of classes grouped by day and sorted by start time.",
    )
    mode_group.add_argument(
        "--workload",
        action="store_true",
        help="Classes and teaching hours per day.",
    )
    mode_group.add_argument(
        "--conflicts",
        action="store_true",
        help="Report overlapping classes that share a section, room or instructor.",
    )
    mode_group.add_argument(
        "--ical",
        type=str,
        metavar="OUT",
        default=None,
        help="Write weekly recurring events to an .ics file.",
    )

    parser.add_argument(
        "--preset",
        choices=sorted(SLOT_PRESETS),
        default=None,
        help=f"Grid layout preset (default: from settings, else {DEFAULT_PRESET}).",
    )
    parser.add_argument(
        "--format",
        choices=("12hour", "24hour"),
        default=None,
        help="Time display format for slot labels.",
    )
    parser.add_argument(
        "--days",
        type=str,
        default=None,
        help="Comma-separated days to show (default: Monday-Saturday).",
    )
    parser.add_argument(
        "--by",
        choices=("section", "room"),
        default=None,
        help="Grid mode: one grid per section or room.",
    )
    return parser.parse_args(argv)


def _parse_days(value: str | None) -> list[str]:
    if not value:
        return list(TEACHING_DAYS)
    days = []
    for token in value.split(","):
        day = canonical_day(token)
        if day is None:
            raise ValueError(f"Unknown day '{token.strip()}'")
        if day not in days:
            days.append(day)
    return days


def _slot_config(args: argparse.Namespace) -> SlotConfig:
    settings = get_settings()
    config = SLOT_PRESETS[args.preset] if args.preset else settings.slot_config()
    if args.format:
        config = config.model_copy(update={"time_display_format": args.format})
    return config


def _load_entries(args: argparse.Namespace) -> list[ScheduleEntry]:
    filters = {field: getattr(args, field) for field in SCHEDULE_FILTERS}
    if args.api:
        settings = get_settings()
        client = ScheduleClient(
            settings.api_base_url,
            token=settings.api_token or None,
            timeout=settings.request_timeout_seconds,
        )
        return client.fetch_schedules(**filters)

    entries = load_schedules_file(args.file)
    # Exports are not filtered server-side
    for field, value in filters.items():
        if not value:
            continue
        if field == "instructor":
            entries = filter_by_instructor(entries, value)
        else:
            entries = [e for e in entries if (getattr(e, field) or "").strip() == value.strip()]
    return entries


def _render_grid(entries: list[ScheduleEntry], args: argparse.Namespace, days: list[str]) -> str:
    config = _slot_config(args)
    slots = build_time_slots(config)
    policy = get_settings().meridiem_policy

    if args.by is None:
        return format_grid(reconcile(slots, entries, days, meridiem_policy=policy))

    columns = sorted({(getattr(e, args.by) or "").strip() for e in entries} - {""})
    grids = reconcile_by(slots, entries, days, args.by, columns, meridiem_policy=policy)
    return "\n\n".join(
        f"{args.by.capitalize()}: {column}\n{format_grid(grid)}" for column, grid in grids.items()
    )


def _render_workload(entries: list[ScheduleEntry], days: list[str]) -> str:
    summary = summarize_workload(entries, days=days, meridiem_policy=get_settings().meridiem_policy)
    rows = [
        {"day": d.day, "classes": str(d.classes), "hours": f"{d.hours:g}"}
        for d in summary.daily_breakdown
    ]
    return "\n".join(
        [
            format_table(rows, ("day", "classes", "hours")),
            "",
            f"Total classes: {summary.total_classes}",
            f"Total hours:   {summary.total_hours:g}",
            f"Busiest day:   {summary.busiest_day}",
        ]
    )


def _render_conflicts(entries: list[ScheduleEntry], args: argparse.Namespace) -> str:
    policy = get_settings().meridiem_policy
    fmt = _slot_config(args).time_display_format
    overlaps = find_overlaps(
        entries, scopes=("section", "room", "instructor"), meridiem_policy=policy
    )
    if not overlaps:
        return "No conflicts found."
    rows = [
        {
            "day": display_day(c.day),
            "scope": c.scope or "",
            "first": f"{c.entry.subject or '-'} ({standardize_time(c.entry.time, fmt, meridiem_policy=policy)})",
            "second": f"{c.other.subject or '-'} ({standardize_time(c.other.time, fmt, meridiem_policy=policy)})",
        }
        for c in overlaps
    ]
    return format_table(rows, ("day", "scope", "first", "second"))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging_from_settings(settings)

    days = _parse_days(args.days)
    entries = _load_entries(args)
    log.info("schedules_ready", count=len(entries), source="api" if args.api else args.file)

    if args.ical:
        output_file = Path(args.ical)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(
            export_ical(entries, meridiem_policy=settings.meridiem_policy), encoding="utf-8"
        )
        log.info("ical_written", path=str(output_file))
    elif args.workload:
        print(_render_workload(entries, days))
    elif args.conflicts:
        print(_render_conflicts(entries, args))
    elif args.list:
        normalized = normalize_entries(entries, meridiem_policy=settings.meridiem_policy)
        fmt = _slot_config(args).time_display_format
        print(format_table(table_rows(normalized, days=days, fmt=fmt), TABLE_HEADERS))
    else:
        print(_render_grid(entries, args, days))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except (ScheduleError, ValueError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
