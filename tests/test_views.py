"""Tests for list, table, card and text grid views."""

from src.schedule_grid.grid import reconcile
from src.schedule_grid.normalize import normalize_entries
from src.schedule_grid.views import (
    card_rows,
    format_grid,
    format_table,
    group_by_day,
    list_rows,
    table_rows,
)


def test_group_by_day_sorts_by_start(schedule_records):
    late = {"_id": "late", "day": "Monday", "time": "10:00 AM - 11:00 AM"}
    early = {"_id": "early", "day": "Monday", "time": "6:00 AM - 7:00 AM"}
    grouped = group_by_day(normalize_entries([late, *schedule_records, early]))
    assert [e.entry.id for e in grouped["monday"]] == ["early", "s1", "late"]
    assert [e.entry.id for e in grouped["thursday"]] == ["s1"]
    assert grouped["sunday"] == []


def test_group_by_day_keeps_misaligned_entries():
    entries = normalize_entries([{"day": "Monday", "time": "7:15 AM - 8:05 AM"}])
    assert len(group_by_day(entries, ["Monday"])["monday"]) == 1


def test_group_by_day_is_stable_for_equal_starts():
    records = [
        {"_id": str(i), "day": "Friday", "time": "9:00 AM - 10:00 AM"} for i in range(5)
    ]
    grouped = group_by_day(normalize_entries(records), ["Friday"])
    assert [e.entry.id for e in grouped["friday"]] == ["0", "1", "2", "3", "4"]


def test_table_rows(schedule_records):
    rows = table_rows(normalize_entries(schedule_records), days=["Monday", "Tuesday"])
    assert rows == [
        {
            "day": "Monday",
            "time": "7:00 AM - 9:00 AM",
            "subject": "Programming 1",
            "instructor": "Jane Cruz",
            "room": "301",
            "section": "A",
        },
        {
            "day": "Tuesday",
            "time": "8:00 AM - 9:30 AM",
            "subject": "Discrete Math",
            "instructor": "Leo Santos",
            "room": "205",
            "section": "A",
        },
    ]


def test_missing_fields_render_as_dash():
    rows = table_rows(normalize_entries([{"day": "Monday", "time": "08:00 - 09:00"}]), fmt="24hour")
    assert rows[0]["time"] == "08:00 - 09:00"
    assert rows[0]["room"] == "-"
    assert rows[0]["instructor"] == "-"


def test_list_rows_flat_order(schedule_records):
    rows = list_rows(normalize_entries(schedule_records))
    assert [r["subject"] for r in rows] == ["Programming 1", "Discrete Math", "PE 1"]
    assert rows[0]["day"] == "Monday/Thursday"


def test_card_rows_omit_empty_days(schedule_records):
    cards = card_rows(normalize_entries(schedule_records))
    assert list(cards) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert cards["Wednesday"][0]["subject"] == "PE 1"


def test_format_table():
    text = format_table([{"day": "Monday", "subject": "Math"}], ("day", "subject"))
    assert text.splitlines() == [
        "Day    | Subject",
        "-------+--------",
        "Monday | Math   ",
    ]


def test_format_table_empty():
    assert format_table([], ("day",)) == "(no classes scheduled)"


def test_format_grid(morning_slots):
    grid = reconcile(
        morning_slots,
        [{"day": "Monday", "time": "7:00 AM - 8:00 AM", "subject": "Math"}],
        ["Monday", "Tuesday"],
    )
    lines = format_grid(grid, cell_width=10).splitlines()
    assert lines[0].split(" | ") == ["Time".ljust(17), "Monday    ", "Tuesday   "]
    assert "Math (x2)" in lines[2]
    assert lines[3].startswith("7:30 AM - 8:00 AM |   |")
    assert len(lines) == 2 + len(morning_slots)
