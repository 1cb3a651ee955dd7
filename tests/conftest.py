"""Shared fixtures for schedule grid tests."""

import pytest

from src.schedule_grid import config
from src.schedule_grid.slots import generate_time_slots, parse_time_slots


@pytest.fixture
def morning_labels() -> list[str]:
    """Four half-hour slots, 7:00 AM to 9:00 AM."""
    return generate_time_slots(7, 9, 30)


@pytest.fixture
def morning_slots(morning_labels):
    return parse_time_slots(morning_labels)


@pytest.fixture
def schedule_records() -> list[dict]:
    """A small week for section A of BSIT 1st Year, as returned by the API."""
    return [
        {
            "_id": "s1",
            "subject": "Programming 1",
            "instructor": "Jane Cruz",
            "room": "301",
            "section": "A",
            "course": "BSIT",
            "year": "1st Year",
            "day": "Monday/Thursday",
            "time": "7:00 AM - 9:00 AM",
        },
        {
            "_id": "s2",
            "subject": "Discrete Math",
            "instructor": "Leo Santos",
            "room": "205",
            "section": "A",
            "course": "BSIT",
            "year": "1st Year",
            "day": "Tuesday/Friday",
            "time": "8:00 AM - 9:30 AM",
        },
        {
            "_id": "s3",
            "subject": "PE 1",
            "instructor": "Jane Cruz",
            "room": "Gym",
            "section": "B",
            "course": "BSIT",
            "year": "1st Year",
            "day": "Wednesday",
            "time": "1:00 PM - 3:00 PM",
        },
    ]


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Keep the settings singleton from leaking between tests."""
    monkeypatch.setattr(config, "_settings", None)
