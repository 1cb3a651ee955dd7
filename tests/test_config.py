"""Tests for settings and grid view configuration."""

import pytest
from pydantic import ValidationError

from src.schedule_grid.config import (
    DEFAULT_PRESET,
    SLOT_PRESETS,
    GridSettings,
    SlotConfig,
    get_settings,
)


def test_defaults():
    settings = GridSettings(_env_file=None)
    assert settings.slot_config() == SLOT_PRESETS[DEFAULT_PRESET]
    assert settings.meridiem_policy == "24hour"
    assert settings.stale_time_seconds == 120


def test_reads_schedule_env_vars(monkeypatch):
    monkeypatch.setenv("SCHEDULE_SLOT_DURATION_MINUTES", "60")
    monkeypatch.setenv("SCHEDULE_TIME_DISPLAY_FORMAT", "24hour")
    monkeypatch.setenv("SCHEDULE_MERIDIEM_POLICY", "strict")
    monkeypatch.setenv("SCHEDULE_API_BASE_URL", "https://sched.example.edu")

    settings = GridSettings(_env_file=None)

    assert settings.slot_config() == SlotConfig(
        start_hour=7, end_hour=21, slot_duration_minutes=60, time_display_format="24hour"
    )
    assert settings.meridiem_policy == "strict"
    assert settings.api_base_url == "https://sched.example.edu"


def test_invalid_display_format_rejected(monkeypatch):
    monkeypatch.setenv("SCHEDULE_TIME_DISPLAY_FORMAT", "military")
    with pytest.raises(ValidationError):
        GridSettings(_env_file=None)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_hour": 9, "end_hour": 9},
        {"start_hour": 10, "end_hour": 8},
        {"slot_duration_minutes": 0},
        {"end_hour": 25},
    ],
)
def test_slot_config_validation(kwargs):
    with pytest.raises(ValidationError):
        SlotConfig(**kwargs)


def test_preset_durations():
    assert {name: p.slot_duration_minutes for name, p in SLOT_PRESETS.items()} == {
        "detailed": 30,
        "general": 60,
        "instructor": 120,
        "reports": 150,
    }


def test_get_settings_is_a_singleton():
    assert get_settings() is get_settings()
