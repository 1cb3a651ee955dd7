"""Schedule grid configuration loaded from environment variables.

Two layers: GridSettings holds process-wide settings (API location, logging,
refresh timing) read from the environment, while SlotConfig describes one
grid view (hours, slot width, display format) and is passed around explicitly.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings

TimeDisplayFormat = Literal["12hour", "24hour"]

# How a clock time without AM/PM is read: "24hour" takes the bare hour as
# 24-hour time, "strict" rejects it.
MeridiemPolicy = Literal["24hour", "strict"]


class SlotConfig(BaseModel):
    """View configuration that determines slot generation."""

    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(default=7, ge=0, le=23)
    end_hour: int = Field(default=21, ge=1, le=24)
    slot_duration_minutes: int = Field(default=30, gt=0)
    time_display_format: TimeDisplayFormat = "12hour"

    @model_validator(mode="after")
    def _check_hours(self) -> "SlotConfig":
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        return self


# Named grid layouts used across the admin and instructor views
SLOT_PRESETS: dict[str, SlotConfig] = {
    "detailed": SlotConfig(start_hour=7, end_hour=21, slot_duration_minutes=30),
    "general": SlotConfig(start_hour=7, end_hour=21, slot_duration_minutes=60),
    "instructor": SlotConfig(start_hour=7, end_hour=21, slot_duration_minutes=120),
    "reports": SlotConfig(start_hour=7, end_hour=21, slot_duration_minutes=150),
}

DEFAULT_PRESET = "detailed"


class GridSettings(BaseSettings):
    """Schedule grid settings loaded from environment variables.

    Settings are loaded from SCHEDULE_* environment variables with sensible
    defaults. For local development, create a .env file in the project root.
    """

    # Grid layout
    start_hour: int = Field(default=7, description="First hour shown on the grid")
    end_hour: int = Field(default=21, description="Hour the grid stops at (exclusive)")
    slot_duration_minutes: int = Field(default=30, description="Width of one grid slot")
    time_display_format: TimeDisplayFormat = Field(
        default="12hour",
        description="Slot label format (12hour or 24hour)",
    )
    meridiem_policy: MeridiemPolicy = Field(
        default="24hour",
        description="How times without AM/PM are read (24hour or strict)",
    )

    # Schedule API (external service)
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the scheduling REST API",
    )
    api_token: str = Field(
        default="",
        description="Bearer token for the scheduling API",
    )
    request_timeout_seconds: float = Field(
        default=30,
        description="Timeout for a single API request",
    )

    # Refresh
    stale_time_seconds: float = Field(
        default=120,
        description="Age after which a cached schedule snapshot is refetched",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "SCHEDULE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def slot_config(self) -> SlotConfig:
        """Build the grid view configuration from these settings."""
        return SlotConfig(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            slot_duration_minutes=self.slot_duration_minutes,
            time_display_format=self.time_display_format,
        )


# Singleton pattern
_settings: GridSettings | None = None


def get_settings() -> GridSettings:
    """Get the grid settings singleton.

    Returns:
        GridSettings: Settings instance
    """
    global _settings
    if _settings is None:
        _settings = GridSettings()
    return _settings
