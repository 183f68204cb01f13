"""Application configuration and environment management."""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


load_dotenv()


def _detect_timezone() -> str:
    tz_env = os.environ.get("TZ") or os.environ.get("LOCAL_TIMEZONE")
    if tz_env:
        return tz_env

    try:
        import tzlocal

        local_tz = tzlocal.get_localzone_name()
        return str(local_tz) if local_tz else "UTC"
    except Exception:
        return "UTC"


def _detect_color_scheme() -> str:
    explicit = os.environ.get("WORLDTIMEZ_COLOR_SCHEME")
    if explicit:
        return explicit.lower()

    # Terminals export "fg;bg"; a background of 0-6 or 8 is a dark palette.
    colorfgbg = os.environ.get("COLORFGBG", "")
    background = colorfgbg.split(";")[-1] if colorfgbg else ""
    if background.isdigit() and int(background) in {0, 1, 2, 3, 4, 5, 6, 8}:
        return "dark"
    return "light"


class Settings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    data_dir: Path = Field(default=Path("data"), description="Directory for persistent data")
    database_url: str = Field(
        default="sqlite:///data/worldtimez.db",
        description="SQLAlchemy connection string for the key/value store",
    )
    storage_key: str = Field(default="worldtimez_timezones", description="Key holding the saved entry list")
    theme_key: str = Field(default="theme", description="Key holding the theme preference")

    default_timezone: str = Field(
        default_factory=_detect_timezone,
        description="Olson timezone identifier of the host, used to seed an empty list",
    )
    fallback_timezone: str = Field(
        default="Etc/UTC",
        description="Seed zone when the host zone is not in Region/Place form",
    )
    color_scheme: str = Field(
        default_factory=_detect_color_scheme,
        description="Ambient colour scheme used when no theme has been saved",
    )

    slot_window_size: int = Field(default=48, description="Number of slots generated per entry")
    slot_step_minutes: int = Field(default=30, description="Minutes between neighbouring slots")
    slot_center_offset: int = Field(default=24, description="Index of the selected slot")

    log_level: str = Field(default="INFO", description="Root level for the worldtimez logger")

    @field_validator("default_timezone", "fallback_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @field_validator("color_scheme")
    @classmethod
    def _validate_color_scheme(cls, value: str) -> str:
        value_lower = value.lower()
        if value_lower not in {"light", "dark"}:
            raise ValueError("Colour scheme must be light or dark")
        return value_lower

    @field_validator("slot_window_size", "slot_step_minutes")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Slot window values must be positive")
        return value

    @model_validator(mode="after")
    def _validate_center(self) -> "Settings":
        if not 0 <= self.slot_center_offset < self.slot_window_size:
            raise ValueError("Slot center offset must fall inside the window")
        return self


_ENV_MAPPING = {
    "DATA_DIR": "data_dir",
    "DATABASE_URL": "database_url",
    "WORLDTIMEZ_STORAGE_KEY": "storage_key",
    "WORLDTIMEZ_THEME_KEY": "theme_key",
    "DEFAULT_TIMEZONE": "default_timezone",
    "FALLBACK_TIMEZONE": "fallback_timezone",
    "SLOT_WINDOW_SIZE": "slot_window_size",
    "SLOT_STEP_MINUTES": "slot_step_minutes",
    "SLOT_CENTER_OFFSET": "slot_center_offset",
    "LOG_LEVEL": "log_level",
}


def _load_settings() -> Settings:
    data: dict[str, object] = {}
    for env_name, field_name in _ENV_MAPPING.items():
        if env_name not in os.environ:
            continue
        data[field_name] = os.environ[env_name]
    return Settings(**data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = _load_settings()
    if settings.database_url.startswith("sqlite") and ":memory:" not in settings.database_url:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
