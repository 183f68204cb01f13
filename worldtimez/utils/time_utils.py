"""Timezone-aware time utilities."""
from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from worldtimez.config.settings import get_settings


def ambient_zone_name() -> str:
    """Name of the host timezone as configured or detected at startup."""
    return get_settings().default_timezone


def get_local_timezone() -> ZoneInfo:
    """Get the configured local timezone."""
    return ZoneInfo(ambient_zone_name())


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_instant(dt: datetime) -> datetime:
    """Normalise ``dt`` to an absolute UTC instant.

    Naive datetimes are taken to already be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_instant(text: str, zone: ZoneInfo | None = None) -> datetime:
    """Parse an ISO 8601 string into a UTC instant.

    Strings without an offset are read as wall-clock time in ``zone``
    (the host zone when omitted).
    """
    dt = datetime.fromisoformat(text.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=zone or get_local_timezone())
    return as_instant(dt)
