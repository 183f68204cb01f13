"""Conversion of a reference instant into per-zone display data and slot grids.

Every function here is pure: the same reference instant and zone identifier
always produce the same result, and nothing is cached besides what
``zoneinfo`` caches itself.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from worldtimez.core.errors import InvalidZone
from worldtimez.utils.time_utils import as_instant

logger = logging.getLogger("worldtimez.engine")

CANONICAL_ZONE_PATTERN = re.compile(r"^[A-Za-z]+/[A-Za-z0-9_]+$")

DEFAULT_WINDOW_SIZE = 48
DEFAULT_STEP_MINUTES = 30
DEFAULT_CENTER_OFFSET = 24

# Legacy ids were stored as "<continent>_<city>" slugs.
_CONTINENTS: dict[str, str] = {
    "asia": "Asia",
    "europe": "Europe",
    "americas": "America",
    "africa": "Africa",
    "oceania": "Australia",
}

_CITY_ALIASES: dict[str, str] = {
    "dhaka": "Dhaka",
    "sylhet": "Dhaka",  # same zone as Dhaka
}


@dataclass(frozen=True)
class LocalTimeInfo:
    zone_id: str
    local: datetime
    date_label: str
    utc_offset_minutes: int
    offset_label: str
    is_valid: bool = True


@dataclass(frozen=True)
class TimeSlot:
    hour: int
    minute: int
    meridiem: str
    instant: datetime
    is_selected: bool
    offset_index: int

    @property
    def label(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d} {self.meridiem}"


def is_canonical_zone_id(value: object) -> bool:
    """Return True when ``value`` has the ``Region/Place`` shape."""
    return isinstance(value, str) and CANONICAL_ZONE_PATTERN.match(value) is not None


def format_zone_id(raw: str) -> str:
    """Repair a loosely formatted zone string into ``Region/Place`` form.

    Canonical ids pass through untouched. Anything else is treated as a
    ``continent_city`` slug: the continent goes through a small lookup table,
    the city through a table of known aliases, and unknown segments are
    capitalised. This is a best-effort repair for legacy data only.
    """
    if is_canonical_zone_id(raw):
        return raw

    parts = raw.lower().split("_")
    continent = parts[0]
    city = parts[1] if len(parts) > 1 and parts[1] else parts[0]

    region = _CONTINENTS.get(continent) or continent.capitalize()
    place = _CITY_ALIASES.get(city) or city.capitalize()
    return f"{region}/{place}"


def resolve_zone(zone_id: str) -> tuple[str, ZoneInfo]:
    """Return ``(resolved_id, zone)`` for ``zone_id``.

    The identifier is tried as given first; the legacy repair is only
    attempted when that fails.
    """
    if not zone_id or not isinstance(zone_id, str):
        raise InvalidZone(str(zone_id), "empty identifier")

    try:
        return zone_id, ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        first_error: Exception = exc

    repaired = format_zone_id(zone_id)
    if repaired != zone_id:
        try:
            zone = ZoneInfo(repaired)
        except (ZoneInfoNotFoundError, ValueError):
            pass
        else:
            logger.debug("Repaired legacy zone id %r to %r", zone_id, repaired)
            return repaired, zone

    raise InvalidZone(zone_id, str(first_error)) from first_error


def offset_minutes(dt: datetime) -> int:
    offset = dt.utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds()) // 60


def format_offset(minutes: int) -> str:
    """Format signed offset minutes as ``UTC+HH:MM``."""
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"UTC{sign}{hours:02d}:{mins:02d}"


def format_date_label(dt: datetime) -> str:
    """``Mon, Jan 5`` style calendar label."""
    return f"{dt:%a}, {dt:%b} {dt.day}"


def localize(reference: datetime, zone_id: str) -> LocalTimeInfo:
    """Convert ``reference`` into the local calendar of ``zone_id``.

    The offset is always recomputed from the zone rules; an entry's cached
    offset is never consulted. Raises :class:`InvalidZone` when the zone
    cannot be resolved.
    """
    resolved_id, zone = resolve_zone(zone_id)
    try:
        local = as_instant(reference).astimezone(zone)
    except (OverflowError, ValueError) as exc:
        raise InvalidZone(zone_id, str(exc)) from exc

    minutes = offset_minutes(local)
    return LocalTimeInfo(
        zone_id=resolved_id,
        local=local,
        date_label=format_date_label(local),
        utc_offset_minutes=minutes,
        offset_label=format_offset(minutes),
    )


def generate_slots(
    reference: datetime,
    zone_id: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
    step_minutes: int = DEFAULT_STEP_MINUTES,
    center_offset: int = DEFAULT_CENTER_OFFSET,
) -> list[TimeSlot]:
    """Build the centered window of selectable slots for one zone.

    Slot ``i`` is ``reference`` shifted by ``(i - center_offset) * step_minutes``
    minutes and then converted into the zone, so a DST change inside the
    window shows up as an uneven wall-clock step. Slots whose instant cannot
    be represented are left out; the result may be shorter than
    ``window_size``.
    """
    if window_size <= 0 or step_minutes <= 0:
        raise ValueError("window_size and step_minutes must be positive")
    if not 0 <= center_offset < window_size:
        raise ValueError("center_offset must fall inside the window")

    _, zone = resolve_zone(zone_id)
    base = as_instant(reference)

    slots: list[TimeSlot] = []
    for index in range(window_size):
        shift = index - center_offset
        try:
            instant = (base + timedelta(minutes=shift * step_minutes)).astimezone(zone)
        except (OverflowError, ValueError) as exc:
            logger.debug("Skipping slot %+d for %s: %s", shift, zone_id, exc)
            continue
        slots.append(
            TimeSlot(
                hour=instant.hour,
                minute=instant.minute,
                meridiem="AM" if instant.hour < 12 else "PM",
                instant=instant,
                is_selected=shift == 0,
                offset_index=shift,
            )
        )
    return slots
