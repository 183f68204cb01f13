"""Ordered, deduplicated list of tracked timezone entries.

Entries are identified by :func:`identity_key`, never by list position. All
mutations return a new list and leave their input untouched.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from worldtimez.config.settings import Settings, get_settings
from worldtimez.core.engine import is_canonical_zone_id, localize
from worldtimez.core.errors import InvalidZone
from worldtimez.utils.time_utils import as_instant, now_utc

logger = logging.getLogger("worldtimez.entries")


class TimezoneEntry(BaseModel):
    """A tracked location.

    Field aliases match the stored record shape
    (``id, name, city, country, population, offset``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    zone_id: str = Field(..., alias="id", min_length=1)
    display_name: str = Field(..., alias="name")
    city: str
    country: str
    population: int = Field(default=0, ge=0)
    utc_offset_minutes: int = Field(default=0, alias="offset", description="Offset when added; display cache only")

    @property
    def key(self) -> str:
        return identity_key(self)

    @property
    def title(self) -> str:
        return f"{self.country}/{self.city}"


EntryList = List[TimezoneEntry]


def identity_key(entry: TimezoneEntry) -> str:
    return f"{entry.zone_id}_{entry.city}"


def index_of(entries: Sequence[TimezoneEntry], key: str) -> int:
    for index, entry in enumerate(entries):
        if identity_key(entry) == key:
            return index
    return -1


def find(entries: Sequence[TimezoneEntry], key: str) -> Optional[TimezoneEntry]:
    index = index_of(entries, key)
    return entries[index] if index != -1 else None


def add(entries: Sequence[TimezoneEntry], entry: TimezoneEntry) -> EntryList:
    """Append ``entry`` unless an entry with the same identity is present."""
    key = identity_key(entry)
    if index_of(entries, key) != -1:
        logger.debug("Timezone %s already tracked", key)
        return list(entries)
    return [*entries, entry]


def remove(entries: Sequence[TimezoneEntry], entry: TimezoneEntry) -> EntryList:
    """Drop the entry sharing ``entry``'s identity; no-op when absent."""
    index = index_of(entries, identity_key(entry))
    if index == -1:
        logger.debug("Timezone %s not tracked, nothing to remove", identity_key(entry))
        return list(entries)
    return [*entries[:index], *entries[index + 1:]]


def move(entries: Sequence[TimezoneEntry], from_index: int, to_index: int) -> EntryList:
    """Relocate the element at ``from_index`` to ``to_index``.

    Out-of-range indices leave the order unchanged.
    """
    result = list(entries)
    size = len(result)
    if not (0 <= from_index < size and 0 <= to_index < size):
        logger.warning("Ignoring move %s -> %s on a list of %d entries", from_index, to_index, size)
        return result
    if from_index == to_index:
        return result

    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def reorder(entries: Sequence[TimezoneEntry], from_key: str, to_key: str) -> EntryList:
    """Move the entry identified by ``from_key`` into the slot of ``to_key``."""
    if from_key == to_key:
        return list(entries)
    from_index = index_of(entries, from_key)
    to_index = index_of(entries, to_key)
    if from_index == -1 or to_index == -1:
        logger.warning("Ignoring reorder of unknown entries %r -> %r", from_key, to_key)
        return list(entries)
    logger.debug("Moving timezone from %d to %d", from_index, to_index)
    return move(entries, from_index, to_index)


def _clean_segment(segment: str) -> str:
    return segment.replace("_", " ")


def entry_for_zone(zone_id: str, utc_offset_minutes: int) -> TimezoneEntry:
    segments = zone_id.split("/")
    return TimezoneEntry(
        zone_id=zone_id,
        display_name=zone_id,
        city=_clean_segment(segments[-1]),
        country=_clean_segment(segments[0]),
        population=0,
        utc_offset_minutes=utc_offset_minutes,
    )


def _sample_instants(reference: datetime) -> list[datetime]:
    return [reference.replace(month=month, day=15, hour=12, minute=0, second=0, microsecond=0) for month in range(1, 13)]


def _short_alias(zone_name: str, reference: datetime) -> Optional[str]:
    """Return a ``Region/Place`` link for a deeper zone that keeps the same clock.

    ``America/Indiana/Indianapolis`` maps to ``America/Indianapolis``. The alias
    is only accepted when it exists and agrees with the original zone's offset
    on one day of every month of the reference year.
    """
    segments = zone_name.split("/")
    if len(segments) < 3:
        return None
    alias = f"{segments[0]}/{segments[-1]}"
    if not is_canonical_zone_id(alias):
        return None
    try:
        for sample in _sample_instants(reference):
            if localize(sample, alias).utc_offset_minutes != localize(sample, zone_name).utc_offset_minutes:
                return None
    except InvalidZone:
        return None
    return alias


def seed_default(
    zone_name: Optional[str] = None,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> EntryList:
    """Build the one-entry list used when nothing has been saved yet.

    The host zone is read once, here. A host zone that is not in
    ``Region/Place`` form would not survive the next validated load, so a
    two-segment link with the same rules is tried (see :func:`_short_alias`)
    and the configured fallback zone is used when there is none
    (``UTC``, ``America/Indiana/Knox``).
    """
    settings = settings or get_settings()
    reference = as_instant(now) if now else now_utc()

    host = zone_name or settings.default_timezone
    candidates = [host]
    if not is_canonical_zone_id(host):
        alias = _short_alias(host, reference)
        if alias:
            logger.info("Seeding host timezone %s as %s", host, alias)
            candidates = [alias]
    candidates.append(settings.fallback_timezone)

    for candidate in candidates:
        if not is_canonical_zone_id(candidate):
            logger.warning("Host timezone %r is not Region/Place, not seeding it", candidate)
            continue
        try:
            info = localize(reference, candidate)
        except InvalidZone as exc:
            logger.warning("Cannot seed timezone list: %s", exc)
            continue
        logger.info("Seeding timezone list with %s", candidate)
        return [entry_for_zone(candidate, info.utc_offset_minutes)]

    logger.error("No usable timezone to seed the list with")
    return []
