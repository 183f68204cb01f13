"""Saving and restoring the tracked timezone list and the theme preference."""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from worldtimez.config.settings import Settings, get_settings
from worldtimez.core import entries as entry_list
from worldtimez.core.engine import is_canonical_zone_id
from worldtimez.core.entries import EntryList, TimezoneEntry
from worldtimez.core.errors import CorruptPersistedState, StorageReadFailure, StorageWriteFailure
from worldtimez.data.store import KeyValueStore

logger = logging.getLogger("worldtimez.persistence")

THEMES: tuple[str, ...] = ("light", "dark")


def serialize_entries(entries: Sequence[TimezoneEntry]) -> str:
    return json.dumps([entry.model_dump(by_alias=True) for entry in entries])


def parse_entries(raw: str) -> EntryList:
    """Decode and validate a stored list.

    Raises :class:`CorruptPersistedState` if the payload or any single entry
    is malformed; there is no partial result.
    """
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise CorruptPersistedState(f"Stored timezones are not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise CorruptPersistedState(f"Stored timezones must be a list, got {type(payload).__name__}")

    for position, item in enumerate(payload):
        zone_id = item.get("id") if isinstance(item, dict) else None
        if not is_canonical_zone_id(zone_id):
            raise CorruptPersistedState(f"Stored timezone #{position} has invalid id {zone_id!r}")

    try:
        parsed = [TimezoneEntry.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise CorruptPersistedState(f"Stored timezones failed validation: {exc}") from exc

    result: EntryList = []
    for entry in parsed:
        result = entry_list.add(result, entry)
    return result


class EntryStore:
    """Persistence adapter over a :class:`KeyValueStore`.

    Loading is all-or-nothing: one malformed entry discards the whole saved
    list. Write failures are logged and never reach the caller; read failures
    do.
    """

    def __init__(self, backend: KeyValueStore, settings: Optional[Settings] = None) -> None:
        self.backend = backend
        self.settings = settings or get_settings()

    @property
    def storage_key(self) -> str:
        return self.settings.storage_key

    @property
    def theme_key(self) -> str:
        return self.settings.theme_key

    def load(self) -> EntryList:
        """Return the saved list, or ``[]`` when nothing usable is stored.

        A corrupt record is wiped. :class:`StorageReadFailure` propagates and
        leaves the record alone.
        """
        raw = self.backend.get(self.storage_key)
        if raw is None:
            return []

        try:
            loaded = parse_entries(raw)
        except CorruptPersistedState as exc:
            logger.error("Discarding saved timezones: %s", exc)
            self.clear()
            return []

        logger.debug("Loaded %d saved timezones", len(loaded))
        return loaded

    def save(self, entries: Sequence[TimezoneEntry]) -> None:
        try:
            self.backend.set(self.storage_key, serialize_entries(entries))
        except (StorageWriteFailure, OSError) as exc:
            logger.error("Error saving timezones: %s", exc)
            return
        logger.debug("Saved %d timezones", len(entries))

    def clear(self) -> None:
        try:
            self.backend.delete(self.storage_key)
        except (StorageWriteFailure, OSError) as exc:
            logger.error("Error clearing saved timezones: %s", exc)

    def load_theme(self, default: Optional[str] = None) -> str:
        fallback = default or self.settings.color_scheme
        try:
            raw = self.backend.get(self.theme_key)
        except StorageReadFailure as exc:
            logger.error("Error loading theme preference: %s", exc)
            return fallback

        if raw in THEMES:
            return raw
        if raw is not None:
            logger.warning("Ignoring unknown theme preference %r", raw)
        return fallback

    def save_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Theme must be one of {', '.join(THEMES)}")
        try:
            self.backend.set(self.theme_key, theme)
        except (StorageWriteFailure, OSError) as exc:
            logger.error("Error saving theme preference: %s", exc)
