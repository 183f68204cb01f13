"""Composition root tying the engine, the entry list and persistence together."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from worldtimez.config.settings import Settings
from worldtimez.core import entries as entry_list
from worldtimez.core.engine import LocalTimeInfo, TimeSlot, generate_slots, localize
from worldtimez.core.entries import EntryList, TimezoneEntry
from worldtimez.core.errors import InvalidZone, StorageReadFailure
from worldtimez.data.persistence import EntryStore
from worldtimez.utils.time_utils import as_instant, now_utc

logger = logging.getLogger("worldtimez.session")


@dataclass(frozen=True)
class EntryView:
    entry: TimezoneEntry
    info: LocalTimeInfo
    slots: List[TimeSlot]

    @property
    def selected_slot(self) -> Optional[TimeSlot]:
        for slot in self.slots:
            if slot.is_selected:
                return slot
        return None


class WorldClockSession:
    """Single-writer owner of the reference instant, the entry list and the theme.

    Every mutation replaces the whole list and writes it through to the store
    before returning.
    """

    def __init__(
        self,
        store: EntryStore,
        settings: Optional[Settings] = None,
        reference: Optional[datetime] = None,
    ) -> None:
        self.store = store
        self.settings = settings or store.settings
        self.reference: datetime = as_instant(reference) if reference else now_utc()
        self.entries: EntryList = []
        self.theme: str = self.settings.color_scheme

    @classmethod
    def start(
        cls,
        store: EntryStore,
        settings: Optional[Settings] = None,
        reference: Optional[datetime] = None,
    ) -> "WorldClockSession":
        session = cls(store, settings=settings, reference=reference)
        session.restore()
        return session

    def restore(self) -> EntryList:
        self.theme = self.store.load_theme(self.settings.color_scheme)
        try:
            loaded = self.store.load()
        except StorageReadFailure as exc:
            # Show the host zone but keep whatever is stored untouched.
            logger.error("Error loading saved timezones: %s", exc)
            self.entries = entry_list.seed_default(now=self.reference, settings=self.settings)
            return self.entries
        self._commit(loaded)
        return self.entries

    def _commit(self, entries: EntryList) -> EntryList:
        # An empty list is never shown; it is reseeded from the host zone.
        if not entries:
            entries = entry_list.seed_default(now=self.reference, settings=self.settings)
        self.entries = entries
        self.store.save(entries)
        return entries

    def add(self, entry: TimezoneEntry) -> EntryList:
        logger.info("Adding timezone %s", entry.key)
        return self._commit(entry_list.add(self.entries, entry))

    def delete(self, entry: TimezoneEntry) -> EntryList:
        logger.info("Deleting timezone %s", entry.key)
        return self._commit(entry_list.remove(self.entries, entry))

    def delete_key(self, key: str) -> EntryList:
        entry = entry_list.find(self.entries, key)
        if entry is None:
            logger.warning("No tracked timezone with key %r", key)
            return self.entries
        return self.delete(entry)

    def reorder(self, from_id: str, to_id: str) -> EntryList:
        return self._commit(entry_list.reorder(self.entries, from_id, to_id))

    def move(self, from_index: int, to_index: int) -> EntryList:
        return self._commit(entry_list.move(self.entries, from_index, to_index))

    def select_slot(self, instant: datetime) -> datetime:
        self.reference = as_instant(instant)
        return self.reference

    def reset_to_now(self, now: Optional[datetime] = None) -> datetime:
        self.reference = as_instant(now) if now else now_utc()
        return self.reference

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        self.store.save_theme(self.theme)
        return self.theme

    def reset(self) -> EntryList:
        """Forget the saved list and start again from the host zone."""
        logger.info("Resetting saved timezones")
        self.store.clear()
        return self._commit([])

    def render(self) -> List[EntryView]:
        """Localize every entry against the reference instant.

        Entries whose zone cannot be resolved are left out of this pass.
        """
        views: List[EntryView] = []
        for entry in self.entries:
            try:
                info = localize(self.reference, entry.zone_id)
                slots = generate_slots(
                    self.reference,
                    entry.zone_id,
                    window_size=self.settings.slot_window_size,
                    step_minutes=self.settings.slot_step_minutes,
                    center_offset=self.settings.slot_center_offset,
                )
            except InvalidZone as exc:
                logger.warning("Skipping %s in this render pass: %s", entry.key, exc)
                continue
            views.append(EntryView(entry=entry, info=info, slots=slots))
        return views
