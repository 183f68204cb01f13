"""Exception types raised by the time engine and the storage layer."""
from __future__ import annotations


class WorldtimezError(Exception):
    """Base class for application errors."""


class InvalidZone(WorldtimezError, ValueError):
    """A zone identifier could not be resolved to offset/calendar data."""

    def __init__(self, zone_id: str, reason: str | None = None) -> None:
        self.zone_id = zone_id
        self.reason = reason
        message = f"Unknown timezone {zone_id!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CorruptPersistedState(WorldtimezError):
    """The stored entry list failed format or schema validation."""


class StorageReadFailure(WorldtimezError):
    """The backing store could not be read."""


class StorageWriteFailure(WorldtimezError):
    """The backing store rejected a write."""
