from __future__ import annotations


class MapperError(Exception):
    """Base class for mud-mapper failures."""


class TranscriptError(MapperError):
    """The transcript could not be read or holds no text."""


class StorageError(MapperError):
    """A storage upsert could not be completed."""


class ZoneNotFoundError(StorageError):
    def __init__(self, zone: int | str):
        super().__init__(f"zone not found: {zone!r}")
        self.zone = zone
