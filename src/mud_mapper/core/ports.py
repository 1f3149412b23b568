from __future__ import annotations

from typing import Protocol

from .types import CanonicalRoom, DoorInfo, ParseWarning, ZoneLabel


class WarningSink(Protocol):
    def emit(self, warning: ParseWarning) -> None:
        ...


class MapStoragePort(Protocol):
    def resolve_zone(self, zone: ZoneLabel) -> int:
        ...

    def upsert_room(self, room: CanonicalRoom, zone_id: int | None) -> int:
        ...

    def upsert_edge(
        self,
        from_room_id: int,
        direction: str,
        to_room_id: int | None,
        door: DoorInfo,
        *,
        is_zone_exit: bool = False,
        look_description: str | None = None,
    ) -> None:
        ...
