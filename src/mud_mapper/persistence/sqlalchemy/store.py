from __future__ import annotations

from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from ...core.errors import StorageError
from ...core.normalize import dump_json
from ...core.types import CanonicalRoom, DoorInfo, ZoneLabel
from ..interfaces import UnitOfWork


class SQLAlchemyMapStore:
    """Storage port backed by the rooms/room_exits/zones tables.

    Every call runs in its own unit of work so a failed upsert rolls back
    only itself.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    def resolve_zone(self, zone: ZoneLabel) -> int:
        try:
            with self._uow_factory() as uow:
                row = uow.zones.resolve(zone)
                uow.commit()
                return row.id
        except SQLAlchemyError as exc:
            raise StorageError(f"zone {zone!r}: {exc}") from exc

    def upsert_room(self, room: CanonicalRoom, zone_id: int | None) -> int:
        exits = [
            {
                "direction": token.direction,
                "isDoor": token.door.is_door,
                "doorName": token.door.door_name,
                "isLocked": token.door.is_locked,
            }
            for token in room.exits
        ]
        try:
            with self._uow_factory() as uow:
                row = uow.rooms.upsert(
                    room.key,
                    name=room.title,
                    description=room.description,
                    zone_id=zone_id,
                    zone_exit=room.zone_exit,
                    visit_count=room.visit_count,
                    npcs_json=dump_json(room.npcs),
                    items_json=dump_json(room.items),
                    exits_json=dump_json(exits),
                )
                uow.commit()
                return row.id
        except SQLAlchemyError as exc:
            raise StorageError(f"room {room.key!r}: {exc}") from exc

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
        try:
            with self._uow_factory() as uow:
                uow.exits.upsert(
                    from_room_id,
                    direction,
                    to_room_id,
                    is_door=door.is_door,
                    door_name=door.door_name,
                    is_locked=door.is_locked,
                    is_zone_exit=is_zone_exit,
                    look_description=look_description,
                )
                uow.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"exit {from_room_id}/{direction}: {exc}") from exc
