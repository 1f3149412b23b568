from __future__ import annotations

from typing import Protocol


class ZoneRepo(Protocol):
    def get(self, zone_id: int): ...
    def get_by_name(self, name: str): ...
    def create(self, name: str, alias: str | None = None): ...
    def resolve(self, zone: int | str): ...


class RoomRepo(Protocol):
    def get_by_key(self, room_key: str): ...
    def upsert(
        self,
        room_key: str,
        *,
        name: str,
        description: str,
        zone_id: int | None,
        zone_exit: bool = False,
        visit_count: int = 1,
        npcs_json: str = "[]",
        items_json: str = "[]",
        exits_json: str = "[]",
    ): ...
    def list_by_zone(self, zone_id: int): ...


class RoomExitRepo(Protocol):
    def get(self, from_room_id: int, direction: str): ...
    def upsert(
        self,
        from_room_id: int,
        direction: str,
        to_room_id: int | None,
        *,
        is_door: bool = False,
        door_name: str | None = None,
        is_locked: bool = False,
        is_zone_exit: bool = False,
        look_description: str | None = None,
    ): ...
    def list_from(self, from_room_id: int): ...


class UnitOfWork(Protocol):
    zones: ZoneRepo
    rooms: RoomRepo
    exits: RoomExitRepo

    def commit(self) -> None: ...
    def rollback(self) -> None: ...

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
