from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.errors import ZoneNotFoundError
from ...core.normalize import collapse_whitespace, normalize_title
from .base import utcnow
from .models import Room, RoomExit, Zone


def _is_unique_violation(exc: IntegrityError, constraint: str, sqlite_columns: str) -> bool:
    message = str(exc).lower()
    return constraint in message or sqlite_columns in message


class ZoneRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, zone_id: int) -> Zone | None:
        return self.session.get(Zone, zone_id)

    def get_by_name(self, name: str) -> Zone | None:
        normalized = normalize_title(name)
        stmt = (
            select(Zone)
            .where(or_(Zone.name_normalized == normalized, func.lower(Zone.alias) == normalized))
            .order_by(Zone.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, name: str, alias: str | None = None) -> Zone:
        name = collapse_whitespace(name)
        try:
            with self.session.begin_nested():
                row = Zone(name=name, name_normalized=normalize_title(name), alias=alias)
                self.session.add(row)
                self.session.flush()
                return row
        except IntegrityError as exc:
            if not _is_unique_violation(exc, "uq_zones_name_normalized", "zones.name_normalized"):
                raise
        existing = self.get_by_name(name)
        assert existing is not None
        return existing

    def resolve(self, zone: int | str) -> Zone:
        """Find a zone by id, name or alias; unknown names are created."""
        if isinstance(zone, int):
            row = self.get(zone)
            if row is None:
                raise ZoneNotFoundError(zone)
            return row
        row = self.get_by_name(zone)
        if row is not None:
            return row
        return self.create(zone)

    def list_all(self) -> list[Zone]:
        return list(self.session.execute(select(Zone).order_by(Zone.id)).scalars().all())


class RoomRepo:
    def __init__(self, session: Session):
        self.session = session

    def get_by_key(self, room_key: str) -> Room | None:
        stmt = select(Room).where(Room.room_key == room_key).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

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
    ) -> Room:
        values = {
            "name": name,
            "description": description,
            "zone_id": zone_id,
            "zone_exit": zone_exit,
            "visit_count": visit_count,
            "npcs_json": npcs_json,
            "items_json": items_json,
            "exits_json": exits_json,
        }
        row = self.get_by_key(room_key)
        if row is None:
            try:
                with self.session.begin_nested():
                    row = Room(room_key=room_key, **values)
                    self.session.add(row)
                    self.session.flush()
                    return row
            except IntegrityError as exc:
                if not _is_unique_violation(exc, "uq_rooms_room_key", "rooms.room_key"):
                    raise
            row = self.get_by_key(room_key)
            assert row is not None
        for field_name, value in values.items():
            setattr(row, field_name, value)
        row.updated_at = utcnow()
        self.session.flush()
        return row

    def list_by_zone(self, zone_id: int) -> list[Room]:
        stmt = select(Room).where(Room.zone_id == zone_id).order_by(Room.id)
        return list(self.session.execute(stmt).scalars().all())


class RoomExitRepo:
    def __init__(self, session: Session):
        self.session = session

    def get(self, from_room_id: int, direction: str) -> RoomExit | None:
        stmt = (
            select(RoomExit)
            .where(RoomExit.from_room_id == from_room_id)
            .where(RoomExit.direction == direction)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

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
    ) -> RoomExit:
        row = self.get(from_room_id, direction)
        if row is None:
            try:
                with self.session.begin_nested():
                    row = RoomExit(
                        from_room_id=from_room_id,
                        direction=direction,
                        to_room_id=to_room_id,
                        is_door=is_door,
                        door_name=door_name,
                        is_locked=is_locked,
                        is_zone_exit=is_zone_exit,
                        look_description=look_description,
                    )
                    self.session.add(row)
                    self.session.flush()
                    return row
            except IntegrityError as exc:
                if not _is_unique_violation(
                    exc,
                    "uq_room_exits_from_direction",
                    "room_exits.from_room_id, room_exits.direction",
                ):
                    raise
            row = self.get(from_room_id, direction)
            assert row is not None

        # A dangling re-import never forgets a destination learned earlier.
        if to_room_id is not None:
            row.to_room_id = to_room_id
        row.is_door = is_door
        row.is_locked = is_locked
        row.is_zone_exit = is_zone_exit
        if door_name is not None:
            row.door_name = door_name
        if look_description is not None:
            row.look_description = look_description
        row.updated_at = utcnow()
        self.session.flush()
        return row

    def list_from(self, from_room_id: int) -> list[RoomExit]:
        stmt = select(RoomExit).where(RoomExit.from_room_id == from_room_id).order_by(RoomExit.id)
        return list(self.session.execute(stmt).scalars().all())
