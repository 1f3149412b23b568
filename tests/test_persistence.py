from __future__ import annotations

import json

import pytest
from sqlalchemy import func, select

from mud_mapper.core.context import ParseContext, ParserConfig
from mud_mapper.core.engine import TranscriptMapper
from mud_mapper.core.errors import StorageError, ZoneNotFoundError
from mud_mapper.core.persister import persist_map
from mud_mapper.core.types import DoorInfo
from mud_mapper.persistence.sqlalchemy.models import Room, RoomExit, Zone
from mud_mapper.persistence.sqlalchemy.store import SQLAlchemyMapStore


def _counts(session_factory):
    with session_factory() as session:
        return tuple(
            session.execute(select(func.count()).select_from(model)).scalar_one()
            for model in (Zone, Room, RoomExit)
        )


def test_persist_is_idempotent_across_imports(temple_transcript, session_factory, uow_factory):
    mapper = TranscriptMapper()
    store = SQLAlchemyMapStore(uow_factory)

    first = mapper.persist(mapper.parse(temple_transcript), store)
    counts = _counts(session_factory)
    second = mapper.persist(mapper.parse(temple_transcript), store)

    assert (first.rooms_saved, first.edges_saved, first.failures) == (2, 1, 0)
    assert (second.rooms_saved, second.edges_saved, second.failures) == (2, 1, 0)
    assert counts == (1, 2, 1)
    assert _counts(session_factory) == counts


def test_persisted_rows_carry_room_and_exit_data(temple_transcript, session_factory, uow_factory):
    mapper = TranscriptMapper()
    mapper.persist(mapper.parse(temple_transcript), SQLAlchemyMapStore(uow_factory))

    with uow_factory() as uow:
        temple = uow.rooms.get_by_key("the-temple-of-midgaard")
        square = uow.rooms.get_by_key("temple-square")
        zone = uow.zones.get_by_name("Unassigned")
        exits = uow.exits.list_from(temple.id)

        assert temple.name == "The Temple of Midgaard"
        assert temple.zone_id == zone.id
        assert json.loads(temple.npcs_json) == ["A cleric of the temple"]
        assert [item["direction"] for item in json.loads(temple.exits_json)] == ["north", "south"]
        assert [(row.direction, row.to_room_id) for row in exits] == [("north", square.id)]
        assert uow.rooms.list_by_zone(zone.id)[0].id == temple.id


def test_dangling_reimport_keeps_known_destination(session_factory, uow_factory):
    store = SQLAlchemyMapStore(uow_factory)
    with uow_factory() as uow:
        a = uow.rooms.upsert("a", name="A", description="Room a.", zone_id=None)
        b = uow.rooms.upsert("b", name="B", description="Room b.", zone_id=None)
        uow.commit()

    store.upsert_edge(a.id, "north", b.id, DoorInfo())
    store.upsert_edge(a.id, "north", None, DoorInfo(is_door=True, door_name="gate"))

    with uow_factory() as uow:
        row = uow.exits.get(a.id, "north")
        assert row.to_room_id == b.id
        assert row.is_door
        assert row.door_name == "gate"


def test_explicit_zone_id_must_exist(uow_factory):
    store = SQLAlchemyMapStore(uow_factory)
    with uow_factory() as uow:
        zone = uow.zones.create("Midgaard", alias="mid")
        uow.commit()

    assert store.resolve_zone(zone.id) == zone.id
    assert store.resolve_zone("midgaard") == zone.id
    assert store.resolve_zone("MID") == zone.id
    with pytest.raises(ZoneNotFoundError):
        store.resolve_zone(999)


def test_unknown_zone_id_fails_rooms_without_aborting(temple_transcript, uow_factory, session_factory):
    mapper = TranscriptMapper()
    context = mapper.new_context(42)
    summary = mapper.persist(mapper.parse(temple_transcript, context=context), SQLAlchemyMapStore(uow_factory), context)

    assert summary.rooms_saved == 0
    assert summary.rooms_failed == 2
    assert summary.edges_failed == 1
    assert context.count("persistence") == 4
    assert _counts(session_factory) == (0, 0, 0)


class FlakyStore:
    def __init__(self, failing_key: str):
        self.failing_key = failing_key
        self.rooms: dict[str, int] = {}
        self.edges: list[tuple[int, str, int | None]] = []

    def resolve_zone(self, zone):
        return 1

    def upsert_room(self, room, zone_id):
        if room.key == self.failing_key:
            raise StorageError("disk full")
        self.rooms[room.key] = len(self.rooms) + 1
        return self.rooms[room.key]

    def upsert_edge(self, from_room_id, direction, to_room_id, door, *, is_zone_exit=False, look_description=None):
        self.edges.append((from_room_id, direction, to_room_id))


def test_failing_room_does_not_stop_batch(temple_transcript, sink):
    context = ParseContext(config=ParserConfig(include_unexplored_exits=True), sink=sink)
    result = TranscriptMapper(context.config).parse(temple_transcript, context=context)
    store = FlakyStore("temple-square")

    summary = persist_map(result, store, context)

    assert store.rooms == {"the-temple-of-midgaard": 1}
    # north leads to the unsaved square; the dangling south exit still saves.
    assert store.edges == [(1, "south", None)]
    assert summary.rooms_failed == 1
    assert summary.edges_saved == 1
    assert summary.edges_failed == 3
    assert any("disk full" in warning.message for warning in sink.warnings)
