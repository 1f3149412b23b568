from __future__ import annotations

import json

from mud_mapper.core.engine import TranscriptMapper
from mud_mapper.core.exporter import export_map
from mud_mapper.persistence.sqlalchemy import SQLAlchemyMapStore, open_database, unit_of_work_factory

TRANSCRIPT = """\
<100H 120M 90V>
\x1b[1;36mThe Temple of Midgaard\x1b[0m
You are in the southern end of the temple hall in the Temple of Midgaard.
The temple has been constructed from giant marble blocks.
[EXITS: n s(door)]
[Current Zone: Midgaard]

look north
You see the temple square to the north.

n
Temple Square
You are standing on the temple square, where huge marble steps lead up
to the temple gate and the entrance to the clerics guild lies to the west.
A cityguard is standing here.
Exits: south, west

w
Alas, you cannot go that way...

s
The Temple of Midgaard
You are in the southern end of the temple hall in the Temple of Midgaard.
The temple has been constructed from giant marble blocks.
[EXITS: n s(door)]
"""


def main() -> None:
    mapper = TranscriptMapper()
    result = mapper.parse(TRANSCRIPT)

    print(json.dumps(export_map(result), indent=2))

    engine, session_factory = open_database("sqlite+pysqlite:///:memory:")
    uow_factory = unit_of_work_factory(session_factory)
    summary = mapper.persist(result, SQLAlchemyMapStore(uow_factory))
    print("persisted:", summary)

    with uow_factory() as uow:
        for zone in uow.zones.list_all():
            rooms = uow.rooms.list_by_zone(zone.id)
            print(f"zone {zone.name}: {[room.room_key for room in rooms]}")
            for room in rooms:
                for row in uow.exits.list_from(room.id):
                    print(f"  {room.room_key} --{row.direction}--> {row.to_room_id}")
    engine.dispose()


if __name__ == "__main__":
    main()
