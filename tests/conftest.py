from __future__ import annotations

import pytest
from sqlalchemy import text

from mud_mapper.core.context import ParseContext, ParserConfig
from mud_mapper.persistence.sqlalchemy.db import build_engine, build_session_factory, create_schema
from mud_mapper.persistence.sqlalchemy.uow import unit_of_work_factory

TEMPLE_TRANSCRIPT = """\
<100H 120M 90V> look
The Temple of Midgaard
You are in the southern end of the temple hall in the Temple of Midgaard.
The temple has been constructed from giant marble blocks.
A cleric of the temple is standing here.
Exits: north, south(door)

north
Temple Square
You are standing on the temple square, where huge marble steps lead up
to the temple gate and the entrance to the clerics guild lies to the west.
Exits: south, west

east
Alas, you cannot go that way...
"""


class RecordingSink:
    def __init__(self):
        self.warnings = []

    def emit(self, warning) -> None:
        self.warnings.append(warning)


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite+pysqlite:///:memory:")
    create_schema(engine)
    sf = build_session_factory(engine)
    with sf() as session:
        session.execute(text("PRAGMA foreign_keys=ON"))
        session.commit()
    return sf


@pytest.fixture()
def uow_factory(session_factory):
    return unit_of_work_factory(session_factory)


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def context(sink):
    return ParseContext(config=ParserConfig(), sink=sink)


@pytest.fixture()
def temple_transcript():
    return TEMPLE_TRANSCRIPT
