from __future__ import annotations

import json

import pytest

from mud_mapper.core.context import ParserConfig
from mud_mapper.core.engine import TranscriptMapper, parse_transcript, read_transcript
from mud_mapper.core.errors import TranscriptError
from mud_mapper.core.exporter import export_map, load_export, write_export
from mud_mapper.core.types import UNASSIGNED_ZONE


def test_temple_example_end_to_end(temple_transcript, context):
    result = parse_transcript(temple_transcript, context)

    assert [room.key for room in result.rooms] == ["the-temple-of-midgaard", "temple-square"]
    assert len(result.edges) == 1
    edge = result.edges[0]
    assert (edge.from_key, edge.direction, edge.to_key) == ("the-temple-of-midgaard", "north", "temple-square")
    assert edge.is_door is False

    temple = result.room("the-temple-of-midgaard")
    assert temple.npcs == ["A cleric of the temple"]
    assert temple.exit_for("south").door.is_door
    assert result.edges_from("temple-square") == []
    # The failed "east" from Temple Square is the only warning.
    assert [warning.kind for warning in result.warnings] == ["correlation"]
    assert result.stats["danglingEdges"] == 0
    assert result.stats["rooms"] == 2


def test_return_trip_resolves_reverse_exit(temple_transcript, context):
    text = temple_transcript + "south\n" + temple_transcript.split("\n", 1)[1].split("\n\n", 1)[0] + "\n"
    result = parse_transcript(text, context)

    assert len(result.rooms) == 2
    assert result.room("the-temple-of-midgaard").visit_count == 2
    assert {(edge.from_key, edge.direction, edge.to_key) for edge in result.edges} == {
        ("the-temple-of-midgaard", "north", "temple-square"),
        ("temple-square", "south", "the-temple-of-midgaard"),
    }


def test_export_shape(temple_transcript):
    document = export_map(parse_transcript(temple_transcript))

    assert set(document) == {"rooms", "edges", "stats"}
    assert set(document["rooms"][0]) == {
        "key", "title", "description", "npcs", "items", "zone", "exits", "visits", "zoneExit",
    }
    assert document["edges"][0] == {
        "from": "the-temple-of-midgaard",
        "direction": "north",
        "to": "temple-square",
        "isDoor": False,
        "doorName": None,
        "isLocked": False,
        "isZoneExit": False,
        "lookDescription": None,
    }
    assert document["rooms"][0]["zone"] == UNASSIGNED_ZONE
    assert document["stats"] == {"totalRooms": 2, "totalEdges": 1, "danglingEdges": 0, "warnings": 1}


def test_dangling_edge_exports_null_target(temple_transcript):
    mapper = TranscriptMapper(ParserConfig(include_unexplored_exits=True))
    document = export_map(mapper.parse(temple_transcript))

    dangling = [edge for edge in document["edges"] if edge["to"] is None]
    assert {(edge["from"], edge["direction"]) for edge in dangling} == {
        ("the-temple-of-midgaard", "south"),
        ("temple-square", "south"),
        ("temple-square", "west"),
    }
    assert all("to" in edge for edge in document["edges"])
    assert document["stats"]["danglingEdges"] == 3


def test_reimported_export_keeps_counts_and_content(temple_transcript, tmp_path):
    mapper = TranscriptMapper(ParserConfig(include_unexplored_exits=True))
    first = mapper.parse(temple_transcript, zone=3)
    path = write_export(first, tmp_path / "map.json")

    reloaded = load_export(path)
    again = export_map(reloaded)
    written = json.loads(path.read_text(encoding="utf-8"))

    assert len(reloaded.rooms) == len(first.rooms)
    assert len(reloaded.edges) == len(first.edges)
    assert again["rooms"] == written["rooms"]
    assert again["edges"] == written["edges"]
    assert [zone.label for zone in reloaded.zones] == [3]


def test_load_export_drops_edges_from_unknown_rooms():
    result = load_export(
        {
            "rooms": [{"key": "a", "title": "A", "description": "Room a.", "exits": ["north"]}],
            "edges": [
                {"from": "a", "direction": "north", "to": "missing"},
                {"from": "ghost", "direction": "south", "to": "a"},
            ],
        }
    )

    assert [(edge.from_key, edge.to_key) for edge in result.edges] == [("a", None)]
    assert result.rooms[0].zone == UNASSIGNED_ZONE


def test_read_transcript_errors(tmp_path):
    with pytest.raises(TranscriptError):
        read_transcript(tmp_path / "missing.log")
    blank = tmp_path / "blank.log"
    blank.write_text("  \n\n", encoding="utf-8")
    with pytest.raises(TranscriptError):
        read_transcript(blank)


def test_read_transcript_falls_back_to_latin1(tmp_path):
    path = tmp_path / "latin.log"
    path.write_bytes("Caf\xe9 Royale\n".encode("latin-1"))

    assert read_transcript(path) == "Caf\xe9 Royale\n"


def test_transcript_without_rooms_yields_empty_map():
    result = TranscriptMapper().parse("Gandalf says 'hello'\nYou are hungry.\n")

    assert result.rooms == []
    assert result.edges == []
    assert result.zones == []


def test_warnings_flow_through_injected_sink(sink):
    mapper = TranscriptMapper(sink=sink)
    result = mapper.parse("Void\nDark.\nExits: none\n")

    assert result.rooms == []
    assert [warning.kind for warning in sink.warnings] == ["extraction"]
    assert result.warnings == sink.warnings


def test_arrival_banners_assign_zones_and_mark_zone_exit(context):
    text = (
        "Dusty Road\nA dusty road winds between low hills toward the east.\nExits: east\n"
        "east\nYou have entered Midgaard.\n"
        "Crossroads\nFour weathered roads meet beneath a leaning signpost.\nExits: north, west\n"
        "north\nYou have entered Haon-Dor.\n"
        "Forest Path\nA narrow path winds between ancient oaks.\nExits: south\n"
    )
    result = parse_transcript(text, context)

    assert {room.key: room.zone for room in result.rooms} == {
        "dusty-road": "Midgaard",
        "crossroads": "Midgaard",
        "forest-path": "Haon-Dor",
    }
    zone_exits = [(edge.from_key, edge.to_key) for edge in result.edges if edge.is_zone_exit]
    assert zone_exits == [("crossroads", "forest-path")]
    assert UNASSIGNED_ZONE not in [zone.label for zone in result.zones]
