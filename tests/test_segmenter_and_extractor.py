from __future__ import annotations

from mud_mapper.core.context import ParserConfig
from mud_mapper.core.extractor import extract_room
from mud_mapper.core.segmenter import BlockMatch, DEFAULT_MATCHERS, segment
from mud_mapper.core.types import COMMAND, OBSERVATION


def test_segment_splits_observations_and_commands(temple_transcript):
    blocks = segment(temple_transcript)

    assert [block.kind for block in blocks] == [OBSERVATION, COMMAND, OBSERVATION, COMMAND]
    assert blocks[0].head == "The Temple of Midgaard"
    assert blocks[1].head == "north"
    assert blocks[2].head == "Temple Square"
    assert [line.text for line in blocks[3].lines] == ["east", "Alas, you cannot go that way..."]


def test_segment_without_room_shapes_returns_empty():
    assert segment("") == []
    assert segment("Gandalf says 'hello'\nnorth\nYou are hungry.\n") == []


def test_segment_keeps_trailing_lines_with_observation():
    text = (
        "Market Square\n"
        "Stalls crowd every corner of the noisy market square.\n"
        "Exits: north\n"
        "[Current Zone: Midgaard]\n"
        "The baker is standing here.\n"
    )
    blocks = segment(text)

    assert len(blocks) == 1
    room = extract_room(blocks[0])
    assert room.zone_hints == ("Midgaard",)
    assert room.npc_mentions == ("The baker",)
    assert room.exit_directions == ["north"]


def test_segment_prefers_later_title_when_two_titles_stack():
    text = (
        "Welcome Back Adventurer\n"
        "The Dusty Road\n"
        "A dusty road winds between low hills toward the east.\n"
        "Exits: east, west\n"
    )
    blocks = segment(text)

    assert len(blocks) == 1
    assert blocks[0].head == "The Dusty Road"


def test_custom_matcher_is_tried_in_priority_order():
    def skip_ooc(lines, i, config):
        if lines[i].text.startswith("[OOC]"):
            return BlockMatch(kind=None, end=i + 1)
        return None

    text = (
        "Quiet Glade\n"
        "Tall grass sways gently in the quiet forest glade.\n"
        "Exits: south\n"
        "[OOC] Bob: brb\n"
    )
    blocks = segment(text, matchers=(skip_ooc, *DEFAULT_MATCHERS))

    assert [line.text for line in blocks[0].lines][-1] == "Exits: south"


def test_extract_room_fields(temple_transcript):
    blocks = segment(temple_transcript)
    room = extract_room(blocks[0])

    assert room.title == "The Temple of Midgaard"
    assert room.body_text.startswith("You are in the southern end of the temple hall")
    assert room.body_text.endswith("giant marble blocks.")
    assert room.npc_mentions == ("A cleric of the temple",)
    assert room.exit_directions == ["north", "south"]
    assert room.exit_tokens[1].door.is_door
    assert room.ref == "block-0"


def test_extract_room_exit_listing_format():
    text = (
        "Guard Post\n"
        "A cramped stone guard post overlooks the city gate.\n"
        "Obvious exits:\n"
        "North - Main Gate\n"
        "Down  - Cellar\n"
    )
    room = extract_room(segment(text)[0])

    assert room.exit_directions == ["north", "down"]
    assert room.body_text == "A cramped stone guard post overlooks the city gate."


def test_extract_room_rejects_short_description():
    text = "Dark Cell\nDark.\nExits: none\n"
    blocks = segment(text)

    assert blocks[0].kind == OBSERVATION
    assert extract_room(blocks[0]) is None
    assert extract_room(blocks[0], ParserConfig(min_description_length=3)) is not None


def test_extract_room_skips_chatter_in_description():
    text = (
        "Town Hall\n"
        "The town hall is a grand building of white stone.\n"
        "Gandalf says 'nice place'\n"
        "Exits: west\n"
    )
    room = extract_room(segment(text)[0])

    assert room.body_text == "The town hall is a grand building of white stone."
