from __future__ import annotations

import pytest

from mud_mapper.core.directions import CANONICAL_DIRECTIONS, normalize_direction, opposite, parse_movement
from mud_mapper.core.extractor import parse_exit_tokens
from mud_mapper.core.normalize import clean_line, slugify, word_overlap
from mud_mapper.core.patterns import (
    door_from_text,
    exit_line_body,
    is_move_failure,
    looks_like_title,
    npc_mention,
    zone_banner,
)


def test_opposite_is_an_involution_over_all_directions():
    for direction in CANONICAL_DIRECTIONS:
        assert opposite(opposite(direction)) == direction
    assert opposite("ne") == "southwest"


def test_opposite_rejects_unknown_token():
    with pytest.raises(ValueError):
        opposite("sideways")


def test_normalize_direction_aliases_and_noise():
    assert normalize_direction("N") == "north"
    assert normalize_direction("south-west") == "southwest"
    assert normalize_direction("up.") == "up"
    assert normalize_direction("no") is None
    assert normalize_direction(None) is None


def test_parse_movement_accepts_bare_and_verb_forms_only():
    assert parse_movement("n") == "north"
    assert parse_movement("go east") == "east"
    assert parse_movement("look north") is None
    assert parse_movement("north gate") is None


def test_clean_line_strips_colour_markup_and_prompt():
    assert clean_line("\x1b[1;36mThe Temple of Midgaard\x1b[0m") == "The Temple of Midgaard"
    assert clean_line('<font color="#00FFFF">Temple Square</font>') == "Temple Square"
    assert clean_line("24H 100M 80V > north") == "north"
    assert clean_line("Fish &amp; Chips") == "Fish & Chips"


def test_exit_line_variants():
    assert exit_line_body("Exits: north, south") == "north, south"
    assert exit_line_body("[EXITS: n e s w]") == "n e s w"
    assert exit_line_body("Obvious exits:") == ""
    assert exit_line_body("The exit is to the north.") is None


def test_parse_exit_tokens_marks_doors():
    tokens = parse_exit_tokens("north, south(door), [east], west [locked iron gate], up*")
    by_direction = {token.direction: token.door for token in tokens}

    assert [token.direction for token in tokens] == ["north", "south", "east", "west", "up"]
    assert not by_direction["north"].is_door
    assert by_direction["south"].is_door and by_direction["south"].door_name == "door"
    assert by_direction["east"].is_door
    assert by_direction["west"].door_name == "iron gate"
    assert by_direction["west"].is_locked
    assert by_direction["up"].is_door


def test_parse_exit_tokens_none():
    assert parse_exit_tokens("none") == []
    assert parse_exit_tokens("") == []


def test_title_heuristic():
    assert looks_like_title("The Temple of Midgaard")
    assert not looks_like_title("You are in the southern end of the temple.")
    assert not looks_like_title("north")
    assert not looks_like_title("Exits: north")
    assert not looks_like_title("A cityguard is standing here")


def test_line_recognisers():
    assert zone_banner("[Current Zone: Midgaard]") == "Midgaard"
    assert zone_banner("You have entered the Haon-Dor forest.") == "the Haon-Dor forest"
    assert npc_mention("(Glowing) The cityguard is standing here.") == "The cityguard"
    assert is_move_failure("Alas, you cannot go that way...")
    assert is_move_failure("The iron gate seems to be closed.")


def test_door_from_text():
    door = door_from_text("You see a heavy oak door set in the wall. It is locked.")
    assert door.is_door
    assert door.door_name == "heavy oak door"
    assert door.is_locked
    assert not door_from_text("You see nothing special.").is_door


def test_slug_and_similarity():
    assert slugify("The Temple of Midgaard") == "the-temple-of-midgaard"
    assert slugify("!!!") == "room"
    assert word_overlap("a b c", "a b c") == 1.0
    assert word_overlap("a b", "c d") == 0.0
