"""Line-shape recognisers shared by the segmenter and the room extractor.

Every helper answers a yes/no question about one cleaned transcript line (or
returns the piece it recognised) and never raises on odd input.
"""

from __future__ import annotations

import re

from .directions import normalize_direction, parse_movement
from .types import DoorInfo

EXIT_LINE_RE = re.compile(r"^(?P<open>\[)?\s*(?:obvious\s+)?exits?\s*:\s*(?P<body>.*)$", re.IGNORECASE)
EXIT_LISTING_RE = re.compile(r"^(?P<dir>[A-Za-z][A-Za-z-]*)\s*[-:]\s+(?P<dest>.+)$")
LOOK_DIRECTION_RE = re.compile(r"^(?:look|l|examine|ex)\s+(?P<dir>[A-Za-z-]+)$", re.IGNORECASE)

ITEM_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^you\s+see\s+(?P<name>.+?)\s+(?:lying\s+)?here\b", re.IGNORECASE),
    re.compile(r"^(?P<name>.+?)\s+(?:is|are)\s+(?:lying|resting on the ground|hanging)\s+here\b", re.IGNORECASE),
    re.compile(r"^(?P<name>.+?)\s+(?:lies|lie|hangs|has been (?:left|dropped)|have been (?:left|dropped))\b.*\bhere\b", re.IGNORECASE),
)

NPC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(?P<name>.+?)\s+(?:is|are)\s+"
        r"(?:standing|sitting|resting|sleeping|kneeling|waiting|hovering|lurking|floating)\s+here\b",
        re.IGNORECASE,
    ),
    re.compile(r"^(?P<name>.+?)\s+(?:stands|sits|sleeps|rests|waits|kneels|lurks|hovers|floats)\s+here\b", re.IGNORECASE),
    re.compile(r"^(?P<name>.+?)\s+(?:is|are)\s+here\b", re.IGNORECASE),
)

ZONE_BANNER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\[\s*current\s+zone\s*:\s*(?P<zone>[^\]]+?)\s*\]", re.IGNORECASE),
    re.compile(r"^current\s+zone\s*:\s*(?P<zone>.+?)\s*$", re.IGNORECASE),
    re.compile(r"^you\s+have\s+entered\s+(?P<zone>.+?)[.!]?$", re.IGNORECASE),
    re.compile(r"^(?:area|zone)\s*:\s*(?P<zone>.+?)\s*$", re.IGNORECASE),
)

MOVE_FAILURE_RE = re.compile(
    r"alas,?\s+you\s+cannot\s+go\s+that\s+way"
    r"|you\s+can(?:not|'t|no)\s+go\s+(?:that\s+way|there)"
    r"|there\s+is\s+no\s+(?:exit|way)\b"
    r"|\bno\s+exit\s+that\s+way"
    r"|\bthe\s+[\w\s-]{1,30}?\s+(?:is|seems\s+to\s+be)\s+(?:closed|locked)"
    r"|you\s+are\s+too\s+exhausted"
    r"|you\s+(?:need|would\s+need|'d\s+need)\s+a\s+boat"
    r"|the\s+way\s+is\s+blocked"
    r"|in\s+your\s+dreams"
    r"|no\s+way!?\s+you(?:'re|\s+are)\s+(?:still\s+)?fighting"
    r"|you\s+can't\s+do\s+that\s+while"
    r"|^huh\?",
    re.IGNORECASE,
)

NOISE_RE = re.compile(
    r"^\S+(?:\s+\S+){0,3}\s+(?:says|said|tells\s+you|orates|shouts|yells|whispers|gossips)\b"
    r"|\b(?:arrives\s+from|has\s+arrived|leaves)\s+(?:the\s+)?(?:north|south|east|west|up|down|above|below)"
    r"|^(?:room\s+scan\s+complete|found\s+exits|you\s+look\b)",
    re.IGNORECASE,
)

DOOR_NOUN_RE = re.compile(
    r"\b(?:a|an|the)\s+(?P<name>(?:[\w'-]+\s+){0,3}?"
    r"(?:door|doors|gate|gates|portal|hatch|archway|grate|portcullis|trapdoor))\b",
    re.IGNORECASE,
)
BARRIER_RE = re.compile(r"\b(?:locked|closed|barred|sealed|shut)\b", re.IGNORECASE)
LOCKED_RE = re.compile(r"\blocked\b", re.IGNORECASE)

COMMAND_WORDS = frozenset(
    {
        "look", "l", "exits", "examine", "ex", "scan", "who", "score", "sc",
        "inventory", "inv", "i", "eq", "equipment", "cast", "c", "say", "tell",
        "get", "take", "drop", "put", "wear", "wield", "kill", "k", "open",
        "close", "unlock", "lock", "rest", "sleep", "wake", "stand", "sit",
        "save", "quit", "help", "consider", "con", "list", "buy", "sell",
        "recall", "affects", "aff", "time", "weather", "where", "map", "bind",
    }
)

_STATE_WORDS = frozenset({"closed", "open", "locked", "unlocked", "barred", "shut"})
_NAME_FLAGS_RE = re.compile(r"^(?:\([^)]*\)\s*)+")
_TITLE_END_REJECT = '.!?,;:"\''


def exit_line_body(text: str) -> str | None:
    """Return the token text of an exit line, or ``None`` if it is not one."""
    match = EXIT_LINE_RE.match(text or "")
    if match is None:
        return None
    body = match.group("body").strip()
    if match.group("open") and body.endswith("]"):
        body = body[:-1].rstrip()
    return body


def is_exit_line(text: str) -> bool:
    return exit_line_body(text) is not None


def exit_listing(text: str) -> str | None:
    """``North - Temple Square`` style listing; returns the direction."""
    match = EXIT_LISTING_RE.match(text or "")
    if match is None:
        return None
    return normalize_direction(match.group("dir"))


def parse_look_direction(text: str) -> str | None:
    match = LOOK_DIRECTION_RE.match((text or "").strip())
    if match is None:
        return None
    return normalize_direction(match.group("dir"))


def looks_like_command_echo(text: str) -> bool:
    words = (text or "").split()
    if not words or len(words) > 6:
        return False
    if not text[0].islower():
        return False
    return words[0] in COMMAND_WORDS


def zone_banner(text: str) -> str | None:
    for pattern in ZONE_BANNER_PATTERNS:
        match = pattern.match(text or "")
        if match:
            return match.group("zone").strip() or None
    return None


def _clean_name(name: str) -> str:
    value = _NAME_FLAGS_RE.sub("", name.strip())
    return value.strip(" .,!;:")


def item_mention(text: str) -> str | None:
    for pattern in ITEM_PATTERNS:
        match = pattern.match(text or "")
        if match:
            return _clean_name(match.group("name")) or None
    return None


def npc_mention(text: str) -> str | None:
    for pattern in NPC_PATTERNS:
        match = pattern.match(text or "")
        if match:
            return _clean_name(match.group("name")) or None
    return None


def is_move_failure(text: str) -> bool:
    return bool(MOVE_FAILURE_RE.search(text or ""))


def is_noise(text: str) -> bool:
    return bool(NOISE_RE.search(text or ""))


def door_from_marker(marker: str) -> DoorInfo:
    """Door metadata from an exit marker such as ``(door)`` or ``[locked iron gate]``."""
    words = marker.strip().lower().split()
    name_words = [word for word in words if word not in _STATE_WORDS]
    return DoorInfo(
        is_door=True,
        door_name=" ".join(name_words) or "door",
        is_locked="locked" in words,
    )


def door_from_text(text: str) -> DoorInfo:
    """Door metadata from free prose, e.g. a ``look north`` response."""
    match = DOOR_NOUN_RE.search(text or "")
    barrier = bool(BARRIER_RE.search(text or ""))
    if match is None and not barrier:
        return DoorInfo()
    return DoorInfo(
        is_door=True,
        door_name=match.group("name").lower() if match else None,
        is_locked=bool(LOCKED_RE.search(text or "")),
    )


def looks_like_title(text: str, max_length: int = 60, max_words: int = 10) -> bool:
    """Heuristic shape of a room title line.

    Short, starts with a capital letter or digit, does not end like a
    sentence, and is none of the other recognised line kinds.
    """
    if not text or len(text) < 2 or len(text) > max_length:
        return False
    if len(text.split()) > max_words:
        return False
    if not (text[0].isupper() or text[0].isdigit()):
        return False
    if text[-1] in _TITLE_END_REJECT:
        return False
    if is_exit_line(text) or exit_listing(text):
        return False
    if parse_movement(text) or parse_look_direction(text):
        return False
    if zone_banner(text) or item_mention(text) or npc_mention(text):
        return False
    if is_move_failure(text) or is_noise(text):
        return False
    return True
