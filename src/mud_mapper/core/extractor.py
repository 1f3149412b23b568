"""Turn one observation block into an :class:`ObservedRoom`."""

from __future__ import annotations

import re
from dataclasses import replace

from .context import ParserConfig
from .directions import normalize_direction
from .normalize import collapse_whitespace
from .patterns import (
    door_from_marker,
    exit_line_body,
    exit_listing,
    is_noise,
    item_mention,
    npc_mention,
    zone_banner,
)
from .types import OBSERVATION, DoorInfo, ExitToken, ObservedRoom, RawBlock

# Bracketed groups or bare words; commas, semicolons, slashes and blanks separate.
_EXIT_PIECE_RE = re.compile(r"\[[^\]]*\]|\([^)]*\)|[^\s,;/\[\]()]+")
_SUFFIX_MARKERS = "*!#"


def parse_exit_tokens(body: str) -> list[ExitToken]:
    """Split the text after ``Exits:`` into normalised exit tokens.

    ``[north]`` and ``(north)`` mark a closed door on that exit; a bracketed
    marker after a direction (``south(door)``, ``east [iron gate]``) names it.
    """
    if collapse_whitespace(body).lower().rstrip(".") in ("", "none", "no exits"):
        return []
    tokens: list[ExitToken] = []
    marked = False
    for piece in _EXIT_PIECE_RE.findall(body):
        if piece[0] in "[(":
            inner = piece[1:-1].strip()
            direction = normalize_direction(inner)
            if direction is not None:
                tokens.append(ExitToken(raw=piece, direction=direction, door=DoorInfo(is_door=True)))
                marked = True
            elif tokens and not marked and inner:
                last = tokens[-1]
                tokens[-1] = replace(last, raw=f"{last.raw}{piece}", door=door_from_marker(inner))
                marked = True
            continue
        word = piece.rstrip(_SUFFIX_MARKERS)
        direction = normalize_direction(word)
        if direction is None:
            continue
        door = DoorInfo(is_door=True) if word != piece else DoorInfo()
        tokens.append(ExitToken(raw=piece, direction=direction, door=door))
        marked = door.is_door
    return tokens


def extract_room(block: RawBlock, config: ParserConfig | None = None) -> ObservedRoom | None:
    """Parse ``block`` or return ``None`` when it is not a usable room.

    ``None`` means the title or description is missing; the caller records a
    warning and carries on.
    """
    cfg = config or ParserConfig()
    if block.kind != OBSERVATION:
        return None
    lines = [line for line in block.lines if line.text]
    if not lines:
        return None
    title = collapse_whitespace(lines[0].text)
    if not title:
        return None

    description: list[str] = []
    npcs: list[str] = []
    items: list[str] = []
    zone_hints: list[str] = []
    exit_tokens: list[ExitToken] = []
    seen_exits = False
    listing_open = False

    for line in lines[1:]:
        text = line.text
        body = exit_line_body(text) if not seen_exits else None
        if body is not None:
            seen_exits = True
            exit_tokens = parse_exit_tokens(body)
            listing_open = not body
            continue
        if listing_open:
            direction = exit_listing(text)
            if direction is not None:
                exit_tokens.append(ExitToken(raw=text, direction=direction))
                continue
            listing_open = False

        zone = zone_banner(text)
        if zone is not None:
            zone_hints.append(zone)
            continue
        item = item_mention(text)
        if item is not None:
            if item not in items:
                items.append(item)
            continue
        npc = npc_mention(text)
        if npc is not None:
            if npc not in npcs:
                npcs.append(npc)
            continue
        if not seen_exits and not is_noise(text):
            description.append(text)

    body_text = collapse_whitespace(" ".join(description))
    if len(body_text) < cfg.min_description_length:
        return None

    return ObservedRoom(
        title=title,
        body_text=body_text,
        exit_tokens=tuple(_unique_directions(exit_tokens)),
        npc_mentions=tuple(npcs),
        item_mentions=tuple(items),
        source_block_index=block.index,
        line_start=block.first_line,
        line_end=block.last_line,
        zone_hints=tuple(zone_hints),
    )


def _unique_directions(tokens: list[ExitToken]) -> list[ExitToken]:
    seen: set[str] = set()
    out: list[ExitToken] = []
    for token in tokens:
        if token.direction in seen:
            continue
        seen.add(token.direction)
        out.append(token)
    return out
