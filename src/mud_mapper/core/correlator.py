"""Pair movement commands with the rooms they lead to."""

from __future__ import annotations

import operator
from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence

from .context import ParseContext
from .directions import opposite, parse_movement
from .extractor import extract_room
from .normalize import collapse_whitespace
from .patterns import door_from_text, is_move_failure, parse_look_direction, zone_banner
from .types import COMMAND, Correlation, Edge, ExitNote, MovementEvent, ObservedRoom, RawBlock


def movement_from_block(block: RawBlock) -> MovementEvent | None:
    if block.kind != COMMAND:
        return None
    direction = parse_movement(block.head)
    if direction is None:
        return None
    return MovementEvent(direction=direction, source_block_index=block.index, line_number=block.first_line)


def _response_text(block: RawBlock) -> str:
    return collapse_whitespace(" ".join(line.text for line in block.response))


def _failure_line(block: RawBlock) -> Optional[int]:
    for line in block.response:
        if is_move_failure(line.text):
            return line.number
    return None


def _banners(block: RawBlock) -> list[str]:
    return [zone for zone in (zone_banner(line.text) for line in block.response) if zone]


def correlate(blocks: Sequence[RawBlock], context: ParseContext | None = None) -> Correlation:
    """Walk ``blocks`` in order and record one edge per successful move.

    A move only becomes an edge when the very next block is a readable room
    observation. Failed moves, moves followed by another command or by an
    unreadable room, and moves that start from an unknown room are dropped
    with a warning.

    Zone banners printed in a move's response belong to the room the move
    reaches; banners after a failed move or a ``look <dir>`` belong to the
    room the player is still standing in.
    """
    ctx = context or ParseContext()
    result = Correlation()
    current: ObservedRoom | None = None
    pending: MovementEvent | None = None
    arrival_hints: list[str] = []

    def drop_pending(reason: str) -> None:
        ctx.warn(
            "correlation",
            f"move '{pending.direction}' {reason}; no edge recorded",
            line_start=pending.line_number,
        )

    def hint_current(hints: list[str]) -> None:
        nonlocal current
        if not hints or current is None:
            return
        current = replace(current, zone_hints=current.zone_hints + tuple(hints))
        result.rooms[-1] = current

    for block in blocks:
        if block.kind == COMMAND:
            move = movement_from_block(block)
            if move is None:
                look = parse_look_direction(block.head)
                if look is not None and current is not None:
                    text = _response_text(block)
                    if text:
                        result.notes.append(
                            ExitNote(room_ref=current.ref, direction=look, description=text, door=door_from_text(text))
                        )
                hint_current(_banners(block))
                continue
            if pending is not None:
                drop_pending("was followed by another command instead of a room")
            result.moves.append(move)
            failed_at = _failure_line(block)
            if failed_at is not None:
                pending = move
                drop_pending(f"failed (line {failed_at})")
                pending = None
                arrival_hints = []
                hint_current(_banners(block))
                continue
            pending = move
            arrival_hints = _banners(block)
            continue

        room = extract_room(block, ctx.config)
        if room is None:
            ctx.warn(
                "extraction",
                f"skipped malformed room block starting '{block.head[:40]}'",
                line_start=block.first_line,
                line_end=block.last_line,
            )
            if pending is not None:
                drop_pending("reached a room that could not be read")
            pending = None
            arrival_hints = []
            current = None
            continue

        if arrival_hints:
            room = replace(room, zone_hints=tuple(arrival_hints) + room.zone_hints)
            arrival_hints = []
        result.rooms.append(room)
        if pending is not None:
            if current is None:
                drop_pending("started from an unknown room")
            else:
                result.edges.append(
                    Edge(
                        from_key=current.ref,
                        direction=pending.direction,
                        to_key=room.ref,
                        source_block_index=pending.source_block_index,
                    )
                )
            pending = None
        current = room

    if pending is not None:
        drop_pending("ended the transcript")
    return result


def bidirectional_pairs(
    edges: Iterable[Edge],
    same_origin: Callable[[str, str], bool] = operator.eq,
) -> list[tuple[Edge, Edge]]:
    """Return ``(forward, reverse)`` pairs where the reverse trip was observed.

    ``forward`` is A -D-> B and ``reverse`` a later B -opposite(D)-> A'. The
    reverse must leave from exactly B; ``same_origin(A', A)`` decides whether
    it came back to A, which lets deduplication ask "same title" instead of
    "same key".
    """
    ordered = sorted((edge for edge in edges if edge.to_key is not None), key=lambda e: e.source_block_index)
    pairs: list[tuple[Edge, Edge]] = []
    for i, forward in enumerate(ordered):
        back = opposite(forward.direction)
        for reverse in ordered[i + 1:]:
            if (
                reverse.direction == back
                and reverse.from_key == forward.to_key
                and same_origin(reverse.to_key, forward.from_key)
            ):
                pairs.append((forward, reverse))
                break
    return pairs
