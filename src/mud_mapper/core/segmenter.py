"""Split a raw transcript into ordered observation and command blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .context import ParserConfig
from .directions import parse_movement
from .normalize import clean_line
from .patterns import is_exit_line, looks_like_command_echo, looks_like_title, parse_look_direction
from .types import COMMAND, OBSERVATION, RawBlock, TranscriptLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockMatch:
    kind: Optional[str]
    end: int


@dataclass(frozen=True)
class _Scan:
    end: int
    first_body: Optional[int]
    body_lines: int


Matcher = Callable[[Sequence[TranscriptLine], int, ParserConfig], Optional[BlockMatch]]


def split_lines(text: str) -> list[TranscriptLine]:
    return [TranscriptLine(number, clean_line(raw)) for number, raw in enumerate(text.splitlines(), start=1)]


def match_blank(lines: Sequence[TranscriptLine], i: int, config: ParserConfig) -> BlockMatch | None:
    if not lines[i].text:
        return BlockMatch(kind=None, end=i + 1)
    return None


def match_movement(lines: Sequence[TranscriptLine], i: int, config: ParserConfig) -> BlockMatch | None:
    if parse_movement(lines[i].text):
        return BlockMatch(kind=COMMAND, end=i + 1)
    return None


def match_look_direction(lines: Sequence[TranscriptLine], i: int, config: ParserConfig) -> BlockMatch | None:
    if parse_look_direction(lines[i].text):
        return BlockMatch(kind=COMMAND, end=i + 1)
    return None


def _is_title(text: str, config: ParserConfig) -> bool:
    return looks_like_title(text, max_length=config.max_title_length, max_words=config.max_title_words)


def _scan_observation(lines: Sequence[TranscriptLine], i: int, config: ParserConfig) -> _Scan | None:
    first_body: Optional[int] = None
    body_lines = 0
    stop = min(len(lines), i + 1 + config.lookahead_lines)
    for j in range(i + 1, stop):
        text = lines[j].text
        if not text:
            continue
        if is_exit_line(text):
            return _Scan(end=j + 1, first_body=first_body, body_lines=body_lines)
        if parse_movement(text) or parse_look_direction(text) or looks_like_command_echo(text):
            return None
        if first_body is None:
            first_body = j
        body_lines += 1
    return None


def match_observation(lines: Sequence[TranscriptLine], i: int, config: ParserConfig) -> BlockMatch | None:
    if not _is_title(lines[i].text, config):
        return None
    scan = _scan_observation(lines, i, config)
    if scan is None:
        return None
    if scan.first_body is not None and _is_title(lines[scan.first_body].text, config):
        # Two title-shaped lines in a row: the later one is the title when it
        # still has description text of its own before the exits.
        inner = _scan_observation(lines, scan.first_body, config)
        if inner is not None and inner.body_lines > 0:
            return None
    return BlockMatch(kind=OBSERVATION, end=scan.end)


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    match_blank,
    match_movement,
    match_look_direction,
    match_observation,
)


def segment(
    text: str,
    config: ParserConfig | None = None,
    *,
    matchers: Sequence[Matcher] = DEFAULT_MATCHERS,
) -> list[RawBlock]:
    """Return the transcript's blocks in order.

    Lines no matcher claims are appended to the nearest preceding block, so
    an observation keeps its NPC lines and combat spam and a command keeps
    its response. A transcript without any room-shaped region yields ``[]``.
    """
    cfg = config or ParserConfig()
    lines = split_lines(text or "")
    blocks: list[RawBlock] = []
    current: list[TranscriptLine] = []
    current_kind: Optional[str] = None
    orphans = 0

    def flush() -> None:
        if current_kind is not None and current:
            blocks.append(RawBlock(index=len(blocks), kind=current_kind, lines=tuple(current)))

    i = 0
    while i < len(lines):
        match = None
        for matcher in matchers:
            match = matcher(lines, i, cfg)
            if match is not None:
                break
        if match is None:
            if current_kind is not None:
                current.append(lines[i])
            else:
                orphans += 1
            i += 1
            continue
        if match.kind is None:
            i = match.end
            continue
        flush()
        current = list(lines[i:match.end])
        current_kind = match.kind
        i = match.end
    flush()

    if orphans:
        logger.debug("Dropped %d leading lines outside any block", orphans)
    if not any(block.kind == OBSERVATION for block in blocks):
        return []
    return blocks
