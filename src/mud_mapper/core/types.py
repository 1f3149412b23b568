from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

OBSERVATION = "observation"
COMMAND = "command"

UNASSIGNED_ZONE = "unassigned"

ZoneLabel = Union[int, str]


@dataclass(frozen=True)
class TranscriptLine:
    number: int
    text: str


@dataclass(frozen=True)
class RawBlock:
    index: int
    kind: str
    lines: tuple[TranscriptLine, ...]

    @property
    def first_line(self) -> int:
        return self.lines[0].number if self.lines else 0

    @property
    def last_line(self) -> int:
        return self.lines[-1].number if self.lines else 0

    @property
    def head(self) -> str:
        return self.lines[0].text if self.lines else ""

    @property
    def response(self) -> tuple[TranscriptLine, ...]:
        return self.lines[1:]


@dataclass(frozen=True)
class DoorInfo:
    is_door: bool = False
    door_name: Optional[str] = None
    is_locked: bool = False

    def merge(self, other: "DoorInfo") -> "DoorInfo":
        return DoorInfo(
            is_door=self.is_door or other.is_door,
            door_name=self.door_name or other.door_name,
            is_locked=self.is_locked or other.is_locked,
        )


@dataclass(frozen=True)
class ExitToken:
    raw: str
    direction: str
    door: DoorInfo = field(default_factory=DoorInfo)


@dataclass(frozen=True)
class ObservedRoom:
    title: str
    body_text: str
    exit_tokens: tuple[ExitToken, ...]
    npc_mentions: tuple[str, ...]
    item_mentions: tuple[str, ...]
    source_block_index: int
    line_start: int = 0
    line_end: int = 0
    zone_hints: tuple[str, ...] = ()

    @property
    def ref(self) -> str:
        return f"block-{self.source_block_index}"

    @property
    def exit_directions(self) -> list[str]:
        return [token.direction for token in self.exit_tokens]


@dataclass(frozen=True)
class MovementEvent:
    direction: str
    source_block_index: int
    line_number: int = 0


@dataclass(frozen=True)
class ExitNote:
    room_ref: str
    direction: str
    description: str
    door: DoorInfo = field(default_factory=DoorInfo)


@dataclass
class Edge:
    from_key: str
    direction: str
    to_key: Optional[str] = None
    is_door: bool = False
    door_name: Optional[str] = None
    is_locked: bool = False
    is_zone_exit: bool = False
    look_description: Optional[str] = None
    source_block_index: int = 0

    @property
    def is_dangling(self) -> bool:
        return self.to_key is None

    @property
    def door(self) -> DoorInfo:
        return DoorInfo(is_door=self.is_door, door_name=self.door_name, is_locked=self.is_locked)

    def apply_door(self, door: DoorInfo) -> None:
        merged = self.door.merge(door)
        self.is_door = merged.is_door
        self.door_name = merged.door_name
        self.is_locked = merged.is_locked


@dataclass
class CanonicalRoom:
    key: str
    title: str
    description: str
    visit_count: int = 1
    npcs: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    exits: list[ExitToken] = field(default_factory=list)
    zone: Optional[ZoneLabel] = None
    zone_exit: bool = False
    zone_hints: list[str] = field(default_factory=list)
    first_seen_block: int = 0
    refs: list[str] = field(default_factory=list)

    def exit_for(self, direction: str) -> ExitToken | None:
        for token in self.exits:
            if token.direction == direction:
                return token
        return None


@dataclass
class Zone:
    label: ZoneLabel
    source: str
    room_keys: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParseWarning:
    kind: str
    message: str
    line_start: int = 0
    line_end: int = 0

    def __str__(self) -> str:
        if self.line_start and self.line_end and self.line_end != self.line_start:
            return f"[{self.kind}] lines {self.line_start}-{self.line_end}: {self.message}"
        if self.line_start:
            return f"[{self.kind}] line {self.line_start}: {self.message}"
        return f"[{self.kind}] {self.message}"


@dataclass
class Correlation:
    rooms: list[ObservedRoom] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    notes: list[ExitNote] = field(default_factory=list)
    moves: list[MovementEvent] = field(default_factory=list)


@dataclass
class MapResult:
    rooms: list[CanonicalRoom] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)

    def room(self, key: str) -> CanonicalRoom | None:
        for room in self.rooms:
            if room.key == key:
                return room
        return None

    def edges_from(self, key: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.from_key == key]


@dataclass
class PersistSummary:
    rooms_saved: int = 0
    rooms_failed: int = 0
    edges_saved: int = 0
    edges_failed: int = 0

    @property
    def failures(self) -> int:
        return self.rooms_failed + self.edges_failed
