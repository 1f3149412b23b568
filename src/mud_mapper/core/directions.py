from __future__ import annotations

CANONICAL_DIRECTIONS: tuple[str, ...] = (
    "north",
    "south",
    "east",
    "west",
    "up",
    "down",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
)

OPPOSITE_DIRECTIONS: dict[str, str] = {
    "north": "south",
    "south": "north",
    "east": "west",
    "west": "east",
    "up": "down",
    "down": "up",
    "northeast": "southwest",
    "southwest": "northeast",
    "northwest": "southeast",
    "southeast": "northwest",
}

DIRECTION_ALIASES: dict[str, str] = {
    "n": "north",
    "s": "south",
    "e": "east",
    "w": "west",
    "u": "up",
    "d": "down",
    "ne": "northeast",
    "nw": "northwest",
    "se": "southeast",
    "sw": "southwest",
    "north-east": "northeast",
    "north-west": "northwest",
    "south-east": "southeast",
    "south-west": "southwest",
}

# Verbs that turn "go north" into a move.
MOVEMENT_VERBS = frozenset({"go", "walk", "run", "move", "climb"})


def normalize_direction(token: str | None) -> str | None:
    """Return the canonical direction for ``token`` or ``None``."""
    value = (token or "").strip().lower().rstrip(".")
    if value in OPPOSITE_DIRECTIONS:
        return value
    return DIRECTION_ALIASES.get(value)


def opposite(direction: str) -> str:
    canonical = normalize_direction(direction)
    if canonical is None:
        raise ValueError(f"not a direction: {direction!r}")
    return OPPOSITE_DIRECTIONS[canonical]


def parse_movement(text: str) -> str | None:
    """Recognise a one- or two-word movement command.

    ``n``, ``north`` and ``go north`` all yield ``"north"``; anything else,
    including ``look north``, yields ``None``.
    """
    words = text.strip().lower().split()
    if len(words) == 1:
        return normalize_direction(words[0])
    if len(words) == 2 and words[0] in MOVEMENT_VERBS:
        return normalize_direction(words[1])
    return None
