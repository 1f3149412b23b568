"""Assign every canonical room to exactly one zone."""

from __future__ import annotations

from collections import deque

from .context import ParseContext
from .types import UNASSIGNED_ZONE, CanonicalRoom, Edge, Zone, ZoneLabel


def _adjacency(rooms: list[CanonicalRoom], edges: list[Edge]) -> dict[str, list[str]]:
    graph: dict[str, list[str]] = {room.key: [] for room in rooms}
    for edge in edges:
        if edge.to_key is None or edge.to_key not in graph or edge.from_key not in graph:
            continue
        graph[edge.from_key].append(edge.to_key)
        graph[edge.to_key].append(edge.from_key)
    return graph


def _propagate(rooms: list[CanonicalRoom], edges: list[Edge]) -> dict[str, str]:
    """Multi-source BFS from rooms carrying a zone banner.

    Seeds are queued in observation order, so on equal distance the earliest
    seen banner wins. Seeded rooms keep their own banner.
    """
    graph = _adjacency(rooms, edges)
    assigned: dict[str, str] = {}
    queue: deque[str] = deque()
    for room in sorted(rooms, key=lambda r: r.first_seen_block):
        if room.zone_hints:
            assigned[room.key] = room.zone_hints[-1]
            queue.append(room.key)
    while queue:
        key = queue.popleft()
        for neighbour in graph[key]:
            if neighbour not in assigned:
                assigned[neighbour] = assigned[key]
                queue.append(neighbour)
    return assigned


def mark_zone_exits(rooms: list[CanonicalRoom], edges: list[Edge]) -> int:
    by_key = {room.key: room for room in rooms}
    count = 0
    for edge in edges:
        if edge.to_key is None:
            continue
        origin, target = by_key.get(edge.from_key), by_key.get(edge.to_key)
        if origin is None or target is None or origin.zone == target.zone:
            continue
        edge.is_zone_exit = True
        origin.zone_exit = True
        target.zone_exit = True
        count += 1
    return count


def resolve_zones(
    rooms: list[CanonicalRoom],
    edges: list[Edge],
    context: ParseContext | None = None,
) -> list[Zone]:
    """Set ``room.zone`` on every room and return the zones in first-seen order.

    An explicit override wins for every room. Otherwise banner hints spread
    over the exit graph and whatever they cannot reach lands in the
    ``unassigned`` zone.
    """
    ctx = context or ParseContext()
    zones: dict[ZoneLabel, Zone] = {}

    def place(room: CanonicalRoom, label: ZoneLabel, source: str) -> None:
        room.zone = label
        zone = zones.get(label)
        if zone is None:
            zone = zones[label] = Zone(label=label, source=source)
        zone.room_keys.append(room.key)

    if ctx.zone_override is not None:
        for room in rooms:
            place(room, ctx.zone_override, "explicit")
        return list(zones.values())

    assigned = _propagate(rooms, edges)
    for room in rooms:
        label = assigned.get(room.key)
        if label is None:
            place(room, UNASSIGNED_ZONE, "unassigned")
        else:
            place(room, label, "banner")

    exits = mark_zone_exits(rooms, edges)
    if exits:
        ctx.logger.info("Marked %d zone exits", exits)
    unassigned = zones.get(UNASSIGNED_ZONE)
    if unassigned is not None:
        ctx.logger.info("%d rooms fell into the '%s' zone", len(unassigned.room_keys), UNASSIGNED_ZONE)
    return list(zones.values())
