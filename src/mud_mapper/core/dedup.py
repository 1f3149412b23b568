"""Merge repeated observations of a room into canonical rooms."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .context import ParseContext
from .correlator import bidirectional_pairs
from .normalize import normalize_body, normalize_title, short_hash, slugify, word_overlap
from .types import CanonicalRoom, Correlation, Edge, ExitToken, ObservedRoom


@dataclass
class _Group:
    title: str
    prefix: str
    members: list[ObservedRoom] = field(default_factory=list)

    @property
    def longest_body(self) -> str:
        return max((member.body_text for member in self.members), key=len, default="")


class _DisjointSet:
    def __init__(self, size: int):
        self._parent = list(range(size))

    def find(self, item: int) -> int:
        while self._parent[item] != item:
            self._parent[item] = self._parent[self._parent[item]]
            item = self._parent[item]
        return item

    def union(self, left: int, right: int) -> None:
        a, b = self.find(left), self.find(right)
        if a != b:
            # Lower index stays the root so the earliest group names the room.
            self._parent[max(a, b)] = min(a, b)


def room_identity(room: ObservedRoom, prefix_length: int) -> tuple[str, str]:
    return normalize_title(room.title), normalize_body(room.body_text)[:prefix_length]


def _group_observations(rooms: list[ObservedRoom], prefix_length: int) -> tuple[list[_Group], dict[str, int]]:
    groups: list[_Group] = []
    index: dict[tuple[str, str], int] = {}
    group_of: dict[str, int] = {}
    for room in rooms:
        identity = room_identity(room, prefix_length)
        gid = index.get(identity)
        if gid is None:
            gid = len(groups)
            index[identity] = gid
            groups.append(_Group(title=identity[0], prefix=identity[1]))
        groups[gid].members.append(room)
        group_of[room.ref] = gid
    return groups, group_of


def _linked_pairs(group_of: dict[str, int], edges: list[Edge]) -> set[tuple[int, int]]:
    return {
        (group_of[edge.from_key], group_of[edge.to_key])
        for edge in edges
        if edge.to_key is not None and edge.from_key in group_of and edge.to_key in group_of
    }


def _union_apart(sets: _DisjointSet, linked: set[tuple[int, int]], left: int, right: int) -> None:
    """Union two groups unless an observed move leads from one to the other."""
    a, b = sets.find(left), sets.find(right)
    if a == b:
        return
    for x, y in linked:
        if {sets.find(x), sets.find(y)} == {a, b}:
            return
    sets.union(a, b)


def _merge_similar(
    groups: list[_Group],
    linked: set[tuple[int, int]],
    sets: _DisjointSet,
    threshold: float,
) -> None:
    for i, left in enumerate(groups):
        for j in range(i + 1, len(groups)):
            right = groups[j]
            if left.title != right.title:
                continue
            if word_overlap(left.longest_body, right.longest_body) > threshold:
                _union_apart(sets, linked, i, j)


def _merge_corroborated(
    groups: list[_Group],
    group_of: dict[str, int],
    edges: list[Edge],
    linked: set[tuple[int, int]],
    sets: _DisjointSet,
) -> None:
    by_group = [
        replace(edge, from_key=str(group_of[edge.from_key]), to_key=str(group_of[edge.to_key]))
        for edge in edges
        if edge.to_key is not None
    ]

    def same_title(left: str, right: str) -> bool:
        return groups[int(left)].title == groups[int(right)].title

    for forward, reverse in bidirectional_pairs(by_group, same_origin=same_title):
        _union_apart(sets, linked, int(forward.from_key), int(reverse.to_key))


def _merge_exits(members: list[ObservedRoom]) -> list[ExitToken]:
    merged: dict[str, ExitToken] = {}
    for member in members:
        for token in member.exit_tokens:
            existing = merged.get(token.direction)
            if existing is None:
                merged[token.direction] = token
            else:
                merged[token.direction] = replace(existing, door=existing.door.merge(token.door))
    return list(merged.values())


def _ordered_union(values: list[tuple[str, ...]]) -> list[str]:
    out: list[str] = []
    for group in values:
        for value in group:
            if value not in out:
                out.append(value)
    return out


def _build_room(key: str, members: list[ObservedRoom]) -> CanonicalRoom:
    members = sorted(members, key=lambda member: member.source_block_index)
    best = members[0]
    for member in members[1:]:
        if len(member.body_text) > len(best.body_text):
            best = member
    return CanonicalRoom(
        key=key,
        title=members[0].title,
        description=best.body_text,
        visit_count=len(members),
        npcs=_ordered_union([member.npc_mentions for member in members]),
        items=_ordered_union([member.item_mentions for member in members]),
        exits=_merge_exits(members),
        zone_hints=[hint for member in members for hint in member.zone_hints],
        first_seen_block=members[0].source_block_index,
        refs=[member.ref for member in members],
    )


def _assign_keys(clusters: list[list[_Group]]) -> list[str]:
    per_title: dict[str, int] = {}
    for cluster in clusters:
        per_title[cluster[0].title] = per_title.get(cluster[0].title, 0) + 1
    keys: list[str] = []
    used: set[str] = set()
    for cluster in clusters:
        head = cluster[0]
        key = slugify(head.title)
        if per_title[head.title] > 1:
            key = f"{key}~{short_hash(head.prefix)}"
        if key in used:
            key = f"{key}~{short_hash(head.title + head.prefix)}"
        used.add(key)
        keys.append(key)
    return keys


def merge_edges(edges: list[Edge], context: ParseContext) -> list[Edge]:
    """Collapse edges sharing ``(from_key, direction)``; resolved targets win."""
    merged: dict[tuple[str, str], Edge] = {}
    for edge in edges:
        slot = (edge.from_key, edge.direction)
        existing = merged.get(slot)
        if existing is None:
            merged[slot] = replace(edge)
            continue
        if existing.to_key is None:
            existing.to_key = edge.to_key
        elif edge.to_key is not None and edge.to_key != existing.to_key:
            context.warn(
                "dedup",
                f"'{edge.from_key}' {edge.direction} leads to both '{existing.to_key}' and '{edge.to_key}'; "
                f"keeping '{existing.to_key}'",
            )
        existing.apply_door(edge.door)
    return list(merged.values())


def deduplicate(
    correlation: Correlation,
    context: ParseContext | None = None,
) -> tuple[list[CanonicalRoom], list[Edge]]:
    """Return canonical rooms and edges rewritten onto their keys.

    Observations group by normalised title plus description prefix; groups
    sharing a title merge when their word overlap exceeds the similarity
    threshold or when a return trip shows they are the same place, but never
    when an observed move leads from one to the other. The canonical key is the
    title slug when the title names one room, else slug plus a prefix hash.
    """
    ctx = context or ParseContext()
    cfg = ctx.config
    groups, group_of = _group_observations(correlation.rooms, cfg.description_prefix_length)
    sets = _DisjointSet(len(groups))
    linked = _linked_pairs(group_of, correlation.edges)
    _merge_similar(groups, linked, sets, cfg.similarity_threshold)
    _merge_corroborated(groups, group_of, correlation.edges, linked, sets)

    roots: dict[int, list[_Group]] = {}
    for gid, group in enumerate(groups):
        roots.setdefault(sets.find(gid), []).append(group)
    clusters = [roots[root] for root in sorted(roots)]
    keys = _assign_keys(clusters)

    rooms: list[CanonicalRoom] = []
    key_of_ref: dict[str, str] = {}
    for key, cluster in zip(keys, clusters):
        members = [member for group in cluster for member in group.members]
        room = _build_room(key, members)
        rooms.append(room)
        for ref in room.refs:
            key_of_ref[ref] = key
    rooms.sort(key=lambda room: room.first_seen_block)

    rewritten = [
        replace(
            edge,
            from_key=key_of_ref[edge.from_key],
            to_key=key_of_ref.get(edge.to_key) if edge.to_key is not None else None,
        )
        for edge in correlation.edges
    ]
    edges = merge_edges(rewritten, ctx)
    _apply_exit_metadata(rooms, edges, correlation, key_of_ref, ctx)
    return rooms, edges


def _apply_exit_metadata(
    rooms: list[CanonicalRoom],
    edges: list[Edge],
    correlation: Correlation,
    key_of_ref: dict[str, str],
    context: ParseContext,
) -> None:
    by_key = {room.key: room for room in rooms}
    if context.config.include_unexplored_exits:
        explored = {(edge.from_key, edge.direction) for edge in edges}
        for room in rooms:
            for token in room.exits:
                if (room.key, token.direction) not in explored:
                    edges.append(Edge(from_key=room.key, direction=token.direction, source_block_index=room.first_seen_block))

    slots = {(edge.from_key, edge.direction): edge for edge in edges}
    for edge in edges:
        token = by_key[edge.from_key].exit_for(edge.direction)
        if token is not None:
            edge.apply_door(token.door)
    for note in correlation.notes:
        edge = slots.get((key_of_ref.get(note.room_ref, ""), note.direction))
        if edge is None:
            continue
        if not edge.look_description:
            edge.look_description = note.description
        edge.apply_door(note.door)
