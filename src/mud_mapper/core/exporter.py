"""JSON export of a parse result and re-import of an exported document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .directions import normalize_direction
from .types import UNASSIGNED_ZONE, CanonicalRoom, DoorInfo, Edge, ExitToken, MapResult, Zone


def room_to_dict(room: CanonicalRoom) -> dict[str, Any]:
    return {
        "key": room.key,
        "title": room.title,
        "description": room.description,
        "npcs": list(room.npcs),
        "items": list(room.items),
        "zone": room.zone if room.zone is not None else UNASSIGNED_ZONE,
        "exits": [
            {
                "direction": token.direction,
                "raw": token.raw,
                "isDoor": token.door.is_door,
                "doorName": token.door.door_name,
                "isLocked": token.door.is_locked,
            }
            for token in room.exits
        ],
        "visits": room.visit_count,
        "zoneExit": room.zone_exit,
    }


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    return {
        "from": edge.from_key,
        "direction": edge.direction,
        "to": edge.to_key,
        "isDoor": edge.is_door,
        "doorName": edge.door_name,
        "isLocked": edge.is_locked,
        "isZoneExit": edge.is_zone_exit,
        "lookDescription": edge.look_description,
    }


def export_map(result: MapResult) -> dict[str, Any]:
    """Field-stable document: dangling edges keep ``"to": null``."""
    return {
        "rooms": [room_to_dict(room) for room in result.rooms],
        "edges": [edge_to_dict(edge) for edge in result.edges],
        "stats": {
            "totalRooms": len(result.rooms),
            "totalEdges": len(result.edges),
            "danglingEdges": sum(1 for edge in result.edges if edge.is_dangling),
            "warnings": len(result.warnings),
        },
    }


def write_export(result: MapResult, path: str | Path) -> Path:
    target = Path(path)
    target.write_text(json.dumps(export_map(result), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return target


def _token_from_dict(raw: Any) -> ExitToken | None:
    if isinstance(raw, str):
        direction = normalize_direction(raw)
        return ExitToken(raw=raw, direction=direction) if direction else None
    if not isinstance(raw, dict):
        return None
    direction = normalize_direction(str(raw.get("direction") or ""))
    if direction is None:
        return None
    return ExitToken(
        raw=str(raw.get("raw") or direction),
        direction=direction,
        door=DoorInfo(
            is_door=bool(raw.get("isDoor")),
            door_name=raw.get("doorName"),
            is_locked=bool(raw.get("isLocked")),
        ),
    )


def load_export(data: dict[str, Any] | str | Path) -> MapResult:
    """Rebuild a :class:`MapResult` from :func:`export_map` output.

    Accepts the document itself, its JSON text or a path to the file.
    Edges whose origin room is missing from the document are dropped.
    """
    if isinstance(data, Path):
        data = json.loads(data.read_text(encoding="utf-8"))
    elif isinstance(data, str):
        data = json.loads(data)
    if not isinstance(data, dict):
        raise ValueError("export document must be a JSON object")

    rooms: list[CanonicalRoom] = []
    zones: dict[Any, Zone] = {}
    for order, raw in enumerate(data.get("rooms") or []):
        tokens = [token for token in (_token_from_dict(item) for item in raw.get("exits") or []) if token]
        zone = raw.get("zone")
        if zone is None:
            zone = UNASSIGNED_ZONE
        room = CanonicalRoom(
            key=str(raw["key"]),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            visit_count=int(raw.get("visits") or 1),
            npcs=list(raw.get("npcs") or []),
            items=list(raw.get("items") or []),
            exits=tokens,
            zone=zone,
            zone_exit=bool(raw.get("zoneExit")),
            first_seen_block=order,
        )
        rooms.append(room)
        source = "unassigned" if zone == UNASSIGNED_ZONE else ("explicit" if isinstance(zone, int) else "banner")
        zones.setdefault(zone, Zone(label=zone, source=source)).room_keys.append(room.key)

    known = {room.key for room in rooms}
    edges: list[Edge] = []
    for order, raw in enumerate(data.get("edges") or []):
        direction = normalize_direction(str(raw.get("direction") or ""))
        origin = raw.get("from")
        if direction is None or origin not in known:
            continue
        target = raw.get("to")
        edges.append(
            Edge(
                from_key=origin,
                direction=direction,
                to_key=target if target in known else None,
                is_door=bool(raw.get("isDoor")),
                door_name=raw.get("doorName"),
                is_locked=bool(raw.get("isLocked")),
                is_zone_exit=bool(raw.get("isZoneExit")),
                look_description=raw.get("lookDescription"),
                source_block_index=order,
            )
        )
    return MapResult(rooms=rooms, edges=edges, zones=list(zones.values()), stats={"source": "export"})
