"""Hand a parse result to the storage collaborator, one entity at a time."""

from __future__ import annotations

from .context import ParseContext
from .ports import MapStoragePort
from .types import MapResult, PersistSummary, ZoneLabel


def persist_map(
    result: MapResult,
    storage: MapStoragePort,
    context: ParseContext | None = None,
) -> PersistSummary:
    """Upsert every room, then every edge.

    A failing upsert is logged and counted but never stops the batch. Edges
    whose origin or target room failed to save are counted as failures
    rather than stored with a guessed endpoint.
    """
    ctx = context or ParseContext()
    summary = PersistSummary()
    zone_ids: dict[ZoneLabel, int | None] = {}
    room_ids: dict[str, int] = {}

    def zone_id_for(label: ZoneLabel | None) -> int | None:
        if label is None:
            return None
        if label not in zone_ids:
            try:
                zone_ids[label] = storage.resolve_zone(label)
            except Exception as exc:
                zone_ids[label] = None
                ctx.warn("persistence", f"zone {label!r} could not be resolved: {exc}")
        return zone_ids[label]

    for room in result.rooms:
        zone_id = zone_id_for(room.zone)
        if room.zone is not None and zone_id is None:
            summary.rooms_failed += 1
            ctx.warn("persistence", f"room '{room.key}' not saved: zone {room.zone!r} unavailable")
            continue
        try:
            room_ids[room.key] = storage.upsert_room(room, zone_id)
        except Exception as exc:
            summary.rooms_failed += 1
            ctx.warn("persistence", f"room '{room.key}' not saved: {exc}")
            continue
        summary.rooms_saved += 1

    for edge in result.edges:
        from_id = room_ids.get(edge.from_key)
        to_id = room_ids.get(edge.to_key) if edge.to_key is not None else None
        if from_id is None or (edge.to_key is not None and to_id is None):
            summary.edges_failed += 1
            ctx.warn(
                "persistence",
                f"exit '{edge.from_key}' {edge.direction} not saved: endpoint room was not saved",
            )
            continue
        try:
            storage.upsert_edge(
                from_id,
                edge.direction,
                to_id,
                edge.door,
                is_zone_exit=edge.is_zone_exit,
                look_description=edge.look_description,
            )
        except Exception as exc:
            summary.edges_failed += 1
            ctx.warn("persistence", f"exit '{edge.from_key}' {edge.direction} not saved: {exc}")
            continue
        summary.edges_saved += 1

    ctx.logger.info(
        "Persisted %d/%d rooms and %d/%d exits",
        summary.rooms_saved,
        len(result.rooms),
        summary.edges_saved,
        len(result.edges),
    )
    return summary
