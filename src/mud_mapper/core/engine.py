from __future__ import annotations

import logging
from pathlib import Path

from .context import ParseContext, ParserConfig
from .correlator import correlate
from .dedup import deduplicate
from .errors import TranscriptError
from .persister import persist_map
from .ports import MapStoragePort, WarningSink
from .segmenter import segment
from .types import OBSERVATION, MapResult, PersistSummary, ZoneLabel
from .zones import resolve_zones


def read_transcript(path: str | Path) -> str:
    """Return the transcript text, decoding UTF-8 with a latin-1 fallback.

    Raises :class:`TranscriptError` when the file is missing, unreadable or
    blank; those are the only fatal input conditions.
    """
    target = Path(path)
    try:
        raw = target.read_bytes()
    except OSError as exc:
        raise TranscriptError(f"cannot read transcript {target}: {exc}") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("latin-1")
    if not text.strip():
        raise TranscriptError(f"transcript {target} is empty")
    return text


class TranscriptMapper:
    """Runs segmentation through zone resolution over one transcript."""

    def __init__(
        self,
        config: ParserConfig | None = None,
        *,
        sink: WarningSink | None = None,
        logger: logging.Logger | None = None,
    ):
        self._config = config or ParserConfig()
        self._sink = sink
        self._logger = logger or logging.getLogger(__name__)

    def new_context(self, zone: ZoneLabel | None = None) -> ParseContext:
        return ParseContext(config=self._config, zone_override=zone, sink=self._sink, logger=self._logger)

    def parse(self, text: str, *, zone: ZoneLabel | None = None, context: ParseContext | None = None) -> MapResult:
        ctx = context or self.new_context(zone)
        blocks = segment(text, ctx.config)
        if not blocks:
            self._logger.info("No room-shaped text found in transcript")
        correlation = correlate(blocks, ctx)
        rooms, edges = deduplicate(correlation, ctx)
        zones = resolve_zones(rooms, edges, ctx)
        stats = {
            "blocks": len(blocks),
            "observations": sum(1 for block in blocks if block.kind == OBSERVATION),
            "moves": len(correlation.moves),
            "rooms": len(rooms),
            "edges": len(edges),
            "danglingEdges": sum(1 for edge in edges if edge.is_dangling),
            "zones": len(zones),
        }
        self._logger.info(
            "Parsed %d blocks into %d rooms and %d exits (%d warnings)",
            stats["blocks"],
            stats["rooms"],
            stats["edges"],
            len(ctx.warnings),
        )
        return MapResult(rooms=rooms, edges=edges, zones=zones, warnings=list(ctx.warnings), stats=stats)

    def parse_file(self, path: str | Path, *, zone: ZoneLabel | None = None) -> MapResult:
        return self.parse(read_transcript(path), zone=zone)

    def persist(
        self,
        result: MapResult,
        storage: MapStoragePort,
        context: ParseContext | None = None,
    ) -> PersistSummary:
        return persist_map(result, storage, context or self.new_context())


def parse_transcript(text: str, context: ParseContext | None = None) -> MapResult:
    ctx = context or ParseContext()
    return TranscriptMapper(ctx.config, sink=ctx.sink, logger=ctx.logger).parse(text, context=ctx)
