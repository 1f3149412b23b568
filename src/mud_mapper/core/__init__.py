from .context import LoggingWarningSink, ParseContext, ParserConfig
from .correlator import bidirectional_pairs, correlate
from .dedup import deduplicate
from .directions import CANONICAL_DIRECTIONS, normalize_direction, opposite, parse_movement
from .engine import TranscriptMapper, parse_transcript, read_transcript
from .errors import MapperError, StorageError, TranscriptError, ZoneNotFoundError
from .exporter import export_map, load_export, write_export
from .extractor import extract_room, parse_exit_tokens
from .persister import persist_map
from .ports import MapStoragePort, WarningSink
from .segmenter import segment
from .types import (
    CanonicalRoom,
    DoorInfo,
    Edge,
    ExitToken,
    MapResult,
    ObservedRoom,
    ParseWarning,
    PersistSummary,
    RawBlock,
    Zone,
)
from .zones import resolve_zones

__all__ = [
    "TranscriptMapper",
    "ParseContext",
    "ParserConfig",
    "LoggingWarningSink",
    "MapStoragePort",
    "WarningSink",
    "MapperError",
    "TranscriptError",
    "StorageError",
    "ZoneNotFoundError",
    "CANONICAL_DIRECTIONS",
    "normalize_direction",
    "opposite",
    "parse_movement",
    "read_transcript",
    "parse_transcript",
    "segment",
    "extract_room",
    "parse_exit_tokens",
    "correlate",
    "bidirectional_pairs",
    "deduplicate",
    "resolve_zones",
    "export_map",
    "write_export",
    "load_export",
    "persist_map",
    "CanonicalRoom",
    "DoorInfo",
    "Edge",
    "ExitToken",
    "MapResult",
    "ObservedRoom",
    "ParseWarning",
    "PersistSummary",
    "RawBlock",
    "Zone",
]
