from .core.context import ParseContext, ParserConfig
from .core.engine import TranscriptMapper, parse_transcript, read_transcript
from .core.errors import MapperError, StorageError, TranscriptError, ZoneNotFoundError
from .core.exporter import export_map, load_export, write_export
from .core.ports import MapStoragePort
from .core.types import CanonicalRoom, Edge, MapResult, PersistSummary

__all__ = [
    "TranscriptMapper",
    "ParseContext",
    "ParserConfig",
    "MapStoragePort",
    "parse_transcript",
    "read_transcript",
    "export_map",
    "write_export",
    "load_export",
    "MapperError",
    "TranscriptError",
    "StorageError",
    "ZoneNotFoundError",
    "CanonicalRoom",
    "Edge",
    "MapResult",
    "PersistSummary",
]
