from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ports import WarningSink
from .types import ParseWarning, ZoneLabel


@dataclass(frozen=True)
class ParserConfig:
    lookahead_lines: int = 30
    max_title_length: int = 60
    max_title_words: int = 10
    min_description_length: int = 10
    description_prefix_length: int = 80
    similarity_threshold: float = 0.8
    include_unexplored_exits: bool = False


class LoggingWarningSink:
    """Forwards parse warnings to a logger at WARNING level."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("mud_mapper")

    def emit(self, warning: ParseWarning) -> None:
        self._logger.warning("%s", warning)


@dataclass
class ParseContext:
    """Per-run state handed to every pipeline stage.

    Carries the tuning config, the caller's zone override and the warning
    sink, so no stage reaches for module-level settings.
    """

    config: ParserConfig = field(default_factory=ParserConfig)
    zone_override: ZoneLabel | None = None
    sink: WarningSink | None = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("mud_mapper"))
    warnings: list[ParseWarning] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.sink is None:
            self.sink = LoggingWarningSink(self.logger)

    def warn(self, kind: str, message: str, line_start: int = 0, line_end: int = 0) -> ParseWarning:
        warning = ParseWarning(kind=kind, message=message, line_start=line_start, line_end=line_end or line_start)
        self.warnings.append(warning)
        self.sink.emit(warning)
        return warning

    def count(self, kind: str) -> int:
        return sum(1 for warning in self.warnings if warning.kind == kind)
