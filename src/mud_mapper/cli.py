"""Command-line entrypoint: parse a transcript, export it and store it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from .core.engine import TranscriptMapper, read_transcript
from .core.errors import TranscriptError
from .core.exporter import write_export
from .core.types import MapResult, ParseWarning, PersistSummary
from .persistence.sqlalchemy import SQLAlchemyMapStore, open_database, unit_of_work_factory
from .settings import settings

app = typer.Typer(help="Rebuild a MUD map from a session transcript")
console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _summary_table(result: MapResult, summary: PersistSummary | None, warnings: list[ParseWarning]) -> Table:
    table = Table(title="Map summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Rooms", str(len(result.rooms)))
    table.add_row("Exits", str(len(result.edges)))
    table.add_row("Dangling exits", str(sum(1 for edge in result.edges if edge.is_dangling)))
    table.add_row("Zones", str(len(result.zones)))
    table.add_row("Warnings", str(len(warnings)))
    if summary is not None:
        table.add_row("Rooms saved", f"{summary.rooms_saved} ({summary.rooms_failed} failed)")
        table.add_row("Exits saved", f"{summary.edges_saved} ({summary.edges_failed} failed)")
    return table


@app.command()
def parse(
    transcript: Path = typer.Argument(..., help="Path to the session transcript"),
    zone_id: Optional[int] = typer.Option(None, "--zone-id", help="Assign every room to this zone id"),
    export: Optional[Path] = typer.Option(None, "--export", help="Write the map as JSON to this path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Parse and export without touching the database"),
    database_url: Optional[str] = typer.Option(None, "--database-url", help="Override MUD_MAPPER_DATABASE_URL"),
    include_unexplored: bool = typer.Option(
        False, "--include-unexplored", help="Record listed but untraversed exits as dangling"
    ),
) -> None:
    _configure_logging(settings.log_level)
    config = settings.parser_config(
        include_unexplored_exits=include_unexplored or settings.include_unexplored_exits
    )
    mapper = TranscriptMapper(config)

    try:
        text = read_transcript(transcript)
    except TranscriptError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    context = mapper.new_context(zone_id)
    result = mapper.parse(text, context=context)

    if export is not None:
        write_export(result, export)
        console.print(f"Exported map to [bold]{export}[/bold]")

    summary: PersistSummary | None = None
    if not dry_run:
        url = database_url or settings.database_url
        try:
            engine, session_factory = open_database(url)
        except (SQLAlchemyError, OSError) as exc:
            err_console.print(f"[red]database {escape(url)} is unusable: {escape(str(exc))}[/red]")
            raise typer.Exit(code=1)
        store = SQLAlchemyMapStore(unit_of_work_factory(session_factory))
        summary = mapper.persist(result, store, context)
        engine.dispose()

    console.print(_summary_table(result, summary, context.warnings))
    for warning in context.warnings:
        console.print(f"[yellow]warning[/yellow] {escape(str(warning))}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
