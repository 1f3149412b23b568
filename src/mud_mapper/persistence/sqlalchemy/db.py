from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .base import Base


def _is_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite"


def _is_memory(url: URL) -> bool:
    return url.database in (None, "", ":memory:")


def build_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Engine for the map database.

    In-memory SQLite shares one connection so every unit of work sees the
    same tables; file SQLite gets its parent directory created. SQLite
    connections enforce foreign keys.
    """
    parsed = make_url(url)
    if _is_sqlite(parsed) and _is_memory(parsed):
        engine = create_engine(
            parsed,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        if _is_sqlite(parsed):
            Path(parsed.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(parsed, echo=echo)

    if _is_sqlite(parsed):
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def open_database(url: str | URL, *, echo: bool = False) -> tuple[Engine, sessionmaker[Session]]:
    """Build the engine, create missing tables and return both halves."""
    engine = build_engine(url, echo=echo)
    create_schema(engine)
    return engine, build_session_factory(engine)
