from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session, sessionmaker

from .repos import RoomExitRepo, RoomRepo, ZoneRepo


class SQLAlchemyUnitOfWork:
    """One session with the map repositories bound to it.

    Nothing is written unless :meth:`commit` is called; leaving the block
    on an exception rolls back.
    """

    zones: ZoneRepo
    rooms: RoomRepo
    exits: RoomExitRepo

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "SQLAlchemyUnitOfWork":
        session = self._session_factory()
        self.session = session
        self.zones = ZoneRepo(session)
        self.rooms = RoomRepo(session)
        self.exits = RoomExitRepo(session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.session is None:
            return
        try:
            if exc_type is not None:
                self.session.rollback()
        finally:
            self.session.close()
            self.session = None

    def commit(self) -> None:
        assert self.session is not None, "unit of work used outside its with-block"
        self.session.commit()

    def rollback(self) -> None:
        assert self.session is not None, "unit of work used outside its with-block"
        self.session.rollback()


def unit_of_work_factory(session_factory: sessionmaker[Session]) -> Callable[[], SQLAlchemyUnitOfWork]:
    def _factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return _factory
