from .db import build_engine, build_session_factory, create_schema, open_database
from .store import SQLAlchemyMapStore
from .uow import SQLAlchemyUnitOfWork, unit_of_work_factory

__all__ = [
    "build_engine",
    "build_session_factory",
    "create_schema",
    "open_database",
    "SQLAlchemyMapStore",
    "SQLAlchemyUnitOfWork",
    "unit_of_work_factory",
]
