"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from .models import Base


def create_db_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine; SQLite engines get SQLAlchemy-driven BEGIN/SAVEPOINT."""
    engine = create_engine(database_url, future=True, echo=echo)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_transactions(engine)
    return engine


def _enable_sqlite_transactions(engine: Engine) -> None:
    # pysqlite starts transactions lazily on its own, which breaks savepoints.
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")


def init_db(engine: Engine) -> None:
    """Create tables if they are missing."""
    Base.metadata.create_all(engine)

