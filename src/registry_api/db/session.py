"""Database session and engine helpers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker

from registry_api.config import get_settings

from .base import Base
from . import models  # noqa: F401  # ensure models are imported for metadata

# Execution options for a write transaction. On SQLite the transaction starts
# with BEGIN IMMEDIATE so concurrent publishers serialize on the write lock
# before they read the rows they are about to change.
WRITE_EXECUTION_OPTIONS: dict[str, object] = {"sqlite_begin_mode": "IMMEDIATE"}


def resolve_database_url(raw_url: str) -> str:
    url = make_url(raw_url)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        db_path = Path(url.database)
        if not db_path.is_absolute():
            db_path = Path.cwd() / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        url = url.set(database=str(db_path))
    return url.render_as_string(hide_password=False)


def _install_sqlite_hooks(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        # hand BEGIN over to SQLAlchemy so the mode can vary per transaction
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:
        mode = connection.get_execution_options().get("sqlite_begin_mode", "DEFERRED")
        connection.exec_driver_sql(f"BEGIN {mode}")


def create_registry_engine(raw_url: str, *, isolation_level: str | None = None) -> Engine:
    database_url = resolve_database_url(raw_url)
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )
        _install_sqlite_hooks(engine)
        return engine

    options: dict[str, object] = {}
    if isolation_level:
        options["isolation_level"] = isolation_level
    return create_engine(
        database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        **options,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        future=True,
        expire_on_commit=False,
    )


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return create_registry_engine(
        settings.database_url,
        isolation_level=settings.isolation_level,
    )


@lru_cache()
def get_session_factory() -> sessionmaker[Session]:
    return create_session_factory(get_engine())


__all__ = [
    "Base",
    "WRITE_EXECUTION_OPTIONS",
    "create_registry_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "resolve_database_url",
]
