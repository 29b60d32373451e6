"""Database engine setup for SQLite with WAL mode.

SQLite is the document store and the search index: WAL mode for
concurrent reads, FTS5 for full-text search. The DB is stored at
``{data_root}/.wikigraph/{filename}``.

SQLAlchemy Core (not ORM) is used because the store hands out frozen
pydantic models, not tracked entities.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

from wikigraph.infrastructure.database.schema import (
    FTS_CONTENT_CREATE_SQL,
    FTS_TITLE_CREATE_SQL,
    metadata,
)

DATA_DIRNAME = ".wikigraph"
DEFAULT_DB_FILENAME = "wikigraph.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(data_root: Path, filename: str = DEFAULT_DB_FILENAME) -> Engine:
    """Initialize the database at ``{data_root}/.wikigraph/{filename}``.

    Creates the data directory, all tables from :data:`schema.metadata`,
    and both FTS5 virtual tables. Idempotent — safe to call on an
    existing database.

    Returns the engine ready for use.
    """
    data_dir = data_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / filename)
    metadata.create_all(engine)

    with engine.begin() as conn:
        conn.execute(text(FTS_TITLE_CREATE_SQL))
        conn.execute(text(FTS_CONTENT_CREATE_SQL))

    return engine
