"""SQLite database engine and schema via SQLAlchemy Core."""

from wikigraph.infrastructure.database.engine import create_db_engine, init_database
from wikigraph.infrastructure.database.schema import metadata, notes, vaults

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "notes",
    "vaults",
]
