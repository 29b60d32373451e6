"""SQLAlchemy Core table definitions for the wikigraph database.

The two FTS5 virtual tables are created via raw DDL in the
initialization function since SQLAlchemy cannot express SQLite virtual
tables natively. Titles and content are indexed separately so each can
be searched (and ranked) on its own.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

vaults = Table(
    "vaults",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("created_at", BigInteger, nullable=False),
)

notes = Table(
    "notes",
    metadata,
    # rowid alias; gives a stable storage order for listing
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", Text, nullable=False, unique=True),
    Column("vault_id", Text, ForeignKey("vaults.id"), nullable=False),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False, default="", server_default=""),
    Column("folder_id", Text),
    Column("order", Integer, nullable=False, default=0, server_default="0"),
    Column("created_at", BigInteger, nullable=False),  # epoch ms
    Column("updated_at", BigInteger, nullable=False),  # epoch ms
)

Index("ix_notes_vault", notes.c.vault_id)
Index("ix_notes_folder", notes.c.vault_id, notes.c.folder_id)

# FTS5 virtual table DDL — standalone (no content= clause).
# The store manages inserts/deletes explicitly alongside note writes.
# id is UNINDEXED: stored for joins but not searched.
FTS_TITLE_CREATE_SQL = (
    "CREATE VIRTUAL TABLE IF NOT EXISTS notes_title_fts USING fts5(id UNINDEXED, title)"
)
FTS_CONTENT_CREATE_SQL = (
    "CREATE VIRTUAL TABLE IF NOT EXISTS notes_content_fts USING fts5(id UNINDEXED, content)"
)
