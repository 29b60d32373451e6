"""NoteStore — document store and full-text search index over SQLite.

The store is the single dependency injected into every service. It owns
the database engine and the lazily built link graph, and it is the only
place that touches storage. The core algorithms never see SQL: they get
lists of :class:`~wikigraph.domain.types.Note` snapshots.

Writes go through :meth:`NoteStore.transaction`, which yields a
:class:`StoreTransaction` bound to one connection. A transaction commits
on normal exit, rolls back on exception, and always invalidates the
cached graph.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, text

from wikigraph.domain.ids import generate_id
from wikigraph.domain.types import Note, Vault
from wikigraph.infrastructure.database.engine import init_database
from wikigraph.infrastructure.database.schema import notes, vaults
from wikigraph.infrastructure.graph.engine import GraphEngine

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from wikigraph.config.settings import WikiSettings

logger = logging.getLogger(__name__)

_PATCHABLE_FIELDS = frozenset({"title", "content", "folder_id", "order", "updated_at"})
_TERM_PATTERN = re.compile(r"\w+")


class NoteNotFoundError(LookupError):
    """Raised by a transaction when a patch targets a missing note."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"No note found with ID '{note_id}'")
        self.note_id = note_id


def build_match_expression(query: str) -> str | None:
    """Turn free user input into a safe FTS5 MATCH expression.

    Each word becomes a quoted term, the last one a prefix term, and the
    terms are OR-ed so partial matches still rank. Returns None when the
    input has no searchable words.
    """
    terms = _TERM_PATTERN.findall(query)
    if not terms:
        return None
    quoted = [f'"{term}"' for term in terms]
    quoted[-1] = f"{quoted[-1]}*"
    return " OR ".join(quoted)


def _row_to_note(row: Any) -> Note:
    m = row._mapping
    return Note(
        id=m["id"],
        vault_id=m["vault_id"],
        title=m["title"],
        content=m["content"],
        folder_id=m["folder_id"],
        order=m["order"],
        created_at=m["created_at"],
        updated_at=m["updated_at"],
    )


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction with note read/write helpers.

    Every note write keeps both FTS tables in step with the ``notes``
    row, so search never sees a title or body the table does not hold.
    """

    conn: Connection

    # -- reads --------------------------------------------------------

    def get_note(self, note_id: str) -> Note | None:
        row = self.conn.execute(select(notes).where(notes.c.id == note_id)).first()
        return _row_to_note(row) if row is not None else None

    def list_notes_by_vault(self, vault_id: str) -> list[Note]:
        rows = self.conn.execute(
            select(notes).where(notes.c.vault_id == vault_id).order_by(notes.c.seq)
        ).fetchall()
        return [_row_to_note(r) for r in rows]

    # -- writes -------------------------------------------------------

    def insert_vault(self, name: str, *, created_at: int) -> Vault:
        vault = Vault(id=generate_id("vault"), name=name, created_at=created_at)
        self.conn.execute(insert(vaults).values(id=vault.id, name=name, created_at=created_at))
        return vault

    def insert_note(
        self,
        vault_id: str,
        title: str,
        *,
        created_at: int,
        folder_id: str | None = None,
        content: str = "",
    ) -> Note:
        """Insert a note at the end of its folder (``order`` = sibling count)."""
        siblings = self.conn.execute(
            select(func.count())
            .select_from(notes)
            .where(notes.c.vault_id == vault_id, notes.c.folder_id.is_(folder_id))
        ).scalar_one()
        note = Note(
            id=generate_id("note"),
            vault_id=vault_id,
            title=title,
            content=content,
            folder_id=folder_id,
            order=int(siblings),
            created_at=created_at,
            updated_at=created_at,
        )
        self.conn.execute(insert(notes).values(**note.model_dump()))
        self.upsert_fts(note.id, title=title, content=content)
        return note

    def patch_note(self, note_id: str, **fields: Any) -> None:
        """Update selected columns of one note.

        Only ``title``, ``content``, ``folder_id``, ``order`` and
        ``updated_at`` may be patched. ``updated_at`` is never bumped
        implicitly; callers decide whether a write counts as a change.
        """
        unknown = set(fields) - _PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot patch note fields: {sorted(unknown)}")
        result = self.conn.execute(notes.update().where(notes.c.id == note_id).values(**fields))
        if result.rowcount == 0:
            raise NoteNotFoundError(note_id)
        self.upsert_fts(note_id, title=fields.get("title"), content=fields.get("content"))

    def delete_note(self, note_id: str) -> bool:
        result = self.conn.execute(delete(notes).where(notes.c.id == note_id))
        self.delete_fts(note_id)
        return result.rowcount > 0

    # -- FTS helpers --------------------------------------------------

    def upsert_fts(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> None:
        """Replace FTS entries for the given fields (DELETE + INSERT pattern).

        FTS5 virtual tables don't support UPDATE, so we delete any
        existing row first, then insert the new one.
        """
        for table, column, value in (
            ("notes_title_fts", "title", title),
            ("notes_content_fts", "content", content),
        ):
            if value is None:
                continue
            self.conn.execute(text(f"DELETE FROM {table} WHERE id = :id"), {"id": note_id})
            self.conn.execute(
                text(f"INSERT INTO {table}(id, {column}) VALUES (:id, :value)"),
                {"id": note_id, "value": value},
            )

    def delete_fts(self, note_id: str) -> None:
        for table in ("notes_title_fts", "notes_content_fts"):
            self.conn.execute(text(f"DELETE FROM {table} WHERE id = :id"), {"id": note_id})


# ---------------------------------------------------------------------------
# NoteStore — the repository
# ---------------------------------------------------------------------------


class NoteStore:
    """Repository encapsulating database, search index, and graph access.

    Constructed once at CLI startup from :class:`WikiSettings`. Services
    receive the store via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: WikiSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root, settings.database.filename)
        self._graph = GraphEngine(self)

    @property
    def root(self) -> Path:
        """Directory holding the ``.wikigraph/`` data folder."""
        return self._settings.data_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def graph(self) -> GraphEngine:
        """The link graph engine (lazy-built per vault)."""
        return self._graph

    @property
    def settings(self) -> WikiSettings:
        return self._settings

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """One database transaction.

        Commits when the block exits normally and rolls back on any
        exception. The graph cache is invalidated either way so the next
        access rebuilds from committed state.
        """
        try:
            with self._engine.begin() as conn:
                yield StoreTransaction(conn=conn)
        finally:
            self._graph.invalidate()

    # ------------------------------------------------------------------
    # Vaults
    # ------------------------------------------------------------------

    def get_vault(self, vault_id: str) -> Vault | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(vaults).where(vaults.c.id == vault_id)).first()
        if row is None:
            return None
        return Vault(id=row.id, name=row.name, created_at=row.created_at)

    def list_vaults(self) -> list[Vault]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(vaults).order_by(vaults.c.created_at)).fetchall()
        return [Vault(id=r.id, name=r.name, created_at=r.created_at) for r in rows]

    # ------------------------------------------------------------------
    # Notes — reads (engine.connect(), no transaction overhead)
    # ------------------------------------------------------------------

    def get_note(self, note_id: str) -> Note | None:
        with self._engine.connect() as conn:
            return StoreTransaction(conn=conn).get_note(note_id)

    def list_notes_by_vault(self, vault_id: str, *, limit: int | None = None) -> list[Note]:
        """All notes of a vault in storage (insertion) order."""
        query = select(notes).where(notes.c.vault_id == vault_id).order_by(notes.c.seq)
        if limit is not None:
            query = query.limit(limit)
        with self._engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_note(r) for r in rows]

    # ------------------------------------------------------------------
    # Full-text search
    # ------------------------------------------------------------------

    def search_by_title(self, vault_id: str, query: str, limit: int) -> list[Note]:
        """Notes whose title matches *query*, best BM25 match first."""
        return self._search("notes_title_fts", vault_id, query, limit)

    def search_by_content(self, vault_id: str, query: str, limit: int) -> list[Note]:
        """Notes whose content matches *query*, best BM25 match first."""
        return self._search("notes_content_fts", vault_id, query, limit)

    def _search(self, table: str, vault_id: str, query: str, limit: int) -> list[Note]:
        expression = build_match_expression(query)
        if expression is None or limit <= 0:
            return []
        sql = f"""
            SELECT n.*
            FROM {table}
            JOIN notes AS n ON {table}.id = n.id
            WHERE {table} MATCH :query
              AND n.vault_id = :vault_id
            ORDER BY bm25({table}), n.seq
            LIMIT :limit
        """
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(sql), {"query": expression, "vault_id": vault_id, "limit": limit}
            ).fetchall()
        logger.debug("fts %s matched %d rows for %r", table, len(rows), expression)
        return [_row_to_note(r) for r in rows]
