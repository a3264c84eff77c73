"""FTS5-backed full-text index over inventory records.

The index lives in a single SQLite database in WAL mode. One long-lived
connection performs all writes under a lock; every read opens its own
read-only connection and therefore sees the last committed snapshot
without waiting for the writer.

The FTS5 columns receive analyzed text (see ``query.analysis``) while the
``documents`` table keeps the raw values returned in hits.
"""

import sqlite3
import threading
import time
from collections.abc import Iterator, Mapping
from pathlib import Path

import structlog

from inventory_search.inventory.domain import EntityType, InventoryRecord
from inventory_search.inventory.repositories import Repository
from inventory_search.query.analysis import TOKENIZER, index_text
from inventory_search.query.nodes import Query
from inventory_search.query.parser import QueryParseError, parse_query
from inventory_search.search.compiler import SCOPE_VALUE, compile_match
from inventory_search.search.documents import build_document, to_hit
from inventory_search.search.progress import IndexProgress
from inventory_search.search.projections import project
from inventory_search.search.schemas import IndexedDocument, SearchHit

logger = structlog.get_logger()

INDEX_FILENAME = "search.db"
DEFAULT_MAX_HITS = 50
MAX_WILDCARD_TERMS = 1024
PROGRESS_LOG_INTERVAL = 250

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS documents (
    pk INTEGER PRIMARY KEY,
    id TEXT NOT NULL,
    type TEXT NOT NULL,
    type_display TEXT NOT NULL,
    content TEXT NOT NULL,
    display TEXT NOT NULL,
    snippet TEXT NOT NULL,
    scope TEXT NOT NULL DEFAULT '{SCOPE_VALUE}',
    UNIQUE (type, id)
);
CREATE INDEX IF NOT EXISTS documents_id ON documents (id);
CREATE VIRTUAL TABLE IF NOT EXISTS documents_fts USING fts5(
    id,
    type,
    content,
    scope,
    content='documents',
    content_rowid='pk',
    tokenize='{TOKENIZER}'
);
CREATE VIRTUAL TABLE IF NOT EXISTS documents_vocab USING fts5vocab('documents_fts', 'col');
"""

_SEARCH_SQL = """
SELECT d.id, d.type, d.type_display, d.content, d.display, d.snippet
FROM (
    SELECT rowid, bm25(documents_fts) AS score
    FROM documents_fts
    WHERE documents_fts MATCH ?
    ORDER BY score, rowid
    LIMIT ?
) AS hits
JOIN documents AS d ON d.pk = hits.rowid
ORDER BY hits.score, hits.rowid
"""


def _fts_values(
    pk: int, doc_id: str, doc_type: str, content: str, scope: str
) -> tuple[int, str, str, str, str]:
    """Column values for documents_fts, analyzed like query terms.

    Deletes must pass exactly what was inserted, so both go through here.
    """
    return (pk, index_text(doc_id), index_text(doc_type), index_text(content), scope)


class IndexStorageError(Exception):
    """Raised when the index database cannot be read or written."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize storage error.

        Args:
            message: Error description.
            path: Index database path.
        """
        super().__init__(message)
        self.path = path


class SearchIndex:
    """Full-text index of inventory records.

    Thread-safe: writes are serialized by a lock around the single writer
    connection (opened with check_same_thread=False since writes arrive
    from worker threads); reads use independent connections.
    """

    def __init__(
        self,
        index_path: Path,
        progress: IndexProgress | None = None,
        max_hits: int = DEFAULT_MAX_HITS,
    ) -> None:
        """Initialize search index (call initialize() before writing).

        Args:
            index_path: Directory holding the index database.
            progress: Tracker updated during full rebuilds.
            max_hits: Upper bound on results per search.
        """
        self.index_path = Path(index_path)
        self.db_path = self.index_path / INDEX_FILENAME
        self.progress = progress if progress is not None else IndexProgress()
        self.max_hits = max_hits
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    # -- lifecycle ---------------------------------------------------------

    def initialize(self) -> None:
        """Open the writer connection and create the schema if needed.

        Raises:
            IndexStorageError: If the database cannot be created.
        """
        with self._lock:
            if self._conn is not None:
                return
            try:
                self.index_path.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path, check_same_thread=False)
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(_SCHEMA)
                conn.commit()
            except (sqlite3.Error, OSError) as e:
                raise IndexStorageError(
                    f"Failed to open search index: {e}", str(self.db_path)
                ) from e
            self._conn = conn
        logger.info("search_index_initialized", path=str(self.db_path))

    def close(self) -> None:
        """Close the writer connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("search_index_closed")

    def _writer(self) -> sqlite3.Connection:
        if self._conn is None:
            raise IndexStorageError("Search index is not initialized", str(self.db_path))
        return self._conn

    def _reader(self) -> sqlite3.Connection | None:
        """Open a read-only connection, or None if no index exists yet."""
        if not self.db_path.exists():
            return None
        uri = self.db_path.resolve().as_uri() + "?mode=ro"
        return sqlite3.connect(uri, uri=True)

    # -- writes ------------------------------------------------------------

    def index_record(self, record: InventoryRecord) -> IndexedDocument:
        """Project an inventory row and upsert its document.

        Args:
            record: Any inventory row model.

        Returns:
            The stored document.

        Raises:
            ValueError: If the row has a blank id.
            IndexStorageError: If the write fails.
        """
        projection = project(record)
        return self.index_document(
            projection.doc_type.value, projection.doc_id, *projection.fields
        )

    def index_document(
        self, doc_type: str, doc_id: str, *fields: str | None
    ) -> IndexedDocument:
        """Insert or replace the document for ``(doc_type, doc_id)``.

        Args:
            doc_type: Entity tag.
            doc_id: Row identifier.
            *fields: Searchable values, display field first.

        Returns:
            The stored document.

        Raises:
            ValueError: If the id is blank.
            IndexStorageError: If the write fails.
        """
        document = build_document(doc_type, doc_id, *fields)
        with self._lock:
            conn = self._writer()
            try:
                self._upsert(conn, document)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise IndexStorageError(
                    f"Failed to index {document.type_display} {document.id}: {e}",
                    str(self.db_path),
                ) from e
        logger.debug("search_document_upserted", id=document.id, type=document.type)
        return document

    def _upsert(self, conn: sqlite3.Connection, document: IndexedDocument) -> None:
        existing = conn.execute(
            "SELECT pk, id, type, content, scope FROM documents WHERE type = ? AND id = ?",
            (document.type, document.id),
        ).fetchone()

        if existing is not None:
            pk = existing[0]
            conn.execute(
                "INSERT INTO documents_fts (documents_fts, rowid, id, type, content, scope) "
                "VALUES ('delete', ?, ?, ?, ?, ?)",
                _fts_values(*existing),
            )
            conn.execute(
                "UPDATE documents SET type_display = ?, content = ?, display = ?, snippet = ? "
                "WHERE pk = ?",
                (
                    document.type_display,
                    document.content,
                    document.display_text,
                    document.snippet,
                    pk,
                ),
            )
        else:
            cursor = conn.execute(
                "INSERT INTO documents (id, type, type_display, content, display, snippet) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    document.id,
                    document.type,
                    document.type_display,
                    document.content,
                    document.display_text,
                    document.snippet,
                ),
            )
            pk = cursor.lastrowid

        conn.execute(
            "INSERT INTO documents_fts (rowid, id, type, content, scope) VALUES (?, ?, ?, ?, ?)",
            _fts_values(pk, document.id, document.type, document.content, SCOPE_VALUE),
        )

    def delete_record(self, doc_id: str, doc_type: str | None = None) -> int:
        """Remove the documents of a deleted row.

        Args:
            doc_id: Row identifier.
            doc_type: Restrict the delete to one entity type; all types
                when None.

        Returns:
            Number of documents removed; 0 when the id is not indexed.

        Raises:
            IndexStorageError: If the delete fails.
        """
        safe_id = (doc_id or "").strip()
        if not safe_id:
            logger.warning("search_delete_ignored", reason="empty_id")
            return 0

        sql = "SELECT pk, id, type, content, scope FROM documents WHERE id = ?"
        params: tuple[str, ...] = (safe_id,)
        if doc_type and doc_type.strip():
            sql += " AND type = ?"
            params = (safe_id, doc_type.strip().lower())

        with self._lock:
            conn = self._writer()
            try:
                rows = conn.execute(sql, params).fetchall()
                for row in rows:
                    conn.execute(
                        "INSERT INTO documents_fts (documents_fts, rowid, id, type, content, scope) "
                        "VALUES ('delete', ?, ?, ?, ?, ?)",
                        _fts_values(*row),
                    )
                    conn.execute("DELETE FROM documents WHERE pk = ?", (row[0],))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise IndexStorageError(
                    f"Failed to delete {safe_id}: {e}", str(self.db_path)
                ) from e

        logger.debug("search_document_deleted", id=safe_id, type=doc_type, removed=len(rows))
        return len(rows)

    def clear_index(self) -> None:
        """Delete every document.

        Raises:
            IndexStorageError: If the index cannot be cleared.
        """
        with self._lock:
            conn = self._writer()
            try:
                conn.execute("INSERT INTO documents_fts (documents_fts) VALUES ('delete-all')")
                conn.execute("DELETE FROM documents")
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise IndexStorageError(
                    f"Failed to clear search index: {e}", str(self.db_path)
                ) from e
        logger.debug("search_index_cleared", path=str(self.db_path))

    def reindex_all(
        self, repositories: Mapping[EntityType, Repository[InventoryRecord]]
    ) -> int:
        """Rebuild the index from every repository.

        Progress totals are published before the index is cleared so callers
        can follow the rebuild from the start. Rows that cannot be indexed
        are skipped; storage or repository failures end the pass. Progress
        is always finished.

        Args:
            repositories: Row sources keyed by entity type.

        Returns:
            Number of documents written.
        """
        started = time.monotonic()
        written = 0
        processed = 0
        progress_started = False
        try:
            batches = [
                (entity, list(repository.find_all()))
                for entity, repository in repositories.items()
            ]
            self.progress.start({entity.label: len(rows) for entity, rows in batches})
            progress_started = True
            grand_total = sum(len(rows) for _, rows in batches)

            self.clear_index()

            for entity, rows in batches:
                for row in rows:
                    try:
                        self.index_record(row)
                        written += 1
                    except ValueError as e:
                        logger.warning("reindex_row_skipped", type=entity.value, error=str(e))
                    self.progress.inc(entity.label)
                    processed += 1
                    if processed % PROGRESS_LOG_INTERVAL == 0 or processed == grand_total:
                        logger.debug(
                            "reindex_progress", processed=processed, total=grand_total
                        )

            logger.info(
                "reindex_completed",
                documents=written,
                duration_ms=round((time.monotonic() - started) * 1000),
            )
        except Exception:
            logger.exception("reindex_failed", path=str(self.db_path), documents=written)
        finally:
            if progress_started:
                self.progress.finish()
        return written

    # -- reads -------------------------------------------------------------

    def search(self, query: Query | str, limit: int | None = None) -> list[SearchHit]:
        """Run a query against the latest committed snapshot.

        Args:
            query: Query tree, or a string in the structured grammar.
            limit: Maximum hits; capped at ``max_hits``.

        Returns:
            Hits ranked by BM25, empty on invalid input or storage errors.
        """
        if isinstance(query, str):
            try:
                query = parse_query(query)
            except QueryParseError as e:
                logger.warning("search_query_invalid", query=e.query, error=str(e))
                return []

        hit_limit = self.max_hits if limit is None else max(0, min(limit, self.max_hits))
        try:
            conn = self._reader()
            if conn is None:
                return []
            try:
                match = compile_match(query, lambda f, p: self._expand(conn, f, p))
                if match is None:
                    return []
                rows = conn.execute(_SEARCH_SQL, (match, hit_limit)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("search_query_failed", query=str(query), error=str(e))
            return []

        return [
            to_hit(
                IndexedDocument(
                    id=row[0],
                    type=row[1],
                    type_display=row[2],
                    content=row[3],
                    display_text=row[4],
                    snippet=row[5],
                )
            )
            for row in rows
        ]

    def _expand(self, conn: sqlite3.Connection, field: str, pattern: str) -> list[str]:
        rows = conn.execute(
            "SELECT term FROM documents_vocab WHERE col = ? AND term GLOB ? "
            "ORDER BY term LIMIT ?",
            (field, pattern, MAX_WILDCARD_TERMS),
        ).fetchall()
        return [row[0] for row in rows]

    def terms(self, field: str, start: str = "") -> Iterator[str]:
        """Iterate the term dictionary of one field in sorted order.

        Args:
            field: Indexed column name.
            start: First term to return (inclusive lower bound).

        Yields:
            Indexed terms greater than or equal to ``start``.

        Raises:
            sqlite3.Error: If the dictionary cannot be read.
        """
        conn = self._reader()
        if conn is None:
            return
        try:
            cursor = conn.execute(
                "SELECT term FROM documents_vocab WHERE col = ? AND term >= ? ORDER BY term",
                (field, start),
            )
            for (term,) in cursor:
                yield term
        finally:
            conn.close()

    def count(self) -> int:
        """Number of indexed documents.

        Raises:
            IndexStorageError: If the database cannot be read.
        """
        try:
            conn = self._reader()
            if conn is None:
                return 0
            try:
                return conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise IndexStorageError(
                f"Failed to count documents: {e}", str(self.db_path)
            ) from e
