"""Record Store handle: SQLite connection lifecycle, schema and indexes.

The store is an explicitly constructed handle passed to the repositories
and the seeder. connect() validates the database and creates the schema;
close() releases it. Each operation opens a short-lived connection, so a
single handle can be shared by concurrent request handlers.

Documents are stored one row per record; nested fields (verb tenses) are
kept as JSON text.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Generator

import structlog

from verbario.core.errors import StoreUnavailable
from verbario.core.pagination import normalize_query

logger = structlog.get_logger(__name__)

DEFAULT_CONNECT_TIMEOUT = 5.0

VERBS_WORD_INDEX = "idx_verbs_word"


@dataclass
class IndexInfo:
    """An index on a store table."""

    name: str
    columns: list[str]
    unique: bool


def _casefold_contains(haystack: str | None, needle: str | None) -> bool:
    if haystack is None or needle is None:
        return False
    return needle.casefold() in haystack.casefold()


class RecordStore:
    """Handle on the SQLite database holding verbs and translations.

    Example:
        with RecordStore(Path("data/verbario.db")) as store:
            with store.connection() as conn:
                conn.execute("SELECT COUNT(*) FROM verbs")
    """

    def __init__(self, path: Path, connect_timeout: float = DEFAULT_CONNECT_TIMEOUT):
        self.path = Path(path)
        self.connect_timeout = connect_timeout
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> "RecordStore":
        """Open the database and create the schema if needed.

        Raises:
            StoreUnavailable: If the database cannot be opened or initialized
        """
        if self._connected:
            return self

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._open()
        except (sqlite3.Error, OSError) as e:
            logger.error("store.connect_failed", path=str(self.path), error=str(e))
            raise StoreUnavailable(f"Cannot open store at {self.path}: {e}") from e

        try:
            _create_schema(conn)
            conn.commit()
        except sqlite3.DatabaseError as e:
            logger.error("store.schema_failed", path=str(self.path), error=str(e))
            raise StoreUnavailable(f"Cannot initialize store at {self.path}: {e}") from e
        finally:
            conn.close()

        self._connected = True
        logger.info("store.connected", path=str(self.path))
        return self

    def close(self) -> None:
        """Release the handle. Safe to call more than once."""
        if self._connected:
            self._connected = False
            logger.info("store.disconnected", path=str(self.path))

    def __enter__(self) -> "RecordStore":
        return self.connect()

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.path, timeout=self.connect_timeout, check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        conn.create_function("casefold_contains", 2, _casefold_contains, deterministic=True)
        return conn

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a connection as context manager.

        Commits on success, rolls back on error.

        Raises:
            StoreUnavailable: If the store is not connected or cannot be opened
        """
        if not self._connected:
            raise StoreUnavailable("Record store is not connected")

        try:
            conn = self._open()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open store at {self.path}: {e}") from e

        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Index management
    # -------------------------------------------------------------------------

    def list_indexes(self, table: str) -> list[IndexInfo]:
        """List indexes on a table, with their columns and uniqueness."""
        indexes: list[IndexInfo] = []
        with self.connection() as conn:
            for row in conn.execute(f"PRAGMA index_list({_quote(table)})").fetchall():
                columns = [
                    info["name"]
                    for info in conn.execute(
                        f"PRAGMA index_info({_quote(row['name'])})"
                    ).fetchall()
                ]
                indexes.append(
                    IndexInfo(name=row["name"], columns=columns, unique=bool(row["unique"]))
                )
        return indexes

    def drop_index(self, name: str) -> None:
        with self.connection() as conn:
            conn.execute(f"DROP INDEX IF EXISTS {_quote(name)}")
        logger.debug("store.index_dropped", index=name)

    def create_index(self, table: str, column: str, name: str, unique: bool = False) -> None:
        """Create an index if it does not exist.

        Raises:
            sqlite3.IntegrityError: If unique and existing rows collide
        """
        kind = "UNIQUE INDEX" if unique else "INDEX"
        with self.connection() as conn:
            conn.execute(
                f"CREATE {kind} IF NOT EXISTS {_quote(name)} "
                f"ON {_quote(table)}({_quote(column)})"
            )
        logger.debug("store.index_created", index=name, unique=unique)


def substring_filter(column: str, q: str | None) -> tuple[str, tuple[str, ...]]:
    """Build a case-insensitive substring WHERE clause for column.

    Returns an empty clause when q is None or blank.
    """
    needle = normalize_query(q)
    if needle is None:
        return "", ()
    return f" WHERE casefold_contains({_quote(column)}, ?)", (needle,)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes.

    Uses IF NOT EXISTS for idempotency. The unique index on verbs.word is
    created best-effort: a legacy database with duplicate words still
    connects, and the seeder's index repair reports the problem.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS verbs (
            id TEXT PRIMARY KEY,
            word TEXT NOT NULL,
            tenses TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS translations (
            id TEXT PRIMARY KEY,
            word TEXT NOT NULL,
            english TEXT NOT NULL,
            hungarian TEXT NOT NULL,
            memorized INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_translations_word ON translations(word);
        CREATE INDEX IF NOT EXISTS idx_translations_memorized ON translations(memorized);
        """
    )
    try:
        conn.execute(
            f"CREATE UNIQUE INDEX IF NOT EXISTS {VERBS_WORD_INDEX} ON verbs(word)"
        )
    except sqlite3.IntegrityError as e:
        logger.warning("store.unique_word_index_failed", error=str(e))
