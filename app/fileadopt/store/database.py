"""SQLite connection handling and schema creation.

All tables live in one database file. Writes are committed immediately
unless they run inside :meth:`Database.batch`, which groups a whole scan
into one transaction.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fileadopt.errors import StoreError

logger = logging.getLogger(__name__)

INDEX_TABLE = "file_adoption_index"
ORPHAN_TABLE = "file_adoption_orphans"
HARDLINK_TABLE = "file_adoption_hardlinks"
MANAGED_TABLE = "file_managed"

_SCHEMA: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS {INDEX_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        uri TEXT NOT NULL UNIQUE,
        is_ignored INTEGER NOT NULL DEFAULT 0,
        is_managed INTEGER NOT NULL DEFAULT 0,
        directory_depth INTEGER NOT NULL DEFAULT 0,
        timestamp INTEGER NOT NULL DEFAULT 0
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_index_flags ON {INDEX_TABLE}(is_ignored, is_managed)",
    f"""
    CREATE TABLE IF NOT EXISTS {ORPHAN_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        uri TEXT NOT NULL UNIQUE,
        timestamp INTEGER NOT NULL DEFAULT 0
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_orphans_timestamp ON {ORPHAN_TABLE}(timestamp)",
    f"""
    CREATE TABLE IF NOT EXISTS {HARDLINK_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        source_id TEXT NOT NULL,
        uri TEXT NOT NULL,
        timestamp INTEGER NOT NULL DEFAULT 0,
        UNIQUE (source_id, uri)
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_hardlinks_uri ON {HARDLINK_TABLE}(uri)",
)

_REGISTRY_SCHEMA: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS {MANAGED_TABLE} (
        fid INTEGER PRIMARY KEY AUTOINCREMENT,
        uri TEXT NOT NULL,
        filename TEXT NOT NULL,
        timestamp INTEGER NOT NULL DEFAULT 0,
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_managed_uri ON {MANAGED_TABLE}(uri)",
)


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate sqlite3 errors into StoreError.

    Args:
        action: Description used in the error message (e.g. "upsert index row").

    Raises:
        StoreError: If the wrapped block raises sqlite3.Error, or a value
            cannot be encoded as UTF-8 for binding.
    """
    try:
        yield
    except (sqlite3.Error, UnicodeEncodeError) as e:
        msg = f"Failed to {action}: {e}"
        raise StoreError(msg) from e


class Database:
    """Owns the SQLite connection shared by the stores.

    Args:
        path: Database file, or ":memory:" for an in-memory database.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = path
        self._conn: sqlite3.Connection | None = None
        self._batch_depth = 0

    @property
    def path(self) -> Path | str:
        """Location of the database."""
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        """Open connection, connecting on first use."""
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    def connect(self) -> None:
        """Open the connection and create missing tables.

        Raises:
            StoreError: If the database cannot be opened or initialized.
        """
        if self._conn is not None:
            return
        if isinstance(self._path, Path):
            self._path.parent.mkdir(parents=True, exist_ok=True)
        with store_errors(f"open database {self._path}"):
            conn = sqlite3.connect(str(self._path))
            conn.row_factory = sqlite3.Row
            for statement in (*_SCHEMA, *_REGISTRY_SCHEMA):
                conn.execute(statement)
            conn.commit()
        self._conn = conn

    def close(self) -> None:
        """Close the connection if it is open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str, params: tuple[object, ...] = ()) -> sqlite3.Cursor:
        """Execute a statement on the shared connection."""
        return self.connection.execute(sql, params)

    def commit(self) -> None:
        """Commit pending writes unless a batch is open."""
        if self._batch_depth == 0:
            self.connection.commit()

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group writes into a single transaction.

        Nested batches join the outermost one. The transaction is rolled
        back if the block raises.

        Raises:
            StoreError: If the commit fails.
        """
        self._batch_depth += 1
        try:
            yield
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.connection.rollback()
            raise
        self._batch_depth -= 1
        if self._batch_depth == 0:
            with store_errors("commit batch"):
                self.connection.commit()

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
