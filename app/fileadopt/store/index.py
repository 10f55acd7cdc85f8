"""Persisted index of file state under the public root.

One row per canonical URI records whether the file is ignored, whether it
is managed by the registry, its directory depth and when the row last
changed. Row ids increase with insertion order and give listings a stable
pagination key.
"""

import logging
import sqlite3
from collections.abc import Iterable, Iterator

from fileadopt.models.records import IndexRecord
from fileadopt.store.database import INDEX_TABLE, Database, store_errors

logger = logging.getLogger(__name__)

# Rows per DELETE statement when removing many URIs.
_DELETE_CHUNK = 500

# An existing row is only rewritten when its flags or depth change, so a
# rescan of an unchanged tree leaves every row, timestamps included, as is.
_UPSERT_SQL = f"""
    INSERT INTO {INDEX_TABLE} (uri, is_ignored, is_managed, directory_depth, timestamp)
    VALUES (?, ?, ?, ?, ?)
    ON CONFLICT(uri) DO UPDATE SET
        is_ignored = excluded.is_ignored,
        is_managed = excluded.is_managed,
        directory_depth = excluded.directory_depth,
        timestamp = excluded.timestamp
    WHERE is_ignored != excluded.is_ignored
        OR is_managed != excluded.is_managed
        OR directory_depth != excluded.directory_depth
"""


def _row_to_record(row: sqlite3.Row) -> IndexRecord:
    return IndexRecord(
        uri=row["uri"],
        is_ignored=bool(row["is_ignored"]),
        is_managed=bool(row["is_managed"]),
        directory_depth=int(row["directory_depth"]),
        timestamp=int(row["timestamp"]),
        id=int(row["id"]),
    )


def _flag_conditions(ignored: bool | None, managed: bool | None) -> tuple[str, list[object]]:
    """Build a WHERE clause filtering on the ignored/managed flags."""
    clauses: list[str] = []
    params: list[object] = []
    if ignored is not None:
        clauses.append("is_ignored = ?")
        params.append(1 if ignored else 0)
    if managed is not None:
        clauses.append("is_managed = ?")
        params.append(1 if managed else 0)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class IndexStore:
    """Table access for the file index.

    All methods raise StoreError when the database fails; errors are never
    swallowed because a half-written index must be visible to the caller.

    Args:
        database: Shared database handle.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def upsert(self, record: IndexRecord) -> None:
        """Insert or update the row for the record's URI.

        Raises:
            StoreError: If the write fails.
        """
        with store_errors(f"upsert index row {record.uri}"):
            self._db.execute(
                _UPSERT_SQL,
                (
                    record.uri,
                    1 if record.is_ignored else 0,
                    1 if record.is_managed else 0,
                    record.directory_depth,
                    record.timestamp,
                ),
            )
            self._db.commit()

    def upsert_many(self, records: Iterable[IndexRecord]) -> int:
        """Upsert several records in one transaction.

        Returns:
            Number of records written.
        """
        count = 0
        with self._db.batch():
            for record in records:
                self.upsert(record)
                count += 1
        return count

    def get(self, uri: str) -> IndexRecord | None:
        """Fetch the row for a URI, or None."""
        with store_errors(f"read index row {uri}"):
            row = self._db.execute(
                f"SELECT * FROM {INDEX_TABLE} WHERE uri = ?",
                (uri,),
            ).fetchone()
        return _row_to_record(row) if row else None

    def delete(self, uri: str) -> bool:
        """Delete the row for a URI.

        Returns:
            True if a row was removed.
        """
        with store_errors(f"delete index row {uri}"):
            cursor = self._db.execute(f"DELETE FROM {INDEX_TABLE} WHERE uri = ?", (uri,))
            self._db.commit()
        return cursor.rowcount > 0

    def delete_missing(self, uris: Iterable[str]) -> int:
        """Remove the rows of URIs whose files were found absent.

        Args:
            uris: URIs observed to be missing from disk.

        Returns:
            Number of rows removed.
        """
        pending = list(uris)
        removed = 0
        with store_errors("delete missing index rows"):
            for start in range(0, len(pending), _DELETE_CHUNK):
                chunk = pending[start : start + _DELETE_CHUNK]
                placeholders = ", ".join("?" for _ in chunk)
                cursor = self._db.execute(
                    f"DELETE FROM {INDEX_TABLE} WHERE uri IN ({placeholders})",
                    tuple(chunk),
                )
                removed += cursor.rowcount
            self._db.commit()
        if removed:
            logger.debug("Removed %d index rows for missing files", removed)
        return removed

    def truncate_all(self) -> None:
        """Delete every row."""
        with store_errors("truncate index"):
            self._db.execute(f"DELETE FROM {INDEX_TABLE}")
            self._db.commit()

    def iter_uris(self) -> Iterator[str]:
        """Yield every indexed URI in row-id order."""
        with store_errors("read index URIs"):
            rows = self._db.execute(f"SELECT uri FROM {INDEX_TABLE} ORDER BY id").fetchall()
        for row in rows:
            yield row["uri"]

    def iter_rows(self, after_id: int = 0, limit: int = 100) -> list[IndexRecord]:
        """Return up to ``limit`` rows with an id greater than ``after_id``."""
        with store_errors("read index rows"):
            rows = self._db.execute(
                f"SELECT * FROM {INDEX_TABLE} WHERE id > ? ORDER BY id LIMIT ?",
                (after_id, limit),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def count_by_ignored_managed(self) -> dict[tuple[bool, bool], int]:
        """Count rows grouped by (is_ignored, is_managed).

        Returns:
            Mapping of flag pairs to row counts; missing groups are absent.
        """
        with store_errors("count index rows"):
            rows = self._db.execute(
                f"""
                SELECT is_ignored, is_managed, COUNT(*) AS total
                FROM {INDEX_TABLE}
                GROUP BY is_ignored, is_managed
                """
            ).fetchall()
        return {
            (bool(row["is_ignored"]), bool(row["is_managed"])): int(row["total"]) for row in rows
        }

    def list_unmanaged_unignored(self, limit: int, after_id: int = 0) -> list[IndexRecord]:
        """List unmanaged, non-ignored rows in row-id order.

        Args:
            limit: Maximum number of rows.
            after_id: Only rows with a larger id are returned.
        """
        with store_errors("list unmanaged index rows"):
            rows = self._db.execute(
                f"""
                SELECT * FROM {INDEX_TABLE}
                WHERE is_ignored = 0 AND is_managed = 0 AND id > ?
                ORDER BY id
                LIMIT ?
                """,
                (after_id, limit),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def list_files(
        self,
        *,
        ignored: bool | None = None,
        managed: bool | None = None,
        limit: int = 50,
    ) -> list[str]:
        """List URIs sorted by URI, optionally filtered by flags."""
        where, params = _flag_conditions(ignored, managed)
        with store_errors("list index files"):
            rows = self._db.execute(
                f"SELECT uri FROM {INDEX_TABLE} {where} ORDER BY uri LIMIT ?",
                (*params, limit),
            ).fetchall()
        return [row["uri"] for row in rows]

    def count_files(self, *, ignored: bool | None = None, managed: bool | None = None) -> int:
        """Count rows, optionally filtered by flags."""
        where, params = _flag_conditions(ignored, managed)
        with store_errors("count index files"):
            row = self._db.execute(
                f"SELECT COUNT(*) AS total FROM {INDEX_TABLE} {where}",
                tuple(params),
            ).fetchone()
        return int(row["total"])
