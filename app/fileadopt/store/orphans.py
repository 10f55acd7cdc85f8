"""Persisted list of discovered orphan files.

Rows survive scans that do not observe them again; an orphan only leaves
the table when it is adopted or explicitly deleted.
"""

from fileadopt.models.records import OrphanRecord
from fileadopt.store.database import ORPHAN_TABLE, Database, store_errors


class OrphanStore:
    """Table access for the orphan list.

    Args:
        database: Shared database handle.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def upsert(self, uri: str, timestamp: int) -> None:
        """Record an orphan, refreshing the timestamp of an existing row.

        Raises:
            StoreError: If the write fails.
        """
        with store_errors(f"upsert orphan {uri}"):
            self._db.execute(
                f"""
                INSERT INTO {ORPHAN_TABLE} (uri, timestamp) VALUES (?, ?)
                ON CONFLICT(uri) DO UPDATE SET timestamp = excluded.timestamp
                """,
                (uri, timestamp),
            )
            self._db.commit()

    def delete(self, uri: str) -> bool:
        """Remove an orphan row.

        Returns:
            True if a row was removed.
        """
        with store_errors(f"delete orphan {uri}"):
            cursor = self._db.execute(f"DELETE FROM {ORPHAN_TABLE} WHERE uri = ?", (uri,))
            self._db.commit()
        return cursor.rowcount > 0

    def get(self, uri: str) -> OrphanRecord | None:
        """Fetch the orphan row for a URI, or None."""
        with store_errors(f"read orphan {uri}"):
            row = self._db.execute(
                f"SELECT uri, timestamp FROM {ORPHAN_TABLE} WHERE uri = ?",
                (uri,),
            ).fetchone()
        return OrphanRecord(uri=row["uri"], timestamp=int(row["timestamp"])) if row else None

    def list_all(self, limit: int | None = None) -> list[str]:
        """List orphan URIs, oldest discovery first.

        Args:
            limit: Maximum number of URIs; None returns all.
        """
        sql = f"SELECT uri FROM {ORPHAN_TABLE} ORDER BY timestamp ASC, id ASC"
        params: tuple[object, ...] = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        with store_errors("list orphans"):
            rows = self._db.execute(sql, params).fetchall()
        return [row["uri"] for row in rows]

    def count(self) -> int:
        """Count orphan rows."""
        with store_errors("count orphans"):
            row = self._db.execute(f"SELECT COUNT(*) AS total FROM {ORPHAN_TABLE}").fetchone()
        return int(row["total"])

    def truncate_all(self) -> None:
        """Delete every orphan row."""
        with store_errors("truncate orphans"):
            self._db.execute(f"DELETE FROM {ORPHAN_TABLE}")
            self._db.commit()
