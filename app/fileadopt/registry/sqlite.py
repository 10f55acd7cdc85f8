"""SQLite-backed reference registry.

Stores entries in a ``file_managed`` table inside the fileadopt database.
Used by the CLI when no other registry is wired in, and by the tests.
"""

import logging

from fileadopt.errors import RegistryError, StoreError
from fileadopt.models.entity import EntityHandle
from fileadopt.registry.base import ManagedRegistry
from fileadopt.store.database import MANAGED_TABLE, Database, store_errors

logger = logging.getLogger(__name__)


class SqliteRegistry(ManagedRegistry):
    """Managed-file registry stored in SQLite.

    Args:
        database: Shared database handle.
    """

    def __init__(self, database: Database) -> None:
        super().__init__()
        self._db = database

    def list_all_managed_uris(self) -> list[str]:
        """Return the URI of every entry."""
        try:
            with store_errors("list managed files"):
                rows = self._db.execute(f"SELECT uri FROM {MANAGED_TABLE}").fetchall()
        except StoreError as e:
            raise RegistryError(str(e)) from e
        return [row["uri"] for row in rows]

    def create_managed_entry(self, uri: str, filename: str, timestamp: int) -> EntityHandle:
        """Insert an entry and notify listeners.

        Raises:
            RegistryError: If the insert fails.
        """
        try:
            with store_errors(f"create managed entry for {uri}"):
                cursor = self._db.execute(
                    f"INSERT INTO {MANAGED_TABLE} (uri, filename, timestamp) VALUES (?, ?, ?)",
                    (uri, filename, timestamp),
                )
                self._db.commit()
        except StoreError as e:
            raise RegistryError(str(e)) from e

        entity = EntityHandle(
            id=int(cursor.lastrowid or 0),
            uri=uri,
            filename=filename,
            timestamp=timestamp,
        )
        logger.debug("Created managed entry %d for %s", entity.id, uri)
        self._notify_insert(entity)
        return entity

    def get_by_uri(self, uri: str) -> EntityHandle | None:
        """Return the newest entry for a URI, or None."""
        try:
            with store_errors(f"read managed entry for {uri}"):
                row = self._db.execute(
                    f"""
                    SELECT fid, uri, filename, timestamp FROM {MANAGED_TABLE}
                    WHERE uri = ? ORDER BY fid DESC LIMIT 1
                    """,
                    (uri,),
                ).fetchone()
        except StoreError as e:
            raise RegistryError(str(e)) from e
        if row is None:
            return None
        return EntityHandle(
            id=int(row["fid"]),
            uri=row["uri"],
            filename=row["filename"],
            timestamp=int(row["timestamp"]),
        )

    def delete_entry(self, entity: EntityHandle) -> bool:
        """Delete an entry and notify listeners.

        Returns:
            True if the entry existed.

        Raises:
            RegistryError: If the delete fails.
        """
        try:
            with store_errors(f"delete managed entry {entity.id}"):
                cursor = self._db.execute(
                    f"DELETE FROM {MANAGED_TABLE} WHERE fid = ?",
                    (entity.id,),
                )
                self._db.commit()
        except StoreError as e:
            raise RegistryError(str(e)) from e

        if cursor.rowcount == 0:
            return False
        self._notify_delete(entity)
        return True
