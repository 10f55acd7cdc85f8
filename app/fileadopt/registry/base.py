"""Abstract interface of the managed-file registry.

The registry is an external store of file entries. The engine only needs
to list every registered URI and to create new entries; registries that
support deletion notify listeners so the index can be patched without a
rescan.
"""

from abc import ABC, abstractmethod
from typing import Protocol

from fileadopt.models.entity import EntityHandle


class EntityListener(Protocol):
    """Receives insert/delete notifications from a registry."""

    def on_entity_insert(self, entity: EntityHandle) -> None:
        """Handle a newly created registry entry."""

    def on_entity_delete(self, entity: EntityHandle) -> None:
        """Handle a deleted registry entry."""


class ManagedRegistry(ABC):
    """Abstract base class for managed-file registries.

    Example:
        >>> registry = SqliteRegistry(database)
        >>> handle = registry.create_managed_entry("public://a.txt", "a.txt", 1700000000)
        >>> "public://a.txt" in registry.list_all_managed_uris()
        True
    """

    def __init__(self) -> None:
        self._listeners: list[EntityListener] = []

    @abstractmethod
    def list_all_managed_uris(self) -> list[str]:
        """Return the URI of every registry entry.

        Raises:
            RegistryError: If the registry cannot be queried.
        """

    @abstractmethod
    def create_managed_entry(self, uri: str, filename: str, timestamp: int) -> EntityHandle:
        """Create a registry entry for a file.

        Args:
            uri: Canonical URI of the file.
            filename: Base name of the file.
            timestamp: File modification time (Unix seconds).

        Returns:
            Handle of the new entry.

        Raises:
            RegistryError: If the entry cannot be created.
        """

    def add_listener(self, listener: EntityListener) -> None:
        """Register a listener for insert/delete notifications."""
        self._listeners.append(listener)

    def _notify_insert(self, entity: EntityHandle) -> None:
        for listener in self._listeners:
            listener.on_entity_insert(entity)

    def _notify_delete(self, entity: EntityHandle) -> None:
        for listener in self._listeners:
            listener.on_entity_delete(entity)
