"""Index maintenance driven by registry insert/delete events.

The hook keeps the index current between scans. It applies the same
canonicalization and ignore rules as the scans so both paths write the
same flags for the same file.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path

from fileadopt.core.config import AdoptionConfig
from fileadopt.core.ignore import is_ignored
from fileadopt.core.uri import canonicalize, directory_depth, is_public, to_relative
from fileadopt.models.entity import EntityHandle
from fileadopt.models.records import IndexRecord
from fileadopt.store.index import IndexStore

logger = logging.getLogger(__name__)


class EntityLifecycleHook:
    """Patches the index when registry entries are created or deleted.

    Register an instance with :meth:`ManagedRegistry.add_listener`.

    Args:
        config: Settings providing the public root and ignore patterns.
        index: Index table access.
        clock: Wall clock used for row timestamps.
    """

    def __init__(
        self,
        config: AdoptionConfig,
        index: IndexStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._index = index
        self._clock = clock

    def on_entity_insert(self, entity: EntityHandle) -> None:
        """Mark the entity's file as managed in the index.

        Entities outside the public scheme are ignored.
        """
        record = self._record_for(entity, managed=True)
        if record is None:
            return
        self._index.upsert(record)
        logger.debug("Indexed managed file %s", record.uri)

    def on_entity_delete(self, entity: EntityHandle) -> None:
        """Update the index after the entity's registry entry was deleted.

        If the file still exists it becomes unmanaged (an orphan candidate
        again); otherwise its index row is removed.
        """
        record = self._record_for(entity, managed=False)
        if record is None:
            return
        path = Path(self._config.public_root) / to_relative(record.uri)
        if path.is_file():
            self._index.upsert(record)
            logger.debug("Marked %s unmanaged after registry delete", record.uri)
        else:
            self._index.delete(record.uri)
            logger.debug("Dropped index row for deleted file %s", record.uri)

    def _record_for(self, entity: EntityHandle, *, managed: bool) -> IndexRecord | None:
        uri = canonicalize(entity.uri)
        if not is_public(uri):
            return None
        relative = to_relative(uri)
        if not relative:
            return None
        return IndexRecord(
            uri=uri,
            is_ignored=is_ignored(relative, self._config.patterns),
            is_managed=managed,
            directory_depth=directory_depth(relative),
            timestamp=int(self._clock()),
        )
