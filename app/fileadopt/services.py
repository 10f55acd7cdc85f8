"""Assembly of the database, registry, stores and engine.

``Services`` wires one set of collaborators around a single database
file and registers the lifecycle hook with the registry, so index rows
follow registry inserts and deletes made through the same process.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from fileadopt.core.config import AdoptionConfig
from fileadopt.core.paths import get_database_path
from fileadopt.core.state import StateManager
from fileadopt.engine.hooks import EntityLifecycleHook
from fileadopt.engine.inventory import InventoryManager
from fileadopt.engine.reconciler import ReconciliationEngine
from fileadopt.engine.runner import CronRunner
from fileadopt.links.scanner import LinkScanner
from fileadopt.registry.sqlite import SqliteRegistry
from fileadopt.store.database import Database
from fileadopt.store.index import IndexStore
from fileadopt.store.orphans import OrphanStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Services:
    """Collaborators sharing one database connection."""

    config: AdoptionConfig
    database: Database
    registry: SqliteRegistry
    index: IndexStore
    orphans: OrphanStore
    engine: ReconciliationEngine
    hook: EntityLifecycleHook
    inventory: InventoryManager
    links: LinkScanner

    def runner(self, state: StateManager | None = None) -> CronRunner:
        """Create a scheduled-run driver using ``state`` (default location if None)."""
        return CronRunner(self.engine, self.config, state or StateManager())

    def close(self) -> None:
        """Close the database connection."""
        self.database.close()


def build_services(config: AdoptionConfig, db_path: Path | str | None = None) -> Services:
    """Create the service graph for ``config``.

    Args:
        config: Active configuration.
        db_path: Database location; defaults to the XDG state directory.
            Pass ":memory:" for a throwaway database.

    Returns:
        Connected Services instance.

    Raises:
        StoreError: If the database cannot be opened.
    """
    database = Database(db_path if db_path is not None else get_database_path())
    database.connect()
    logger.debug("Using database %s", database.path)

    registry = SqliteRegistry(database)
    index = IndexStore(database)
    orphans = OrphanStore(database)
    hook = EntityLifecycleHook(config, index)
    registry.add_listener(hook)

    return Services(
        config=config,
        database=database,
        registry=registry,
        index=index,
        orphans=orphans,
        engine=ReconciliationEngine(config, registry, database, index=index, orphans=orphans),
        hook=hook,
        inventory=InventoryManager(index, config.public_root),
        links=LinkScanner(database),
    )
