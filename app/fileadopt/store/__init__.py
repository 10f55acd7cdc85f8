"""SQLite persistence for the file index, orphan list and link references.

This module exports the database handle and the table stores.
"""

from fileadopt.store.database import Database
from fileadopt.store.index import IndexStore
from fileadopt.store.orphans import OrphanStore

__all__ = [
    "Database",
    "IndexStore",
    "OrphanStore",
]
