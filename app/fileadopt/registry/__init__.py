"""Managed-file registry contract, adapter and reference implementation.

This module exports the registry interface the engine depends on, the
scan-scoped membership adapter and the SQLite-backed registry used by the
CLI and tests.
"""

from fileadopt.registry.adapter import ManagedRegistryAdapter
from fileadopt.registry.base import EntityListener, ManagedRegistry
from fileadopt.registry.sqlite import SqliteRegistry

__all__ = [
    "EntityListener",
    "ManagedRegistry",
    "ManagedRegistryAdapter",
    "SqliteRegistry",
]
