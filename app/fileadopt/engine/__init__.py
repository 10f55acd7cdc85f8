"""Reconciliation engine, registry lifecycle hook, inventory and scheduled runs.

This module exports the services that operate on the public root.
"""

from fileadopt.engine.hooks import EntityLifecycleHook
from fileadopt.engine.inventory import DirectoryInfo, InventoryManager
from fileadopt.engine.reconciler import ReconciliationEngine
from fileadopt.engine.runner import CronRunner, RunReport

__all__ = [
    "CronRunner",
    "DirectoryInfo",
    "EntityLifecycleHook",
    "InventoryManager",
    "ReconciliationEngine",
    "RunReport",
]
