"""Data models for fileadopt.

This module exports the record, result and entity types shared by the
stores, the registry contract and the reconciliation engine.
"""

from fileadopt.models.entity import EntityHandle
from fileadopt.models.records import HardLinkRecord, IndexRecord, OrphanRecord
from fileadopt.models.results import (
    AdoptionResult,
    AdoptionSummary,
    ChunkResult,
    ScanCounts,
    ScanLists,
)

__all__ = [
    "AdoptionResult",
    "AdoptionSummary",
    "ChunkResult",
    "EntityHandle",
    "HardLinkRecord",
    "IndexRecord",
    "OrphanRecord",
    "ScanCounts",
    "ScanLists",
]
