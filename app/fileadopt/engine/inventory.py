"""Reporting and housekeeping on top of the index.

Provides filtered listings and counts, a directory overview limited by
depth, and a batched cleanup that drops rows for files that no longer
exist on disk.
"""

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path

from fileadopt.core.uri import to_relative
from fileadopt.store.index import IndexStore

logger = logging.getLogger(__name__)

# Rows fetched per query when walking the whole index.
_PAGE_SIZE = 500


@dataclass(frozen=True, slots=True)
class DirectoryInfo:
    """Aggregated index counts for one directory.

    Attributes:
        path: Directory relative to the public root, ``/`` separated.
        depth: Number of separators in ``path``.
        files: Indexed files in the directory or below it.
        orphans: Unmanaged, non-ignored files in the directory or below it.
    """

    path: str
    depth: int
    files: int
    orphans: int


@dataclass(frozen=True, slots=True)
class IndexSummary:
    """Index totals grouped by flags.

    Attributes:
        total: All indexed files.
        managed: Files with a registry entry.
        ignored: Files matching an ignore pattern.
        orphans: Unmanaged files matching no ignore pattern.
    """

    total: int
    managed: int
    ignored: int
    orphans: int


class InventoryManager:
    """Index-backed listings and stale-row cleanup.

    Args:
        index: Index table access.
        public_root: Directory backing the public scheme.
    """

    def __init__(self, index: IndexStore, public_root: Path) -> None:
        self._index = index
        self._root = Path(public_root)

    def list_files(
        self,
        *,
        ignored: bool = False,
        unmanaged: bool = False,
        limit: int = 50,
    ) -> list[str]:
        """List indexed URIs sorted by URI.

        Args:
            ignored: Only return ignored files.
            unmanaged: Only return unmanaged files.
            limit: Maximum number of URIs.
        """
        return self._index.list_files(
            ignored=True if ignored else None,
            managed=False if unmanaged else None,
            limit=limit,
        )

    def count_files(self, *, ignored: bool = False, unmanaged: bool = False) -> int:
        """Count indexed files with the same filters as :meth:`list_files`."""
        return self._index.count_files(
            ignored=True if ignored else None,
            managed=False if unmanaged else None,
        )

    def summary(self) -> IndexSummary:
        """Return index totals grouped by flags."""
        counts = self._index.count_by_ignored_managed()
        return IndexSummary(
            total=sum(counts.values()),
            managed=sum(n for (_, managed), n in counts.items() if managed),
            ignored=sum(n for (ignored, _), n in counts.items() if ignored),
            orphans=counts.get((False, False), 0),
        )

    def cleanup_stale(self, batch_size: int = 100) -> int:
        """Remove index rows whose files no longer exist.

        Walks the index in row-id order, ``batch_size`` rows at a time.

        Returns:
            Number of rows removed.
        """
        removed = 0
        last_id = 0
        while True:
            rows = self._index.iter_rows(after_id=last_id, limit=batch_size)
            if not rows:
                break
            missing = [row.uri for row in rows if not self._exists(row.uri)]
            removed += self._index.delete_missing(missing)
            last_id = rows[-1].id
            if len(rows) < batch_size:
                break
        if removed:
            logger.info("Removed %d stale index row(s)", removed)
        return removed

    def list_directories(self, max_depth: int) -> list[DirectoryInfo]:
        """Summarize indexed files per directory, down to ``max_depth``.

        Top-level directories have depth 0.

        Returns:
            DirectoryInfo entries sorted by path.
        """
        files: dict[str, int] = {}
        orphans: dict[str, int] = {}
        last_id = 0
        while True:
            rows = self._index.iter_rows(after_id=last_id, limit=_PAGE_SIZE)
            if not rows:
                break
            for row in rows:
                is_orphan = not row.is_managed and not row.is_ignored
                directory = posixpath.dirname(to_relative(row.uri))
                while directory:
                    if directory.count("/") <= max_depth:
                        files[directory] = files.get(directory, 0) + 1
                        if is_orphan:
                            orphans[directory] = orphans.get(directory, 0) + 1
                    directory = posixpath.dirname(directory)
            last_id = rows[-1].id

        return [
            DirectoryInfo(
                path=path,
                depth=path.count("/"),
                files=count,
                orphans=orphans.get(path, 0),
            )
            for path, count in sorted(files.items())
        ]

    def _exists(self, uri: str) -> bool:
        return (self._root / to_relative(uri)).exists()
