"""Reconciliation of the public file tree against the managed registry.

The engine drives every scan and adoption:

- ``scan_public_files``: index every file with its ignored/managed flags and
  drop rows for files that disappeared.
- ``scan_and_process`` / ``scan_with_lists`` / ``record_orphans``: walk the
  non-ignored files, classify them and record orphans.
- ``scan_chunk``: the same walk split into resumable, time-boxed chunks.
- ``build_index``: rebuild the index from scratch.
- ``adopt*``: register orphans in the registry.

Each public call loads its own registry membership snapshot; nothing is
reused across calls. The engine takes no locks and assumes one invocation
at a time per public root.
"""

import logging
import posixpath
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from fileadopt.core.config import AdoptionConfig
from fileadopt.core.ignore import match_ignore
from fileadopt.core.uri import canonicalize, directory_depth, is_public, to_relative
from fileadopt.core.walker import DirectoryWalker, WalkCursor, WalkEntry
from fileadopt.errors import RegistryError
from fileadopt.models.records import IndexRecord
from fileadopt.models.results import (
    AdoptionResult,
    AdoptionSummary,
    ChunkResult,
    ScanCounts,
    ScanLists,
)
from fileadopt.registry.adapter import ManagedRegistryAdapter
from fileadopt.registry.base import ManagedRegistry
from fileadopt.store.database import Database
from fileadopt.store.index import IndexStore
from fileadopt.store.orphans import OrphanStore

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ReconciliationEngine:
    """Scans the public root and adopts orphaned files.

    Args:
        config: Settings; read on every call so edits apply immediately.
        registry: Managed-file registry to classify against and adopt into.
        database: Database shared by the index and orphan stores.
        index: Index table access. Defaults to an IndexStore on ``database``.
        orphans: Orphan table access. Defaults to an OrphanStore on ``database``.
        clock: Wall clock used for row timestamps.
        timer: Monotonic clock used for chunk time limits.
    """

    def __init__(
        self,
        config: AdoptionConfig,
        registry: ManagedRegistry,
        database: Database,
        *,
        index: IndexStore | None = None,
        orphans: OrphanStore | None = None,
        clock: Clock = time.time,
        timer: Clock = time.monotonic,
    ) -> None:
        self._config = config
        self._registry = registry
        self._db = database
        self._index = index if index is not None else IndexStore(database)
        self._orphans = orphans if orphans is not None else OrphanStore(database)
        self._adapter = ManagedRegistryAdapter(registry)
        self._clock = clock
        self._timer = timer

    @property
    def config(self) -> AdoptionConfig:
        """Active configuration."""
        return self._config

    @property
    def index(self) -> IndexStore:
        """Index table access."""
        return self._index

    @property
    def orphans(self) -> OrphanStore:
        """Orphan table access."""
        return self._orphans

    def get_ignore_patterns(self) -> list[str]:
        """Return the configured ignore patterns in configuration order."""
        return self._config.patterns

    # =========================================================================
    # Scans
    # =========================================================================

    def scan_public_files(self) -> int:
        """Refresh the index from a full walk of the public root.

        Every file, ignored or not, is upserted with its current flags. Rows
        for files that were not seen are removed afterwards. Running the scan
        twice without filesystem changes leaves the index unchanged.

        Returns:
            Number of files indexed (0 if the root is unavailable).

        Raises:
            StoreError: If the index cannot be written.
            RegistryError: If registry membership cannot be loaded.
        """
        walker = self._walker()
        if not walker.is_available():
            logger.warning("Public root %s is not a readable directory", walker.root)
            return 0

        managed = self._adapter.load_all()
        now = self._now()
        observed: set[str] = set()

        try:
            with self._db.batch():
                for entry in walker.walk():
                    uri = entry.uri
                    observed.add(uri)
                    self._index.upsert(self._index_record(entry, uri in managed, now))
                    self._trace(entry, uri in managed)

                missing = [uri for uri in self._index.iter_uris() if uri not in observed]
                removed = self._index.delete_missing(missing)
        except OSError as e:
            logger.warning("Scan of %s aborted, index left unchanged: %s", walker.root, e)
            return 0

        logger.info("Indexed %d files; removed %d stale index rows", len(observed), removed)
        return len(observed)

    def scan_and_process(self, adopt: bool = True, limit: int | None = None) -> ScanCounts:
        """Walk non-ignored files, counting orphans and optionally adopting them.

        Orphans that are not adopted are recorded in the orphan table.

        Args:
            adopt: Adopt orphans as they are found.
            limit: Maximum number of adoptions (None = no limit).

        Returns:
            ScanCounts with files seen, orphans found and files adopted.
        """
        walker = self._walker()
        if not walker.is_available():
            return ScanCounts()

        managed = self._adapter.load_all()
        patterns = self.get_ignore_patterns()
        now = self._now()
        files = orphans = adopted = 0

        try:
            with self._db.batch():
                for entry in walker.walk_filtered():
                    files += 1
                    uri = entry.uri
                    self._trace(entry, uri in managed)
                    if uri in managed:
                        continue
                    orphans += 1
                    if adopt and (limit is None or adopted < limit):
                        if self._adopt_one(uri, managed, patterns).success:
                            adopted += 1
                            continue
                    self._orphans.upsert(uri, now)
        except OSError as e:
            logger.warning("Scan of %s aborted: %s", walker.root, e)
            return ScanCounts()

        return ScanCounts(files=files, orphans=orphans, adopted=adopted)

    def scan_with_lists(self, limit: int | None = None) -> ScanLists:
        """Walk non-ignored files and list the orphans found.

        Every orphan is recorded in the orphan table. The returned list holds
        the first ``limit`` orphans in walk order; the counters are not capped.

        Args:
            limit: Maximum length of ``to_manage`` (None = no limit).
        """
        return self._scan_orphans(list_limit=limit, record_limit=None)

    def record_orphans(self, limit: int | None = None) -> ScanCounts:
        """Walk non-ignored files and record orphans without listing them.

        Unlike ``scan_with_lists``, the limit does not shape a returned list;
        it bounds how many rows reach the orphan table. The first ``limit``
        orphans in walk order are written and the rest are only counted.

        Args:
            limit: Maximum number of orphan rows written in this pass
                (None = no limit). Counters are not capped.
        """
        lists = self._scan_orphans(list_limit=0, record_limit=limit)
        return ScanCounts(files=lists.files, orphans=lists.orphans)

    def scan_chunk(
        self,
        cursor: WalkCursor | str = "",
        batch_size: int | None = None,
        time_limit: float | None = None,
    ) -> ChunkResult:
        """Scan one chunk of the tree, resuming from a cursor.

        The chunk ends after ``batch_size`` orphans were collected or once
        ``time_limit`` seconds have passed. Both checks run between files, so
        every call visits at least one file and a slow file can overrun the
        budget. Feeding each ``resume`` token back in until it comes back
        empty yields every orphan exactly once.

        Args:
            cursor: Resume token from the previous chunk ("" to start).
            batch_size: Orphans per chunk; defaults to ``items_per_run``.
            time_limit: Seconds per chunk (None = no limit).

        Returns:
            ChunkResult with the orphans found and the next resume token.

        Raises:
            ValueError: If batch_size is smaller than 1.
        """
        if batch_size is None:
            batch_size = self._config.items_per_run
        if batch_size < 1:
            msg = f"Batch size must be at least 1, got {batch_size}"
            raise ValueError(msg)
        if isinstance(cursor, str):
            cursor = WalkCursor.from_token(cursor)

        walker = self._walker()
        if not walker.is_available():
            return ChunkResult()

        managed = self._adapter.load_all()
        started = self._timer()
        to_manage: list[str] = []
        last_visited = ""

        try:
            for entry in walker.walk_filtered(cursor):
                if last_visited and (
                    len(to_manage) >= batch_size
                    or (time_limit is not None and self._timer() - started >= time_limit)
                ):
                    return ChunkResult(to_manage=to_manage, resume=WalkCursor(last_visited).token)
                last_visited = entry.relative_path
                uri = entry.uri
                self._trace(entry, uri in managed)
                if uri not in managed:
                    to_manage.append(uri)
        except OSError as e:
            # Keep the caller's cursor so the chunk can be retried.
            logger.warning("Chunk scan of %s aborted: %s", walker.root, e)
            return ChunkResult(resume=cursor.token)

        return ChunkResult(to_manage=to_manage, resume="")

    def build_index(self) -> int:
        """Rebuild the index from scratch.

        Used after configuration changes (such as ignore-pattern edits) so no
        stale flags survive. The old rows are discarded in the same
        transaction that writes the new ones.

        Returns:
            Number of files indexed (0 if the root is unavailable, in which
            case the index is left untouched).
        """
        walker = self._walker()
        if not walker.is_available():
            logger.warning("Public root %s is not a readable directory", walker.root)
            return 0

        managed = self._adapter.load_all()
        now = self._now()
        count = 0

        try:
            with self._db.batch():
                self._index.truncate_all()
                for entry in walker.walk():
                    self._index.upsert(self._index_record(entry, entry.uri in managed, now))
                    count += 1
        except OSError as e:
            logger.warning("Index rebuild of %s aborted, index left unchanged: %s", walker.root, e)
            return 0

        logger.info("Rebuilt index with %d files", count)
        return count

    # =========================================================================
    # Adoption
    # =========================================================================

    def adopt(self, uri: str) -> AdoptionResult:
        """Adopt a single file, reporting why it was skipped or failed."""
        managed = self._adapter.load_all()
        return self._adopt_one(canonicalize(uri), managed, self.get_ignore_patterns())

    def adopt_file(self, uri: str) -> bool:
        """Adopt a single file.

        Returns:
            True if a registry entry was created.
        """
        return self.adopt(uri).success

    def adopt_batch(self, uris: Iterable[str]) -> AdoptionSummary:
        """Adopt several files, continuing past individual failures.

        Args:
            uris: URIs to adopt, processed in order.

        Returns:
            AdoptionSummary with one result per URI.
        """
        managed = self._adapter.load_all()
        patterns = self.get_ignore_patterns()
        results = tuple(self._adopt_one(canonicalize(uri), managed, patterns) for uri in uris)
        summary = AdoptionSummary(results=results)
        if summary.attempted:
            logger.info("Adopted %d of %d file(s)", summary.adopted, summary.attempted)
        return summary

    def adopt_files(self, uris: Iterable[str]) -> int:
        """Adopt several files.

        Returns:
            Number of files adopted.
        """
        return self.adopt_batch(uris).adopted

    def adopt_unmanaged(self, limit: int | None = None) -> int:
        """Adopt unmanaged, non-ignored files recorded in the index.

        Files are taken in index row order.

        Args:
            limit: Maximum number of files; defaults to ``items_per_run``.

        Returns:
            Number of files adopted.
        """
        if limit is None:
            limit = self._config.items_per_run
        if limit <= 0:
            return 0
        rows = self._index.list_unmanaged_unignored(limit)
        return self.adopt_batch(row.uri for row in rows).adopted

    def _adopt_one(self, uri: str, managed: set[str], patterns: list[str]) -> AdoptionResult:
        """Create a registry entry for one file.

        ``managed`` is the caller's snapshot; adopted URIs are added to it so
        a batch never registers the same file twice.
        """
        if not is_public(uri):
            return AdoptionResult(uri=uri, success=False, error="Not a public:// URI")
        relative = to_relative(uri)
        if not relative:
            return AdoptionResult(uri=uri, success=False, error="URI does not name a file")
        if any(part in ("", ".", "..") for part in relative.split("/")):
            return AdoptionResult(uri=uri, success=False, error="Invalid path component")

        match = match_ignore(relative, patterns)

        if uri in managed:
            self._refresh_index_row(uri, relative, ignored=match.ignored, managed=True)
            return AdoptionResult(uri=uri, success=False, error="Already managed")

        if match.ignored:
            self._refresh_index_row(uri, relative, ignored=True, managed=False)
            return AdoptionResult(
                uri=uri,
                success=False,
                error=f"Ignored by pattern {match.pattern}",
            )

        timestamp = self._file_timestamp(relative)
        try:
            self._registry.create_managed_entry(uri, posixpath.basename(relative), timestamp)
        except RegistryError as e:
            logger.error("Failed to adopt file %s: %s", uri, e)
            return AdoptionResult(uri=uri, success=False, error=str(e))

        managed.add(uri)
        self._orphans.delete(uri)
        self._index.upsert(
            IndexRecord(
                uri=uri,
                is_ignored=False,
                is_managed=True,
                directory_depth=directory_depth(relative),
                timestamp=self._now(),
            )
        )
        logger.info("Adopted orphan file %s", uri)
        return AdoptionResult(uri=uri, success=True)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _walker(self) -> DirectoryWalker:
        return DirectoryWalker(
            Path(self._config.public_root),
            self.get_ignore_patterns(),
            ignore_symlinks=self._config.ignore_symlinks,
        )

    def _scan_orphans(self, list_limit: int | None, record_limit: int | None) -> ScanLists:
        """Walk non-ignored files, recording and listing orphans."""
        walker = self._walker()
        if not walker.is_available():
            return ScanLists()

        managed = self._adapter.load_all()
        now = self._now()
        files = orphans = 0
        to_manage: list[str] = []

        try:
            with self._db.batch():
                for entry in walker.walk_filtered():
                    files += 1
                    uri = entry.uri
                    self._trace(entry, uri in managed)
                    if uri in managed:
                        continue
                    orphans += 1
                    if record_limit is None or orphans <= record_limit:
                        self._orphans.upsert(uri, now)
                    if list_limit is None or len(to_manage) < list_limit:
                        to_manage.append(uri)
        except OSError as e:
            logger.warning("Orphan scan of %s aborted: %s", walker.root, e)
            return ScanLists()

        return ScanLists(files=files, orphans=orphans, to_manage=to_manage)

    def _refresh_index_row(self, uri: str, relative: str, *, ignored: bool, managed: bool) -> None:
        """Correct the flags of an existing index row."""
        row = self._index.get(uri)
        if row is None or (row.is_ignored, row.is_managed) == (ignored, managed):
            return
        self._index.upsert(
            IndexRecord(
                uri=uri,
                is_ignored=ignored,
                is_managed=managed,
                directory_depth=directory_depth(relative),
                timestamp=self._now(),
            )
        )

    def _file_timestamp(self, relative: str) -> int:
        """Modification time of a file, or the current time if unavailable."""
        try:
            return int((Path(self._config.public_root) / relative).stat().st_mtime)
        except OSError:
            return self._now()

    def _index_record(self, entry: WalkEntry, managed: bool, now: int) -> IndexRecord:
        return IndexRecord(
            uri=entry.uri,
            is_ignored=entry.ignored,
            is_managed=managed,
            directory_depth=entry.depth,
            timestamp=now,
        )

    def _trace(self, entry: WalkEntry, managed: bool) -> None:
        if self._config.verbose_logging:
            logger.debug(
                "Scanned %s (ignored=%s, managed=%s)",
                entry.uri,
                entry.ignored,
                managed,
            )

    def _now(self) -> int:
        return int(self._clock())
