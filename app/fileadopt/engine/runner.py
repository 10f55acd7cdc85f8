"""Scheduled-run driver.

An external scheduler (cron, systemd timer) invokes :meth:`CronRunner.run`.
Each run performs the initial full scan if one is pending, a periodic full
scan when the configured interval has elapsed, and then adopts a bounded
number of unmanaged files if adoption is enabled. Overlapping runs must be
prevented by the scheduler.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from fileadopt.core.config import AdoptionConfig
from fileadopt.core.state import LAST_FULL_SCAN, NEEDS_INITIAL_SCAN, StateManager
from fileadopt.engine.reconciler import ReconciliationEngine

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = 3600


@dataclass(frozen=True, slots=True)
class RunReport:
    """What a scheduled run did.

    Attributes:
        scanned: True if a full scan ran.
        indexed: Files indexed by the full scan.
        adopted: Files adopted.
    """

    scanned: bool = False
    indexed: int = 0
    adopted: int = 0


class CronRunner:
    """Runs the periodic scan and adoption work.

    Args:
        engine: Reconciliation engine.
        config: Settings providing interval, adoption switch and batch size.
        state: Persistent run state.
        clock: Wall clock used for interval checks.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        config: AdoptionConfig,
        state: StateManager,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._engine = engine
        self._config = config
        self._state = state
        self._clock = clock

    def mark_initial_scan(self) -> None:
        """Request a full scan on the next run."""
        self._state.set(NEEDS_INITIAL_SCAN, True)

    def run(self) -> RunReport:
        """Execute one scheduled run.

        Returns:
            RunReport describing the work performed.
        """
        now = int(self._clock())
        scanned = False
        indexed = 0

        if self._state.get(NEEDS_INITIAL_SCAN):
            indexed = self._full_scan(now)
            self._state.delete(NEEDS_INITIAL_SCAN)
            scanned = True
        elif self._scan_due(now):
            indexed = self._full_scan(now)
            scanned = True

        adopted = 0
        if self._config.enable_adoption:
            adopted = self._engine.adopt_unmanaged(self._config.items_per_run)

        logger.info("Scheduled run: scanned=%s indexed=%d adopted=%d", scanned, indexed, adopted)
        return RunReport(scanned=scanned, indexed=indexed, adopted=adopted)

    def _scan_due(self, now: int) -> bool:
        interval = self._config.scan_interval_hours * _SECONDS_PER_HOUR
        last = int(self._state.get(LAST_FULL_SCAN, 0) or 0)
        return interval == 0 or now - last >= interval

    def _full_scan(self, now: int) -> int:
        indexed = self._engine.scan_public_files()
        self._state.set(LAST_FULL_SCAN, now)
        return indexed
