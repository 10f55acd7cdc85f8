"""Unit tests for the scheduled-run driver."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fileadopt.core.config import AdoptionConfig
from fileadopt.core.state import LAST_FULL_SCAN, NEEDS_INITIAL_SCAN, StateManager
from fileadopt.engine.runner import CronRunner

HOUR = 3600
NOW = 1_700_000_000


@pytest.fixture
def state(tmp_path: Path) -> StateManager:
    return StateManager(state_dir=tmp_path / "state")


@pytest.fixture
def mock_engine() -> MagicMock:
    engine = MagicMock()
    engine.scan_public_files.return_value = 7
    engine.adopt_unmanaged.return_value = 3
    return engine


def _runner(engine: MagicMock, config: AdoptionConfig, state: StateManager) -> CronRunner:
    return CronRunner(engine, config, state, clock=lambda: NOW)


class TestCronRunner:
    """Tests for CronRunner.run."""

    def test_initial_scan_runs_once(
        self, mock_engine: MagicMock, config: AdoptionConfig, state: StateManager
    ) -> None:
        config.scan_interval_hours = 24
        runner = _runner(mock_engine, config, state)
        runner.mark_initial_scan()

        report = runner.run()

        assert report.scanned
        assert report.indexed == 7
        assert state.get(NEEDS_INITIAL_SCAN) is None
        assert state.get(LAST_FULL_SCAN) == NOW

        assert not runner.run().scanned
        assert mock_engine.scan_public_files.call_count == 1

    def test_scan_when_interval_elapsed(
        self, mock_engine: MagicMock, config: AdoptionConfig, state: StateManager
    ) -> None:
        config.scan_interval_hours = 24
        state.set(LAST_FULL_SCAN, NOW - 25 * HOUR)

        assert _runner(mock_engine, config, state).run().scanned

    def test_no_scan_within_interval(
        self, mock_engine: MagicMock, config: AdoptionConfig, state: StateManager
    ) -> None:
        config.scan_interval_hours = 24
        state.set(LAST_FULL_SCAN, NOW - HOUR)

        assert not _runner(mock_engine, config, state).run().scanned
        mock_engine.scan_public_files.assert_not_called()

    def test_zero_interval_scans_every_run(
        self, mock_engine: MagicMock, config: AdoptionConfig, state: StateManager
    ) -> None:
        config.scan_interval_hours = 0
        state.set(LAST_FULL_SCAN, NOW)

        assert _runner(mock_engine, config, state).run().scanned

    def test_adoption_only_when_enabled(
        self, mock_engine: MagicMock, config: AdoptionConfig, state: StateManager
    ) -> None:
        state.set(LAST_FULL_SCAN, NOW)
        runner = _runner(mock_engine, config, state)

        assert runner.run().adopted == 0
        mock_engine.adopt_unmanaged.assert_not_called()

        config.enable_adoption = True
        config.items_per_run = 15
        assert runner.run().adopted == 3
        mock_engine.adopt_unmanaged.assert_called_once_with(15)
