"""Unit tests for StateManager.

Tests for the JSON run-state document used by scheduled runs.
"""

import json
import logging
from pathlib import Path

import pytest
from fileadopt.core.state import LAST_FULL_SCAN, NEEDS_INITIAL_SCAN, StateManager


@pytest.fixture
def manager(tmp_path: Path) -> StateManager:
    """Create a StateManager with temporary directory."""
    return StateManager(state_dir=tmp_path)


class TestStateManager:
    """Tests for get/set/delete."""

    def test_state_path(self, tmp_path: Path) -> None:
        assert StateManager(state_dir=tmp_path).state_path == tmp_path / "state.json"

    def test_missing_file_returns_default(self, manager: StateManager) -> None:
        assert manager.get(LAST_FULL_SCAN) is None
        assert manager.get(LAST_FULL_SCAN, 0) == 0

    def test_set_and_get(self, manager: StateManager) -> None:
        manager.set(NEEDS_INITIAL_SCAN, True)
        manager.set(LAST_FULL_SCAN, 123)

        assert manager.get(NEEDS_INITIAL_SCAN) is True
        assert manager.get(LAST_FULL_SCAN) == 123

    def test_values_persist_across_instances(self, tmp_path: Path) -> None:
        StateManager(state_dir=tmp_path).set(LAST_FULL_SCAN, 42)

        assert StateManager(state_dir=tmp_path).get(LAST_FULL_SCAN) == 42

    def test_delete(self, manager: StateManager) -> None:
        manager.set(NEEDS_INITIAL_SCAN, True)
        manager.delete(NEEDS_INITIAL_SCAN)
        manager.delete("never-set")

        assert manager.get(NEEDS_INITIAL_SCAN) is None

    def test_creates_state_dir(self, tmp_path: Path) -> None:
        manager = StateManager(state_dir=tmp_path / "nested" / "state")
        manager.set(LAST_FULL_SCAN, 1)

        assert json.loads(manager.state_path.read_text()) == {LAST_FULL_SCAN: 1}

    def test_corrupt_file_treated_as_empty(
        self, manager: StateManager, caplog: pytest.LogCaptureFixture
    ) -> None:
        manager.state_path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            assert manager.get(LAST_FULL_SCAN) is None
        assert "unreadable state file" in caplog.text

        manager.set(LAST_FULL_SCAN, 5)
        assert manager.get(LAST_FULL_SCAN) == 5
