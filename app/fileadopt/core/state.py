"""Run state for scheduled invocations.

The StateManager persists a small JSON document with the flags the
scheduled-run driver needs between invocations:

- ``needs_initial_scan``: set on first setup, cleared after the first full scan.
- ``last_full_scan``: Unix timestamp of the last completed full scan.
"""

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from fileadopt.core.paths import get_state_dir

logger = logging.getLogger(__name__)

NEEDS_INITIAL_SCAN = "needs_initial_scan"
LAST_FULL_SCAN = "last_full_scan"


class StateManager:
    """Manages key-value run state in a JSON file.

    Storage location: ~/.local/state/fileadopt/state.json

    Attributes:
        state_dir: Directory containing the state file.
    """

    STATE_FILENAME = "state.json"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/fileadopt
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def state_path(self) -> Path:
        """Path to the state.json file."""
        return self._state_dir / self.STATE_FILENAME

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value, returning ``default`` when it is not set."""
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value.

        Raises:
            OSError: If the state file cannot be written.
        """
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        """Remove a value if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> dict[str, Any]:
        """Load the state document.

        A missing file yields an empty document. A corrupt file is logged
        and treated as empty so the next write repairs it.
        """
        if not self.state_path.exists():
            return {}
        try:
            data = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.state_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed state file %s", self.state_path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        """Write the state document, replacing the previous file."""
        self._state_dir.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._state_dir,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(str(tmp_path), str(self.state_path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise
