"""XDG-compliant path management for fileadopt.

XDG defaults:
- Config: ~/.config/fileadopt/
- State: ~/.local/state/fileadopt/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "fileadopt"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/fileadopt/ (or XDG_CONFIG_HOME/fileadopt/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the index database and the scheduled-run state.

    Returns:
        Path to ~/.local/state/fileadopt/ (or XDG_STATE_HOME/fileadopt/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/fileadopt/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_database_path() -> Path:
    """Get the SQLite database path holding the index, orphan and link tables.

    Returns:
        Path to ~/.local/state/fileadopt/fileadopt.db.
    """
    return get_state_dir() / "fileadopt.db"
