"""Configuration model and TOML persistence.

Configuration is stored in ~/.config/fileadopt/config.toml. All keys are
flat; ``ignore_patterns`` holds a single string with one pattern per line
(commas are accepted as separators too).
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fileadopt.core.ignore import DEFAULT_IGNORE_PATTERNS, parse_patterns, validate_patterns
from fileadopt.core.paths import get_config_path
from fileadopt.errors import ConfigError, ConfigNotFoundError, ConfigParseError, PatternError

logger = logging.getLogger(__name__)

# Upper bound for any per-run item limit.
MAX_ITEMS_PER_RUN = 500


class AdoptionConfig(BaseModel):
    """Settings for scanning and adoption.

    Attributes:
        public_root: Directory that backs the ``public://`` scheme.
        ignore_patterns: Glob patterns, one per line or comma separated.
        ignore_symlinks: Skip symbolic links entirely while walking.
        items_per_run: Files adopted per scheduled run, and default scan limit.
        verbose_logging: Log every visited file at debug level.
        directory_depth: Deepest directory level shown in directory listings.
        enable_adoption: Adopt unmanaged files during scheduled runs.
        scan_interval_hours: Hours between full index scans (0 = every run).
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    public_root: Annotated[
        Path,
        Field(description="Directory backing the public:// scheme"),
    ] = Path("sites/default/files")
    ignore_patterns: Annotated[
        str,
        Field(description="Ignore patterns, newline or comma separated"),
    ] = "\n".join(DEFAULT_IGNORE_PATTERNS)
    ignore_symlinks: Annotated[
        bool,
        Field(description="Skip symbolic links while scanning"),
    ] = False
    items_per_run: Annotated[
        int,
        Field(ge=1, le=MAX_ITEMS_PER_RUN, description="Items per run (1-500)"),
    ] = 20
    verbose_logging: Annotated[
        bool,
        Field(description="Log each scanned file"),
    ] = False
    directory_depth: Annotated[
        int,
        Field(ge=0, le=32, description="Directory levels shown in listings"),
    ] = 3
    enable_adoption: Annotated[
        bool,
        Field(description="Adopt unmanaged files on scheduled runs"),
    ] = False
    scan_interval_hours: Annotated[
        int,
        Field(ge=0, description="Hours between full scans (0 = every run)"),
    ] = 24

    @field_validator("ignore_patterns")
    @classmethod
    def validate_ignore_patterns(cls, v: str) -> str:
        """Reject patterns that can never match before they are persisted."""
        try:
            validate_patterns(v)
        except PatternError as e:
            raise ValueError(str(e)) from e
        return v

    @property
    def patterns(self) -> list[str]:
        """Parsed ignore patterns in configuration order."""
        return parse_patterns(self.ignore_patterns)


def load_config(path: Path | None = None) -> AdoptionConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AdoptionConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    # ignore_patterns may be written as a TOML array
    if isinstance(data.get("ignore_patterns"), list):
        data["ignore_patterns"] = "\n".join(str(p) for p in data["ignore_patterns"])

    try:
        return AdoptionConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> AdoptionConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return get_default_config()


def save_config(config: AdoptionConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file first and moved into place
    with os.replace().

    Args:
        config: The AdoptionConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: AdoptionConfig) -> dict[str, object]:
    """Convert AdoptionConfig to a dictionary for TOML serialization."""
    data = config.model_dump()
    data["public_root"] = str(config.public_root)
    return data


def get_default_config() -> AdoptionConfig:
    """Create a default AdoptionConfig."""
    return AdoptionConfig()
