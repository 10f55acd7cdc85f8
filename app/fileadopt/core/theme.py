"""Console color theme.

Colors can be overridden in ~/.config/fileadopt/theme.toml under a
``[colors]`` table; unknown keys or invalid values fall back to defaults.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from fileadopt.core.paths import get_config_dir

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Color configuration for the CLI.

    All colors must be hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    managed: str = "#69B9A1"
    orphan: str = "#f5b332"
    ignored: str = "#636e72"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        digits = color[1:]
        if not color.startswith("#") or len(digits) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(digits, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_user_theme_path() -> Path:
    """Path of the optional user theme file."""
    return get_config_dir() / "theme.toml"


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors, applying user overrides when present.

    Args:
        path: Theme file; defaults to :func:`get_user_theme_path`.
    """
    theme_path = path or get_user_theme_path()
    try:
        with open(theme_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return ThemeColors()
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Failed to read theme file %s: %s", theme_path, e)
        return ThemeColors()

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Invalid 'colors' section in %s", theme_path)
        return ThemeColors()
    try:
        return ThemeColors(**colors)
    except ValidationError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert ThemeColors to a Rich Theme."""
    if colors is None:
        colors = load_theme()
    return Theme(
        {
            "text": colors.text,
            "muted": colors.muted,
            "header": colors.header,
            "border": colors.border,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "managed": colors.managed,
            "orphan": f"bold {colors.orphan}",
            "ignored": colors.ignored,
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it once."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
