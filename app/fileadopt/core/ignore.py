"""Ignore pattern parsing and matching.

Patterns are shell-style globs evaluated with :mod:`fnmatch` against the
path relative to the public root. ``*`` also matches ``/``, so ``css/*``
covers every file below ``css/``. Case sensitivity follows the platform
default (:func:`fnmatch.fnmatch` normalizes case on Windows).
"""

import fnmatch
import logging
import posixpath
import re
from collections.abc import Iterable
from dataclasses import dataclass

from fileadopt.errors import PatternError

logger = logging.getLogger(__name__)

# Separators accepted between patterns in the configuration value.
_SPLIT_RE = re.compile(r"[\r\n,]+")

# Patterns shipped with a fresh configuration (aggregated assets).
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "css/*",
    "js/*",
    "php/*",
    "styles/*",
)


@dataclass(frozen=True, slots=True)
class IgnoreMatch:
    """Outcome of evaluating a path against the ignore patterns.

    Attributes:
        ignored: True if any pattern matched.
        pattern: First matching pattern in configuration order, if any.
    """

    ignored: bool
    pattern: str | None = None


NO_MATCH = IgnoreMatch(ignored=False)


def parse_patterns(raw: str | Iterable[str] | None) -> list[str]:
    """Parse ignore patterns from a configuration value.

    Accepts a raw string (split on newlines and commas) or an already split
    sequence. Whitespace is trimmed, empty entries dropped, order preserved.

    Args:
        raw: Configuration value.

    Returns:
        List of pattern strings.
    """
    if not raw:
        return []
    parts = _SPLIT_RE.split(raw) if isinstance(raw, str) else list(raw)
    return [p.strip() for p in parts if p and p.strip()]


def match_ignore(
    path: str,
    patterns: Iterable[str],
    *,
    match_basename: bool = False,
) -> IgnoreMatch:
    """Evaluate a relative path against ignore patterns.

    Patterns are tried in order and evaluation stops at the first match.
    A pattern that cannot be evaluated counts as "no match".

    Args:
        path: Path relative to the public root, ``/`` separated.
        patterns: Parsed ignore patterns.
        match_basename: If True, patterns without ``/`` are also tried
            against the final path component.

    Returns:
        IgnoreMatch describing the first matching pattern.
    """
    basename = posixpath.basename(path) if match_basename else None
    for pattern in patterns:
        if not pattern:
            continue
        try:
            if fnmatch.fnmatch(path, pattern):
                return IgnoreMatch(ignored=True, pattern=pattern)
            if basename is not None and "/" not in pattern and fnmatch.fnmatch(basename, pattern):
                return IgnoreMatch(ignored=True, pattern=pattern)
        except (re.error, TypeError, ValueError) as e:
            logger.debug("Skipping unusable ignore pattern %r: %s", pattern, e)
            continue
    return NO_MATCH


def is_ignored(path: str, patterns: Iterable[str]) -> bool:
    """Check whether a relative path matches any ignore pattern."""
    return match_ignore(path, patterns).ignored


def validate_patterns(raw: str | Iterable[str] | None) -> list[str]:
    """Parse and validate ignore patterns before they are persisted.

    Args:
        raw: Configuration value.

    Returns:
        The parsed patterns.

    Raises:
        PatternError: If a pattern is absolute, contains a NUL byte, or
            cannot be compiled.
    """
    patterns = parse_patterns(raw)
    for pattern in patterns:
        if "\x00" in pattern:
            msg = f"Ignore pattern contains a NUL byte: {pattern!r}"
            raise PatternError(msg)
        if pattern.startswith("/"):
            msg = f"Ignore pattern must be relative to the public root: {pattern!r}"
            raise PatternError(msg)
        try:
            re.compile(fnmatch.translate(pattern))
        except re.error as e:
            msg = f"Invalid ignore pattern {pattern!r}: {e}"
            raise PatternError(msg) from e
    return patterns
