"""Lazy, resumable traversal of the public root.

The walker yields files in a fixed pre-order: inside each directory,
subdirectories come first, then files, each group sorted by name. That order
is the lexicographic order of :func:`walk_key`, which lets a resumed walk
skip every subtree that lies entirely before the cursor without listing it.

Symlinked directories are only followed when their target lies outside the
walk root and is neither the same as nor an ancestor of any directory on the
current descent path. The decision depends only on the path being visited,
so a resumed walk makes the same choices as an uninterrupted one.
"""

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from fileadopt.core.ignore import match_ignore
from fileadopt.core.uri import directory_depth, to_uri

logger = logging.getLogger(__name__)

# Sort rank of a path component: directories before files.
_DIR_RANK = 0
_FILE_RANK = 1

WalkKey = tuple[tuple[int, str], ...]


def walk_key(relative_path: str) -> WalkKey:
    """Return the ordering key of a file path in walk order.

    Args:
        relative_path: ``/`` separated path of a file below the root.

    Returns:
        Tuple of ``(rank, name)`` pairs, one per path component.
    """
    parts = relative_path.split("/")
    return tuple((_DIR_RANK, p) for p in parts[:-1]) + ((_FILE_RANK, parts[-1]),)


@dataclass(frozen=True, slots=True)
class WalkCursor:
    """Position in the walk order.

    The cursor records the last fully visited file. An empty cursor means
    "start of the tree" when passed in, and "walk complete" when returned
    by a chunked scan.

    Attributes:
        after: Relative path of the last visited file, or "".
    """

    after: str = ""

    @classmethod
    def from_token(cls, token: str | None) -> "WalkCursor":
        """Build a cursor from its serialized token."""
        return cls(after=(token or "").strip().strip("/"))

    @property
    def token(self) -> str:
        """Serialized form of the cursor."""
        return self.after

    @property
    def is_start(self) -> bool:
        """True if the cursor points at the start of the tree."""
        return not self.after


START = WalkCursor()


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A file discovered by the walker.

    Attributes:
        relative_path: Path relative to the root, ``/`` separated.
        ignored: True if an ignore pattern matched the path.
        matched_pattern: First matching ignore pattern, if any.
    """

    relative_path: str
    ignored: bool = False
    matched_pattern: str | None = None

    @property
    def uri(self) -> str:
        """Canonical URI of the file."""
        return to_uri(self.relative_path)

    @property
    def depth(self) -> int:
        """Directory depth of the file (separators in the relative path)."""
        return directory_depth(self.relative_path)


class DirectoryWalker:
    """Walks a directory tree and yields files in deterministic order.

    Args:
        root: Directory to walk.
        patterns: Parsed ignore patterns, evaluated against relative paths.
        ignore_symlinks: If True, symlinks (files and directories) are skipped.
    """

    def __init__(
        self,
        root: Path,
        patterns: Sequence[str] = (),
        *,
        ignore_symlinks: bool = False,
    ) -> None:
        self._root = Path(root)
        self._patterns = tuple(patterns)
        self._ignore_symlinks = ignore_symlinks

    @property
    def root(self) -> Path:
        """Directory being walked."""
        return self._root

    def is_available(self) -> bool:
        """Check whether the root exists, is a directory and can be listed."""
        if not self._root.is_dir():
            return False
        try:
            with os.scandir(self._root):
                return True
        except OSError as e:
            logger.debug("Cannot list walk root %s: %s", self._root, e)
            return False

    def walk(self, cursor: WalkCursor | str = START) -> Iterator[WalkEntry]:
        """Yield every file after the cursor, including ignored ones.

        Unreadable subdirectories are skipped, but a root that cannot be
        listed is an error: an empty walk would look like a tree with no
        files in it.

        Args:
            cursor: Resume position; the default starts at the root.

        Yields:
            WalkEntry for each file, with its ignore status.

        Raises:
            OSError: If the root directory cannot be listed.
        """
        if isinstance(cursor, str):
            cursor = WalkCursor.from_token(cursor)
        if not self.is_available():
            return

        root_real = os.path.realpath(self._root)
        cursor_key = walk_key(cursor.after) if not cursor.is_start else None
        yield from self._walk_directory(str(self._root), (), root_real, (root_real,), cursor_key)

    def walk_filtered(self, cursor: WalkCursor | str = START) -> Iterator[WalkEntry]:
        """Yield files after the cursor that match no ignore pattern."""
        for entry in self.walk(cursor):
            if not entry.ignored:
                yield entry

    def _walk_directory(
        self,
        directory: str,
        parts: tuple[str, ...],
        root_real: str,
        real_stack: tuple[str, ...],
        cursor_key: WalkKey | None,
    ) -> Iterator[WalkEntry]:
        """Recursively walk one directory.

        Args:
            directory: Filesystem path of the directory.
            parts: Components of the directory relative to the root.
            root_real: Resolved path of the walk root.
            real_stack: Resolved paths of the directories on the descent path.
            cursor_key: Walk key of the resume cursor, or None.
        """
        subdirs, files = self._list_directory(directory, root_real, real_stack)
        prefix: WalkKey = tuple((_DIR_RANK, p) for p in parts)

        for name, real in subdirs:
            if cursor_key is not None:
                sub_key = (*prefix, (_DIR_RANK, name))
                head = cursor_key[: len(sub_key)]
                if sub_key < head:
                    # Whole subtree precedes the cursor.
                    continue
                inner_cursor = cursor_key if head == sub_key else None
            else:
                inner_cursor = None
            yield from self._walk_directory(
                os.path.join(directory, name),
                (*parts, name),
                root_real,
                (*real_stack, real),
                inner_cursor,
            )

        for name in files:
            if cursor_key is not None and (*prefix, (_FILE_RANK, name)) <= cursor_key:
                continue
            relative = "/".join((*parts, name))
            match = match_ignore(relative, self._patterns)
            yield WalkEntry(
                relative_path=relative,
                ignored=match.ignored,
                matched_pattern=match.pattern,
            )

    def _list_directory(
        self,
        directory: str,
        root_real: str,
        real_stack: tuple[str, ...],
    ) -> tuple[list[tuple[str, str]], list[str]]:
        """List a directory into sorted (subdirectory, real path) pairs and file names.

        Dotfiles, unreadable entries, skipped symlinks, cyclic symlinked
        directories and names that are not valid UTF-8 are left out. Only the
        root itself must be listable.
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            if directory == str(self._root):
                raise
            logger.debug("Cannot list directory %s: %s", directory, e)
            return [], []

        current_real = real_stack[-1]
        subdirs: list[tuple[str, str]] = []
        files: list[str] = []

        for entry in entries:
            name = entry.name
            if name.startswith("."):
                continue
            try:
                name.encode("utf-8")
            except UnicodeEncodeError:
                # Undecodable bytes surface as surrogate escapes; no URI can hold them.
                logger.warning("Skipping %r: name is not valid UTF-8", entry.path)
                continue
            try:
                is_link = entry.is_symlink()
                if is_link and self._ignore_symlinks:
                    continue
                if entry.is_dir():
                    if is_link:
                        real = os.path.realpath(entry.path)
                        if self._is_cyclic(real, root_real, real_stack):
                            logger.debug("Skipping cyclic symlink %s -> %s", entry.path, real)
                            continue
                    else:
                        real = os.path.join(current_real, name)
                    subdirs.append((name, real))
                elif entry.is_file():
                    files.append(name)
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry.path, e)
                continue

        return subdirs, files

    @staticmethod
    def _is_cyclic(real: str, root_real: str, real_stack: tuple[str, ...]) -> bool:
        """Check whether following a symlinked directory could revisit a node.

        Args:
            real: Resolved target of the symlink.
            root_real: Resolved walk root.
            real_stack: Resolved directories on the current descent path.

        Returns:
            True if the target is inside the root, or is the same as or an
            ancestor of a directory being walked.
        """
        if real == root_real or real.startswith(root_real.rstrip(os.sep) + os.sep):
            return True
        prefix = real.rstrip(os.sep) + os.sep
        return any(ancestor == real or ancestor.startswith(prefix) for ancestor in real_stack)
