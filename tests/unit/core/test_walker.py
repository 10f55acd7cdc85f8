"""Unit tests for the directory walker."""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from fileadopt.core.walker import DirectoryWalker, WalkCursor, walk_key


def _paths(walker: DirectoryWalker, cursor: str = "") -> list[str]:
    return [entry.relative_path for entry in walker.walk(cursor)]


class TestWalkOrder:
    """Tests for the deterministic walk order."""

    def test_subdirectories_before_files(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        """Inside a directory, subdirectories are walked before files."""
        make_files("z.txt", "a.txt", "m/inner.txt", "b/x.txt")

        assert _paths(DirectoryWalker(public_root)) == [
            "b/x.txt",
            "m/inner.txt",
            "a.txt",
            "z.txt",
        ]

    def test_order_matches_walk_key(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("a/b/c.txt", "a/b.txt", "a/a/z.txt", "top.txt", "b/1.txt")

        paths = _paths(DirectoryWalker(public_root))

        assert paths == sorted(paths, key=walk_key)

    def test_dotfiles_skipped(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files(".htaccess", ".git/config", "visible.txt")

        assert _paths(DirectoryWalker(public_root)) == ["visible.txt"]

    def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        walker = DirectoryWalker(tmp_path / "missing")

        assert not walker.is_available()
        assert list(walker.walk()) == []

    def test_unlistable_root_is_unavailable(
        self, public_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_scandir = os.scandir

        def scandir(path: object = ".") -> object:
            if os.fspath(path) == str(public_root):  # type: ignore[arg-type]
                raise PermissionError(13, "Permission denied", str(public_root))
            return real_scandir(path)  # type: ignore[arg-type]

        monkeypatch.setattr(os, "scandir", scandir)

        assert not DirectoryWalker(public_root).is_available()

    def test_root_failing_during_walk_raises(
        self,
        public_root: Path,
        make_files: Callable[..., list[Path]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An unreadable root is an error, not an empty tree."""
        make_files("a.txt")
        real_scandir = os.scandir
        calls: list[str] = []

        def scandir(path: object = ".") -> object:
            calls.append(os.fspath(path))  # type: ignore[arg-type]
            if len(calls) > 1:
                raise PermissionError(13, "Permission denied", calls[-1])
            return real_scandir(path)  # type: ignore[arg-type]

        monkeypatch.setattr(os, "scandir", scandir)

        with pytest.raises(PermissionError):
            list(DirectoryWalker(public_root).walk())
        assert calls == [str(public_root), str(public_root)]

    def test_unreadable_subdirectory_skipped(
        self,
        public_root: Path,
        make_files: Callable[..., list[Path]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        make_files("locked/secret.txt", "open/a.txt", "top.txt")
        real_scandir = os.scandir
        locked = str(public_root / "locked")

        def scandir(path: object = ".") -> object:
            if os.fspath(path) == locked:  # type: ignore[arg-type]
                raise PermissionError(13, "Permission denied", locked)
            return real_scandir(path)  # type: ignore[arg-type]

        monkeypatch.setattr(os, "scandir", scandir)

        assert _paths(DirectoryWalker(public_root)) == ["open/a.txt", "top.txt"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts any bytes")
    def test_undecodable_names_skipped(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("a.txt", "b.txt")
        bad_dir = os.path.join(os.fsencode(public_root), b"dir\xfe")
        os.mkdir(bad_dir)
        with open(os.path.join(bad_dir, b"inner.txt"), "wb") as f:
            f.write(b"x")
        with open(os.path.join(os.fsencode(public_root), b"bad\xff.txt"), "wb") as f:
            f.write(b"x")

        assert _paths(DirectoryWalker(public_root)) == ["a.txt", "b.txt"]

    def test_entry_uri_and_depth(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("a/b/c.txt")

        (entry,) = list(DirectoryWalker(public_root).walk())

        assert entry.uri == "public://a/b/c.txt"
        assert entry.depth == 2


class TestIgnoreFlags:
    """Tests for ignore evaluation during the walk."""

    def test_walk_marks_ignored_files(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("css/style.css", "img/a.png")

        entries = {e.relative_path: e for e in DirectoryWalker(public_root, ["css/*"]).walk()}

        assert entries["css/style.css"].ignored
        assert entries["css/style.css"].matched_pattern == "css/*"
        assert not entries["img/a.png"].ignored

    def test_walk_filtered_drops_ignored(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("css/style.css", "img/a.png")

        walker = DirectoryWalker(public_root, ["css/*"])

        assert [e.relative_path for e in walker.walk_filtered()] == ["img/a.png"]


class TestResume:
    """Tests for cursor-based resumption."""

    @pytest.fixture
    def tree(self, make_files: Callable[..., list[Path]]) -> None:
        make_files(
            "a/b/c.txt",
            "a/b/d.txt",
            "a/e.txt",
            "f/g.txt",
            "h.txt",
            "i.txt",
        )

    @pytest.mark.usefixtures("tree")
    def test_resume_from_each_position_matches_full_walk(self, public_root: Path) -> None:
        """Resuming after any file yields exactly the remaining files."""
        walker = DirectoryWalker(public_root)
        full = _paths(walker)

        for position, path in enumerate(full):
            assert _paths(walker, path) == full[position + 1 :]

    @pytest.mark.usefixtures("tree")
    def test_cursor_of_deleted_file_still_resumes(self, public_root: Path) -> None:
        """A cursor naming a file that no longer exists resumes after its position."""
        walker = DirectoryWalker(public_root)

        assert _paths(walker, "a/b/ccc.txt") == ["a/b/d.txt", "a/e.txt", "f/g.txt", "h.txt", "i.txt"]

    def test_cursor_token(self) -> None:
        assert WalkCursor.from_token("/a/b.txt/").after == "a/b.txt"
        assert WalkCursor.from_token(None).is_start
        assert WalkCursor("x/y").token == "x/y"


class TestSymlinks:
    """Tests for symbolic link handling."""

    def test_cycle_to_ancestor_terminates(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        """A link back to an ancestor directory is not followed."""
        make_files("a/file.txt")
        os.symlink(public_root / "a", public_root / "a" / "loop")

        assert _paths(DirectoryWalker(public_root)) == ["a/file.txt"]

    def test_link_to_root_not_followed(
        self, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        make_files("x.txt")
        os.symlink(public_root, public_root / "self")

        assert _paths(DirectoryWalker(public_root)) == ["x.txt"]

    def test_external_link_followed(
        self, tmp_path: Path, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        """A link to a directory outside the root is walked once."""
        external = tmp_path / "external"
        external.mkdir()
        (external / "shared.txt").write_text("shared")
        os.symlink(external, public_root / "linked")
        make_files("own.txt")

        assert _paths(DirectoryWalker(public_root)) == ["linked/shared.txt", "own.txt"]

    def test_external_link_back_to_itself_terminates(
        self, tmp_path: Path, public_root: Path
    ) -> None:
        external = tmp_path / "external"
        external.mkdir()
        (external / "f.txt").write_text("f")
        os.symlink(external, external / "again")
        os.symlink(external, public_root / "ext")

        assert _paths(DirectoryWalker(public_root)) == ["ext/f.txt"]

    def test_ignore_symlinks_skips_links(
        self, tmp_path: Path, public_root: Path, make_files: Callable[..., list[Path]]
    ) -> None:
        external = tmp_path / "external"
        external.mkdir()
        (external / "shared.txt").write_text("shared")
        os.symlink(external, public_root / "linked")
        make_files("own.txt")
        os.symlink(public_root / "own.txt", public_root / "alias.txt")

        walker = DirectoryWalker(public_root, ignore_symlinks=True)

        assert _paths(walker) == ["own.txt"]
