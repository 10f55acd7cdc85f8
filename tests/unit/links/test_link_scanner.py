"""Unit tests for hard-coded link detection."""

import pytest
from fileadopt.links.scanner import LinkScanner, TextSource, extract_links
from fileadopt.store.database import Database


class TestExtractLinks:
    """Tests for extract_links function."""

    def test_src_and_href(self) -> None:
        text = (
            '<img src="/sites/default/files/img/a.png">'
            "<a href='https://example.com/sites/default/files/docs/b.pdf?v=2'>doc</a>"
        )

        assert extract_links(text) == ["public://img/a.png", "public://docs/b.pdf"]

    def test_links_without_files_segment_skipped(self) -> None:
        assert extract_links('<a href="/node/1">x</a><img src="/themes/logo.png">') == []

    def test_duplicates_removed(self) -> None:
        text = '<img src="/sites/x/files/a.png"><img SRC="/sites/x/files/a.png#top">'

        assert extract_links(text) == ["public://a.png"]

    def test_empty_text(self) -> None:
        assert extract_links("") == []


class TestTextSource:
    """Tests for TextSource validation."""

    def test_requires_source_id(self) -> None:
        with pytest.raises(ValueError, match="source_id"):
            TextSource("", "text")


class TestLinkScanner:
    """Tests for LinkScanner persistence."""

    @pytest.fixture
    def scanner(self, database: Database) -> LinkScanner:
        return LinkScanner(database, clock=lambda: 42)

    def test_refresh_records_pairs(self, scanner: LinkScanner) -> None:
        recorded = scanner.refresh(
            [
                TextSource("node:1", '<img src="/sites/default/files/a.png">'),
                TextSource("node:2", '<a href="/sites/default/files/a.png">'),
            ]
        )

        assert recorded == 2
        assert scanner.references_for("public://a.png") == ["node:1", "node:2"]
        (first, _) = scanner.list_references()
        assert first.timestamp == 42

    def test_refresh_replaces_previous_rows(self, scanner: LinkScanner) -> None:
        scanner.refresh([TextSource("node:1", '<img src="/sites/default/files/old.png">')])
        scanner.refresh([TextSource("node:1", '<img src="/sites/default/files/new.png">')])

        assert [r.uri for r in scanner.list_references()] == ["public://new.png"]
        assert scanner.references_for("public://old.png") == []

    def test_static_extract(self) -> None:
        assert LinkScanner.extract_links('<img src="/sites/a/files/x.png">') == ["public://x.png"]
