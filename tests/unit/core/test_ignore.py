"""Unit tests for ignore pattern parsing and matching."""

import pytest
from fileadopt.core.ignore import (
    DEFAULT_IGNORE_PATTERNS,
    is_ignored,
    match_ignore,
    parse_patterns,
    validate_patterns,
)
from fileadopt.errors import PatternError


class TestParsePatterns:
    """Tests for parse_patterns function."""

    def test_newline_and_comma_separated(self) -> None:
        raw = "css/*\r\njs/*, php/*\n\n styles/* "
        assert parse_patterns(raw) == ["css/*", "js/*", "php/*", "styles/*"]

    def test_preserves_order(self) -> None:
        assert parse_patterns("b\na") == ["b", "a"]

    def test_empty_values(self) -> None:
        assert parse_patterns("") == []
        assert parse_patterns(None) == []
        assert parse_patterns(" , \n") == []

    def test_accepts_sequence(self) -> None:
        assert parse_patterns([" a ", "", "b"]) == ["a", "b"]


class TestMatchIgnore:
    """Tests for match_ignore function."""

    def test_default_patterns_ignore_css(self) -> None:
        """css/style.css matches the default css/* pattern."""
        result = match_ignore("css/style.css", DEFAULT_IGNORE_PATTERNS)
        assert result.ignored
        assert result.pattern == "css/*"

    def test_star_spans_separators(self) -> None:
        """A star matches across directory separators."""
        assert is_ignored("css/deep/nested/file.css", ["css/*"])

    def test_first_match_wins(self) -> None:
        result = match_ignore("css/a.css", ["*.css", "css/*"])
        assert result.pattern == "*.css"

    def test_no_match(self) -> None:
        result = match_ignore("images/a.png", DEFAULT_IGNORE_PATTERNS)
        assert not result.ignored
        assert result.pattern is None

    def test_question_mark_and_class(self) -> None:
        assert is_ignored("a1.txt", ["a?.txt"])
        assert is_ignored("b.log", ["[ab].log"])
        assert not is_ignored("c.log", ["[ab].log"])

    def test_basename_matching_opt_in(self) -> None:
        assert not match_ignore("deep/x.tmp", ["x.tmp"]).ignored
        assert match_ignore("deep/x.tmp", ["x.tmp"], match_basename=True).ignored

    def test_empty_pattern_list_never_ignores(self) -> None:
        assert not is_ignored("anything", [])

    def test_unbalanced_bracket_does_not_raise(self) -> None:
        """A malformed pattern counts as no match instead of raising."""
        assert not is_ignored("a.txt", ["[a-"])


class TestValidatePatterns:
    """Tests for validate_patterns function."""

    def test_valid_patterns_returned(self) -> None:
        assert validate_patterns("css/*\njs/*") == ["css/*", "js/*"]

    def test_rejects_absolute_pattern(self) -> None:
        with pytest.raises(PatternError):
            validate_patterns("/css/*")

    def test_rejects_nul_byte(self) -> None:
        with pytest.raises(PatternError):
            validate_patterns("bad\x00pattern")
