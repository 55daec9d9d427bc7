"""Unit tests for target selector derivation."""

import pytest

from remoteclick.core.selectors import build_selector, escape_css_id


class TestEscapeCssId:
    """Tests for escape_css_id."""

    def test_plain_id_is_unchanged(self) -> None:
        """Alphanumerics, dashes and underscores need no escaping."""
        assert escape_css_id("submit-btn_2") == "submit-btn_2"

    def test_dot_is_escaped(self) -> None:
        """a.b should become a\\.b."""
        assert escape_css_id("a.b") == "a\\.b"

    def test_space_is_escaped(self) -> None:
        """Spaces are escaped like punctuation."""
        assert escape_css_id("save button") == "save\\ button"

    @pytest.mark.parametrize("char", list("!\"#$%&'()*+,./:;<=>?@[\\]^`{|}~"))
    def test_every_special_character_is_escaped(self, char: str) -> None:
        """Each reserved character gets exactly one backslash."""
        assert escape_css_id(f"x{char}y") == f"x\\{char}y"

    def test_unicode_is_unchanged(self) -> None:
        """Non-ASCII characters are valid in identifiers."""
        assert escape_css_id("bouton-é") == "bouton-é"


class TestBuildSelector:
    """Tests for build_selector."""

    def test_button_id_becomes_id_selector(self) -> None:
        """buttonId a.b should map to #a\\.b."""
        assert build_selector("a.b", None) == "#a\\.b"

    def test_selector_takes_precedence(self) -> None:
        """A raw selector wins when both are given."""
        assert build_selector("ignored", "form button[type=submit]") == (
            "form button[type=submit]"
        )

    def test_neither_raises(self) -> None:
        """At least one of the two is required."""
        with pytest.raises(ValueError):
            build_selector(None, None)
