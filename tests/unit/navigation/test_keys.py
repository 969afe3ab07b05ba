"""Tests for KeyPress normalization."""

import pytest

from clipdeck.navigation.keys import KeyPress, NavKey


class TestKeyPress:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("left", NavKey.LEFT),
            ("ArrowRight", NavKey.RIGHT),
            ("PageDown", NavKey.PAGE_DOWN),
            ("c-m", NavKey.ENTER),
            (" ", NavKey.SPACE),
            ("x", None),
            ("escape", None),
        ],
    )
    def test_nav_key(self, raw, expected):
        assert KeyPress(raw).nav_key == expected

    def test_printable(self):
        assert KeyPress("a").is_printable
        assert KeyPress("A", shift=True).is_printable
        assert KeyPress("é").is_printable
        assert not KeyPress("a", ctrl=True).is_printable
        assert not KeyPress("a", alt=True).is_printable
        assert not KeyPress("a", meta=True).is_printable
        assert not KeyPress("escape").is_printable
        assert not KeyPress("\t").is_printable

    def test_character_case_kept(self):
        assert KeyPress("Q").name == "Q"

    def test_ctrl_chords(self):
        assert KeyPress("f", ctrl=True).is_ctrl("f")
        assert KeyPress("F", ctrl=True).is_ctrl("f")
        assert KeyPress("c-f").is_ctrl("f")
        assert not KeyPress("f").is_ctrl("f")

    def test_aliases(self):
        assert KeyPress("Esc").name == "escape"
        assert KeyPress("s-tab").name == "backtab"
