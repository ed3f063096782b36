"""Tests for insert-mode editing keys."""

from __future__ import annotations

from neorepl.core.editing import (
    BACKSPACE_JOIN,
    BACKSPACE_LINE,
    EditKeys,
    backspace_keys,
    break_line_keys,
    delete_word_keys,
)


class TestBackspaceKeys:
    """Tests for backspace_keys()."""

    def test_after_marker_joins(self):
        """Right after the marker both characters and the break go."""
        keys = backspace_keys("\\abc", 1)
        assert keys == EditKeys("<BS><BS>", BACKSPACE_JOIN)
        assert keys.joins

    def test_before_marker_joins(self):
        """At column 0 the marker is deleted forward first."""
        assert backspace_keys("\\abc", 0) == EditKeys("<Del><BS>", BACKSPACE_JOIN)

    def test_ordinary_backspace(self):
        """Elsewhere backspace stays within the line."""
        assert backspace_keys("\\abc", 3) == EditKeys("<BS>", BACKSPACE_LINE)
        assert backspace_keys("abc", 1) == EditKeys("<BS>", BACKSPACE_LINE)
        assert not backspace_keys("abc", 1).joins

    def test_custom_marker(self):
        """Other markers are honoured."""
        assert backspace_keys(";x", 1, marker=";").joins


class TestDeleteWordKeys:
    """Tests for delete_word_keys()."""

    def test_joins_at_marker(self):
        """Deleting a word at the marker joins lines like backspace."""
        assert delete_word_keys("\\x", 1) == EditKeys("<BS><BS>", BACKSPACE_JOIN)

    def test_ordinary(self):
        """Elsewhere it is a plain <C-W>."""
        assert delete_word_keys("x y", 3) == EditKeys("<C-W>", BACKSPACE_LINE)


class TestBreakLine:
    """Tests for the break line keys."""

    def test_default(self):
        """A new line, cleared of auto-indent, starting with the marker."""
        assert break_line_keys() == "<CR><C-U>\\"

    def test_custom_marker(self):
        """break_line_keys() uses the given marker."""
        assert break_line_keys(";") == "<CR><C-U>;"
