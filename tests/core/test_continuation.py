"""Tests for logical statement resolution."""

from __future__ import annotations

import pytest

from neorepl.core.continuation import Statement, is_blank, is_continuation, resolve, strip_marker


class TestResolve:
    """Tests for resolve()."""

    def test_single_line(self):
        """A line without continuations is its own statement."""
        stmt = resolve(["a", "b"], 2)
        assert stmt == Statement(lines=("b",), start=2, end=2)

    def test_cursor_on_continuation_line(self):
        """The statement extends back to its head line."""
        stmt = resolve(["x = 1", "\\+ 2"], 2)
        assert stmt is not None
        assert list(stmt.lines) == ["x = 1", "\\+ 2"]
        assert (stmt.start, stmt.end) == (1, 2)

    def test_cursor_on_head_line(self):
        """The statement extends forward over following continuations."""
        stmt = resolve(["x = [1,", "\\2,", "\\3]", "y"], 1)
        assert stmt is not None
        assert (stmt.start, stmt.end) == (1, 3)

    def test_statement_in_middle_of_buffer(self):
        """Neighbouring statements are not included."""
        lines = ["a", "b", "\\c", "d"]
        stmt = resolve(lines, 3)
        assert stmt is not None
        assert list(stmt.lines) == ["b", "\\c"]
        assert (stmt.start, stmt.end) == (2, 3)

    def test_headless_continuation_is_malformed(self):
        """A marker line with nothing above it has no head."""
        assert resolve(["\\abc"], 1) is None

    def test_headless_run_of_continuations(self):
        """Several marker lines from the top are malformed too."""
        assert resolve(["\\a", "\\b", "c"], 2) is None

    def test_cursor_outside_buffer(self):
        """Cursor lines outside 1..len raise IndexError."""
        with pytest.raises(IndexError):
            resolve(["a"], 0)
        with pytest.raises(IndexError):
            resolve(["a"], 2)

    def test_custom_marker(self):
        """The marker character is configurable."""
        stmt = resolve(["a", ";b"], 2, marker=";")
        assert stmt is not None
        assert stmt.start == 1


class TestStatement:
    """Tests for Statement helpers."""

    def test_program_strips_markers(self):
        """Continuation lines lose their marker, the head line is untouched."""
        stmt = Statement(lines=("x = [1,", "\\2,", "\\3]"), start=1, end=3)
        assert stmt.program() == ["x = [1,", "2,", "3]"]

    def test_program_strips_one_marker(self):
        """Only the first marker character is stripped."""
        stmt = Statement(lines=("s = '", "\\\\n'"), start=1, end=2)
        assert stmt.program() == ["s = '", "\\n'"]

    def test_is_blank(self):
        """Whitespace-only statements are blank."""
        assert Statement(lines=("  ", ""), start=1, end=2).is_blank()
        assert not Statement(lines=("  ", "x"), start=1, end=2).is_blank()


class TestHelpers:
    """Tests for line helpers."""

    def test_is_continuation(self):
        """Only lines starting with the marker continue."""
        assert is_continuation("\\x")
        assert not is_continuation(" \\x")

    def test_strip_marker(self):
        """strip_marker leaves other lines alone."""
        assert strip_marker("\\abc") == "abc"
        assert strip_marker("abc") == "abc"

    def test_is_blank_empty_sequence(self):
        """No lines at all count as blank."""
        assert is_blank([])
