"""Tests for the in-memory host."""

from __future__ import annotations

import pytest

from neorepl.core.errors import HostError
from neorepl.core.host import MemoryHost
from neorepl.core.types import Mark


@pytest.fixture
def bufnr(host: MemoryHost) -> int:
    return host.create_buffer("scratch", ["a", "b", "c"])


class TestLines:
    """Tests for line access."""

    def test_negative_indices(self, host, bufnr):
        """-1 means past the last line."""
        host.set_lines(bufnr, -1, -1, ["d"])
        assert host.get_lines(bufnr, 0, -1) == ["a", "b", "c", "d"]
        assert host.get_lines(bufnr, -2, -1) == ["d"]

    def test_replace_range(self, host, bufnr):
        """Lines in [start, end) are replaced."""
        host.set_lines(bufnr, 1, 2, ["x", "y"])
        assert host.get_lines(bufnr, 0, -1) == ["a", "x", "y", "c"]

    def test_never_empty(self, host, bufnr):
        """Deleting everything leaves one empty line."""
        host.set_lines(bufnr, 0, -1, [])
        assert host.get_lines(bufnr, 0, -1) == [""]
        assert host.line_count(bufnr) == 1

    def test_out_of_bounds(self, host, bufnr):
        """Indices past the end raise HostError."""
        with pytest.raises(HostError):
            host.get_lines(bufnr, 2, 9)

    def test_unknown_buffer(self, host):
        """Unknown buffers raise HostError."""
        with pytest.raises(HostError):
            host.line_count(99)


class TestMarks:
    """Tests for mark bookkeeping."""

    def test_marks_shift_with_insertions_above(self, host, bufnr):
        """Inserting above a mark moves it down."""
        host.set_extmark(bufnr, 2, 1, 2, "neoreplValue")
        host.set_lines(bufnr, 0, 0, ["new"])
        assert host.get_extmarks(bufnr) == [Mark(2, 2, 3, "neoreplValue")]

    def test_marks_unchanged_by_appends(self, host, bufnr):
        """Appending below a mark leaves it alone."""
        host.set_extmark(bufnr, 2, 1, 3, "neoreplValue")
        host.set_lines(bufnr, -1, -1, ["d"])
        assert host.get_extmarks(bufnr) == [Mark(2, 1, 3, "neoreplValue")]

    def test_replaced_lines_drop_marks(self, host, bufnr):
        """Replacing tagged lines removes the mark."""
        host.set_extmark(bufnr, 2, 1, 2, "neoreplValue")
        host.set_lines(bufnr, 1, 2, ["x"])
        assert host.get_extmarks(bufnr) == []

    def test_clear(self, host, bufnr):
        """clear_extmarks drops all marks."""
        host.set_extmark(bufnr, 2, 0, 1, "neoreplInfo")
        host.clear_extmarks(bufnr)
        assert host.get_extmarks(bufnr) == []


class TestBuffersAndWindows:
    """Tests for buffer and window bookkeeping."""

    def test_open_repl_buffer(self, host):
        """REPL buffers are named after their number and become current."""
        bufnr = host.open_repl_buffer()
        assert host.buffer_name(bufnr) == f"neorepl://neorepl({bufnr})"
        assert host.current_buffer == bufnr
        assert host.window_is_valid(host.current_window)

    def test_find_buffer(self, host, bufnr):
        """Buffers are found by number or name."""
        assert host.find_buffer(bufnr) == bufnr
        assert host.find_buffer("scratch") == bufnr
        assert host.find_buffer("missing") == -1
        assert host.find_buffer(99) == -1

    def test_close_buffer_closes_windows(self, host, bufnr):
        """Windows showing a closed buffer go away."""
        winid = host.create_window(bufnr)
        host.close_buffer(bufnr)
        assert not host.buffer_is_valid(bufnr)
        assert not host.window_is_valid(winid)

    def test_close_unknown_buffer(self, host):
        """Closing twice is an error."""
        with pytest.raises(HostError):
            host.close_buffer(99)

    def test_cursor_bounds(self, host):
        """The cursor must stay inside the current buffer."""
        host.open_repl_buffer()
        with pytest.raises(HostError):
            host.set_cursor(2, 0)


class TestContext:
    """Tests for context redirection."""

    def test_window_context(self, host, bufnr):
        """A context window brings its buffer with it."""
        repl = host.open_repl_buffer()
        winid = host.create_window(bufnr)
        with host.context(0, winid):
            assert host.current_window == winid
            assert host.current_buffer == bufnr
        assert host.current_buffer == repl

    def test_restored_on_error(self, host, bufnr):
        """The previous context comes back when the block raises."""
        repl = host.open_repl_buffer()
        with pytest.raises(RuntimeError):
            with host.context(bufnr, 0):
                raise RuntimeError("boom")
        assert host.current_buffer == repl


class TestCommands:
    """Tests for Ex command hooks."""

    def test_no_runner(self, host):
        """Without a runner exec_command raises HostError."""
        with pytest.raises(HostError):
            host.exec_command("echo 1")

    def test_runner(self):
        """The runner gets the source and returns the output."""
        host = MemoryHost(command_runner=str.upper)
        assert host.exec_command("echo 1") == "ECHO 1"

    def test_completer(self, host):
        """Without a completer there are no candidates."""
        assert host.complete_command("ec") == []
