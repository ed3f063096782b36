"""Host abstraction for the editor surface a REPL lives in.

The session engine never touches an editor directly. It computes which
lines to insert, where output ranges are and which highlight class applies,
and hands those decisions to a Host.

Coordinates follow the Neovim API: get_lines/set_lines take 0-based,
end-exclusive indices where -1 means "past the last line", cursor rows are
1-based and columns 0-based.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from neorepl.core.errors import HostError
from neorepl.core.types import Mark

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str], str]
CommandCompleter = Callable[[str], list[str]]


class Host(Protocol):
    """Protocol for the editor surface backing a REPL buffer."""

    def open_repl_buffer(self) -> int:
        """Create a scratch buffer for a new REPL, show it, return its number."""
        ...

    def close_buffer(self, bufnr: int) -> None:
        """Destroy a buffer."""
        ...

    def buffer_is_valid(self, bufnr: int) -> bool:
        ...

    def window_is_valid(self, winid: int) -> bool:
        ...

    def find_buffer(self, spec: int | str) -> int:
        """Resolve a buffer number or name, -1 when there is no such buffer."""
        ...

    def buffer_name(self, bufnr: int) -> str:
        ...

    def line_count(self, bufnr: int) -> int:
        ...

    def get_lines(self, bufnr: int, start: int, end: int) -> list[str]:
        ...

    def set_lines(self, bufnr: int, start: int, end: int, lines: list[str]) -> None:
        ...

    def get_cursor(self) -> tuple[int, int]:
        """Cursor of the current window as (row, col)."""
        ...

    def set_cursor(self, row: int, col: int) -> None:
        ...

    def set_extmark(self, bufnr: int, mark_id: int, start_row: int, end_row: int, hl_group: str) -> None:
        """Tag rows [start_row, end_row) with a highlight group."""
        ...

    def get_extmarks(self, bufnr: int) -> list[Mark]:
        """All marks of the REPL namespace, in no particular order."""
        ...

    def clear_extmarks(self, bufnr: int) -> None:
        ...

    def context(self, buffer: int, window: int) -> AbstractContextManager[None]:
        """Make buffer/window current for the duration of the block.

        0 leaves the respective current value alone. The previous context is
        restored on every exit path.
        """
        ...

    def redraw(self) -> None:
        ...

    def python_globals(self) -> dict[str, Any]:
        """Names the host adds to the namespace of Python sessions."""
        ...

    def exec_command(self, source: str) -> str:
        """Run Ex commands and return their output.

        Raises:
            HostError: If no command interpreter is available.
        """
        ...

    def complete_command(self, text: str) -> list[str]:
        """Command-line completion candidates for text."""
        ...

    def show_completion(self, offset: int, candidates: list[str]) -> None:
        """Present completion candidates starting at 1-based column offset."""
        ...


@dataclass
class MemoryBuffer:
    """A buffer held entirely in memory."""

    number: int
    name: str = ""
    lines: list[str] = field(default_factory=lambda: [""])
    marks: dict[int, Mark] = field(default_factory=dict)


class MemoryHost:
    """In-memory host used by the terminal frontend, the file runner and tests.

    Buffers always hold at least one line, like editor buffers do. Marks move
    with line insertions and deletions above them and are dropped when the
    lines they cover are replaced.

    Example:
        >>> host = MemoryHost()
        >>> bufnr = host.open_repl_buffer()
        >>> host.set_lines(bufnr, -1, -1, ["hello"])
        >>> host.get_lines(bufnr, 0, -1)
        ['', 'hello']
    """

    def __init__(
        self,
        command_runner: CommandRunner | None = None,
        command_completer: CommandCompleter | None = None,
    ) -> None:
        self.buffers: dict[int, MemoryBuffer] = {}
        self.windows: dict[int, int] = {}  # window id -> buffer number
        self.current_buffer = 0
        self.current_window = 0
        self.cursor: tuple[int, int] = (1, 0)
        self.completion: tuple[int, list[str]] | None = None
        self.redraw_count = 0
        self._command_runner = command_runner
        self._command_completer = command_completer
        self._next_buffer = 1
        self._next_window = 1000

    # =========================================================================
    # Buffers and windows
    # =========================================================================

    def create_buffer(self, name: str = "", lines: list[str] | None = None) -> int:
        bufnr = self._next_buffer
        self._next_buffer += 1
        self.buffers[bufnr] = MemoryBuffer(number=bufnr, name=name, lines=list(lines or [""]))
        return bufnr

    def create_window(self, bufnr: int) -> int:
        self._buffer(bufnr)
        winid = self._next_window
        self._next_window += 1
        self.windows[winid] = bufnr
        return winid

    def close_window(self, winid: int) -> None:
        self.windows.pop(winid, None)

    def open_repl_buffer(self) -> int:
        bufnr = self.create_buffer()
        self.buffers[bufnr].name = f"neorepl://neorepl({bufnr})"
        if self.current_window in self.windows:
            self.windows[self.current_window] = bufnr
        else:
            self.current_window = self.create_window(bufnr)
        self.current_buffer = bufnr
        self.cursor = (1, 0)
        return bufnr

    def close_buffer(self, bufnr: int) -> None:
        if self.buffers.pop(bufnr, None) is None:
            raise HostError(f"invalid buffer: {bufnr}")
        for winid in [w for w, b in self.windows.items() if b == bufnr]:
            del self.windows[winid]
        if self.current_buffer == bufnr:
            self.current_buffer = 0
        logger.debug("buffer_closed: bufnr=%d", bufnr)

    def buffer_is_valid(self, bufnr: int) -> bool:
        return bufnr in self.buffers

    def window_is_valid(self, winid: int) -> bool:
        return winid in self.windows

    def find_buffer(self, spec: int | str) -> int:
        if isinstance(spec, int):
            return spec if spec in self.buffers else -1
        for buf in self.buffers.values():
            if buf.name == spec:
                return buf.number
        return -1

    def buffer_name(self, bufnr: int) -> str:
        return self._buffer(bufnr).name

    # =========================================================================
    # Lines and cursor
    # =========================================================================

    def line_count(self, bufnr: int) -> int:
        return len(self._buffer(bufnr).lines)

    def get_lines(self, bufnr: int, start: int, end: int) -> list[str]:
        buf = self._buffer(bufnr)
        start, end = self._span(buf, start, end)
        return buf.lines[start:end]

    def set_lines(self, bufnr: int, start: int, end: int, lines: list[str]) -> None:
        buf = self._buffer(bufnr)
        start, end = self._span(buf, start, end)
        buf.lines[start:end] = list(lines)
        if not buf.lines:
            buf.lines = [""]
        self._shift_marks(buf, start, end, len(lines) - (end - start))

    def get_cursor(self) -> tuple[int, int]:
        return self.cursor

    def set_cursor(self, row: int, col: int) -> None:
        count = self.line_count(self.current_buffer)
        if not 1 <= row <= count:
            raise HostError(f"cursor position outside buffer: {row}")
        self.cursor = (row, col)

    # =========================================================================
    # Marks
    # =========================================================================

    def set_extmark(self, bufnr: int, mark_id: int, start_row: int, end_row: int, hl_group: str) -> None:
        self._buffer(bufnr).marks[mark_id] = Mark(mark_id, start_row, end_row, hl_group)

    def get_extmarks(self, bufnr: int) -> list[Mark]:
        return list(self._buffer(bufnr).marks.values())

    def clear_extmarks(self, bufnr: int) -> None:
        self._buffer(bufnr).marks.clear()

    # =========================================================================
    # Context, commands, completion
    # =========================================================================

    @contextmanager
    def context(self, buffer: int, window: int) -> Iterator[None]:
        saved = (self.current_buffer, self.current_window)
        try:
            if window > 0:
                self.current_window = window
                self.current_buffer = self.windows.get(window, self.current_buffer)
            if buffer > 0:
                self.current_buffer = buffer
            yield
        finally:
            self.current_buffer, self.current_window = saved

    def redraw(self) -> None:
        self.redraw_count += 1

    def python_globals(self) -> dict[str, Any]:
        return {}

    def exec_command(self, source: str) -> str:
        if self._command_runner is None:
            raise HostError("no Ex command interpreter attached")
        return self._command_runner(source)

    def complete_command(self, text: str) -> list[str]:
        if self._command_completer is None:
            return []
        return self._command_completer(text)

    def show_completion(self, offset: int, candidates: list[str]) -> None:
        self.completion = (offset, list(candidates))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _buffer(self, bufnr: int) -> MemoryBuffer:
        buf = self.buffers.get(bufnr)
        if buf is None:
            raise HostError(f"invalid buffer: {bufnr}")
        return buf

    @staticmethod
    def _span(buf: MemoryBuffer, start: int, end: int) -> tuple[int, int]:
        count = len(buf.lines)
        if start < 0:
            start = count + 1 + start
        if end < 0:
            end = count + 1 + end
        if not 0 <= start <= end <= count:
            raise HostError(f"index out of bounds: {start}:{end}")
        return start, end

    @staticmethod
    def _shift_marks(buf: MemoryBuffer, start: int, end: int, delta: int) -> None:
        for mark_id, mark in list(buf.marks.items()):
            if mark.start_row >= end:
                if delta:
                    buf.marks[mark_id] = Mark(
                        mark.id, mark.start_row + delta, mark.end_row + delta, mark.hl_group
                    )
            elif mark.start_row < end and mark.end_row > start:
                del buf.marks[mark_id]
