"""Line-continuation resolution.

A logical statement is a head line followed by any number of continuation
lines, each starting with the continuation marker:

    x = [1,
    \\ 2,
    \\ 3]

Resolution returns raw lines, markers included. Stripping happens where the
lines are consumed (Statement.program()).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

DEFAULT_MARKER = "\\"


@dataclass(frozen=True)
class Statement:
    """A resolved logical statement.

    Attributes:
        lines: Raw buffer lines, markers included.
        start: First buffer line (1-based).
        end: Last buffer line (inclusive).
    """

    lines: tuple[str, ...]
    start: int
    end: int

    def program(self, marker: str = DEFAULT_MARKER) -> list[str]:
        """Lines with the marker stripped from every continuation line."""
        return [self.lines[0]] + [strip_marker(line, marker) for line in self.lines[1:]]

    def is_blank(self) -> bool:
        return is_blank(self.lines)


def is_continuation(line: str, marker: str = DEFAULT_MARKER) -> bool:
    return line.startswith(marker)


def strip_marker(line: str, marker: str = DEFAULT_MARKER) -> str:
    return line[len(marker) :] if line.startswith(marker) else line


def is_blank(lines: Sequence[str]) -> bool:
    """True when every line is empty or whitespace."""
    return all(not line.strip() for line in lines)


def resolve(lines: Sequence[str], cursor_line: int, marker: str = DEFAULT_MARKER) -> Statement | None:
    """Find the logical statement containing cursor_line.

    Args:
        lines: All buffer lines.
        cursor_line: 1-based line the cursor is on.
        marker: Continuation marker.

    Returns:
        The statement, or None when the cursor is inside a run of
        continuation lines that has no head line (an illegal line break).
    """
    if not 1 <= cursor_line <= len(lines):
        raise IndexError(f"line {cursor_line} outside buffer of {len(lines)} lines")

    start = cursor_line
    while is_continuation(lines[start - 1], marker):
        if start == 1:
            return None
        start -= 1

    end = cursor_line
    while end < len(lines) and is_continuation(lines[end], marker):
        end += 1

    return Statement(lines=tuple(lines[start - 1 : end]), start=start, end=end)
