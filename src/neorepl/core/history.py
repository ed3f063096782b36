"""Statement history with in-place recall.

The ring stores submitted statements oldest to newest. Navigating away from
the live edit takes a snapshot of it, so walking back into history and then
forward again restores exactly what was typed.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from neorepl.core.config import DEFAULT_HISTORY_SIZE


class HistoryRing:
    """Fixed-capacity statement history.

    The position counts entries back from the newest: 0 is the live edit,
    1 the newest entry, len() the oldest.

    Example:
        >>> hist = HistoryRing(size=10)
        >>> hist.append(["x = 1"])
        >>> hist.move(True, ["draft"])
        ['x = 1']
        >>> hist.move(False, ["x = 1"])
        ['draft']
    """

    def __init__(self, size: int = DEFAULT_HISTORY_SIZE) -> None:
        if size < 1:
            raise ValueError("history size must be at least 1")
        self.size = size
        self._entries: deque[tuple[str, ...]] = deque(maxlen=size)
        self._pos = 0
        self._saved: list[str] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def pos(self) -> int:
        return self._pos

    def entries(self) -> list[list[str]]:
        """Copies of all entries, oldest first."""
        return [list(entry) for entry in self._entries]

    def append(self, lines: Sequence[str]) -> None:
        """Record a statement, evicting the oldest one past capacity."""
        self._entries.append(tuple(lines))
        self.reset_pos()

    def reset_pos(self) -> None:
        self._pos = 0
        self._saved = None

    def move(self, backward: bool, current: Sequence[str]) -> list[str]:
        """Step through history.

        Args:
            backward: True for older entries, False for newer ones.
            current: Lines of the statement currently displayed.

        Returns:
            Lines that should replace the displayed statement.
        """
        if backward:
            if self._pos >= len(self._entries):
                return list(current)
            if self._pos == 0:
                self._saved = list(current)
            self._pos += 1
            return list(self._entries[-self._pos])

        if self._pos == 0:
            return list(current)
        self._pos -= 1
        if self._pos == 0:
            saved = self._saved if self._saved is not None else [""]
            self._saved = None
            return list(saved)
        return list(self._entries[-self._pos])
