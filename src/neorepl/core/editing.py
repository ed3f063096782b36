"""Insert-mode editing keys for the REPL buffer.

Backspacing over a continuation marker joins the line with the one above,
so the statement stays well formed. The helpers here only decide which keys
to feed; the frontend applies them.
"""

from __future__ import annotations

from typing import NamedTuple

from neorepl.core.continuation import DEFAULT_MARKER

# Value of 'backspace' while the keys are fed
BACKSPACE_JOIN = "indent,start,eol"
BACKSPACE_LINE = "indent,start"


class EditKeys(NamedTuple):
    """Keys to feed and the 'backspace' value to feed them with."""

    keys: str
    backspace: str

    @property
    def joins(self) -> bool:
        return self.backspace == BACKSPACE_JOIN


def _join_keys(line: str, col: int, marker: str) -> EditKeys | None:
    if not line.startswith(marker):
        return None
    if col == len(marker):
        return EditKeys("<BS>" * (len(marker) + 1), BACKSPACE_JOIN)
    if col == 0:
        return EditKeys("<Del>" * len(marker) + "<BS>", BACKSPACE_JOIN)
    return None


def backspace_keys(line: str, col: int, marker: str = DEFAULT_MARKER) -> EditKeys:
    """Keys for <BS> with the cursor at 0-based col of line."""
    return _join_keys(line, col, marker) or EditKeys("<BS>", BACKSPACE_LINE)


def delete_word_keys(line: str, col: int, marker: str = DEFAULT_MARKER) -> EditKeys:
    """Keys for <C-W> with the cursor at 0-based col of line."""
    return _join_keys(line, col, marker) or EditKeys("<C-W>", BACKSPACE_LINE)


def break_line_keys(marker: str = DEFAULT_MARKER) -> str:
    """Keys that continue the statement on a new marker line."""
    return "<CR><C-U>" + marker
