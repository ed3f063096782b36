"""Host implementation on top of a Neovim instance (pynvim).

Extmarks in a dedicated namespace hold the output ranges; they move with
edits the user makes, exactly like the lines they tag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pynvim import Nvim, NvimError

from neorepl.core.errors import HostError
from neorepl.core.types import Highlight, Mark

logger = logging.getLogger(__name__)

NAMESPACE = "neorepl"
FILETYPE = "neorepl"

# Default links, overridable from the user's colorscheme
HIGHLIGHT_LINKS = {
    Highlight.ERROR: "ErrorMsg",
    Highlight.OUTPUT: "String",
    Highlight.VALUE: "Number",
    Highlight.INFO: "Function",
    Highlight.LINEBREAK: "Function",
}


def setup_highlights(nvim: Nvim) -> None:
    for highlight, link in HIGHLIGHT_LINKS.items():
        nvim.api.set_hl(0, highlight.value, {"default": True, "link": link})


class NvimHost:
    """Host backed by the Neovim API.

    Context redirection switches the current window and shows the context
    buffer in it, so Python code and Ex commands alike see them as current.
    """

    def __init__(self, nvim: Nvim) -> None:
        self.nvim = nvim
        self.namespace = nvim.api.create_namespace(NAMESPACE)

    # =========================================================================
    # Buffers and windows
    # =========================================================================

    def open_repl_buffer(self) -> int:
        self.nvim.command("enew")
        bufnr = self.nvim.current.buffer.number
        self.nvim.api.set_option_value("buftype", "nofile", {"buf": bufnr})
        self.nvim.api.set_option_value("swapfile", False, {"buf": bufnr})
        self.nvim.api.buf_set_name(bufnr, f"neorepl://neorepl({bufnr})")
        self.nvim.api.set_option_value("filetype", FILETYPE, {"buf": bufnr})
        self.nvim.command(f'syn match {Highlight.LINEBREAK.value} "^\\\\"')
        logger.debug("repl buffer opened: %d", bufnr)
        return bufnr

    def close_buffer(self, bufnr: int) -> None:
        self._call("buf_delete", bufnr, {"force": True})

    def buffer_is_valid(self, bufnr: int) -> bool:
        return bool(self.nvim.api.buf_is_valid(bufnr))

    def window_is_valid(self, winid: int) -> bool:
        return bool(self.nvim.api.win_is_valid(winid))

    def find_buffer(self, spec: int | str) -> int:
        if isinstance(spec, int):
            return spec if spec > 0 and self.buffer_is_valid(spec) else -1
        if not spec:
            return -1
        return int(self.nvim.funcs.bufnr(spec))

    def buffer_name(self, bufnr: int) -> str:
        return self._call("buf_get_name", bufnr)

    # =========================================================================
    # Lines and cursor
    # =========================================================================

    def line_count(self, bufnr: int) -> int:
        return self._call("buf_line_count", bufnr)

    def get_lines(self, bufnr: int, start: int, end: int) -> list[str]:
        return self._call("buf_get_lines", bufnr, start, end, False)

    def set_lines(self, bufnr: int, start: int, end: int, lines: list[str]) -> None:
        self._call("buf_set_lines", bufnr, start, end, False, lines)

    def get_cursor(self) -> tuple[int, int]:
        row, col = self.nvim.api.win_get_cursor(0)
        return row, col

    def set_cursor(self, row: int, col: int) -> None:
        self._call("win_set_cursor", 0, [row, col])

    # =========================================================================
    # Marks
    # =========================================================================

    def set_extmark(self, bufnr: int, mark_id: int, start_row: int, end_row: int, hl_group: str) -> None:
        self._call(
            "buf_set_extmark",
            bufnr,
            self.namespace,
            start_row,
            0,
            {"id": mark_id, "end_row": end_row, "hl_group": hl_group, "hl_eol": True},
        )

    def get_extmarks(self, bufnr: int) -> list[Mark]:
        marks = self._call("buf_get_extmarks", bufnr, self.namespace, 0, -1, {"details": True})
        return [
            Mark(mark_id, row, details.get("end_row", row), details.get("hl_group"))
            for mark_id, row, _col, details in marks
        ]

    def clear_extmarks(self, bufnr: int) -> None:
        self._call("buf_clear_namespace", bufnr, self.namespace, 0, -1)

    # =========================================================================
    # Context, commands, completion
    # =========================================================================

    @contextmanager
    def context(self, buffer: int, window: int) -> Iterator[None]:
        if buffer <= 0 and window <= 0:
            yield
            return

        api = self.nvim.api
        saved_win = api.get_current_win()
        target_win = None
        shown_buf = None
        try:
            if window > 0:
                api.set_current_win(window)
            if buffer > 0:
                target_win = api.get_current_win()
                shown_buf = api.win_get_buf(target_win)
                api.win_set_buf(target_win, buffer)
            yield
        finally:
            if shown_buf is not None and api.win_is_valid(target_win):
                api.win_set_buf(target_win, shown_buf)
            if window > 0 and api.win_is_valid(saved_win):
                api.set_current_win(saved_win)

    def redraw(self) -> None:
        self.nvim.command("redraw")

    def exec_command(self, source: str) -> str:
        try:
            return self.nvim.api.exec2(source, {"output": True})["output"]
        except NvimError as e:
            raise HostError(str(e)) from e

    def python_globals(self) -> dict[str, Any]:
        return {"nvim": self.nvim}

    def complete_command(self, text: str) -> list[str]:
        return list(self.nvim.funcs.getcompletion(text, "cmdline"))

    def show_completion(self, offset: int, candidates: list[str]) -> None:
        self.nvim.funcs.complete(offset, candidates)

    def _call(self, name: str, *args):
        try:
            return getattr(self.nvim.api, name)(*args)
        except NvimError as e:
            raise HostError(f"{name}: {e}") from e
