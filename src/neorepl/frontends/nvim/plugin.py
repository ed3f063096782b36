"""Neovim remote plugin: the :Repl command and the key-mapped functions.

Mappings are buffer-local to each REPL buffer. The <Plug> targets are always
defined; the default keys only unless the session was opened with
no_defaults.
"""

from __future__ import annotations

import logging
from typing import Any

import pynvim
from pynvim import Nvim

from neorepl.core.config import ReplConfig
from neorepl.core.editing import (
    EditKeys,
    backspace_keys,
    break_line_keys,
    delete_word_keys,
)
from neorepl.core.errors import ConfigError
from neorepl.core.logging_config import configure_logging
from neorepl.core.registry import SessionRegistry
from neorepl.core.session import Session
from neorepl.frontends.nvim.host import NvimHost, setup_highlights

logger = logging.getLogger(__name__)

MSG_NOT_A_REPL = "neorepl: not a REPL buffer"

# (modes, <Plug> name, rhs, expr)
PLUG_MAPPINGS: list[tuple[tuple[str, ...], str, str, bool]] = [
    (("", "i"), "eval-line", "<Cmd>call NeoreplEvalLine()<CR>", False),
    (("i",), "backspace", "NeoreplBackspace()", True),
    (("i",), "delete-word", "NeoreplDeleteWord()", True),
    (("", "i"), "hist-prev", "<Cmd>call NeoreplHistPrev()<CR>", False),
    (("", "i"), "hist-next", "<Cmd>call NeoreplHistNext()<CR>", False),
    (("i",), "complete", "<Cmd>call NeoreplComplete()<CR>", False),
    (("", "i"), "[[", "<Cmd>call NeoreplGotoPrev(v:count1)<CR>", False),
    (("", "i"), "[]", "<Cmd>call NeoreplGotoPrevEnd(v:count1)<CR>", False),
    (("", "i"), "]]", "<Cmd>call NeoreplGotoNext(v:count1)<CR>", False),
    (("", "i"), "][", "<Cmd>call NeoreplGotoNextEnd(v:count1)<CR>", False),
]

# (mode, lhs, rhs, expr)
DEFAULT_MAPPINGS: list[tuple[str, str, str, bool]] = [
    ("i", "<CR>", "<Plug>(neorepl-eval-line)", False),
    ("i", "<C-M>", "<Plug>(neorepl-eval-line)", False),
    ("i", "<NL>", "<Plug>(neorepl-break-line)", False),
    ("i", "<C-J>", "<Plug>(neorepl-break-line)", False),
    ("i", "<BS>", "<Plug>(neorepl-backspace)", False),
    ("i", "<C-H>", "<Plug>(neorepl-backspace)", False),
    ("i", "<C-W>", "<Plug>(neorepl-delete-word)", False),
    ("i", "<Tab>", "pumvisible() ? '<C-N>' : '<Plug>(neorepl-complete)'", True),
    ("i", "<C-P>", "pumvisible() ? '<C-P>' : '<Plug>(neorepl-hist-prev)'", True),
    ("i", "<C-N>", "pumvisible() ? '<C-N>' : '<Plug>(neorepl-hist-next)'", True),
    ("i", "<C-E>", "pumvisible() ? '<C-E>' : '<End>'", True),
    ("i", "<C-A>", "<Home>", False),
    ("", "[[", "<Plug>(neorepl-[[)", False),
    ("", "[]", "<Plug>(neorepl-[])", False),
    ("", "]]", "<Plug>(neorepl-]])", False),
    ("", "][", "<Plug>(neorepl-][)", False),
]


def parse_args(args: list[str]) -> dict[str, Any]:
    """Turn `:Repl key=value ...` arguments into options.

    Digits become integers and true/false booleans; anything else stays a
    string. A bare word is the language.

    Example:
        >>> parse_args(["vim", "indent=2", "redraw=false"])
        {'lang': 'vim', 'indent': 2, 'redraw': False}
    """
    options: dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            options["lang"] = key
            continue
        if value.isdigit():
            options[key] = int(value)
        elif value.lower() in ("true", "false"):
            options[key] = value.lower() == "true"
        else:
            options[key] = value
    return options


@pynvim.plugin
class Neorepl:
    """The plugin class. Owns the host and every session opened with :Repl."""

    def __init__(self, nvim: Nvim) -> None:
        self.nvim = nvim
        self.host: NvimHost | None = None
        self.registry = SessionRegistry()
        self._backspace: str | None = None
        configure_logging()

    def _initialize(self) -> NvimHost:
        if self.host is None:
            self.host = NvimHost(self.nvim)
            setup_highlights(self.nvim)
        return self.host

    def _session(self) -> Session | None:
        session = self.registry.get(self.nvim.current.buffer.number)
        if session is None:
            self.nvim.err_write(MSG_NOT_A_REPL + "\n")
        return session

    # =========================================================================
    # Commands
    # =========================================================================

    @pynvim.command("Repl", nargs="*", sync=True)
    def repl_command(self, args: list[str]) -> None:
        """Open a REPL: `:Repl [python|vim] [key=value ...]`."""
        self.open(parse_args(args))

    @pynvim.function("NeoreplNew", sync=True)
    def new(self, args: list[Any]) -> int:
        """Open a REPL from an options dict and return its buffer number."""
        return self.open(args[0] if args else {})

    def open(self, options: dict[str, Any]) -> int:
        host = self._initialize()
        try:
            config = ReplConfig.from_mapping(options)
            session = self.registry.open(host, config)
        except ConfigError as e:
            self.nvim.err_write(f"neorepl: {e}\n")
            return -1
        self.define_mappings(session, config)
        return session.bufnr

    def define_mappings(self, session: Session, config: ReplConfig) -> None:
        api = self.nvim.api
        bufnr = session.bufnr

        def keymap(mode: str, lhs: str, rhs: str, expr: bool) -> None:
            api.buf_set_keymap(bufnr, mode, lhs, rhs, {"noremap": True, "expr": expr})

        for modes, name, rhs, expr in PLUG_MAPPINGS:
            for mode in modes:
                keymap(mode, f"<Plug>(neorepl-{name})", rhs, expr)
        keymap("i", "<Plug>(neorepl-break-line)", break_line_keys(session.marker), False)

        if not config.no_defaults:
            for mode, lhs, rhs, expr in DEFAULT_MAPPINGS:
                api.buf_set_keymap(bufnr, mode, lhs, rhs, {"expr": expr})

    # =========================================================================
    # Mapped functions
    # =========================================================================

    @pynvim.function("NeoreplEvalLine", sync=True)
    def eval_line(self, args: list[Any]) -> None:
        session = self._session()
        if session is not None:
            session.eval_line()

    @pynvim.function("NeoreplHistPrev", sync=True)
    def hist_prev(self, args: list[Any]) -> None:
        session = self._session()
        if session is not None:
            session.hist_move(True)

    @pynvim.function("NeoreplHistNext", sync=True)
    def hist_next(self, args: list[Any]) -> None:
        session = self._session()
        if session is not None:
            session.hist_move(False)

    @pynvim.function("NeoreplComplete", sync=True)
    def complete(self, args: list[Any]) -> None:
        session = self._session()
        if session is not None:
            session.complete()

    def _goto(self, args: list[Any], backward: bool, to_end: bool) -> None:
        session = self._session()
        if session is not None:
            count = int(args[0]) if args else 1
            session.goto_output(backward, to_end, count)

    @pynvim.function("NeoreplGotoNext", sync=True)
    def goto_next(self, args: list[Any]) -> None:
        self._goto(args, backward=False, to_end=False)

    @pynvim.function("NeoreplGotoNextEnd", sync=True)
    def goto_next_end(self, args: list[Any]) -> None:
        self._goto(args, backward=False, to_end=True)

    @pynvim.function("NeoreplGotoPrev", sync=True)
    def goto_prev(self, args: list[Any]) -> None:
        self._goto(args, backward=True, to_end=False)

    @pynvim.function("NeoreplGotoPrevEnd", sync=True)
    def goto_prev_end(self, args: list[Any]) -> None:
        self._goto(args, backward=True, to_end=True)

    # =========================================================================
    # Editing (expr mappings)
    # =========================================================================

    def _feed(self, edit: EditKeys) -> str:
        """Switch 'backspace' for the keys and return them with the restore."""
        self._backspace = self.nvim.options["backspace"]
        self.nvim.options["backspace"] = edit.backspace
        keys = edit.keys + "<Cmd>call NeoreplRestoreBackspace()<CR>"
        return self.nvim.replace_termcodes(keys, from_part=True, do_lt=False, special=True)

    def _line_and_col(self) -> tuple[str, int]:
        _, col = self.nvim.current.window.cursor
        return self.nvim.current.line, col

    @pynvim.function("NeoreplBackspace", sync=True)
    def backspace(self, args: list[Any]) -> str:
        session = self.registry.get(self.nvim.current.buffer.number)
        marker = session.marker if session else "\\"
        return self._feed(backspace_keys(*self._line_and_col(), marker))

    @pynvim.function("NeoreplDeleteWord", sync=True)
    def delete_word(self, args: list[Any]) -> str:
        session = self.registry.get(self.nvim.current.buffer.number)
        marker = session.marker if session else "\\"
        return self._feed(delete_word_keys(*self._line_and_col(), marker))

    @pynvim.function("NeoreplRestoreBackspace", sync=True)
    def restore_backspace(self, args: list[Any]) -> None:
        if self._backspace is not None:
            self.nvim.options["backspace"] = self._backspace
            self._backspace = None

    # =========================================================================
    # Autocommands
    # =========================================================================

    @pynvim.autocmd("BufDelete", pattern="neorepl://*", eval='expand("<abuf>")', sync=True)
    def on_buf_delete(self, bufnr: str) -> None:
        self.registry.teardown(int(bufnr))
