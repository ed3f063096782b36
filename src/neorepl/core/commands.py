"""REPL meta-commands.

This module provides:
- CommandContext: what a handler gets to work with
- Command: one entry of the command table
- The handler functions
- COMMANDS: the ordered command table

Table order is lookup priority. A typed name picks the first entry it
abbreviates, so `/i` and `/in` reach indent while `/ins` reaches inspect.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from neorepl.core.config import MAX_INDENT
from neorepl.core.types import Highlight

if TYPE_CHECKING:
    from neorepl.core.continuation import Statement
    from neorepl.core.session import Session

logger = logging.getLogger(__name__)

MSG_ARGS_NOT_ALLOWED = "arguments not allowed for this command"
MSG_INVALID_ARGS = "invalid argument"
MSG_INVALID_BUF = "invalid buffer"
MSG_INVALID_WIN = "invalid window"
BUF_EMPTY = "[No Name]"

_BOOLEANS = {"true": True, "false": False}


@dataclass
class CommandContext:
    """State needed by command handlers.

    Attributes:
        session: Session the command runs in.
        statement: Statement the command was typed as.
    """

    session: Session
    statement: Statement | None = None


# Handlers get the argument lines (None when all blank). Returning False
# keeps the cursor where it is instead of appending a new input line.
CommandHandler = Callable[[CommandContext, "list[str] | None"], "bool | None"]


@dataclass(frozen=True)
class Command:
    """A command table entry.

    Attributes:
        name: Canonical name.
        abbrev: Minimum number of leading characters that must be typed.
        handler: Function run when the command matches.
        takes_args: The handler consumes the rest of the line. Commands
            without it reject any argument.
        evaluator: Name of the evaluator the arguments are source for, used
            to route completion.
        usage: Argument placeholder shown in the help.
        summary: One-line description shown in the help.
    """

    name: str
    abbrev: int
    handler: CommandHandler
    takes_args: bool = True
    evaluator: str | None = None
    usage: str = ""
    summary: str = ""

    def matches(self, typed: str) -> bool:
        """True when typed is an allowed abbreviation of the name."""
        return len(typed) >= self.abbrev and self.name.startswith(typed)

    @property
    def pattern(self) -> str:
        """Abbreviation in vim notation, e.g. c[lear]."""
        return f"{self.name[: self.abbrev]}[{self.name[self.abbrev :]}]"


# =============================================================================
# Helpers
# =============================================================================


def _single_arg(args: list[str]) -> str | None:
    """The argument of a command that accepts exactly one line."""
    if len(args) != 1:
        return None
    return args[0].strip()


def _info(ctx: CommandContext, line: str) -> None:
    ctx.session.put([line], Highlight.INFO)


def _error(ctx: CommandContext, line: str) -> None:
    ctx.session.put([line], Highlight.ERROR)


def _buffer_label(ctx: CommandContext, bufnr: int) -> str:
    host = ctx.session.host
    if not host.buffer_is_valid(bufnr):
        return f"buffer: {bufnr} [invalid]"
    return f"buffer: {bufnr} {host.buffer_name(bufnr) or BUF_EMPTY}"


def _toggle(ctx: CommandContext, args: list[str] | None, attr: str) -> None:
    if args is not None:
        value = _BOOLEANS.get((_single_arg(args) or "").lower())
        if value is None:
            _error(ctx, MSG_INVALID_ARGS)
            return
        setattr(ctx.session, attr, value)
    _info(ctx, f"{attr}: {str(getattr(ctx.session, attr)).lower()}")


def _language(ctx: CommandContext, args: list[str] | None, name: str) -> bool | None:
    session = ctx.session
    evaluator = session.evaluators[name]
    if args is not None:
        return evaluator.eval(args, session.eval_context(ctx.statement))
    session.vim_mode = name == "vim"
    _info(ctx, evaluator.banner)
    return None


# =============================================================================
# Command Handlers
# =============================================================================


def cmd_python(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Evaluate Python, or make it the active language."""
    return _language(ctx, args, "python")


def cmd_vim(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Evaluate Ex commands, or make vim the active language."""
    return _language(ctx, args, "vim")


def cmd_buffer(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Set or show the context buffer."""
    session = ctx.session
    if args is None:
        if session.buffer > 0:
            _info(ctx, _buffer_label(ctx, session.buffer))
        else:
            _info(ctx, "buffer: none")
        return None

    arg = _single_arg(args)
    if not arg:
        _error(ctx, MSG_INVALID_ARGS)
        return None

    spec: int | str = int(arg) if arg.isdigit() else arg
    if spec == 0:
        session.buffer = 0
        _info(ctx, "buffer: none")
        return None

    bufnr = session.host.find_buffer(spec)
    if bufnr < 0:
        _error(ctx, MSG_INVALID_BUF)
        return None
    session.buffer = bufnr
    _info(ctx, _buffer_label(ctx, bufnr))
    return None


def cmd_window(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Set or show the context window."""
    session = ctx.session
    if args is None:
        if session.window > 0:
            suffix = "" if session.host.window_is_valid(session.window) else " [invalid]"
            _info(ctx, f"window: {session.window}{suffix}")
        else:
            _info(ctx, "window: none")
        return None

    arg = _single_arg(args)
    if not arg or not arg.isdigit():
        _error(ctx, MSG_INVALID_ARGS)
        return None

    winid = int(arg)
    if winid == 0:
        session.window = 0
        _info(ctx, "window: none")
    elif session.host.window_is_valid(winid):
        session.window = winid
        _info(ctx, f"window: {winid}")
    else:
        _error(ctx, MSG_INVALID_WIN)
    return None


def cmd_indent(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Set or show output indentation."""
    if args is not None:
        arg = _single_arg(args)
        if not arg or not arg.isdigit() or int(arg) > MAX_INDENT:
            _error(ctx, MSG_INVALID_ARGS)
            return None
        ctx.session.indent = int(arg)
    _info(ctx, f"indent: {ctx.session.indent}")
    return None


def cmd_inspect(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Toggle pretty-printing of values."""
    _toggle(ctx, args, "inspect")
    return None


def cmd_redraw(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Toggle redraw after evaluation."""
    _toggle(ctx, args, "redraw")
    return None


def cmd_clear(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Clear the REPL buffer."""
    ctx.session.clear()
    return False


def cmd_quit(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Close the REPL."""
    ctx.session.close()
    return False


def cmd_help(ctx: CommandContext, args: list[str] | None) -> bool | None:
    """Show help."""
    ctx.session.put(help_lines(ctx.session.prefix), Highlight.INFO)
    return None


# =============================================================================
# Command Registry
# =============================================================================

COMMANDS: tuple[Command, ...] = (
    Command(
        "python",
        1,
        cmd_python,
        evaluator="python",
        usage="EXPR",
        summary="switch to python or evaluate expression",
    ),
    Command(
        "vim",
        1,
        cmd_vim,
        evaluator="vim",
        usage="EXPR",
        summary="switch to vim or evaluate expression",
    ),
    Command(
        "buffer",
        1,
        cmd_buffer,
        usage="B",
        summary="change buffer context (0 to disable) or print current value",
    ),
    Command(
        "window",
        1,
        cmd_window,
        usage="N",
        summary="change window context (0 to disable) or print current value",
    ),
    Command("indent", 1, cmd_indent, usage="N", summary="set indentation or print current value"),
    Command(
        "inspect",
        3,
        cmd_inspect,
        usage="B",
        summary="enable/disable inspection or print current value",
    ),
    Command(
        "redraw",
        1,
        cmd_redraw,
        usage="B",
        summary="enable/disable redraw after evaluation or print current value",
    ),
    Command("clear", 1, cmd_clear, takes_args=False, summary="clear buffer"),
    Command("quit", 1, cmd_quit, takes_args=False, summary="close repl instance"),
    Command("help", 1, cmd_help, takes_args=False, summary="show this help"),
)


def find_command(typed: str, table: tuple[Command, ...] = COMMANDS) -> Command | None:
    """First command typed abbreviates, or None."""
    for command in table:
        if command.matches(typed):
            return command
    return None


def help_lines(prefix: str = "/", table: tuple[Command, ...] = COMMANDS) -> list[str]:
    """One line per command, e.g. `/ins[pect] B - enable/disable ...`."""
    heads = [f"{prefix}{c.pattern} {c.usage}".rstrip() for c in table]
    width = max(len(head) for head in heads)
    return [f"{head.ljust(width)} - {c.summary}" for head, c in zip(heads, table)]
