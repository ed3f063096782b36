"""REPL session.

A Session is one REPL instance bound to one host buffer. It owns the
history ring, the output ranges and the evaluators, and implements the
user-facing operations: evaluate the line under the cursor, recall history,
jump between outputs, complete.

Once the backing buffer is gone every operation is a logged no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from neorepl.core.completion import Completion, complete_at
from neorepl.core.config import ReplConfig
from neorepl.core.continuation import Statement, resolve
from neorepl.core.dispatch import dispatch
from neorepl.core.errors import ConfigError
from neorepl.core.evaluators import EvalContext, PythonEvaluator, VimEvaluator
from neorepl.core.history import HistoryRing
from neorepl.core.ranges import OutputRanges
from neorepl.core.types import EvalOutcome, Highlight, OutcomeKind

if TYPE_CHECKING:
    from neorepl.core.evaluators import Evaluator
    from neorepl.core.host import Host

logger = logging.getLogger(__name__)

MSG_ILLEGAL_LINE_BREAK = "illegal line break"

F = TypeVar("F", bound=Callable[..., Any])


def requires_buffer(method: F) -> F:
    """Turn a session method into a no-op once the REPL buffer is gone."""

    @wraps(method)
    def wrapper(self: Session, *args: Any, **kwargs: Any) -> Any:
        if not self.valid:
            logger.warning("repl buffer %d no longer valid, ignoring %s", self.bufnr, method.__name__)
            return None
        return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class Session:
    """One REPL instance.

    Attributes:
        host: Editor surface.
        bufnr: REPL buffer.
        buffer: Context buffer, 0 for none.
        window: Context window, 0 for none.
        vim_mode: Vim is the active language.
        indent: Spaces prefixed to output lines.
        redraw: Redraw the host after evaluations.
        inspect: Pretty-print values.
        hist: Statement history.
        ranges: Output ranges of the REPL buffer.
        evaluators: Evaluators by name.

    Example:
        >>> host = MemoryHost()
        >>> session = Session.create(host)
        >>> host.set_lines(session.bufnr, 0, 1, ["1 + 1"])
        >>> outcome = session.eval_line()
        >>> host.get_lines(session.bufnr, 0, -1)
        ['1 + 1', '2', '']
    """

    def __init__(self, host: Host, bufnr: int, config: ReplConfig | None = None) -> None:
        config = config or ReplConfig()
        self.host = host
        self.bufnr = bufnr
        self.prefix = config.prefix
        self.marker = config.marker
        self.buffer = config.buffer if isinstance(config.buffer, int) else 0
        self.window = config.window
        self.vim_mode = config.lang == "vim"
        self.indent = config.indent
        self.redraw = config.redraw
        self.inspect = config.inspect
        self.hist = HistoryRing(config.history_size)
        self.ranges = OutputRanges(host, bufnr)
        self.evaluators: dict[str, Evaluator] = {
            "python": PythonEvaluator(self),
            "vim": VimEvaluator(self),
        }
        self.on_close: Callable[[Session], None] | None = None

    @classmethod
    def create(cls, host: Host, config: ReplConfig | None = None) -> Session:
        """Open a REPL buffer on host and start a session in it.

        Raises:
            ConfigError: If the configured context buffer or window does not exist.
        """
        config = config or ReplConfig()

        buffer = 0
        if config.buffer:
            buffer = host.find_buffer(config.buffer)
            if buffer < 0:
                raise ConfigError("invalid buffer")
        if config.window and not host.window_is_valid(config.window):
            raise ConfigError("invalid window")

        session = cls(host, host.open_repl_buffer(), config)
        session.buffer = buffer
        logger.debug("session_created: bufnr=%d lang=%s", session.bufnr, config.lang)
        return session

    def __repr__(self) -> str:
        return f"Session(bufnr={self.bufnr}, lang={self.lang!r})"

    @property
    def valid(self) -> bool:
        return self.host.buffer_is_valid(self.bufnr)

    @property
    def lang(self) -> str:
        return "vim" if self.vim_mode else "python"

    @property
    def evaluator(self) -> Evaluator:
        """Evaluator for the active language."""
        return self.evaluators[self.lang]

    def eval_context(self, statement: Statement | None = None) -> EvalContext:
        return EvalContext(
            session=self,
            buffer=self.buffer,
            window=self.window,
            inspect=self.inspect,
            redraw=self.redraw,
            statement=statement,
        )

    # =========================================================================
    # Buffer writes
    # =========================================================================

    @requires_buffer
    def put(self, lines: list[str], highlight: Highlight) -> None:
        """Append lines to the buffer and tag them with highlight."""
        lines = [part for line in lines for part in str(line).split("\n")]
        if self.indent > 0:
            pad = " " * self.indent
            lines = [pad + line for line in lines]

        start = self.host.line_count(self.bufnr)
        self.host.set_lines(self.bufnr, -1, -1, lines)
        end = self.host.line_count(self.bufnr)
        if end > start:
            self.ranges.put(start + 1, end, highlight)

    @requires_buffer
    def clear(self) -> None:
        """Remove all lines and output ranges."""
        self.ranges.clear()
        self.host.set_lines(self.bufnr, 0, -1, [])
        self.host.set_cursor(1, 0)

    @requires_buffer
    def new_line(self) -> None:
        """Append an empty input line and move the cursor to it."""
        self.host.set_lines(self.bufnr, -1, -1, [""])
        self.host.set_cursor(self.host.line_count(self.bufnr), 0)

    @requires_buffer
    def break_line(self, statement: Statement | None = None) -> None:
        """Continue statement on a new marker line below it."""
        row = statement.end if statement else self.host.line_count(self.bufnr)
        self.host.set_lines(self.bufnr, row, row, [self.marker])
        self.host.set_cursor(row + 1, len(self.marker))

    # =========================================================================
    # User operations
    # =========================================================================

    @requires_buffer
    def get_line(self) -> Statement | None:
        """Statement under the cursor, None on an illegal line break."""
        row, _ = self.host.get_cursor()
        return resolve(self.host.get_lines(self.bufnr, 0, -1), row, self.marker)

    @requires_buffer
    def eval_line(self) -> EvalOutcome:
        """Evaluate the statement under the cursor."""
        self.hist.reset_pos()

        statement = self.get_line()
        if statement is None:
            self.put([MSG_ILLEGAL_LINE_BREAK], Highlight.ERROR)
            self.new_line()
            return EvalOutcome(OutcomeKind.MALFORMED)

        if statement.is_blank():
            self.new_line()
            return EvalOutcome(OutcomeKind.EMPTY)

        self.hist.append(statement.lines)
        outcome = dispatch(self, statement)
        if outcome.new_line:
            self.new_line()
        return outcome

    @requires_buffer
    def hist_move(self, backward: bool) -> None:
        """Replace the statement under the cursor with a history entry."""
        if len(self.hist) == 0:
            return
        statement = self.get_line()
        if statement is None:
            return
        lines = self.hist.move(backward, statement.lines)
        self.host.set_lines(self.bufnr, statement.start - 1, statement.end, lines)
        self.host.set_cursor(statement.start + len(lines) - 1, len(lines[-1]))

    @requires_buffer
    def goto_output(self, backward: bool, to_end: bool = False, count: int = 1) -> None:
        """Jump to the start or end of a neighbouring output block."""
        row, _ = self.host.get_cursor()
        target = self.ranges.goto(backward, to_end, count, row)
        self.host.set_cursor(target, 0)

    @requires_buffer
    def get_completion(self) -> Completion | None:
        row, col = self.host.get_cursor()
        line = self.host.get_lines(self.bufnr, row - 1, row)[0]
        return complete_at(self, line, col)

    @requires_buffer
    def complete(self) -> None:
        """Offer completions for the text before the cursor."""
        result = self.get_completion()
        if result is not None:
            self.host.show_completion(*result)

    @requires_buffer
    def close(self) -> None:
        """Close the REPL buffer."""
        logger.debug("session_closing: bufnr=%d", self.bufnr)
        self.host.close_buffer(self.bufnr)
        if self.on_close is not None:
            self.on_close(self)
