"""Evaluator protocol and the per-call evaluation context.

An evaluator turns program lines into output lines. It never touches the
REPL buffer directly: everything goes through the EvalContext it is handed,
which also owns the execution-context redirection (running "as if" another
buffer/window were current).
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from neorepl.core.types import Highlight

if TYPE_CHECKING:
    from neorepl.core.continuation import Statement
    from neorepl.core.session import Session

logger = logging.getLogger(__name__)

MSG_BUFFER_INVALID = "buffer no longer valid, setting it back to 0"
MSG_WINDOW_INVALID = "window no longer valid, setting it back to 0"
MSG_CANCELLED = "operation cancelled"


class Evaluator(Protocol):
    """Contract every pluggable language evaluator satisfies."""

    name: str
    banner: str

    def eval(self, program: list[str], ctx: EvalContext) -> bool | None:
        """Evaluate program lines.

        Returns:
            False to keep the cursor where the evaluator left it (no new
            input line), anything else to append a fresh line.
        """
        ...

    def complete(self, text: str) -> tuple[int | None, list[str]]:
        """Completion for the text before the cursor.

        Returns:
            (1-based column where replacement starts or None, candidates).
        """
        ...


@dataclass
class EvalContext:
    """Everything one evaluation call may use.

    Created by the session for each call; the target buffer/window are the
    session's values at that moment.

    Attributes:
        session: Session the output is written to.
        buffer: Context buffer, 0 for none.
        window: Context window, 0 for none.
        inspect: Render values with the pretty printer.
        redraw: Redraw the host after the evaluation.
        statement: Statement being evaluated, if it came from the buffer.
        incomplete: Set by the evaluator when the program needs more lines.
    """

    session: Session
    buffer: int = 0
    window: int = 0
    inspect: bool = True
    redraw: bool = True
    statement: Statement | None = None
    incomplete: bool = field(default=False, init=False)

    def validate(self) -> bool:
        """Check the target buffer/window are still alive.

        A stale handle is reset to 0 on the session, reported, and the
        operation is cancelled.
        """
        host = self.session.host
        buf_valid = self.buffer == 0 or host.buffer_is_valid(self.buffer)
        win_valid = self.window == 0 or host.window_is_valid(self.window)
        if buf_valid and win_valid:
            return True

        lines = []
        if not buf_valid:
            logger.info("context buffer %d no longer valid", self.buffer)
            self.session.buffer = self.buffer = 0
            lines.append(MSG_BUFFER_INVALID)
        if not win_valid:
            logger.info("context window %d no longer valid", self.window)
            self.session.window = self.window = 0
            lines.append(MSG_WINDOW_INVALID)
        lines.append(MSG_CANCELLED)
        self.session.put(lines, Highlight.ERROR)
        return False

    @contextmanager
    def redirect(self) -> Iterator[None]:
        """Run the block with the target buffer/window current."""
        with self.session.host.context(self.buffer, self.window):
            yield

    def mark_incomplete(self) -> None:
        self.incomplete = True

    # =========================================================================
    # Output helpers
    # =========================================================================

    def put(self, lines: list[str], highlight: Highlight) -> None:
        self.session.put(lines, highlight)

    def output(self, text: str, trim_empty: bool = False) -> None:
        """Write captured text as output lines.

        Args:
            text: Raw text, possibly with a trailing newline.
            trim_empty: Drop blank lines entirely.
        """
        lines = split_lines(text)
        if trim_empty:
            lines = [line for line in lines if line.strip()]
        if lines:
            self.put(lines, Highlight.OUTPUT)

    def value(self, text: str) -> None:
        self.put(split_lines(text) or [""], Highlight.VALUE)

    def error(self, lines: list[str]) -> None:
        self.put(lines, Highlight.ERROR)


class BaseEvaluator:
    """Template for evaluators: validate, redirect, run, report.

    Subclasses implement run(). Any exception it raises, SystemExit and
    KeyboardInterrupt included, is caught here and written to the buffer as
    error lines, so a failing program never takes the session down.
    """

    name = "base"
    banner = ""

    def __init__(self, session: Session) -> None:
        self.session = session

    def eval(self, program: list[str], ctx: EvalContext) -> bool | None:
        if not ctx.validate():
            return None

        result: bool | None = None
        try:
            with ctx.redirect():
                result = self.run(program, ctx)
        except (Exception, SystemExit, KeyboardInterrupt) as e:
            # exit() and c-c in user code end the program, not the session
            logger.debug("%s evaluation failed: %r", self.name, e)
            ctx.error(self.format_error(e))
        finally:
            if ctx.redraw:
                self.session.host.redraw()

        if ctx.incomplete:
            self.session.break_line(ctx.statement)
            return False
        return result

    def run(self, program: list[str], ctx: EvalContext) -> bool | None:
        raise NotImplementedError

    def complete(self, text: str) -> tuple[int | None, list[str]]:
        return None, []

    def format_error(self, exc: BaseException) -> list[str]:
        return split_lines(str(exc)) or [type(exc).__name__]


def split_lines(text: str) -> list[str]:
    """Split text into buffer lines, dropping one trailing newline."""
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def format_exception(exc: BaseException, skip_files: frozenset[str] = frozenset()) -> list[str]:
    """Format an exception without the evaluator machinery frames.

    Frames from this module and from skip_files are dropped, leaving the
    frames of the evaluated program itself.
    """
    skip = skip_files | {__file__}
    te = traceback.TracebackException.from_exception(exc)
    te.stack = traceback.StackSummary.from_list(
        [frame for frame in te.stack if frame.filename not in skip]
    )
    return split_lines("".join(te.format()))
