"""Python evaluator.

Runs source in a namespace owned by the session. An expression is evaluated
and its value shown; anything else is executed. Output written to stdout or
stderr while the program runs is captured and shown as output lines.
"""

from __future__ import annotations

import builtins
import io
import re
import rlcompleter
from codeop import compile_command
from contextlib import redirect_stderr, redirect_stdout
from types import CodeType
from typing import TYPE_CHECKING, Any

from rich.pretty import pretty_repr

from neorepl.core.evaluators.base import BaseEvaluator, EvalContext, format_exception

if TYPE_CHECKING:
    from neorepl.core.session import Session

REPL_FILENAME = "<repl>"

# Identifier or dotted attribute chain ending at the cursor
_COMPLETION_WORD = re.compile(r"[A-Za-z_][\w.]*$")


def _exit(code: object = None) -> None:
    """exit()/quit() that leave sys.stdin open for the next prompt."""
    raise SystemExit(code)


class PythonEvaluator(BaseEvaluator):
    """Evaluates Python in a per-session namespace.

    The namespace starts with `repl` bound to the session, so the REPL can be
    inspected and reconfigured from itself, plus the names the host adds
    (`nvim` under Neovim). The last shown value is kept in `_`, as in the
    interactive interpreter.
    """

    name = "python"
    banner = "-- PYTHON --"

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self.namespace: dict[str, Any] = {
            "__name__": "__repl__",
            "__builtins__": builtins,
            "repl": session,
            "exit": _exit,
            "quit": _exit,
        }
        self.namespace.update(session.host.python_globals())
        self._completer = rlcompleter.Completer(self.namespace)

    def run(self, program: list[str], ctx: EvalContext) -> bool | None:
        source = "\n".join(program)
        code, is_expression = self._compile(source)
        if code is None:
            ctx.mark_incomplete()
            return False

        captured = io.StringIO()
        try:
            with redirect_stdout(captured), redirect_stderr(captured):
                value = eval(code, self.namespace)
        finally:
            ctx.output(captured.getvalue())

        if is_expression and value is not None:
            self.namespace["_"] = value
            ctx.value(self.format_value(value, ctx.inspect))
        return None

    def _compile(self, source: str) -> tuple[CodeType | None, bool]:
        """Compile as an expression if possible, else as statements.

        Returns:
            (code, is_expression). code is None for incomplete input.

        Raises:
            SyntaxError: If the source can never become valid.
        """
        try:
            return compile(source, REPL_FILENAME, "eval"), True
        except SyntaxError:
            pass
        try:
            return compile(source, REPL_FILENAME, "exec"), False
        except SyntaxError:
            # None when more lines could still make it valid
            return compile_command(source, REPL_FILENAME, "exec"), False

    @staticmethod
    def format_value(value: Any, inspect: bool) -> str:
        return pretty_repr(value) if inspect else repr(value)

    def format_error(self, exc: BaseException) -> list[str]:
        if isinstance(exc, SyntaxError):
            return [f"{type(exc).__name__}: {exc.msg}"]
        return format_exception(exc, skip_files=frozenset({__file__}))

    def complete(self, text: str) -> tuple[int | None, list[str]]:
        match = _COMPLETION_WORD.search(text)
        if match is None:
            return None, []

        word = match.group()
        candidates: list[str] = []
        state = 0
        while True:
            try:
                candidate = self._completer.complete(word, state)
            except Exception:
                # attribute lookups run user code (properties, __getattr__)
                break
            if candidate is None:
                break
            candidates.append(candidate)
            state += 1
        return match.start() + 1, candidates
