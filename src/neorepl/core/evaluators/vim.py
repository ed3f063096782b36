"""Vim evaluator.

Ex commands are executed by the host editor; the evaluator only shapes the
output and strips the host's error-location prefixes.
"""

from __future__ import annotations

import re

from neorepl.core.evaluators.base import BaseEvaluator, EvalContext, split_lines

# "nvim_exec2(): Vim(echo):E121: ..." -> "E121: ..."
_ERROR_NOISE = re.compile(r"^.*?Vim(?:\([^)]*\))?:")
_LAST_WORD = re.compile(r"\S+$")


class VimEvaluator(BaseEvaluator):
    """Runs programs through host.exec_command()."""

    name = "vim"
    banner = "-- VIM --"

    def run(self, program: list[str], ctx: EvalContext) -> bool | None:
        output = self.session.host.exec_command("\n".join(program))
        ctx.output(output, trim_empty=True)
        return None

    def format_error(self, exc: BaseException) -> list[str]:
        return [_ERROR_NOISE.sub("", line, count=1) for line in split_lines(str(exc))] or [
            type(exc).__name__
        ]

    def complete(self, text: str) -> tuple[int | None, list[str]]:
        match = _LAST_WORD.search(text)
        start = match.start() + 1 if match else None
        return start, self.session.host.complete_command(text)
