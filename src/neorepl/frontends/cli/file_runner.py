"""File-based execution: feed a file through a session as if typed."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from rich.console import Console

from neorepl.core.config import ReplConfig
from neorepl.core.continuation import is_continuation
from neorepl.core.host import MemoryHost
from neorepl.core.session import Session
from neorepl.frontends.cli.display import buffer_lines, print_lines

logger = logging.getLogger(__name__)


def split_statements(lines: Sequence[str], marker: str = "\\") -> Iterator[list[str]]:
    """Group physical lines into typed statements.

    A statement is a line plus the marker lines that follow it. Marker lines
    at the very top of the file form a statement of their own, which the
    session reports as an illegal line break.
    """
    group: list[str] = []
    for line in lines:
        if group and not is_continuation(line, marker):
            yield group
            group = []
        group.append(line)
    if group:
        yield group


def run_lines(session: Session, lines: Sequence[str], console: Console) -> int:
    """Evaluate lines statement by statement, printing the transcript.

    Returns:
        Number of error lines produced.
    """
    host = session.host
    bufnr = session.bufnr
    errors = 0

    for group in split_statements(lines, session.marker):
        if not session.valid:
            break
        start = host.line_count(bufnr)
        host.set_lines(bufnr, start - 1, start, group)
        end = start + len(group) - 1
        host.set_cursor(end, len(group[-1]))

        outcome = session.eval_line()
        if not session.valid:
            break
        if not outcome.new_line and outcome.command != "clear":
            # incomplete statement left on a marker line
            session.new_line()

        last = host.line_count(bufnr) - 1
        errors += print_lines(console, buffer_lines(session, start, last))

    return errors


def run_from_file(filepath: str, config: ReplConfig | None = None, console: Console | None = None) -> int:
    """Load a file and evaluate it in a fresh session.

    Args:
        filepath: File with one statement per line, continued with the marker.
        config: Session options.
        console: Where the transcript goes.

    Returns:
        Exit status: 0 when no error output was produced, 1 otherwise.

    Raises:
        FileNotFoundError: If filepath does not exist.
    """
    console = console or Console()
    lines = Path(filepath).read_text().splitlines()
    session = Session.create(MemoryHost(), config or ReplConfig())
    logger.debug("running %s (%d lines)", filepath, len(lines))

    errors = run_lines(session, lines, console)
    return 1 if errors else 0
