"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from neorepl.core.host import MemoryHost
from neorepl.core.session import Session
from neorepl.core.types import EvalOutcome


@pytest.fixture
def host() -> MemoryHost:
    """In-memory editor surface."""
    return MemoryHost()


@pytest.fixture
def session(host: MemoryHost) -> Session:
    """Python session in a fresh REPL buffer of host."""
    return Session.create(host)


@pytest.fixture
def submit(session: Session) -> Callable[[str], EvalOutcome]:
    """Type text on the last buffer line and evaluate it.

    Newlines in text become separate buffer lines, so continuation lines are
    written as "head\\n\\\\rest".
    """

    def _submit(text: str) -> EvalOutcome:
        host = session.host
        lines = text.split("\n")
        row = host.line_count(session.bufnr)
        host.set_lines(session.bufnr, row - 1, row, lines)
        host.set_cursor(row + len(lines) - 1, len(lines[-1]))
        return session.eval_line()

    return _submit


@pytest.fixture
def buffer(session: Session) -> Callable[[], list[str]]:
    """Current lines of the REPL buffer."""

    def _buffer() -> list[str]:
        return session.host.get_lines(session.bufnr, 0, -1)

    return _buffer
