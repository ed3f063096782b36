"""Core - the REPL session engine.

This module contains no knowledge of:
- Which editor renders the buffer
- How keys reach the session
- Terminals, plugins or processes

Everything editor-specific goes through the Host protocol, so the engine runs
the same against Neovim and against the in-memory host used by the terminal
frontend and the tests.

Architecture:
    continuation    Logical statements from marker-continued lines
    history         Statement history ring
    ranges          Output range tracking and navigation
    commands        Meta-command table and handlers
    dispatch        Command-or-source routing
    evaluators/     Pluggable languages (Python, Vim)
    completion      Completion broker
    session         One REPL instance
    registry        Sessions by buffer
    host            Host protocol and MemoryHost

Example:
    >>> from neorepl.core import MemoryHost, Session
    >>>
    >>> host = MemoryHost()
    >>> session = Session.create(host)
    >>> host.set_lines(session.bufnr, 0, 1, ["/indent 2"])
    >>> outcome = session.eval_line()
    >>> host.get_lines(session.bufnr, 0, -1)
    ['/indent 2', '  indent: 2', '']
"""

from neorepl.core.config import ReplConfig
from neorepl.core.continuation import Statement, resolve
from neorepl.core.errors import ConfigError, HostError, NeoreplError
from neorepl.core.history import HistoryRing
from neorepl.core.host import Host, MemoryHost
from neorepl.core.ranges import OutputRanges
from neorepl.core.registry import SessionRegistry
from neorepl.core.session import Session
from neorepl.core.types import (
    EvalOutcome,
    Highlight,
    Mark,
    OutcomeKind,
    OutputRange,
    Segment,
)

__all__ = [
    # Config
    "ReplConfig",
    # Errors
    "NeoreplError",
    "ConfigError",
    "HostError",
    # Session
    "Session",
    "SessionRegistry",
    "Statement",
    "resolve",
    "HistoryRing",
    "OutputRanges",
    # Host
    "Host",
    "MemoryHost",
    # Types
    "EvalOutcome",
    "Highlight",
    "Mark",
    "OutcomeKind",
    "OutputRange",
    "Segment",
]
