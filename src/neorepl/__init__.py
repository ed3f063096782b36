"""neorepl - buffer-backed REPL sessions.

A REPL lives in an ordinary editor buffer: type a statement on a line,
submit it, and its output is appended below as highlighted, navigable
output. Statements are Python by default; `/vim` switches to Ex commands
run by the host editor.

Layers:
    core/       Session engine, independent of any editor
    frontends/  Terminal REPL and CLI, Neovim remote plugin

Quick Start:
    >>> from neorepl import MemoryHost, Session
    >>>
    >>> host = MemoryHost()
    >>> session = Session.create(host)
    >>> host.set_lines(session.bufnr, 0, 1, ["[x * x for x in range(4)]"])
    >>> outcome = session.eval_line()
    >>> host.get_lines(session.bufnr, 0, -1)
    ['[x * x for x in range(4)]', '[0, 1, 4, 9]', '']
"""

from neorepl.__version__ import __version__
from neorepl.core import (
    ConfigError,
    EvalOutcome,
    Highlight,
    Host,
    HostError,
    MemoryHost,
    NeoreplError,
    OutcomeKind,
    ReplConfig,
    Session,
    SessionRegistry,
)

__all__ = [
    "__version__",
    "ConfigError",
    "EvalOutcome",
    "Highlight",
    "Host",
    "HostError",
    "MemoryHost",
    "NeoreplError",
    "OutcomeKind",
    "ReplConfig",
    "Session",
    "SessionRegistry",
]
