"""Completion broker.

Decides what the text before the cursor is completing and normalizes the
answer to (1-based start column, candidates):

    /cl|            command name      -> (2, ["clear"])
    /vim ech|       evaluator source  -> offset shifted past "/vim "
    os.pa|          active evaluator  -> (1, ["os.path", "os.pardir"])
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from neorepl.core.commands import COMMANDS, Command, find_command

if TYPE_CHECKING:
    from neorepl.core.session import Session

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")
# Command name followed by whitespace: the rest is an argument
_COMMAND_HEAD = re.compile(r"^([A-Za-z]*)\s+")

Completion = tuple[int, list[str]]


def complete_command_name(typed: str, table: tuple[Command, ...] = COMMANDS) -> list[str]:
    """Canonical names starting with typed, in table order."""
    return [c.name for c in table if c.name.startswith(typed)]


def complete_at(
    session: Session,
    line: str,
    col: int,
    table: tuple[Command, ...] = COMMANDS,
) -> Completion | None:
    """Complete the text of line before col.

    Args:
        session: Session providing the prefix and the evaluators.
        line: Current line.
        col: 0-based cursor column.
        table: Command table.

    Returns:
        (offset, candidates) or None when there is nothing to offer.
    """
    text = line[:col]
    prefix = session.prefix

    if text.startswith(prefix):
        rest = text[len(prefix) :]
        if not _WHITESPACE.search(rest):
            names = complete_command_name(rest, table)
            return (len(prefix) + 1, names) if names else None

        match = _COMMAND_HEAD.match(rest)
        command = find_command(match.group(1), table) if match else None
        if match is None or command is None or command.evaluator is None:
            return None

        evaluator = session.evaluators[command.evaluator]
        start, candidates = evaluator.complete(rest[match.end() :])
        if not candidates:
            return None
        shift = len(prefix) + match.end()
        return (start + shift if start is not None else col + 1), candidates

    start, candidates = session.evaluator.complete(text)
    if not candidates:
        return None
    return (start if start is not None else col + 1), candidates
