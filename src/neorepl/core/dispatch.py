"""Statement dispatch: meta-command or language source.

A statement whose first character is the command prefix is a meta-command:

    /indent 4
    /python [x
    \\ for x in range(3)]

Anything else is source for the active evaluator.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from neorepl.core.commands import (
    COMMANDS,
    MSG_ARGS_NOT_ALLOWED,
    Command,
    CommandContext,
    find_command,
)
from neorepl.core.continuation import is_blank, strip_marker
from neorepl.core.types import EvalOutcome, Highlight, OutcomeKind

if TYPE_CHECKING:
    from neorepl.core.continuation import Statement
    from neorepl.core.session import Session

logger = logging.getLogger(__name__)

MSG_INVALID_COMMAND = "invalid command"
MSG_HANDLER_FAILED = "command failed: {error}"

COMMAND_PATTERN = re.compile(r"^([A-Za-z]*)\s*(.*)$")


def parse_command(line: str, prefix: str = "/") -> tuple[str, str] | None:
    """Split a prefixed line into (name, rest).

    Returns:
        None if line is not a meta-command or no command name can be read.
    """
    if not line.startswith(prefix):
        return None
    match = COMMAND_PATTERN.match(line[len(prefix) :])
    if match is None or not match.group(1):
        return None
    return match.group(1), match.group(2)


def command_args(rest: str, continuation: list[str], marker: str = "\\") -> list[str] | None:
    """Argument lines for a command.

    The rest of the first line comes first, followed by the continuation
    lines with their marker stripped. All blank means no arguments; a single
    line is right-trimmed.
    """
    args = [rest] + [strip_marker(line, marker) for line in continuation]
    if is_blank(args):
        return None
    if len(args) == 1:
        args[0] = args[0].rstrip()
    return args


def dispatch(
    session: Session,
    statement: Statement,
    table: tuple[Command, ...] = COMMANDS,
) -> EvalOutcome:
    """Route a statement to a command handler or the active evaluator.

    Args:
        session: Session the statement was submitted in.
        statement: Non-blank, well-formed statement.
        table: Command table, in priority order.

    Returns:
        How the statement was handled and whether a new line should follow.
    """
    first = statement.lines[0]

    if first.startswith(session.prefix):
        parsed = parse_command(first, session.prefix)
        command = find_command(parsed[0], table) if parsed else None
        if parsed is None or command is None:
            session.put([MSG_INVALID_COMMAND], Highlight.ERROR)
            return EvalOutcome(OutcomeKind.INVALID_COMMAND)

        args = command_args(parsed[1], list(statement.lines[1:]), session.marker)
        if args is not None and not command.takes_args:
            session.put([MSG_ARGS_NOT_ALLOWED], Highlight.ERROR)
            return EvalOutcome(OutcomeKind.COMMAND, command=command.name)

        logger.debug("command: %s args=%r", command.name, args)
        try:
            result = command.handler(CommandContext(session, statement), args)
        except Exception as e:
            logger.exception("command %s failed", command.name)
            if session.valid:
                session.put([MSG_HANDLER_FAILED.format(error=e)], Highlight.ERROR)
            result = None
        return EvalOutcome(OutcomeKind.COMMAND, command=command.name, new_line=result is not False)

    program = statement.program(session.marker)
    result = session.evaluator.eval(program, session.eval_context(statement))
    return EvalOutcome(OutcomeKind.EVALUATED, new_line=result is not False)
