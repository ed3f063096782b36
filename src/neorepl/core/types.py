"""Pure data types for neorepl.core.

These are simple dataclasses with no behavior coupling. Line numbers are
1-based and inclusive unless a field says otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Highlight(Enum):
    """Highlight classes applied to output written into the REPL buffer.

    Values are the highlight group names the host renders.
    """

    ERROR = "neoreplError"
    OUTPUT = "neoreplOutput"
    VALUE = "neoreplValue"
    INFO = "neoreplInfo"
    LINEBREAK = "neoreplLinebreak"  # continuation marker at line start


class OutcomeKind(Enum):
    """How a submitted line was handled."""

    COMMAND = auto()  # Matched a meta-command
    EVALUATED = auto()  # Handed to an evaluator
    INVALID_COMMAND = auto()  # Prefixed but not a known command
    MALFORMED = auto()  # Continuation lines without a head
    EMPTY = auto()  # Whitespace only, nothing evaluated


@dataclass(frozen=True)
class EvalOutcome:
    """Result of submitting one logical statement.

    Attributes:
        kind: How the statement was classified.
        command: Canonical command name when kind is COMMAND.
        new_line: Whether a fresh input line should be appended.
    """

    kind: OutcomeKind
    command: str | None = None
    new_line: bool = True


@dataclass(frozen=True)
class Mark:
    """A tagged interval as stored by the host.

    Uses the host's coordinates: start_row is 0-based, end_row is exclusive
    (equivalently, the 1-based inclusive last line).
    """

    id: int
    start_row: int
    end_row: int
    hl_group: str | None = None


@dataclass(frozen=True)
class OutputRange:
    """A registered output block in buffer coordinates."""

    id: int
    start: int
    end: int
    highlight: str | None = None


@dataclass(frozen=True)
class Segment:
    """One piece of the buffer partition used for output navigation.

    Attributes:
        start: First line (1-based).
        end: Last line (inclusive).
        output: True for registered output, False for the gaps between.
    """

    start: int
    end: int
    output: bool = False
