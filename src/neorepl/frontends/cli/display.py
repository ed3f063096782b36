"""Rendering of REPL buffer lines in the terminal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from neorepl.core.types import Highlight

if TYPE_CHECKING:
    from neorepl.core.session import Session

# Rich style per highlight group
STYLES: dict[str, str] = {
    Highlight.ERROR.value: "bold red",
    Highlight.OUTPUT.value: "default",
    Highlight.VALUE.value: "cyan",
    Highlight.INFO.value: "green",
    Highlight.LINEBREAK.value: "dim",
}
INPUT_STYLE = "bold"


def style_for(highlight: str | None) -> str:
    """Rich style of a line, INPUT_STYLE for lines outside any output."""
    if highlight is None:
        return INPUT_STYLE
    return STYLES.get(highlight, "default")


def render_line(line: str, highlight: str | None) -> Text:
    return Text(line, style=style_for(highlight), no_wrap=False)


def buffer_lines(session: Session, start: int, end: int) -> list[tuple[str, str | None]]:
    """Lines start..end (1-based, inclusive) with their highlight group."""
    if end < start:
        return []
    lines = session.host.get_lines(session.bufnr, start - 1, end)
    return [(line, session.ranges.highlight_at(start + i)) for i, line in enumerate(lines)]


def print_lines(
    console: Console,
    lines: list[tuple[str, str | None]],
    outputs_only: bool = False,
) -> int:
    """Print lines with their highlight styles.

    Args:
        console: Target console.
        lines: (text, highlight group) pairs.
        outputs_only: Skip input lines (the terminal already shows them).

    Returns:
        Number of error lines printed.
    """
    errors = 0
    for line, highlight in lines:
        if outputs_only and highlight is None:
            continue
        if highlight == Highlight.ERROR.value:
            errors += 1
        console.print(render_line(line, highlight), markup=False, highlight=False)
    return errors


def print_welcome(console: Console, session: Session, version: str) -> None:
    console.print(f"[bold]neorepl[/] {version}")
    console.print(
        f"[dim]{session.evaluator.banner}  "
        f"{session.prefix}help for commands, c-j continues a statement, c-d exits[/]"
    )
