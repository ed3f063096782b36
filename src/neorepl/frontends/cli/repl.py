"""Interactive terminal REPL.

The terminal plays the part of the editor window: a MemoryHost holds the
REPL buffer, the prompt edits the input region at its bottom, and every
line the session appends above the next input is printed with the style of
its highlight group.

Keys:
    Enter       submit the statement
    c-j         continue the statement on a new marker line
    c-p / c-n   previous / next history entry
    Tab         complete
    c-d         exit
"""

from __future__ import annotations

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from rich.console import Console

from neorepl.__version__ import __version__
from neorepl.core.config import ReplConfig
from neorepl.core.host import MemoryHost
from neorepl.core.session import Session
from neorepl.frontends.cli.completer import SessionCompleter
from neorepl.frontends.cli.display import buffer_lines, print_lines, print_welcome

logger = logging.getLogger(__name__)

PROMPT = ">>> "


class TerminalRepl:
    """Drives one session from a prompt_toolkit prompt.

    The input region runs from input_start to the last buffer line. It is
    written back into the buffer before anything that reads it (submitting,
    history moves).
    """

    def __init__(self, config: ReplConfig | None = None, console: Console | None = None) -> None:
        self.host = MemoryHost()
        self.session = Session.create(self.host, config or ReplConfig())
        self.console = console or Console()
        self.input_start = 1

    @property
    def bufnr(self) -> int:
        return self.session.bufnr

    def input_text(self) -> str:
        """Current input region as prompt text."""
        return "\n".join(self.host.get_lines(self.bufnr, self.input_start - 1, -1))

    def write_input(self, text: str) -> None:
        """Replace the input region with text and put the cursor at its end."""
        lines = text.split("\n")
        self.host.set_lines(self.bufnr, self.input_start - 1, -1, lines)
        row = self.input_start + len(lines) - 1
        self.host.set_cursor(row, len(lines[-1]))

    def submit(self, text: str) -> None:
        """Evaluate text as typed at the prompt and print what it produced."""
        self.write_input(text)
        submitted_end = self.host.line_count(self.bufnr)

        outcome = self.session.eval_line()
        if not self.session.valid:
            return
        if outcome.command == "clear":
            self.console.clear()
            self.input_start = 1
            return

        statement = self.session.get_line()
        row, _ = self.host.get_cursor()
        self.input_start = statement.start if statement else row
        print_lines(
            self.console,
            buffer_lines(self.session, submitted_end + 1, self.input_start - 1),
            outputs_only=True,
        )

    def history(self, text: str, backward: bool) -> str:
        """Text of the input region after a history move."""
        self.write_input(text)
        self.session.hist_move(backward)
        return self.input_text()

    def key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        marker = self.session.marker

        @kb.add("c-j")
        def _(event: KeyPressEvent) -> None:
            event.current_buffer.insert_text("\n" + marker)

        @kb.add("c-p")
        def _(event: KeyPressEvent) -> None:
            text = self.history(event.current_buffer.text, backward=True)
            event.current_buffer.document = Document(text, len(text))

        @kb.add("c-n")
        def _(event: KeyPressEvent) -> None:
            text = self.history(event.current_buffer.text, backward=False)
            event.current_buffer.document = Document(text, len(text))

        return kb

    def run(self) -> None:
        """Prompt until /quit, c-d or c-c at an empty prompt."""
        prompt: PromptSession[str] = PromptSession(
            completer=SessionCompleter(self.session),
            complete_while_typing=False,
            key_bindings=self.key_bindings(),
        )
        print_welcome(self.console, self.session, __version__)

        while self.session.valid:
            try:
                text = prompt.prompt(PROMPT, default=self.input_text())
            except KeyboardInterrupt:
                self.write_input("")
                continue
            except EOFError:
                break
            self.submit(text)

        logger.debug("terminal repl finished")


def run_interactive(config: ReplConfig | None = None) -> None:
    TerminalRepl(config).run()
