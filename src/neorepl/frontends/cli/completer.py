"""prompt_toolkit completion backed by the session's completion broker."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from neorepl.core.completion import complete_at

if TYPE_CHECKING:
    from neorepl.core.session import Session

logger = logging.getLogger(__name__)


class SessionCompleter(Completer):
    """Completes the current prompt line through a session.

    Candidates replace the text from the broker's offset up to the cursor,
    exactly like the editor popup does.

    Example:
        >>> completer = SessionCompleter(session)
        >>> # User types "/ind" and presses Tab
        >>> # Dropdown shows: indent
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        col = document.cursor_position_col
        result = complete_at(self.session, document.current_line, col)
        if result is None:
            return

        offset, candidates = result
        start_position = min(offset - 1 - col, 0)
        for candidate in candidates:
            yield Completion(text=candidate, start_position=start_position)
