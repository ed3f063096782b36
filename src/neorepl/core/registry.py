"""SessionRegistry - the live REPL sessions, keyed by buffer number."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from neorepl.core.config import ReplConfig
from neorepl.core.session import Session

if TYPE_CHECKING:
    from neorepl.core.host import Host

logger = logging.getLogger(__name__)


@dataclass
class SessionRegistry:
    """Maps REPL buffers to their sessions.

    Frontends look sessions up by the buffer a key was pressed in. A session
    removes itself when it is closed with /quit; buffers wiped from outside
    are dropped with teardown().

    Example:
        >>> registry = SessionRegistry()
        >>> session = registry.open(MemoryHost())
        >>> registry.get(session.bufnr) is session
        True
    """

    _sessions: dict[int, Session] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, host: Host, config: ReplConfig | None = None) -> Session:
        """Create a session in a new REPL buffer and register it.

        Raises:
            ConfigError: If the config names an invalid buffer or window.
        """
        session = Session.create(host, config or ReplConfig())
        self.add(session)
        return session

    def add(self, session: Session) -> None:
        self._sessions[session.bufnr] = session
        session.on_close = lambda s: self.remove(s.bufnr)

    def get(self, bufnr: int) -> Session | None:
        return self._sessions.get(bufnr)

    def has(self, bufnr: int) -> bool:
        return bufnr in self._sessions

    def remove(self, bufnr: int) -> Session | None:
        """Unregister a session.

        Returns:
            The removed session, or None if bufnr had none.
        """
        session = self._sessions.pop(bufnr, None)
        if session is not None:
            logger.debug("session_removed: bufnr=%d", bufnr)
        return session

    def teardown(self, bufnr: int) -> None:
        """Forget the session of a buffer that was deleted by the host."""
        session = self.remove(bufnr)
        if session is not None:
            session.on_close = None

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())
