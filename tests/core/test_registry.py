"""Tests for SessionRegistry."""

from __future__ import annotations

import pytest

from neorepl.core.config import ReplConfig
from neorepl.core.errors import ConfigError
from neorepl.core.host import MemoryHost
from neorepl.core.registry import SessionRegistry


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_open_registers(self, host):
        """open() creates a session and looks it up by buffer."""
        registry = SessionRegistry()
        session = registry.open(host)
        assert registry.has(session.bufnr)
        assert registry.get(session.bufnr) is session
        assert len(registry) == 1

    def test_sessions_are_independent(self, host):
        """Each session has its own buffer and history."""
        registry = SessionRegistry()
        first = registry.open(host)
        second = registry.open(host, ReplConfig(lang="vim"))
        assert first.bufnr != second.bufnr
        assert first.hist is not second.hist
        assert registry.sessions() == [first, second]

    def test_invalid_config_registers_nothing(self, host):
        """A failed open leaves the registry untouched."""
        registry = SessionRegistry()
        with pytest.raises(ConfigError):
            registry.open(host, ReplConfig(buffer=77))
        assert len(registry) == 0

    def test_quit_removes_session(self, host):
        """Closing a session unregisters it."""
        registry = SessionRegistry()
        session = registry.open(host)
        host.set_lines(session.bufnr, 0, 1, ["/quit"])
        session.eval_line()
        assert not registry.has(session.bufnr)

    def test_teardown(self):
        """Buffers deleted by the host are forgotten."""
        host = MemoryHost()
        registry = SessionRegistry()
        session = registry.open(host)
        host.close_buffer(session.bufnr)
        registry.teardown(session.bufnr)
        assert registry.get(session.bufnr) is None
        assert session.on_close is None

    def test_remove_unknown(self):
        """Removing an unknown buffer returns None."""
        assert SessionRegistry().remove(5) is None
