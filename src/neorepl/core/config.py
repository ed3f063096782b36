"""REPL configuration.

ReplConfig collects every option a session recognizes. Values are checked
once, at construction, so the session itself never has to re-validate them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Literal

from neorepl.core.errors import ConfigError

logger = logging.getLogger(__name__)

LANGUAGES = ("python", "vim")
MAX_INDENT = 32
DEFAULT_HISTORY_SIZE = 100

# Alternate spellings accepted by from_mapping()
_ALIASES = {
    "history size": "history_size",
    "history-size": "history_size",
    "no-defaults": "no_defaults",
}


@dataclass
class ReplConfig:
    """Options for a REPL session.

    Attributes:
        lang: Language evaluated by default ("python" or "vim").
        buffer: Context buffer (number or name), 0 for none.
        window: Context window id, 0 for none.
        indent: Number of spaces prefixed to every output line (0-32).
        redraw: Redraw the host after each evaluation.
        inspect: Render values with rich's pretty printer instead of repr().
        history_size: Capacity of the history ring.
        no_defaults: Skip the default key mappings.
        prefix: Character that starts a meta-command.
        marker: Character that marks a continuation line.
    """

    lang: Literal["python", "vim"] = "python"
    buffer: int | str = 0
    window: int = 0
    indent: int = 0
    redraw: bool = True
    inspect: bool = True
    history_size: int = DEFAULT_HISTORY_SIZE
    no_defaults: bool = False
    prefix: str = "/"
    marker: str = "\\"

    def __post_init__(self) -> None:
        if self.lang not in LANGUAGES:
            raise ConfigError(f"lang must be one of {', '.join(LANGUAGES)}, got {self.lang!r}")

        for name in ("window", "indent", "history_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")

        if isinstance(self.buffer, bool) or not isinstance(self.buffer, (int, str)):
            raise ConfigError(f"buffer must be a number or a name, got {self.buffer!r}")
        if isinstance(self.buffer, int) and self.buffer < 0:
            raise ConfigError("buffer must not be negative")
        if self.window < 0:
            raise ConfigError("window must not be negative")
        if not 0 <= self.indent <= MAX_INDENT:
            raise ConfigError(f"indent must be between 0 and {MAX_INDENT}")
        if self.history_size < 1:
            raise ConfigError("history_size must be at least 1")

        for name in ("redraw", "inspect", "no_defaults"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a boolean")

        for name in ("prefix", "marker"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1 or value.isspace():
                raise ConfigError(f"{name} must be a single non-blank character")
        if self.prefix == self.marker:
            raise ConfigError("prefix and marker must differ")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> ReplConfig:
        """Build a config from loosely keyed options (plugin or CLI input).

        Unknown keys are ignored with a warning. None values fall back to
        the defaults.

        Raises:
            ConfigError: If a recognized option has an invalid value.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _ALIASES.get(key, key)
            if name not in known:
                logger.warning("Ignoring unknown option: %s", key)
                continue
            if value is not None:
                kwargs[name] = value
        return cls(**kwargs)
