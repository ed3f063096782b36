"""neorepl error types.

Errors reported inline in the REPL buffer (bad commands, stale context,
evaluator failures) never surface as exceptions. These types cover the
cases that happen outside an evaluation: configuration and host failures.
"""

from __future__ import annotations


class NeoreplError(Exception):
    """Base error for neorepl."""


class ConfigError(NeoreplError):
    """Invalid REPL configuration.

    Raised when:
    - An option has the wrong type or is out of range
    - The initial context buffer or window does not exist
    """


class HostError(NeoreplError):
    """The hosting editor surface could not perform an operation.

    Raised when:
    - A buffer number does not refer to a live buffer
    - No Ex command interpreter is attached to the host
    """
