"""CLI frontend for neorepl.

Commands:
    neorepl repl        Interactive REPL in the terminal
    neorepl run FILE    Evaluate a file statement by statement

Example:
    $ neorepl repl --indent 2
    $ neorepl run session.repl
"""

from neorepl.frontends.cli.main import main

__all__ = ["main"]
