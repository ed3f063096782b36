"""CLI entry point."""

from __future__ import annotations

import sys


def main() -> None:
    """Main entry point for the CLI."""
    import rich_click as click

    from neorepl.core.config import DEFAULT_HISTORY_SIZE, LANGUAGES, MAX_INDENT, ReplConfig
    from neorepl.core.errors import ConfigError
    from neorepl.core.logging_config import configure_logging
    from neorepl.frontends.cli.output import error_exit

    # Configure rich-click styling
    click.rich_click.USE_RICH_MARKUP = True
    click.rich_click.USE_MARKDOWN = True
    click.rich_click.SHOW_ARGUMENTS = True
    click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
    click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
    click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
    click.rich_click.ERRORS_EPILOGUE = ""
    click.rich_click.MAX_WIDTH = 100

    def session_options(f):
        """Options shared by every command that starts a session."""
        f = click.option(
            "--lang",
            "-l",
            type=click.Choice(LANGUAGES),
            default="python",
            show_default=True,
            help="Language evaluated by default",
        )(f)
        f = click.option(
            "--indent",
            "-i",
            type=click.IntRange(0, MAX_INDENT),
            default=0,
            show_default=True,
            help="Spaces prefixed to output lines",
        )(f)
        f = click.option(
            "--history-size",
            type=click.IntRange(1),
            default=DEFAULT_HISTORY_SIZE,
            show_default=True,
            help="Number of statements kept in history",
        )(f)
        f = click.option(
            "--no-inspect",
            is_flag=True,
            help="Show values with repr() instead of the pretty printer",
        )(f)
        return f

    def build_config(lang: str, indent: int, history_size: int, no_inspect: bool) -> ReplConfig:
        try:
            return ReplConfig.from_mapping(
                {
                    "lang": lang,
                    "indent": indent,
                    "history_size": history_size,
                    "inspect": not no_inspect,
                }
            )
        except ConfigError as e:
            error_exit(str(e), code=2)

    # =========================================================================
    # Root CLI
    # =========================================================================
    @click.group()
    @click.version_option(package_name="neorepl")
    @click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default=None,
        help="Diagnostic log level (default: NEOREPL_LOG_LEVEL or WARNING)",
    )
    def cli(log_level: str | None):
        """neorepl - REPL sessions in an editor buffer.

        Type a statement, submit it, and its output is appended below it.
        Lines starting with **\\\\** continue the statement above; lines
        starting with **/** are meta-commands (`/help` lists them).

        **Commands:**

            neorepl repl        Interactive REPL in the terminal

            neorepl run FILE    Evaluate a file statement by statement

        Inside Neovim the same sessions are opened with `:Repl`.
        """
        configure_logging(level=log_level)

    # =========================================================================
    # Commands
    # =========================================================================
    @cli.command()
    @session_options
    def repl(lang: str, indent: int, history_size: int, no_inspect: bool):
        """Interactive REPL in the terminal.

        **Examples:**

            neorepl repl

            neorepl repl --indent 2

            neorepl repl --lang vim
        """
        from neorepl.frontends.cli.repl import run_interactive

        run_interactive(build_config(lang, indent, history_size, no_inspect))

    @cli.command()
    @click.argument("file")
    @session_options
    def run(file: str, lang: str, indent: int, history_size: int, no_inspect: bool):
        """Evaluate FILE statement by statement and print the transcript.

        Exits with status 1 when any statement produced error output.

        **Examples:**

            neorepl run script.repl

            neorepl run script.repl --no-inspect
        """
        from neorepl.frontends.cli.file_runner import run_from_file

        config = build_config(lang, indent, history_size, no_inspect)
        try:
            status = run_from_file(file, config)
        except FileNotFoundError:
            error_exit(f"File not found: {file}")
        sys.exit(status)

    cli()


if __name__ == "__main__":
    main()
