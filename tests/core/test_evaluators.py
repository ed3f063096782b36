"""Tests for the Python and Vim evaluators."""

from __future__ import annotations

import pytest

from neorepl.core.errors import HostError
from neorepl.core.evaluators.base import MSG_BUFFER_INVALID, MSG_CANCELLED, MSG_WINDOW_INVALID, split_lines
from neorepl.core.host import MemoryHost
from neorepl.core.session import Session
from neorepl.core.types import OutcomeKind


class TestPythonEvaluator:
    """Tests for PythonEvaluator through a session."""

    def test_expression_value(self, submit, buffer, session):
        """Expression values are shown in the value class."""
        submit("1 + 1")
        assert buffer() == ["1 + 1", "2", ""]
        assert session.ranges.highlight_at(2) == "neoreplValue"

    def test_statements_keep_namespace(self, submit, buffer):
        """Assignments persist and produce no output."""
        submit("x = 5")
        submit("x * 2")
        assert buffer() == ["x = 5", "x * 2", "10", ""]

    def test_last_value(self, submit, buffer):
        """The last shown value is bound to _."""
        submit("20")
        submit("_ + 1")
        assert buffer()[-2] == "21"

    def test_none_is_not_shown(self, submit, buffer):
        """None values produce no line."""
        submit("None")
        assert buffer() == ["None", ""]

    def test_captured_stdout(self, submit, buffer, session):
        """Printed text comes before the value, in the output class."""
        submit("print('a') or 3")
        assert buffer() == ["print('a') or 3", "a", "3", ""]
        assert session.ranges.highlight_at(2) == "neoreplOutput"
        assert session.ranges.highlight_at(3) == "neoreplValue"

    def test_output_kept_on_error(self, submit, buffer):
        """Output printed before an exception is still shown."""
        submit("print('before'); 1/0")
        assert buffer()[1] == "before"
        assert buffer()[-2] == "ZeroDivisionError: division by zero"

    def test_traceback_without_machinery(self, submit, buffer, session):
        """Tracebacks only show the evaluated program's frames."""
        submit("1/0")
        lines = buffer()[1:-1]
        assert lines[0] == "Traceback (most recent call last):"
        assert lines[-1] == "ZeroDivisionError: division by zero"
        assert not any("evaluators" in line for line in lines)
        assert session.ranges.highlight_at(2) == "neoreplError"

    def test_syntax_error(self, submit, buffer):
        """Syntax errors are reduced to one line."""
        submit(")")
        assert buffer()[1].startswith("SyntaxError: ")
        assert len(buffer()) == 3

    def test_incomplete_input_breaks_line(self, submit, buffer, session):
        """Incomplete input continues on a marker line instead of failing."""
        outcome = submit("def f():")
        assert outcome.kind == OutcomeKind.EVALUATED
        assert not outcome.new_line
        assert buffer() == ["def f():", "\\"]
        assert session.host.get_cursor() == (2, 1)

    def test_completing_incomplete_input(self, submit, buffer, session):
        """Text typed on the marker line completes the statement."""
        submit("def f():")
        host = session.host
        host.set_lines(session.bufnr, 1, 2, ["\\    return 42"])
        host.set_cursor(2, 14)
        session.eval_line()
        submit("f()")
        assert buffer() == ["def f():", "\\    return 42", "f()", "42", ""]

    def test_compound_statement_on_one_line(self, submit, buffer):
        """Complete compound statements run without a trailing blank line."""
        submit("for i in range(2): print(i)")
        assert buffer() == ["for i in range(2): print(i)", "0", "1", ""]

    def test_pretty_printing(self, submit, buffer, session):
        """Long values are pretty-printed when inspect is on."""
        submit("list(range(40))")
        assert len(buffer()) > 3

        session.inspect = False
        submit("list(range(40))")
        assert buffer()[-2] == repr(list(range(40)))

    def test_session_in_namespace(self, submit, buffer, session):
        """The session is reachable as repl."""
        session.indent = 0
        submit("repl.indent = 2")
        assert session.indent == 2
        submit("repl.bufnr")
        assert buffer()[-2] == f"  {session.bufnr}"

    def test_host_globals_in_namespace(self, host, monkeypatch):
        """Names provided by the host are bound for Python code."""
        monkeypatch.setattr(host, "python_globals", lambda: {"editor": "memory"})
        session = Session.create(host)
        assert session.evaluators["python"].namespace["editor"] == "memory"
        assert session.evaluators["python"].namespace["repl"] is session

    def test_failure_keeps_state(self, submit, buffer, session):
        """A failed evaluation leaves history and ranges usable."""
        submit("1/0")
        submit("2")
        assert session.hist.entries() == [["1/0"], ["2"]]
        assert buffer()[-2] == "2"
        highlights = [r.highlight for r in session.ranges.ranges()]
        assert highlights == ["neoreplError", "neoreplValue"]

    def test_system_exit_is_reported(self, submit, buffer, session):
        """raise SystemExit shows an error and the session keeps going."""
        submit("raise SystemExit(3)")
        assert buffer()[-2] == "SystemExit: 3"
        assert session.ranges.highlight_at(len(buffer()) - 1) == "neoreplError"

        submit("1 + 1")
        assert session.valid
        assert buffer()[-2:] == ["2", ""]

    def test_exit_builtin(self, submit, buffer, session):
        """exit() does not end the session."""
        submit("exit()")
        assert buffer()[-2] == "SystemExit"

        submit("1 + 1")
        assert buffer()[-2:] == ["2", ""]
        assert session.hist.entries() == [["exit()"], ["1 + 1"]]

    def test_keyboard_interrupt(self, submit, buffer):
        """An interrupt raised by the program is reported like an error."""
        submit("raise KeyboardInterrupt")
        assert buffer()[-2] == "KeyboardInterrupt"

    def test_completion(self, submit, session):
        """Names and attributes complete from the namespace."""
        submit("import os")
        evaluator = session.evaluators["python"]

        start, candidates = evaluator.complete("x = os.pa")
        assert start == 5
        assert "os.path" in candidates

        start, candidates = evaluator.complete("pri")
        assert start == 1
        assert "print(" in candidates

    def test_completion_without_word(self, session):
        """No identifier before the cursor means no candidates."""
        assert session.evaluators["python"].complete("1 + ") == (None, [])


class TestEvalContext:
    """Tests for context validation and redirection."""

    def test_redirects_to_context_buffer(self, submit, buffer, session):
        """Code runs with the context buffer current, then it is restored."""
        host = session.host
        other = host.create_buffer("notes.txt")
        session.buffer = other
        submit("repl.host.current_buffer")
        assert buffer()[-2] == str(other)
        assert host.current_buffer == session.bufnr

    def test_stale_buffer(self, submit, buffer, session):
        """A deleted context buffer is reset and the evaluation cancelled."""
        host = session.host
        session.buffer = host.create_buffer()
        host.close_buffer(session.buffer)

        submit("1")
        assert session.buffer == 0
        assert buffer() == ["1", MSG_BUFFER_INVALID, MSG_CANCELLED, ""]

    def test_stale_window(self, submit, buffer, session):
        """A closed context window is reset the same way."""
        session.window = 4242
        submit("1")
        assert session.window == 0
        assert buffer() == ["1", MSG_WINDOW_INVALID, MSG_CANCELLED, ""]

    def test_redraw_after_evaluation(self, submit, session):
        """The host is redrawn unless redraw is off."""
        host = session.host
        submit("1")
        assert host.redraw_count == 1
        session.redraw = False
        submit("1")
        assert host.redraw_count == 1


class TestVimEvaluator:
    """Tests for VimEvaluator with a stub command runner."""

    def make_session(self, runner=None, completer=None) -> Session:
        host = MemoryHost(command_runner=runner, command_completer=completer)
        session = Session.create(host)
        session.vim_mode = True
        return session

    def submit(self, session: Session, text: str) -> list[str]:
        session.host.set_lines(session.bufnr, -2, -1, [text])
        session.host.set_cursor(session.host.line_count(session.bufnr), len(text))
        session.eval_line()
        return session.host.get_lines(session.bufnr, 0, -1)

    def test_output(self):
        """Command output becomes output lines, blank lines dropped."""
        session = self.make_session(runner=lambda src: f"\nran {src}\n\n")
        assert self.submit(session, "echo 1") == ["echo 1", "ran echo 1", ""]

    def test_multiline_program(self):
        """Continuation lines are joined with newlines."""
        seen = []
        session = self.make_session(runner=lambda src: seen.append(src) or "")
        session.host.set_lines(session.bufnr, 0, 1, ["let x = [1,", "\\2]"])
        session.host.set_cursor(2, 3)
        session.eval_line()
        assert seen == ["let x = [1,\n2]"]

    def test_error_noise_removed(self):
        """Host error prefixes are stripped from the message."""

        def runner(src: str) -> str:
            raise HostError("nvim_exec2(): Vim(echo):E121: Undefined variable: x")

        session = self.make_session(runner=runner)
        lines = self.submit(session, "echo x")
        assert lines[1] == "E121: Undefined variable: x"

    def test_no_interpreter(self):
        """Without a command runner the error is reported inline."""
        session = self.make_session()
        lines = self.submit(session, "echo 1")
        assert lines[1] == "no Ex command interpreter attached"

    def test_completion(self):
        """Completion asks the host and starts at the last word."""
        session = self.make_session(completer=lambda text: ["echo", "echohl"])
        evaluator = session.evaluators["vim"]
        assert evaluator.complete("ec") == (1, ["echo", "echohl"])
        assert evaluator.complete("call ec")[0] == 6


class TestSplitLines:
    """Tests for split_lines()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", []),
            ("a\n", ["a"]),
            ("a\nb", ["a", "b"]),
            ("a\n\n", ["a", ""]),
        ],
    )
    def test_split(self, text, expected):
        """One trailing newline is dropped."""
        assert split_lines(text) == expected
