"""Tests running libshell against a real ``sh`` process.

IMPORTANT: These use a REAL shell - no scripted responses!
"""

from __future__ import annotations

import typing as t

from libshell.config import ShellConfig
from libshell.shell import Shell

if t.TYPE_CHECKING:
    from libshell.streams import ShellStreams


def test_sh_echo(sh_streams: ShellStreams) -> None:
    """Output and status of a real command are framed correctly."""
    result = Shell(sh_streams).run("echo hello")

    assert result.was_successful()
    assert result.exit_code == 0
    assert result.lines == ["hello"]
    assert result.get_command_number(0) == 0


def test_sh_output_without_newline(sh_streams: ShellStreams) -> None:
    """Output lacking a trailing newline stays off the sentinel line."""
    result = Shell(sh_streams).run("printf 'no newline'")

    assert result.was_successful()
    assert result.lines == ["no newline"]


def test_sh_exit_status(sh_streams: ShellStreams) -> None:
    """Non-zero statuses from the shell are reported."""
    result = Shell(sh_streams).run("(exit 3)")

    assert not result.was_successful()
    assert result.exit_code == 3


def test_sh_accepted_codes(sh_streams: ShellStreams) -> None:
    """A configured non-zero status counts as success."""
    result = Shell(sh_streams).set_result_codes(0, 1).run("false")

    assert result.was_successful()
    assert result.exit_code == 1


def test_sh_fallback_attempts(sh_streams: ShellStreams) -> None:
    """Missing binaries fall through to the bare attempt."""
    config = ShellConfig(binaries=("libshell-missing-binary",))
    shell = Shell(sh_streams, config)

    result = shell.build_commands("%binary echo fallback").run()

    assert result.was_successful()
    assert result.lines == ["fallback"]
    assert result.get_command_number(0) == 1


def test_sh_multiple_commands(sh_streams: ShellStreams) -> None:
    """Several commands share the session and its state."""
    shell = Shell(sh_streams)

    result = shell.add_commands("LIBSHELL_VALUE=42", "echo $LIBSHELL_VALUE").run()

    assert result.was_successful()
    assert result.as_string().strip() == "42"
    assert result.command_numbers == (0, 0)


def test_sh_abort_on_failure(sh_streams: ShellStreams) -> None:
    """A failing command stops the run before later commands."""
    shell = Shell(sh_streams)

    result = shell.add_commands("echo one", "false", "echo three").run()

    assert not result.was_successful()
    assert result.exit_code == 1
    assert result.lines == ["one"]
    assert result.get_command_number(1) == -1


def test_sh_session_survives_runs(sh_streams: ShellStreams) -> None:
    """Consecutive runs keep reading in step with the shell."""
    shell = Shell(sh_streams)

    for value in range(5):
        result = shell.run(f"echo {value}")
        assert result.lines == [str(value)]


def test_sh_multiline_output(sh_streams: ShellStreams) -> None:
    """Multi-line output comes back line by line."""
    result = Shell(sh_streams).run("printf 'a\\nb\\n\\nc\\n'")

    assert result.lines == ["a", "b", "", "c"]
