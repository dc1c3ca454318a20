"""libshell pytest plugin."""

from __future__ import annotations

import logging
import shutil
import subprocess
import typing as t

import pytest

from libshell.shell import Shell
from libshell.streams import ShellStreams
from libshell.test import ScriptedShell

if t.TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


@pytest.fixture
def scripted_shell() -> ScriptedShell:
    """Return a fresh :class:`libshell.test.ScriptedShell`.

    >>> scripted_shell.respond("id -u", "0")
    >>> Shell(scripted_shell.streams).run("id -u").lines
    ['0']
    """
    return ScriptedShell()


@pytest.fixture
def shell_streams(scripted_shell: ScriptedShell) -> ShellStreams:
    """Return the :class:`libshell.streams.ShellStreams` of :func:`scripted_shell`."""
    return scripted_shell.streams


@pytest.fixture
def shell(shell_streams: ShellStreams) -> Shell:
    """Return a :class:`libshell.shell.Shell` over :func:`shell_streams`."""
    return Shell(shell_streams)


@pytest.fixture
def sh_streams() -> Iterator[ShellStreams]:
    """Yield streams bound to a real ``sh`` process, skipping if there is none.

    The process is closed when the test finishes.
    """
    sh = shutil.which("sh")
    if sh is None:
        pytest.skip("sh not found")

    proc = subprocess.Popen(
        [sh],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
    )
    logger.debug("Started %s as pid %s", sh, proc.pid)
    try:
        yield ShellStreams.from_popen(proc)
    finally:
        if proc.stdin is not None:
            proc.stdin.close()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
        if proc.stdout is not None:
            proc.stdout.close()
