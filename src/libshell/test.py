"""Helper methods for testing code built on libshell.

libshell.test
~~~~~~~~~~~~~

"""

from __future__ import annotations

import collections
import dataclasses
import io
import logging
import threading
import typing as t

from .constants import DEFAULT_ENCODING, SENTINEL
from .streams import ShellStreams

logger = logging.getLogger(__name__)

#: Exit code a POSIX shell reports for an unknown command
COMMAND_NOT_FOUND_STATUS = 127


@dataclasses.dataclass(frozen=True)
class ScriptedResponse:
    """Canned answer of a :class:`ScriptedShell` to one attempt."""

    lines: tuple[str, ...] = ()
    exit_code: int = 0
    #: Stop answering after echoing the output, as if the shell died
    hang_up: bool = False


class _ScriptedStdin(io.RawIOBase):
    """Shell stdin that hands complete frames to :class:`ScriptedShell`."""

    def __init__(self, shell: ScriptedShell) -> None:
        self._shell = shell
        self._buffer = ""

    def writable(self) -> bool:
        return True

    def write(self, data: t.Any) -> int:
        if self._shell.broken:
            msg = "Broken pipe"
            raise BrokenPipeError(msg)
        self._buffer += bytes(data).decode(self._shell.encoding)
        trailer = self._shell.trailer
        while trailer in self._buffer:
            attempt, self._buffer = self._buffer.split(trailer, 1)
            self._shell._answer(attempt)
        return len(data)


class _ScriptedStdout(io.TextIOBase):
    """Shell stdout fed by :class:`ScriptedShell` answers."""

    def __init__(self) -> None:
        self.pending: collections.deque[str] = collections.deque()

    def readable(self) -> bool:
        return True

    def readline(self, size: int | None = -1) -> str:
        if not self.pending:
            return ""
        return self.pending.popleft()


class ScriptedShell:
    """In-memory stand-in for a shell session speaking the sentinel protocol.

    Attempts it has no response for exit with status 127 and print nothing,
    like an unknown command whose stderr was discarded.

    Examples
    --------
    >>> from libshell.shell import Shell
    >>> session = ScriptedShell()
    >>> session.respond("cat /proc/version", "Linux version 4.9.0")
    >>> session.respond("false", exit_code=1)

    >>> shell = Shell(session.streams)
    >>> result = shell.add_commands("cat /proc/version", "false").run()
    >>> result.was_successful()
    False
    >>> result.exit_code
    1
    >>> result.lines
    ['Linux version 4.9.0']
    """

    def __init__(
        self,
        sentinel: str = SENTINEL,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.sentinel = sentinel
        self.encoding = encoding
        self.responses: dict[str, ScriptedResponse] = {}
        #: Attempts received, in order
        self.transmitted: list[str] = []
        #: Writes fail with :exc:`BrokenPipeError` while set
        self.broken = False
        self._lock = threading.Lock()
        self.stdin = _ScriptedStdin(self)
        self.stdout = _ScriptedStdout()
        self.streams = ShellStreams(
            reader=self.stdout,
            writer=self.stdin,
            encoding=encoding,
        )

    @property
    def trailer(self) -> str:
        """Status trailer following each attempt on the wire."""
        return (
            "\nstatus=$? && echo ''\n"
            f"echo {self.sentinel}\n"
            "echo $status\n"
            f"echo {self.sentinel}\n"
        )

    def respond(
        self,
        attempt: str,
        *lines: str,
        exit_code: int = 0,
        hang_up: bool = False,
    ) -> None:
        """Answer ``attempt`` with ``lines`` of output and ``exit_code``."""
        self.responses[attempt] = ScriptedResponse(
            lines=lines,
            exit_code=exit_code,
            hang_up=hang_up,
        )

    def _answer(self, attempt: str) -> None:
        with self._lock:
            self.transmitted.append(attempt)
            response = self.responses.get(
                attempt,
                ScriptedResponse(exit_code=COMMAND_NOT_FOUND_STATUS),
            )
            logger.debug("Scripted answer to %r: %r", attempt, response)

            out = [f"{line}\n" for line in response.lines]
            out.append("\n")
            if not response.hang_up:
                out += [
                    f"{self.sentinel}\n",
                    f"{response.exit_code}\n",
                    f"{self.sentinel}\n",
                ]
            self.stdout.pending.extend(out)
