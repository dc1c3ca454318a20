r"""Sentinel framing spoken with the shell session.

libshell.framing
~~~~~~~~~~~~~~~~

Every attempt is sent followed by a fixed trailer that makes the shell print
an empty line, the sentinel, the attempt's exit status and the sentinel
again::

    df -h 2>/dev/null
    status=$? && echo ''
    echo EOL:a00c38d8:EOL
    echo $status
    echo EOL:a00c38d8:EOL

Everything before the first sentinel is the attempt's output. The status sits
between the two sentinels.

Notes
-----
The sentinel is sent unescaped. Output that itself contains the sentinel
text ends the frame early and leaves the rest of the response on the stream,
so the exit code and the following attempts are misread.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import typing as t

from . import exc
from .constants import SENTINEL, UNKNOWN_EXIT_CODE

if t.TYPE_CHECKING:
    from .streams import ShellStreams

logger = logging.getLogger(__name__)

_STATUS_LINE = re.compile(r"[+-]?[0-9]+")


def build_frame(attempt: str, sentinel: str = SENTINEL) -> str:
    r"""Return the text written to the shell for one attempt.

    The empty ``echo`` keeps the sentinel on a line of its own when the
    attempt prints no trailing newline.

    >>> print(build_frame("id -u"), end="")
    id -u
    status=$? && echo ''
    echo EOL:a00c38d8:EOL
    echo $status
    echo EOL:a00c38d8:EOL
    """
    return (
        f"{attempt}\n"
        "status=$? && echo ''\n"
        f"echo {sentinel}\n"
        "echo $status\n"
        f"echo {sentinel}\n"
    )


def parse_status(line: str) -> int | None:
    """Return the exit status carried by ``line``, or ``None`` for noise.

    >>> parse_status("0")
    0
    >>> parse_status(" 127 ")
    127
    >>> parse_status("-1")
    -1
    >>> parse_status("sh: 1: status: not found") is None
    True
    >>> parse_status("") is None
    True
    """
    stripped = line.strip()
    if not _STATUS_LINE.fullmatch(stripped):
        return None
    return int(stripped)


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


@dataclasses.dataclass(frozen=True)
class Frame:
    """Response to one attempt.

    Attributes
    ----------
    lines : list[str]
        Output printed before the first sentinel, newlines removed.
    exit_code : int
        Last integer seen between the sentinels, ``-1`` if there was none.
    """

    lines: list[str]
    exit_code: int = UNKNOWN_EXIT_CODE


class FrameReader:
    r"""Read response frames from the shell's output stream.

    Examples
    --------
    >>> import io
    >>> stdout = io.StringIO(
    ...     "Filesystem  Size\n"
    ...     "/dev/root  1.2G\n"
    ...     "\n"
    ...     "EOL:a00c38d8:EOL\n"
    ...     "0\n"
    ...     "EOL:a00c38d8:EOL\n"
    ... )
    >>> frame = FrameReader(stdout).read_frame()
    >>> frame.lines
    ['Filesystem  Size', '/dev/root  1.2G', '']
    >>> frame.exit_code
    0
    """

    def __init__(self, stdout: t.IO[str], sentinel: str = SENTINEL) -> None:
        self.stdout = stdout
        self.sentinel = sentinel

    def _readline(self, attempt: str | None) -> str:
        line = self.stdout.readline()
        if not line:  # EOF
            raise exc.StreamClosed(attempt)
        return _strip_newline(line)

    def read_frame(self, attempt: str | None = None) -> Frame:
        """Read one attempt's output and exit status.

        Parameters
        ----------
        attempt : str, optional
            Attempt the frame answers, used in error messages.

        Raises
        ------
        libshell.exc.StreamClosed
            If the stream ends before the closing sentinel.
        """
        lines: list[str] = []

        # Output, up to the opening sentinel
        while True:
            line = self._readline(attempt)
            if self.sentinel in line:
                break
            lines.append(line)

        # Status, up to the closing sentinel. It must always be consumed, or
        # the leftovers are read as the next attempt's output.
        exit_code = UNKNOWN_EXIT_CODE
        while True:
            line = self._readline(attempt)
            if self.sentinel in line:
                break
            status = parse_status(line)
            if status is None:
                logger.debug("Ignoring non-numeric status line %r", line)
                continue
            exit_code = status

        return Frame(lines=lines, exit_code=exit_code)


class ProtocolFramer:
    """Send attempts to a shell session and read back their frames.

    Parameters
    ----------
    streams : :class:`libshell.streams.ShellStreams`
        Session to talk to. The caller holds ``streams.lock``.
    sentinel : str
        Marker bracketing the exit status.
    encoding : str, optional
        Encoding for byte writers, the stream pair's own when omitted.
    """

    def __init__(
        self,
        streams: ShellStreams,
        sentinel: str = SENTINEL,
        encoding: str | None = None,
    ) -> None:
        self.streams = streams
        self.sentinel = sentinel
        self.encoding = encoding
        self.reader = FrameReader(streams.reader, sentinel=sentinel)

    def send(self, attempt: str) -> None:
        """Write ``attempt`` and its status trailer to the shell."""
        self.streams.write(build_frame(attempt, self.sentinel), self.encoding)

    def exchange(self, attempt: str) -> Frame:
        """Run ``attempt`` in the shell and return its :class:`Frame`."""
        self.send(attempt)
        return self.reader.read_frame(attempt)
