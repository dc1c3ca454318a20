"""Stream pair bound to one live shell session.

libshell.streams
~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import codecs
import dataclasses
import io
import logging
import threading
import typing as t
import weakref

from .constants import DEFAULT_ENCODING

if t.TYPE_CHECKING:
    import subprocess

logger = logging.getLogger(__name__)

_session_locks: weakref.WeakKeyDictionary[t.Any, threading.Lock] = (
    weakref.WeakKeyDictionary()
)
_session_locks_guard = threading.Lock()


def session_lock(writer: t.Any) -> threading.Lock:
    """Return the run lock of the session fed through ``writer``.

    The lock is keyed on the writer object, so every wrapper built over the
    same stdin shares it.

    >>> import io
    >>> writer = io.BytesIO()
    >>> session_lock(writer) is session_lock(writer)
    True
    >>> session_lock(writer) is session_lock(io.BytesIO())
    False
    """
    with _session_locks_guard:
        try:
            lock = _session_locks.get(writer)
        except TypeError:
            # Neither weak-referenceable nor hashable: the wrapper owns the lock
            return threading.Lock()
        if lock is None:
            lock = threading.Lock()
            try:
                _session_locks[writer] = lock
            except TypeError:
                logger.debug("Writer %r cannot be weakly referenced", writer)
        return lock


def is_byte_stream(stream: t.Any) -> bool:
    """Return True if ``stream`` takes bytes rather than text.

    >>> import codecs, io
    >>> is_byte_stream(io.BytesIO())
    True
    >>> is_byte_stream(io.StringIO())
    False
    >>> is_byte_stream(codecs.getwriter("utf-8")(io.BytesIO()))
    False
    """
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    if isinstance(stream, (io.TextIOBase, codecs.StreamWriter)):
        return False
    return "b" in str(getattr(stream, "mode", ""))


@dataclasses.dataclass(eq=False)
class ShellStreams:
    """Readable and writable ends of a shell session, plus the lock guarding them.

    A shell session is one ordered conversation. :attr:`lock` belongs to the
    session's writer: every :class:`libshell.shell.Shell`, and every
    ``ShellStreams`` built over the same writer, shares it, and a run holds
    it from its first attempt to its last.

    Starting and stopping the shell process is left to the caller.

    Parameters
    ----------
    reader : IO[str]
        Line-oriented text stream carrying the shell's standard output.
    writer : IO[bytes] | IO[str]
        Stream feeding the shell's standard input. Text written to a byte
        stream is encoded with ``encoding``.
    encoding : str
        Encoding used for byte writers unless a write asks for another one.

    Examples
    --------
    >>> import io
    >>> writer = io.BytesIO()
    >>> streams = ShellStreams(io.StringIO("hello\\n"), writer)
    >>> streams.write("echo hello\\n")
    >>> writer.getvalue()
    b'echo hello\\n'
    >>> streams.readline()
    'hello\\n'
    >>> streams.readline()
    ''
    >>> streams.lock is ShellStreams(io.StringIO(), writer).lock
    True
    """

    reader: t.IO[str]
    writer: t.IO[t.Any]
    encoding: str = DEFAULT_ENCODING
    lock: threading.Lock = dataclasses.field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.lock is None:
            self.lock = session_lock(self.writer)

    def write(self, text: str, encoding: str | None = None) -> None:
        """Write ``text`` to the shell and flush it.

        ``encoding`` overrides :attr:`encoding` for byte writers.
        """
        if is_byte_stream(self.writer):
            self.writer.write(text.encode(encoding or self.encoding))
        else:
            self.writer.write(text)
        self.writer.flush()

    def readline(self) -> str:
        """Return the next line of shell output, ``""`` once the stream ends."""
        return self.reader.readline()

    @classmethod
    def from_popen(
        cls,
        proc: subprocess.Popen[t.Any],
        encoding: str = DEFAULT_ENCODING,
    ) -> ShellStreams:
        """Wrap the pipes of an already started shell process.

        The process must have been started with ``stdin=PIPE`` and
        ``stdout=PIPE``. A binary stdout is wrapped in a new
        :class:`io.TextIOWrapper` on every call, and wrappers read ahead, so
        call this once per process and share the result.
        """
        if proc.stdin is None or proc.stdout is None:
            msg = "Shell process needs both stdin and stdout pipes"
            raise ValueError(msg)

        reader = proc.stdout
        if not isinstance(reader, io.TextIOBase):
            reader = io.TextIOWrapper(reader, encoding=encoding)

        logger.debug("Attached to shell process %s", proc.pid)
        return cls(reader=reader, writer=proc.stdin, encoding=encoding)
