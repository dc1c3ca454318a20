"""Provide exceptions used by libshell.

libshell.exc
~~~~~~~~~~~~

Errors raised while *configuring* a :class:`libshell.shell.Shell`, and the
stream errors the framer raises internally.

Notes
-----
Stream errors never leave :meth:`libshell.shell.Shell.run`. The engine turns
them into :attr:`libshell.engine.AttemptOutcome.IO_ERROR` and moves on to the
next attempt, so callers inspect
:meth:`libshell.result.ShellResult.was_successful` instead of catching.
"""

from __future__ import annotations


class LibShellException(Exception):
    """Base exception for all libshell errors."""


class ConfigurationError(LibShellException, ValueError):
    """Raised if a builder call would leave the shell in an unusable state."""


class EmptyAttemptList(ConfigurationError):
    """Raised if a logical command would be queued without any attempt."""

    def __init__(self, *args: object) -> None:
        super().__init__("A command requires at least one attempt")


class EmptyResultCodes(ConfigurationError):
    """Raised if no exit code would be accepted as success."""

    def __init__(self, *args: object) -> None:
        super().__init__("At least one result code must be accepted")


class StreamFailure(LibShellException, OSError):
    """Base exception for failures talking to the shell session."""


class StreamClosed(StreamFailure, ConnectionError):
    """Raised if the shell output ends before a response frame is complete."""

    def __init__(self, attempt: str | None = None, *args: object) -> None:
        if attempt is not None:
            super().__init__(f"Shell stream closed while running: {attempt}")
        else:
            super().__init__("Shell stream closed unexpectedly")
