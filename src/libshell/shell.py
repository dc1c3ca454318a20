"""Queue commands and their fallback attempts for a shell session.

libshell.shell
~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import typing as t

from . import exc
from .config import ShellConfig
from .constants import BINARY_PLACEHOLDER, DEFAULT_RESULT_CODES
from .engine import ExecutionEngine

if t.TYPE_CHECKING:
    import sys

    from .result import ShellResult
    from .streams import ShellStreams

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

logger = logging.getLogger(__name__)

AttemptList = tuple[str, ...]


class Shell:
    """Build and run commands in a persistent shell session.

    Commands are queued with the builder methods, which all return the shell
    so calls can be chained, and executed by :meth:`run`. Each queued command
    holds one or more attempts; the first attempt whose exit code is one of
    :attr:`result_codes` wins, and the run stops at the first command where
    none does.

    Whatever happens, :meth:`run` empties the queue and restores the default
    result codes.

    Parameters
    ----------
    streams : :class:`libshell.streams.ShellStreams`
        Session the commands run in.
    config : :class:`libshell.config.ShellConfig`, optional
        Binaries to expand ``%binary`` with, sentinel and stderr suffix.

    Examples
    --------
    >>> from libshell.test import ScriptedShell
    >>> session = ScriptedShell()
    >>> session.respond("toolbox id -u 2>/dev/null", "0")

    >>> shell = Shell(session.streams)
    >>> result = shell.build_commands("%binary id -u").run()
    >>> result.was_successful()
    True
    >>> result.lines
    ['0']
    >>> result.get_command_number(0)
    1
    >>> session.transmitted
    ['busybox id -u 2>/dev/null', 'toolbox id -u 2>/dev/null']
    """

    def __init__(
        self,
        streams: ShellStreams,
        config: ShellConfig | None = None,
    ) -> None:
        self.streams = streams
        self.config = config if config is not None else ShellConfig()
        self.engine = ExecutionEngine(streams, self.config)
        self._commands: list[AttemptList] = []
        self._result_codes: frozenset[int] = DEFAULT_RESULT_CODES

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(commands={len(self._commands)}, "
            f"result_codes={sorted(self._result_codes)})"
        )

    @property
    def commands(self) -> tuple[AttemptList, ...]:
        """Queued commands, each a tuple of attempts."""
        return tuple(self._commands)

    @property
    def result_codes(self) -> frozenset[int]:
        """Exit codes the next run accepts as success."""
        return self._result_codes

    def _expand(self, template: str) -> list[str]:
        """Return every attempt for ``template``, bare attempt last.

        >>> from libshell.test import ScriptedShell
        >>> shell = Shell(ScriptedShell().streams)
        >>> shell._expand("%binary  df -h")
        ['busybox df -h 2>/dev/null', 'toolbox df -h 2>/dev/null', 'df -h 2>/dev/null']
        """
        suffix = self.config.stderr_discard
        attempts = [
            BINARY_PLACEHOLDER.sub(lambda _m, b=binary: f"{b} ", template) + suffix
            for binary in self.config.binaries
        ]
        attempts.append(BINARY_PLACEHOLDER.sub("", template) + suffix)
        return attempts

    def _queue(self, attempts: t.Iterable[str]) -> None:
        attempt_list = tuple(attempts)
        if not attempt_list:
            raise exc.EmptyAttemptList
        self._commands.append(attempt_list)

    def build_commands(self, *templates: str) -> Self:
        """Queue one command per template, one attempt per binary plus a bare one.

        ``%binary`` in a template is replaced by each configured binary in
        turn, then removed for the last attempt. Every attempt discards
        stderr.

        >>> from libshell.test import ScriptedShell
        >>> shell = Shell(ScriptedShell().streams)
        >>> shell.build_commands("%binary df -h", "%binary df").commands
        (('busybox df -h 2>/dev/null', 'toolbox df -h 2>/dev/null', 'df -h 2>/dev/null'),
         ('busybox df 2>/dev/null', 'toolbox df 2>/dev/null', 'df 2>/dev/null'))
        """
        for template in templates:
            self._queue(self._expand(template))
        return self

    def build_attempts(self, *templates: str) -> Self:
        """Queue a single command holding the expanded attempts of every template.

        >>> from libshell.test import ScriptedShell
        >>> shell = Shell(ScriptedShell().streams)
        >>> shell.build_attempts("%binary df -h", "%binary df").commands
        (('busybox df -h 2>/dev/null', 'toolbox df -h 2>/dev/null', 'df -h 2>/dev/null',
          'busybox df 2>/dev/null', 'toolbox df 2>/dev/null', 'df 2>/dev/null'),)
        """
        attempts: list[str] = []
        for template in templates:
            attempts.extend(self._expand(template))
        self._queue(attempts)
        return self

    def add_commands(self, *commands: str) -> Self:
        """Queue each command as is, with no fallback attempts."""
        for command in commands:
            self._queue((command,))
        return self

    def add_attempts(self, *attempts: str) -> Self:
        """Queue one command whose attempts are ``attempts``, used verbatim."""
        self._queue(attempts)
        return self

    def set_result_codes(self, *codes: int) -> Self:
        """Replace the exit codes accepted as success for the next run.

        >>> from libshell.test import ScriptedShell
        >>> shell = Shell(ScriptedShell().streams)
        >>> sorted(shell.set_result_codes(0, 1).result_codes)
        [0, 1]
        >>> sorted(shell.set_result_codes(2).result_codes)
        [2]
        """
        if not codes:
            raise exc.EmptyResultCodes
        self._result_codes = frozenset(int(code) for code in codes)
        return self

    def reset(self) -> Self:
        """Drop queued commands and restore the default result codes."""
        self._commands.clear()
        self._result_codes = DEFAULT_RESULT_CODES
        return self

    def run(self, command: str | None = None) -> ShellResult:
        """Execute the queued commands.

        Parameters
        ----------
        command : str, optional
            Queued with :meth:`add_commands` before running. Commands queued
            earlier still run first.

        Returns
        -------
        :class:`libshell.result.ShellResult`
            Never raised for shell failures; check
            :meth:`~libshell.result.ShellResult.was_successful`.
        """
        try:
            if command is not None:
                self.add_commands(command)
            return self.engine.run(list(self._commands), self._result_codes)
        finally:
            self.reset()
