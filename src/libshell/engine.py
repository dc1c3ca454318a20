"""Execution engine driving queued commands through a shell session.

libshell.engine
~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import enum
import logging
import typing as t

from .config import ShellConfig
from .constants import UNKNOWN_EXIT_CODE
from .framing import ProtocolFramer
from .result import ShellResult

if t.TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from .streams import ShellStreams

logger = logging.getLogger(__name__)


class AttemptOutcome(enum.Enum):
    """How a single attempt ended."""

    MATCHED = enum.auto()
    NOT_MATCHED = enum.auto()
    IO_ERROR = enum.auto()


@dataclasses.dataclass(frozen=True)
class AttemptReport:
    """Outcome of one attempt, with what the shell sent back."""

    outcome: AttemptOutcome
    exit_code: int = UNKNOWN_EXIT_CODE
    lines: list[str] = dataclasses.field(default_factory=list)
    error: BaseException | None = None


@dataclasses.dataclass
class RunState:
    """Output and bookkeeping accumulated during one run."""

    lines: list[str] = dataclasses.field(default_factory=list)
    exit_code: int = UNKNOWN_EXIT_CODE
    command_numbers: list[int] = dataclasses.field(default_factory=list)


def trim_output(lines: list[str]) -> list[str]:
    """Drop at most one leading and one trailing empty line.

    These come from the empty ``echo`` every frame forces after the output.

    >>> trim_output(["", "line", ""])
    ['line']
    >>> trim_output(["", ""])
    []
    >>> trim_output(["", "", "line", "", ""])
    ['', 'line', '']
    """
    trimmed = list(lines)
    if trimmed and trimmed[-1] == "":
        trimmed.pop()
    if trimmed and trimmed[0] == "":
        trimmed.pop(0)
    return trimmed


class ExecutionEngine:
    """Run a queue of logical commands, trying each one's attempts in order.

    A logical command succeeds with its first attempt whose exit code is
    accepted. The run stops at the first logical command whose attempts all
    fail. Errors raised by the streams count as failed attempts, so
    :meth:`run` always returns a :class:`~libshell.result.ShellResult`.

    Reads block until the shell answers; there is no timeout.

    Parameters
    ----------
    streams : :class:`libshell.streams.ShellStreams`
        Session to run in. Its lock is held for the whole run.
    config : :class:`libshell.config.ShellConfig`, optional
        Supplies the sentinel and, if set, the encoding attempts are written in.
    """

    def __init__(
        self,
        streams: ShellStreams,
        config: ShellConfig | None = None,
    ) -> None:
        self.streams = streams
        self.config = config if config is not None else ShellConfig()
        self.framer = ProtocolFramer(
            streams,
            sentinel=self.config.sentinel,
            encoding=self.config.encoding,
        )

    def run_attempt(self, attempt: str, result_codes: Collection[int]) -> AttemptReport:
        """Run one attempt and classify it against ``result_codes``."""
        try:
            frame = self.framer.exchange(attempt)
        except Exception as e:
            # Anything raised by the streams fails the attempt, never the run
            logger.debug("Stream failure while running %r", attempt, exc_info=True)
            return AttemptReport(outcome=AttemptOutcome.IO_ERROR, error=e)

        if frame.exit_code in result_codes:
            outcome = AttemptOutcome.MATCHED
        else:
            outcome = AttemptOutcome.NOT_MATCHED
        return AttemptReport(
            outcome=outcome,
            exit_code=frame.exit_code,
            lines=frame.lines,
        )

    def run(
        self,
        commands: Sequence[Sequence[str]],
        result_codes: Collection[int],
    ) -> ShellResult:
        """Execute ``commands`` and aggregate their output.

        Parameters
        ----------
        commands : Sequence[Sequence[str]]
            Logical commands, each a non-empty sequence of attempts.
        result_codes : Collection[int]
            Exit codes accepted as success.

        Returns
        -------
        :class:`libshell.result.ShellResult`
        """
        codes = frozenset(result_codes)
        state = RunState()

        with self.streams.lock:
            logger.debug("Preparing to execute %d command(s)", len(commands))

            for number, attempts in enumerate(commands, start=1):
                logger.debug(
                    "Executing command number %d containing %d attempt(s)",
                    number,
                    len(attempts),
                )
                if not self._run_command(attempts, codes, state, len(commands)):
                    logger.debug(
                        "The command number %d failed. Ending shell execution",
                        number,
                    )
                    break

        return ShellResult(
            lines=trim_output(state.lines),
            exit_code=state.exit_code,
            result_codes=codes,
            command_numbers=state.command_numbers,
        )

    def _run_command(
        self,
        attempts: Sequence[str],
        codes: frozenset[int],
        state: RunState,
        command_count: int,
    ) -> bool:
        for index, attempt in enumerate(attempts):
            logger.debug("Running attempt number %d [%s]", index + 1, attempt)

            report = self.run_attempt(attempt, codes)
            state.exit_code = report.exit_code

            if report.outcome is AttemptOutcome.MATCHED:
                if command_count == 1:
                    state.lines = list(report.lines)
                else:
                    state.lines.extend(report.lines)
                state.command_numbers.append(index)
                logger.debug(
                    "The attempt number %d was successfully executed "
                    "and returned result code (%d)",
                    index + 1,
                    report.exit_code,
                )
                return True

            if report.outcome is AttemptOutcome.IO_ERROR:
                logger.debug(
                    "The attempt number %d failed on the shell stream: %s",
                    index + 1,
                    report.error,
                )
            else:
                logger.debug(
                    "The attempt number %d failed with result code (%d)",
                    index + 1,
                    report.exit_code,
                )
        return False
