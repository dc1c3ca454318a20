"""Result type for shell runs.

libshell.result
~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import typing as t

from ._internal.query_list import QueryList
from .constants import COMMAND_NOT_FOUND, DEFAULT_RESULT_CODES

if t.TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator


class ShellResult:
    """Output and status of one :meth:`libshell.shell.Shell.run`.

    Output lines are kept as a tuple and handed out as a fresh
    :class:`~libshell._internal.query_list.QueryList`; the result exposes its
    query methods directly.

    Attributes
    ----------
    lines : QueryList[str]
        Output of every successful command, in order
    exit_code : int
        Exit code of the last attempt executed, ``-1`` if none was read
    result_codes : frozenset[int]
        Exit codes that counted as success for this run
    command_numbers : tuple[int, ...]
        Index of the winning attempt of each successful command

    Examples
    --------
    >>> result = ShellResult(
    ...     lines=["uid=0(root) gid=0(root)"],
    ...     exit_code=0,
    ...     result_codes={0},
    ...     command_numbers=[1],
    ... )
    >>> result.was_successful()
    True
    >>> result.get_command_number(0)
    1
    >>> result.get_command_number(1)
    -1
    >>> result.line(0)
    'uid=0(root) gid=0(root)'
    >>> result.exit_code = 1
    Traceback (most recent call last):
        ...
    AttributeError: ShellResult is immutable: cannot modify field 'exit_code'
    """

    __slots__ = ("_lines", "command_numbers", "exit_code", "result_codes")

    _lines: tuple[str, ...]
    exit_code: int
    result_codes: frozenset[int]
    command_numbers: tuple[int, ...]

    def __init__(
        self,
        lines: Iterable[str],
        exit_code: int,
        result_codes: Iterable[int] = DEFAULT_RESULT_CODES,
        command_numbers: Iterable[int] = (),
    ) -> None:
        object.__setattr__(self, "_lines", tuple(lines))
        object.__setattr__(self, "exit_code", exit_code)
        object.__setattr__(self, "result_codes", frozenset(result_codes))
        object.__setattr__(self, "command_numbers", tuple(command_numbers))

    def __setattr__(self, name: str, value: t.Any) -> None:
        msg = f"{type(self).__name__} is immutable: cannot modify field '{name}'"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable: cannot delete field '{name}'"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return (
            f"ShellResult(exit_code={self.exit_code}, "
            f"successful={self.was_successful()}, lines={len(self._lines)})"
        )

    @property
    def lines(self) -> QueryList[str]:
        """Output lines, as a new :class:`QueryList` on every access."""
        return QueryList(self._lines)

    def was_successful(self) -> bool:
        """Return True if :attr:`exit_code` is one of :attr:`result_codes`."""
        return self.exit_code in self.result_codes

    def get_command_number(self, command: int) -> int:
        """Return which attempt of logical command ``command`` succeeded.

        Returns ``-1`` if that command never ran or failed.
        """
        if 0 <= command < len(self.command_numbers):
            return self.command_numbers[command]
        return COMMAND_NOT_FOUND

    # Line queries

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]

    def line(self, index: int) -> str | None:
        """Return line ``index``, counting from the end if negative.

        Returns ``None`` if there is no such line.
        """
        try:
            return self._lines[index]
        except IndexError:
            return None

    def filter(
        self,
        matcher: Callable[[str], bool] | str | None = None,
        **lookups: t.Any,
    ) -> QueryList[str]:
        """Return the output lines matching, see :meth:`QueryList.filter`."""
        return self.lines.filter(matcher, **lookups)

    def get(
        self,
        matcher: Callable[[str], bool] | str | None = None,
        **kwargs: t.Any,
    ) -> str | None:
        """Return the single matching output line, see :meth:`QueryList.get`."""
        return self.lines.get(matcher, **kwargs)

    def as_string(self, separator: str = "\n") -> str:
        """Return the output joined with ``separator``."""
        return separator.join(self._lines)
