"""Configuration for libshell.

libshell.config
~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import os
import re
import typing as t

from .constants import DEFAULT_BINARIES, SENTINEL, STDERR_DISCARD

if t.TYPE_CHECKING:
    from collections.abc import Mapping

_BINARY_SEPARATOR = re.compile(r"[\s,]+")


@dataclasses.dataclass(frozen=True)
class ShellConfig:
    """Settings a :class:`libshell.shell.Shell` builds and frames commands with.

    Parameters
    ----------
    binaries : tuple[str, ...]
        Elevated binaries substituted for ``%binary``, highest priority first.
    sentinel : str
        Marker bracketing the exit status on the shell stream.
    stderr_discard : str
        Suffix appended to every built attempt.
    encoding : str, optional
        Encoding for text written to a byte stream. ``None`` keeps the
        encoding of the :class:`~libshell.streams.ShellStreams`.

    Examples
    --------
    >>> config = ShellConfig()
    >>> config.binaries
    ('busybox', 'toolbox')

    >>> config.with_binaries("toybox").binaries
    ('toybox',)

    >>> ShellConfig.from_env({"LIBSHELL_BINARIES": "toybox, busybox"}).binaries
    ('toybox', 'busybox')
    """

    binaries: tuple[str, ...] = DEFAULT_BINARIES
    sentinel: str = SENTINEL
    stderr_discard: str = STDERR_DISCARD
    encoding: str | None = None

    def __post_init__(self) -> None:
        if not self.sentinel:
            msg = "sentinel must not be empty"
            raise ValueError(msg)
        object.__setattr__(self, "binaries", tuple(self.binaries))

    def with_binaries(self, *binaries: str) -> ShellConfig:
        """Return a copy using ``binaries`` in place of the configured ones."""
        return dataclasses.replace(self, binaries=binaries)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ShellConfig:
        """Build a config from ``LIBSHELL_*`` environment variables.

        ``LIBSHELL_BINARIES`` holds binary names separated by commas or
        whitespace; set but empty means no binaries at all.
        ``LIBSHELL_ENCODING`` sets the encoding attempts are written in.
        """
        if environ is None:
            environ = os.environ

        binaries = DEFAULT_BINARIES
        raw_binaries = environ.get("LIBSHELL_BINARIES")
        if raw_binaries is not None:
            binaries = tuple(
                name for name in _BINARY_SEPARATOR.split(raw_binaries) if name
            )

        return cls(
            binaries=binaries,
            encoding=environ.get("LIBSHELL_ENCODING") or None,
        )
