"""Tests for libshell.exc."""

from __future__ import annotations

import pytest

from libshell import exc


@pytest.mark.parametrize(
    ("error", "bases"),
    [
        (exc.EmptyAttemptList, (exc.ConfigurationError, ValueError)),
        (exc.EmptyResultCodes, (exc.ConfigurationError, ValueError)),
        (exc.StreamFailure, (exc.LibShellException, OSError)),
        (exc.StreamClosed, (exc.StreamFailure, ConnectionError, OSError)),
    ],
)
def test_hierarchy(error: type[Exception], bases: tuple[type[Exception], ...]) -> None:
    """Errors are catchable by their library and builtin bases."""
    assert issubclass(error, exc.LibShellException)
    for base in bases:
        assert issubclass(error, base)


def test_stream_closed_message() -> None:
    """StreamClosed names the attempt it interrupted."""
    assert str(exc.StreamClosed("df -h")) == "Shell stream closed while running: df -h"
    assert str(exc.StreamClosed()) == "Shell stream closed unexpectedly"
