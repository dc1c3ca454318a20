"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel.
"""

from __future__ import annotations

import typing as t

import pytest
from _pytest.doctest import DoctestItem

from libshell.shell import Shell
from libshell.streams import ShellStreams
from libshell.test import ScriptedShell


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["Shell"] = Shell
        doctest_namespace["ShellStreams"] = ShellStreams
        doctest_namespace["ScriptedShell"] = ScriptedShell
        doctest_namespace["scripted_shell"] = request.getfixturevalue("scripted_shell")


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``LIBSHELL_*`` settings of the developer's shell out of tests."""
    monkeypatch.delenv("LIBSHELL_BINARIES", raising=False)
    monkeypatch.delenv("LIBSHELL_ENCODING", raising=False)
