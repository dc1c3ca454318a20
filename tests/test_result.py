"""Tests for ShellResult."""

from __future__ import annotations

import pytest

from libshell._internal.query_list import (
    MultipleObjectsReturned,
    ObjectDoesNotExist,
    QueryList,
)
from libshell.constants import COMMAND_NOT_FOUND
from libshell.result import ShellResult


@pytest.fixture
def df_result() -> ShellResult:
    """Return a successful two-command result."""
    return ShellResult(
        lines=["Filesystem  Size", "/dev/root  1.2G", "tmpfs  460M"],
        exit_code=0,
        result_codes={0},
        command_numbers=[2, 0],
    )


def test_result_attributes(df_result: ShellResult) -> None:
    """Constructor arguments are normalized into immutable containers."""
    assert isinstance(df_result.lines, QueryList)
    assert df_result.exit_code == 0
    assert df_result.result_codes == frozenset({0})
    assert df_result.command_numbers == (2, 0)


def test_result_is_immutable(df_result: ShellResult) -> None:
    """Fields cannot be reassigned or deleted."""
    with pytest.raises(AttributeError, match="immutable"):
        df_result.exit_code = 1  # type: ignore[misc]

    with pytest.raises(AttributeError, match="cannot delete"):
        del df_result.lines


def test_result_copies_inputs() -> None:
    """Changing the caller's lists afterwards does not affect the result."""
    lines = ["a"]
    numbers = [0]
    result = ShellResult(lines=lines, exit_code=0, command_numbers=numbers)
    lines.append("b")
    numbers.append(1)

    assert result.lines == ["a"]
    assert result.command_numbers == (0,)


@pytest.mark.parametrize(
    ("exit_code", "result_codes", "expected"),
    [
        (0, {0}, True),
        (1, {0}, False),
        (1, {0, 1}, True),
        (0, {1}, False),
        (-1, {0}, False),
    ],
)
def test_was_successful(
    exit_code: int,
    result_codes: set[int],
    expected: bool,
) -> None:
    """Success is membership of the exit code in the stored codes."""
    result = ShellResult(lines=[], exit_code=exit_code, result_codes=result_codes)

    assert result.was_successful() is expected


def test_default_result_codes() -> None:
    """Results built without codes accept 0 only."""
    result = ShellResult(lines=[], exit_code=0)

    assert result.result_codes == frozenset({0})
    assert result.was_successful()


@pytest.mark.parametrize(
    ("command", "expected"),
    [(0, 2), (1, 0), (2, COMMAND_NOT_FOUND), (99, COMMAND_NOT_FOUND), (-1, -1)],
)
def test_get_command_number(
    df_result: ShellResult,
    command: int,
    expected: int,
) -> None:
    """Commands that never succeeded report -1, including one past the end."""
    assert df_result.get_command_number(command) == expected


def test_get_command_number_negative_is_not_found() -> None:
    """Negative command numbers do not index from the end."""
    result = ShellResult(lines=[], exit_code=0, command_numbers=[5])

    assert result.get_command_number(-1) == COMMAND_NOT_FOUND


def test_line_access(df_result: ShellResult) -> None:
    """Lines are reachable by index, iteration and len()."""
    assert len(df_result) == 3
    assert list(df_result) == df_result.lines
    assert df_result[0] == "Filesystem  Size"
    assert df_result.line(-1) == "tmpfs  460M"
    assert df_result.line(3) is None


def test_filter_and_get(df_result: ShellResult) -> None:
    """filter() and get() query the output lines."""
    assert df_result.filter(startswith="/dev") == ["/dev/root  1.2G"]
    assert df_result.filter(lambda line: line.endswith("M")) == ["tmpfs  460M"]
    assert df_result.get(contains="tmpfs") == "tmpfs  460M"
    assert df_result.get(contains="proc", default=None) is None

    with pytest.raises(ObjectDoesNotExist):
        df_result.get(contains="proc")

    with pytest.raises(MultipleObjectsReturned):
        df_result.get(contains="  ")


def test_as_string(df_result: ShellResult) -> None:
    """as_string() joins the output lines."""
    assert df_result.as_string() == "Filesystem  Size\n/dev/root  1.2G\ntmpfs  460M"
    assert df_result.as_string(" | ").count(" | ") == 2
    assert ShellResult(lines=[], exit_code=0).as_string() == ""


def test_repr(df_result: ShellResult) -> None:
    """ShellResult has an informative repr."""
    assert repr(df_result) == "ShellResult(exit_code=0, successful=True, lines=3)"


def test_lines_cannot_be_changed_through_query_list(df_result: ShellResult) -> None:
    """Changing a returned QueryList leaves the result as it was."""
    lines = df_result.lines
    lines.append("tampered")
    lines[0] = "x"
    df_result.lines.clear()
    df_result.filter(startswith="/dev").append("tampered")

    assert list(df_result) == ["Filesystem  Size", "/dev/root  1.2G", "tmpfs  460M"]
    assert len(df_result) == 3
    assert df_result.lines is not df_result.lines
