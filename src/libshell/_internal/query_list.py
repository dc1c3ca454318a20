"""Utilities for filtering or searching lines of shell output.

Note
----
This is an internal API not covered by versioning policy.
"""

from __future__ import annotations

import re
import typing as t
from collections.abc import Callable, Iterable, Mapping

if t.TYPE_CHECKING:

    class LookupProtocol(t.Protocol):
        """Protocol for :class:`QueryList` filtering operators."""

        def __call__(self, data: str, rhs: t.Any) -> bool:
            """Return callback for :class:`QueryList` filtering operators."""
            ...


T = t.TypeVar("T")

no_arg = object()


class MultipleObjectsReturned(Exception):
    """The query returned multiple lines when only one was expected."""


class ObjectDoesNotExist(Exception):
    """The requested line does not exist."""


def lookup_exact(data: str, rhs: t.Any) -> bool:
    return rhs == data


def lookup_iexact(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return rhs.lower() == data.lower()


def lookup_contains(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return rhs in data


def lookup_icontains(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return rhs.lower() in data.lower()


def lookup_startswith(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return data.startswith(rhs)


def lookup_istartswith(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return data.lower().startswith(rhs.lower())


def lookup_endswith(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return data.endswith(rhs)


def lookup_iendswith(data: str, rhs: t.Any) -> bool:
    if not isinstance(rhs, str) or not isinstance(data, str):
        return False

    return data.lower().endswith(rhs.lower())


def lookup_in(data: str, rhs: t.Any) -> bool:
    if isinstance(rhs, (list, tuple, set, frozenset)):
        return data in rhs
    if isinstance(rhs, str):
        return data in rhs
    return False


def lookup_nin(data: str, rhs: t.Any) -> bool:
    if isinstance(rhs, (list, tuple, set, frozenset)):
        return data not in rhs
    if isinstance(rhs, str):
        return data not in rhs
    return False


def lookup_regex(data: str, rhs: t.Any) -> bool:
    if isinstance(rhs, re.Pattern):
        return bool(rhs.search(data))
    if isinstance(data, str) and isinstance(rhs, str):
        return bool(re.search(rhs, data))
    return False


def lookup_iregex(data: str, rhs: t.Any) -> bool:
    if isinstance(rhs, re.Pattern):
        return bool(re.search(rhs.pattern, data, rhs.flags | re.IGNORECASE))
    if isinstance(data, str) and isinstance(rhs, str):
        return bool(re.search(rhs, data, re.IGNORECASE))
    return False


LOOKUP_NAME_MAP: Mapping[str, LookupProtocol] = {
    "eq": lookup_exact,
    "exact": lookup_exact,
    "iexact": lookup_iexact,
    "contains": lookup_contains,
    "icontains": lookup_icontains,
    "startswith": lookup_startswith,
    "istartswith": lookup_istartswith,
    "endswith": lookup_endswith,
    "iendswith": lookup_iendswith,
    "in": lookup_in,
    "nin": lookup_nin,
    "regex": lookup_regex,
    "iregex": lookup_iregex,
}


class OpNotFound(ValueError):
    def __init__(self, op: str, *args: object) -> None:
        super().__init__(f"{op} not in LOOKUP_NAME_MAP")


def _resolve_lookups(
    lookups: Mapping[str, t.Any],
) -> list[tuple[LookupProtocol, t.Any]]:
    resolved = []
    for op, value in lookups.items():
        if op not in LOOKUP_NAME_MAP:
            raise OpNotFound(op=op)
        resolved.append((LOOKUP_NAME_MAP[op], value))
    return resolved


class QueryList(list[T], t.Generic[T]):
    """Filter a list of output lines. For small, local datasets.

    Lookups are named after the operator and are applied to each line.

    >>> lines = QueryList(["Filesystem  Size", "/dev/root  1.2G", "tmpfs  460M"])

    >>> lines.filter(startswith="/dev")
    ['/dev/root  1.2G']
    >>> lines.filter(icontains="TMPFS")
    ['tmpfs  460M']
    >>> lines.filter(regex=r"\\d+M$")
    ['tmpfs  460M']
    >>> lines.filter(lambda line: "Size" in line)
    ['Filesystem  Size']
    >>> lines.filter(contains="46", endswith="M")
    ['tmpfs  460M']

    >>> lines.get(startswith="tmpfs")
    'tmpfs  460M'
    >>> lines.get(startswith="proc", default=None) is None
    True
    """

    def __init__(self, items: Iterable[T] | None = None) -> None:
        super().__init__(items if items is not None else [])

    def filter(
        self,
        matcher: Callable[[T], bool] | T | None = None,
        **lookups: t.Any,
    ) -> QueryList[T]:
        """Filter lines.

        Args:
            matcher: Optional callable or value to match against
            **lookups: Operator names mapped to the value to compare with

        Returns
        -------
            A new QueryList containing only the lines that match
        """
        if matcher is not None:
            if callable(matcher):
                return self.__class__([item for item in self if matcher(item)])
            elif isinstance(matcher, list):
                return self.__class__([item for item in self if item in matcher])
            else:
                return self.__class__([item for item in self if item == matcher])

        if not lookups:
            return self.__class__(self)

        resolved = _resolve_lookups(lookups)
        return self.__class__(
            [
                item
                for item in self
                if all(lookup_fn(item, value) for lookup_fn, value in resolved)
            ],
        )

    def get(
        self,
        matcher: Callable[[T], bool] | T | None = None,
        default: t.Any | None = no_arg,
        **lookups: t.Any,
    ) -> T | None:
        """Retrieve one line.

        Raises :exc:`MultipleObjectsReturned` if multiple lines found.

        Raises :exc:`ObjectDoesNotExist` if no line found, unless ``default`` is given.
        """
        objs = self.filter(matcher, **lookups)

        if len(objs) > 1:
            raise MultipleObjectsReturned
        if len(objs) == 0:
            if default is no_arg:
                raise ObjectDoesNotExist
            return default
        return objs[0]
