"""libshell, run commands with fallback attempts through a persistent shell."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .config import ShellConfig
from .engine import AttemptOutcome, ExecutionEngine
from .result import ShellResult
from .shell import Shell
from .streams import ShellStreams

__all__ = (
    "AttemptOutcome",
    "ExecutionEngine",
    "Shell",
    "ShellConfig",
    "ShellResult",
    "ShellStreams",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
)
