"""Constants shared by the libshell builder, framer and engine.

libshell.constants
~~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import re

#: Marker bracketing the exit status of every attempt on the shell stream.
#: Changing it breaks compatibility with shells already speaking the protocol.
SENTINEL = "EOL:a00c38d8:EOL"

#: Elevated binaries tried, in priority order, in place of ``%binary``
DEFAULT_BINARIES: tuple[str, ...] = ("busybox", "toolbox")

#: Placeholder token in command templates, with any trailing spaces
BINARY_PLACEHOLDER = re.compile(r"%binary( *)")

#: Suffix appended to every built attempt
STDERR_DISCARD = " 2>/dev/null"

#: Exit codes accepted as success when none are configured
DEFAULT_RESULT_CODES: frozenset[int] = frozenset({0})

#: Returned by :meth:`libshell.result.ShellResult.get_command_number` for
#: commands that never succeeded
COMMAND_NOT_FOUND = -1

#: Exit code used when the shell never reported one
UNKNOWN_EXIT_CODE = -1

#: Encoding used for the writable side of the shell session
DEFAULT_ENCODING = "utf-8"
