"""Process exit codes used by the actwrap CLI."""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERNAL_ERROR = 3
EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130
