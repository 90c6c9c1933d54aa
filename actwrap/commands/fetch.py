"""Fetch an action archive and print where it was unpacked."""

from __future__ import annotations

import argparse
import sys

from actwrap.errors import WrapperError
from actwrap.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from actwrap.fetch import fetch_action
from actwrap.reference import parse_action_ref
from actwrap.types import CommandResult


def cmd_fetch(args: argparse.Namespace) -> int | CommandResult:
    json_mode = getattr(args, "json", False)
    try:
        coord = parse_action_ref(args.ref)
        fetched = fetch_action(coord)
    except WrapperError as exc:
        message = exc.describe()
        if json_mode:
            return CommandResult(
                exit_code=EXIT_FAILURE,
                summary=message,
                problems=[{"severity": "error", "message": message, "code": exc.code}],
            )
        print(message, file=sys.stderr)
        return EXIT_FAILURE

    if json_mode:
        return CommandResult(
            exit_code=EXIT_SUCCESS,
            summary=f"Fetched {coord}",
            artifacts={"root": str(fetched.root_dir)},
            data={"url": fetched.url},
        )
    print(fetched.root_dir)
    return EXIT_SUCCESS
