"""Install the witness binary outside of a full run."""

from __future__ import annotations

import argparse
import sys

from actwrap.errors import ToolDownloadFailed
from actwrap.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from actwrap.provision import ensure_witness
from actwrap.types import CommandResult
from actwrap.utils.github import append_github_path, resolve_output_path, write_outputs


def cmd_install_witness(args: argparse.Namespace) -> int | CommandResult:
    json_mode = getattr(args, "json", False)
    try:
        install = ensure_witness(args.version, args.dest)
    except ToolDownloadFailed as exc:
        message = f"Failed to install witness: {exc.describe()}"
        if json_mode:
            return CommandResult(exit_code=EXIT_FAILURE, summary=message)
        print(message, file=sys.stderr)
        return EXIT_FAILURE

    if args.github_path:
        append_github_path(install.bin_dir)

    output_path = resolve_output_path(args.output, args.github_output)
    if json_mode:
        return CommandResult(
            exit_code=EXIT_SUCCESS,
            summary=f"witness {install.version} installed",
            artifacts={"path": str(install.path)},
            data={"cached": install.cached},
        )
    write_outputs([("path", str(install.path))], output_path)
    return EXIT_SUCCESS
