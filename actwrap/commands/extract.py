"""Scan a saved witness log for archivista GitOIDs."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from actwrap.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from actwrap.extract import extract_gitoids
from actwrap.report import OUTPUT_NAME
from actwrap.types import CommandResult
from actwrap.utils.github import resolve_output_path, write_outputs


def cmd_extract(args: argparse.Namespace) -> int | CommandResult:
    json_mode = getattr(args, "json", False)
    log_path = Path(args.log)
    try:
        text = log_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        message = f"Failed to read log: {exc}"
        if json_mode:
            return CommandResult(exit_code=EXIT_FAILURE, summary=message)
        print(message, file=sys.stderr)
        return EXIT_FAILURE

    oids = extract_gitoids(text)
    if json_mode:
        return CommandResult(
            exit_code=EXIT_SUCCESS,
            summary=f"Found {len(oids)} GitOID(s)",
            data={"git_oids": oids},
        )
    output_path = resolve_output_path(args.output, args.github_output)
    write_outputs([(OUTPUT_NAME, oid) for oid in oids], output_path)
    return EXIT_SUCCESS
