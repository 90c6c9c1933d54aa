"""actwrap command line interface."""

from __future__ import annotations

import argparse
import json
import sys
import time

from actwrap import __version__
from actwrap.commands.extract import cmd_extract
from actwrap.commands.fetch import cmd_fetch
from actwrap.commands.install import cmd_install_witness
from actwrap.commands.run import cmd_plan, cmd_run
from actwrap.errors import RunInterrupted
from actwrap.exit_codes import EXIT_INTERNAL_ERROR, EXIT_INTERRUPTED, EXIT_SUCCESS
from actwrap.types import CommandResult

DEFAULT_WITNESS_VERSION = "0.8.1"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="actwrap",
        description="Run GitHub Actions or commands under witness attestation",
    )
    parser.add_argument("--version", action="version", version=f"actwrap {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_json_flag(target: argparse.ArgumentParser) -> None:
        target.add_argument(
            "--json",
            action="store_true",
            help="Output machine-readable JSON",
        )

    def add_input_flags(target: argparse.ArgumentParser) -> None:
        target.add_argument("--config", help="YAML file with input values")
        target.add_argument(
            "--set",
            action="append",
            metavar="NAME=VALUE",
            help="Override an input (repeatable)",
        )

    run = subparsers.add_parser("run", help="Fetch and run a target under witness")
    add_json_flag(run)
    add_input_flags(run)
    run.set_defaults(func=cmd_run)

    plan = subparsers.add_parser("plan", help="Print the witness command without running it")
    add_json_flag(plan)
    add_input_flags(plan)
    plan.add_argument(
        "--witness-bin",
        default="witness",
        help="Binary name to show in the planned command",
    )
    plan.set_defaults(func=cmd_plan)

    extract = subparsers.add_parser("extract", help="Extract GitOIDs from a witness log")
    add_json_flag(extract)
    extract.add_argument("log", help="Path to captured witness output")
    extract.add_argument("--output", help="Write outputs to this file")
    extract.add_argument(
        "--github-output",
        action="store_true",
        help="Write outputs to GITHUB_OUTPUT",
    )
    extract.set_defaults(func=cmd_extract)

    fetch = subparsers.add_parser("fetch", help="Download an action (owner/repo@ref)")
    add_json_flag(fetch)
    fetch.add_argument("ref", help="Action coordinate, e.g. actions/hello-world-javascript-action@main")
    fetch.set_defaults(func=cmd_fetch)

    install = subparsers.add_parser("install-witness", help="Install the witness binary")
    add_json_flag(install)
    install.add_argument("--version", default=DEFAULT_WITNESS_VERSION, help="witness version")
    install.add_argument("--dest", default=".", help="Download directory")
    install.add_argument(
        "--github-path",
        action="store_true",
        help="Append the install directory to GITHUB_PATH",
    )
    install.add_argument("--output", help="Write outputs to this file")
    install.add_argument(
        "--github-output",
        action="store_true",
        help="Write outputs to GITHUB_OUTPUT",
    )
    install.set_defaults(func=cmd_install_witness)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    start = time.perf_counter()
    command = args.command

    try:
        result = args.func(args)
    except (KeyboardInterrupt, RunInterrupted):
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as exc:  # noqa: BLE001 - surface in JSON mode
        if getattr(args, "json", False):
            problems = [
                {
                    "severity": "error",
                    "message": str(exc),
                    "code": "ACTWRAP-UNHANDLED",
                }
            ]
            payload = CommandResult(
                exit_code=EXIT_INTERNAL_ERROR,
                summary=str(exc),
                problems=problems,
            ).to_payload(
                command,
                "error",
                int((time.perf_counter() - start) * 1000),
            )
            print(json.dumps(payload, indent=2))
            return EXIT_INTERNAL_ERROR
        raise

    if isinstance(result, CommandResult):
        exit_code = result.exit_code
        command_result = result
    else:
        exit_code = int(result)
        command_result = CommandResult(exit_code=exit_code)

    if not command_result.summary:
        command_result.summary = "OK" if exit_code == EXIT_SUCCESS else "Command failed"

    if getattr(args, "json", False):
        status = "success" if exit_code == EXIT_SUCCESS else "failure"
        payload = command_result.to_payload(
            command,
            status,
            int((time.perf_counter() - start) * 1000),
        )
        print(json.dumps(payload, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
