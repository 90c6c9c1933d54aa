"""Run a nested action or command under witness."""

from __future__ import annotations

import argparse
import signal
from contextlib import contextmanager
from typing import Iterator

from actwrap.errors import RunInterrupted
from actwrap.executor import Deadline
from actwrap.services.wrapper import WrapperRunResult, run_wrapper
from actwrap.types import CommandResult
from actwrap.utils import github


@contextmanager
def cancel_on_signals(deadline: Deadline) -> Iterator[None]:
    """Route SIGINT/SIGTERM into the run's cancellation token.

    The first signal also raises ``RunInterrupted`` so a blocking download or
    process wait is abandoned at once; later signals only set the flag.
    """

    def _handler(signum: int, _frame: object) -> None:
        if deadline.cancelled:
            return
        name = signal.Signals(signum).name
        deadline.cancel(name)
        raise RunInterrupted(f"Run cancelled: {name}")

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _to_command_result(result: WrapperRunResult) -> CommandResult:
    if result.success:
        summary = f"witness run succeeded ({len(result.git_oids)} GitOID(s))"
    else:
        summary = result.error or "witness run failed"
    return CommandResult(
        exit_code=result.exit_code,
        summary=summary,
        problems=result.problems,
        data=result.to_payload(),
    )


def cmd_run(args: argparse.Namespace) -> int | CommandResult:
    deadline = Deadline()
    with cancel_on_signals(deadline):
        result = run_wrapper(
            config_path=args.config,
            overrides=args.set or [],
            deadline=deadline,
        )
    if getattr(args, "json", False):
        return _to_command_result(result)
    if result.success:
        github.info(f"witness run succeeded ({len(result.git_oids)} GitOID(s))")
    return result.exit_code


def cmd_plan(args: argparse.Namespace) -> int | CommandResult:
    result = run_wrapper(
        config_path=args.config,
        overrides=args.set or [],
        dry_run=True,
        witness_bin=args.witness_bin,
    )
    if getattr(args, "json", False):
        command_result = _to_command_result(result)
        if result.success:
            command_result.summary = "Command planned"
        return command_result
    if result.success:
        print(result.display_command)
    return result.exit_code
