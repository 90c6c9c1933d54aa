"""Subprocess execution with live pass-through and a combined capture buffer."""

from __future__ import annotations

import shutil
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence, TextIO

from actwrap.errors import ProcessSpawnFailed, RunInterrupted, RunTimeout

POLL_INTERVAL = 0.1
TERMINATE_GRACE = 5.0


class Deadline:
    """Cancellation token shared by every blocking step of one run.

    Owns the wall-clock ceiling for the whole run and the interrupt flag set
    by signal handlers. ``seconds`` of ``None`` or ``0`` means no ceiling.
    """

    def __init__(self, seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started = clock()
        self._expires_at: float | None = None
        self._cancel_reason = ""
        self.limit(seconds)

    def limit(self, seconds: float | None) -> None:
        """Set the ceiling, measured from when the token was created."""
        self._expires_at = self._started + seconds if seconds else None

    def cancel(self, reason: str = "interrupted") -> None:
        self._cancel_reason = reason

    @property
    def cancelled(self) -> bool:
        return bool(self._cancel_reason)

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return self._expires_at - self._clock()

    def check(self) -> None:
        if self._cancel_reason:
            raise RunInterrupted(f"Run cancelled: {self._cancel_reason}")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise RunTimeout("Run exceeded its time limit")

    def timeout_for(self, limit: float) -> float:
        """Clamp a per-operation timeout to what is left of the run."""
        remaining = self.remaining()
        if remaining is None:
            return limit
        return max(min(limit, remaining), 0.001)


@dataclass
class ProcessResult:
    exit_code: int
    output: str


def resolve_executable(name: str, env: Mapping[str, str] | None = None) -> str:
    """Resolve an executable name against the child PATH, falling back to the name."""
    search_path = env.get("PATH") if env is not None else None
    return shutil.which(name, path=search_path) or name


def _terminate(proc: subprocess.Popen[str]) -> None:
    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()


def run_streaming(
    argv: Sequence[str],
    *,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    deadline: Deadline | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> ProcessResult:
    """Run ``argv`` without a shell, mirroring both streams as they arrive.

    Every chunk from either stream is also appended, in receipt order, to one
    combined buffer returned as ``ProcessResult.output``. Ordering is only
    guaranteed within a stream.

    Raises:
        ProcessSpawnFailed: the program could not be started.
        RunTimeout / RunInterrupted: the deadline expired or was cancelled;
            the child is terminated first.
    """
    deadline = deadline or Deadline()
    deadline.check()
    out_mirror = stdout if stdout is not None else sys.stdout
    err_mirror = stderr if stderr is not None else sys.stderr

    try:
        proc = subprocess.Popen(  # noqa: S603
            [resolve_executable(argv[0], env), *argv[1:]],
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as exc:
        raise ProcessSpawnFailed(f"Failed to start {argv[0]}: {exc}") from exc

    combined: list[str] = []
    lock = threading.Lock()

    def _pump(pipe: TextIO, mirror: TextIO) -> None:
        try:
            for chunk in iter(pipe.readline, ""):
                with lock:
                    combined.append(chunk)
                    mirror.write(chunk)
                    mirror.flush()
        finally:
            pipe.close()

    threads = [
        threading.Thread(target=_pump, args=(proc.stdout, out_mirror), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, err_mirror), daemon=True),
    ]
    for thread in threads:
        thread.start()

    try:
        while True:
            try:
                proc.wait(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                deadline.check()
        # Background processes left by the child can keep the pipes open.
        while any(thread.is_alive() for thread in threads):
            for thread in threads:
                thread.join(timeout=POLL_INTERVAL)
            deadline.check()
    except (RunTimeout, RunInterrupted, KeyboardInterrupt):
        _terminate(proc)
        for thread in threads:
            thread.join(timeout=POLL_INTERVAL)
        raise

    return ProcessResult(exit_code=proc.returncode, output="".join(combined))
