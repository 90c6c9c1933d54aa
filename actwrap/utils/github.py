"""GitHub runner integration: outputs, step summary, PATH, and annotations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable


def write_outputs(values: Iterable[tuple[str, str]], output_path: Path | None) -> None:
    """Append ``key=value`` lines; repeated keys are written once per value."""
    if output_path is None:
        for key, value in values:
            print(f"{key}={value}")
        return
    with open(output_path, "a", encoding="utf-8") as handle:
        for key, value in values:
            handle.write(f"{key}={value}\n")


def append_summary(text: str, summary_path: Path | None) -> None:
    if summary_path is None:
        print(text)
        return
    with open(summary_path, "a", encoding="utf-8") as handle:
        handle.write(text)
        if not text.endswith("\n"):
            handle.write("\n")


def resolve_output_path(path_value: str | None, github_output: bool) -> Path | None:
    if path_value:
        return Path(path_value)
    if github_output:
        env_path = os.environ.get("GITHUB_OUTPUT")
        return Path(env_path) if env_path else None
    return None


def append_github_path(path_value: Path) -> None:
    env_path = os.environ.get("GITHUB_PATH")
    if not env_path:
        return
    with open(env_path, "a", encoding="utf-8") as handle:
        handle.write(f"{path_value}\n")


def info(message: str) -> None:
    print(message, flush=True)


def debug(message: str) -> None:
    print(f"::debug::{message}", flush=True)


def warning(message: str) -> None:
    print(f"::warning::{message}", flush=True)


def error(message: str) -> None:
    print(f"::error::{message}", flush=True)


def mask(value: str) -> None:
    if value:
        print(f"::add-mask::{value}", flush=True)


def group(title: str) -> None:
    print(f"::group::{title}", flush=True)


def endgroup() -> None:
    print("::endgroup::", flush=True)
