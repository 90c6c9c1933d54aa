"""Shared utility functions for actwrap."""

from __future__ import annotations

from actwrap.utils.env import parse_env_bool
from actwrap.utils.github import (
    append_github_path,
    append_summary,
    resolve_output_path,
    write_outputs,
)

__all__ = [
    "parse_env_bool",
    "append_github_path",
    "append_summary",
    "resolve_output_path",
    "write_outputs",
]
