"""Action input lookup and environment projection for nested actions.

The runner hands every action input to the wrapper as ``INPUT_<NAME>``. Inputs
the wrapper does not own are re-exported under the nested action's naming
convention so it can read them without the wrapper knowing their names.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping

INPUT_PREFIX = "INPUT_"


def normalize_input_name(name: str) -> str:
    return name.strip().replace(" ", "_").replace("-", "_").upper()


def input_env_names(name: str) -> tuple[str, ...]:
    upper = name.strip().replace(" ", "_").upper()
    underscored = INPUT_PREFIX + upper.replace("-", "_")
    hyphenated = INPUT_PREFIX + upper
    if underscored == hyphenated:
        return (underscored,)
    return (underscored, hyphenated)


def get_input(env: Mapping[str, str], name: str, default: str = "") -> str:
    """Read an input the way the runner exposes it; blank counts as unset."""
    for key in input_env_names(name):
        value = env.get(key)
        if value is not None and value.strip():
            return value.strip()
    return default


def project_environment(
    parent_env: Mapping[str, str],
    reserved: Iterable[str],
    prefix: str = INPUT_PREFIX,
) -> dict[str, str]:
    """Compute the nested action's environment.

    Starts from a full copy of ``parent_env``. Every ``<prefix><name>`` whose
    name is not reserved is set again as ``<prefix><name with - as _>``.
    Reserved inputs are not re-exported, but nothing is removed.

    A double-prefixed key (``INPUT_INPUT_<name>``) is an explicit pass-through:
    it is injected as ``INPUT_<name>`` even when ``<name>`` is reserved and
    wins over a single-prefixed value of the same name.
    """
    reserved_names = {normalize_input_name(name) for name in reserved}
    projected = dict(parent_env)
    explicit: dict[str, str] = {}
    for key, value in parent_env.items():
        if not key.startswith(prefix):
            continue
        remainder = key[len(prefix) :]
        if remainder.startswith(prefix):
            inner = remainder[len(prefix) :]
            if inner:
                explicit[prefix + inner.replace("-", "_")] = value
            continue
        if not remainder or normalize_input_name(remainder) in reserved_names:
            continue
        projected[prefix + remainder.replace("-", "_")] = value
    projected.update(explicit)
    return projected


def prepend_path(env: Mapping[str, str], directory: str) -> dict[str, str]:
    updated = dict(env)
    current = updated.get("PATH", "")
    updated["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
    return updated
