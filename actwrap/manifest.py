"""Read a nested action's ``action.yml`` and prepare it for execution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from actwrap.errors import (
    DependencyInstallFailed,
    EntryPointMissing,
    ManifestNotFound,
    ProcessSpawnFailed,
    UnsupportedActionRuntime,
)
from actwrap.executor import Deadline, run_streaming
from actwrap.utils import github

MANIFEST_NAMES = ("action.yml", "action.yaml")


@dataclass(frozen=True)
class ActionManifest:
    entry_point: str
    entry_file: Path
    using: str = ""

    @property
    def is_node(self) -> bool:
        return self.using.startswith("node")


def read_manifest(action_dir: Path) -> ActionManifest:
    for name in MANIFEST_NAMES:
        path = action_dir / name
        if path.is_file():
            break
    else:
        raise ManifestNotFound(f"Neither action.yml nor action.yaml found in {action_dir}")

    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ManifestNotFound(f"Invalid action metadata in {path}: {exc}") from exc

    runs = data.get("runs") if isinstance(data, dict) else None
    runs = runs if isinstance(runs, dict) else {}
    entry_point = runs.get("main")
    if not isinstance(entry_point, str) or not entry_point.strip():
        raise EntryPointMissing("Entry point (runs.main) not defined in action metadata")
    using = str(runs.get("using", "") or "")
    if using and not using.startswith("node"):
        raise UnsupportedActionRuntime(f"Unsupported action runtime {using!r}; only node actions can be wrapped")

    entry_file = action_dir / entry_point
    if not entry_file.is_file():
        raise EntryPointMissing(f"Entry file {entry_file} does not exist.")
    github.info(f"Nested action entry point: {entry_point}")
    return ActionManifest(entry_point=entry_point, entry_file=entry_file, using=using)


def install_dependencies(
    action_dir: Path,
    env: Mapping[str, str] | None = None,
    deadline: Deadline | None = None,
) -> bool:
    """Run ``npm install`` when the action ships a ``package.json``.

    Returns False when there was nothing to install.

    Raises:
        DependencyInstallFailed: npm could not be started or exited non-zero.
    """
    if not (action_dir / "package.json").is_file():
        return False
    github.info("Installing dependencies for nested action...")
    try:
        result = run_streaming(["npm", "install"], cwd=action_dir, env=env, deadline=deadline)
    except ProcessSpawnFailed as exc:
        raise DependencyInstallFailed(f"npm install could not run: {exc}") from exc
    if result.exit_code != 0:
        raise DependencyInstallFailed(f"npm install exited with code {result.exit_code}")
    return True
