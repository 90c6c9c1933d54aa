"""Wrapper run engine for the services layer.

Sequences one invocation: parse inputs, provision witness, resolve the nested
target, build the command, execute it, extract GitOIDs, and report them. Any
``WrapperError`` moves the run to ``Failed`` with a single error annotation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from actwrap.command import (
    TargetMode,
    build_command,
    direct_invocation,
    render_command,
    wrapped_invocation,
)
from actwrap.config.loader import load_settings
from actwrap.config.schema import input_names
from actwrap.environment import prepend_path, project_environment
from actwrap.errors import (
    ConfigError,
    DependencyInstallFailed,
    MissingTarget,
    ProcessNonZeroExit,
    ReportFailed,
    RunInterrupted,
    RunTimeout,
    WrapperError,
)
from actwrap.executor import Deadline, ProcessResult, run_streaming
from actwrap.exit_codes import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS, EXIT_TIMEOUT
from actwrap.extract import extract_gitoids
from actwrap.fetch import FetchResult, fetch_action
from actwrap.manifest import ActionManifest, install_dependencies, read_manifest
from actwrap.options import WrapperSettings
from actwrap.provision import ToolInstall, ensure_witness
from actwrap.reference import parse_action_ref
from actwrap.report import report_results
from actwrap.utils import github


class RunState(str, Enum):
    PARSING_INPUTS = "ParsingInputs"
    PROVISIONING_TOOL = "ProvisioningTool"
    RESOLVING_TARGET = "ResolvingTarget"
    BUILDING_COMMAND = "BuildingCommand"
    EXECUTING = "Executing"
    EXTRACTING_RESULTS = "ExtractingResults"
    REPORTING = "Reporting"
    DONE = "Done"
    FAILED = "Failed"


@dataclass
class Collaborators:
    """I/O steps of a run; tests swap these for fakes."""

    fetch: Callable[..., FetchResult] = fetch_action
    read_manifest: Callable[[Path], ActionManifest] = read_manifest
    install_dependencies: Callable[..., bool] = install_dependencies
    provision: Callable[..., ToolInstall] = ensure_witness
    execute: Callable[..., ProcessResult] = run_streaming


@dataclass
class WrapperRunResult:
    exit_code: int = EXIT_SUCCESS
    state: RunState = RunState.PARSING_INPUTS
    states: list[RunState] = field(default_factory=list)
    mode: TargetMode | None = None
    command: list[str] = field(default_factory=list)
    display_command: str = ""
    git_oids: list[str] = field(default_factory=list)
    error: str = ""
    problems: list[dict[str, Any]] = field(default_factory=list)

    def enter(self, state: RunState) -> None:
        self.state = state
        self.states.append(state)

    @property
    def success(self) -> bool:
        return self.state is RunState.DONE

    def to_payload(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "states": [state.value for state in self.states],
            "mode": self.mode.value if self.mode else None,
            "command": self.command,
            "display_command": self.display_command,
            "git_oids": self.git_oids,
            "error": self.error,
        }


def select_mode(settings: WrapperSettings) -> TargetMode:
    if settings.action_ref and settings.command:
        raise ConfigError("action-ref and command are mutually exclusive; set only one")
    if settings.action_ref:
        return TargetMode.WRAPPED
    if settings.command:
        return TargetMode.DIRECT
    raise MissingTarget("Either action-ref or command must be provided")


def _fail(result: WrapperRunResult, exc: WrapperError) -> WrapperRunResult:
    message = exc.describe()
    result.enter(RunState.FAILED)
    result.error = message
    result.problems.append({"severity": "error", "message": message, "code": exc.code})
    if isinstance(exc, RunTimeout):
        result.exit_code = EXIT_TIMEOUT
    elif isinstance(exc, RunInterrupted):
        result.exit_code = EXIT_INTERRUPTED
    else:
        result.exit_code = EXIT_FAILURE
    github.error(f"Wrapper action failed: {message}")
    return result


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def run_wrapper(
    *,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
    overrides: Iterable[str] = (),
    deadline: Deadline | None = None,
    collaborators: Collaborators | None = None,
    dry_run: bool = False,
    witness_bin: str = "witness",
) -> WrapperRunResult:
    """Run the wrapper once.

    ``dry_run`` stops after the command is built: nothing is provisioned,
    installed, or executed, and ``witness_bin`` stands in for the binary.
    """
    env = dict(os.environ if env is None else env)
    deadline = deadline or Deadline()
    steps = collaborators or Collaborators()
    result = WrapperRunResult()

    try:
        result.enter(RunState.PARSING_INPUTS)
        settings = load_settings(env, config_path, overrides)
        deadline.limit(settings.timeout_minutes * 60)
        result.mode = select_mode(settings)
        secrets = [settings.witness.fulcio_token]
        github.mask(settings.witness.fulcio_token)
        deadline.check()

        child_env = env
        if not dry_run:
            result.enter(RunState.PROVISIONING_TOOL)
            install = steps.provision(
                settings.witness_version,
                settings.witness_install_dir,
                deadline=deadline,
            )
            witness_bin = str(install.path)
            child_env = prepend_path(env, str(install.bin_dir))
            try:
                github.append_github_path(install.bin_dir)
            except OSError as exc:
                raise ReportFailed(f"Failed to update GITHUB_PATH: {exc}") from exc
        child_env = project_environment(child_env, input_names())

        if result.mode is TargetMode.WRAPPED:
            result.enter(RunState.RESOLVING_TARGET)
            coord = parse_action_ref(settings.action_ref)
            github.info(f"Parsed repo: {coord.slug}, ref: {coord.ref}")
            fetched = steps.fetch(coord, deadline=deadline)
            action_dir = fetched.root_dir / coord.path if coord.path else fetched.root_dir
            manifest = steps.read_manifest(action_dir)
            if settings.install_dependencies and not dry_run:
                try:
                    steps.install_dependencies(action_dir, env=child_env, deadline=deadline)
                except DependencyInstallFailed as exc:
                    github.warning(f"Dependency installation failed, continuing: {exc.describe()}")
                    result.problems.append({"severity": "warning", "message": exc.describe(), "code": exc.code})
            target = wrapped_invocation(manifest.entry_file, settings.extra_args)
            cwd = action_dir
        else:
            target = direct_invocation(settings.command, settings.shell)
            cwd = Path(settings.working_directory or ".").resolve()

        result.enter(RunState.BUILDING_COMMAND)
        result.command = build_command(settings.witness, target, witness_bin)
        result.display_command = render_command(result.command, secrets)
        github.info(f"Running: {result.display_command}")
        if dry_run:
            result.enter(RunState.DONE)
            return result

        result.enter(RunState.EXECUTING)
        github.group(f"witness run {settings.witness.step}")
        try:
            process = steps.execute(result.command, cwd=cwd, env=child_env, deadline=deadline)
        finally:
            github.endgroup()
        if process.exit_code != 0:
            raise ProcessNonZeroExit(f"witness exited with code {process.exit_code}", process.exit_code)

        result.enter(RunState.EXTRACTING_RESULTS)
        result.git_oids = extract_gitoids(process.output)
        github.info(f"Extracted {len(result.git_oids)} GitOID(s)")

        result.enter(RunState.REPORTING)
        report_results(
            result.git_oids,
            settings.witness,
            _optional_path(env.get("GITHUB_OUTPUT")),
            _optional_path(env.get("GITHUB_STEP_SUMMARY")),
        )
        result.enter(RunState.DONE)
    except WrapperError as exc:
        return _fail(result, exc)
    return result
