"""Error taxonomy for the wrapper pipeline.

Every fatal condition the orchestrator knows how to report is a
``WrapperError``. Anything else is a bug and propagates to the CLI.
"""

from __future__ import annotations

from typing import Mapping


class WrapperError(RuntimeError):
    """Base class for errors that end a wrapper run."""

    code = "ACTWRAP-ERROR"

    def describe(self) -> str:
        return str(self)


class ConfigError(WrapperError):
    """Raised when the merged inputs are invalid."""

    code = "ACTWRAP-CONFIG"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def describe(self) -> str:
        if not self.errors:
            return str(self)
        return f"{self}: " + "; ".join(self.errors)


class InvalidReferenceFormat(WrapperError):
    code = "ACTWRAP-REF"


class DownloadFailed(WrapperError):
    """Raised when an archive cannot be downloaded or unpacked."""

    code = "ACTWRAP-DOWNLOAD"

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.headers = dict(headers or {})

    def describe(self) -> str:
        parts = [str(self)]
        if self.status is not None:
            parts.append(f"HTTP status: {self.status}")
        if self.headers:
            rendered = ", ".join(f"{key}: {value}" for key, value in sorted(self.headers.items()))
            parts.append(f"Headers: {rendered}")
        return " | ".join(parts)


class ArtifactLayoutUnresolvable(WrapperError):
    code = "ACTWRAP-LAYOUT"


class ToolDownloadFailed(WrapperError):
    code = "ACTWRAP-TOOL"


class ManifestError(WrapperError):
    code = "ACTWRAP-MANIFEST"


class ManifestNotFound(ManifestError):
    pass


class EntryPointMissing(ManifestError):
    pass


class UnsupportedActionRuntime(ManifestError):
    pass


class DependencyInstallFailed(WrapperError):
    """Recovered locally: the orchestrator downgrades this to a warning."""

    code = "ACTWRAP-DEPS"


class MissingTarget(WrapperError):
    code = "ACTWRAP-TARGET"


class ProcessSpawnFailed(WrapperError):
    code = "ACTWRAP-SPAWN"


class RunTimeout(WrapperError):
    code = "ACTWRAP-TIMEOUT"


class RunInterrupted(WrapperError):
    code = "ACTWRAP-INTERRUPTED"


class ReportFailed(WrapperError):
    """Raised when outputs or the step summary cannot be written."""

    code = "ACTWRAP-REPORT"


class ProcessNonZeroExit(WrapperError):
    code = "ACTWRAP-EXIT"

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code
