"""Install the witness binary from the tool cache or a release download."""

from __future__ import annotations

import os
import platform
import shutil
import stat
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from actwrap.errors import DownloadFailed, ToolDownloadFailed
from actwrap.executor import Deadline
from actwrap.utils import github
from actwrap.utils.http import download_file

TOOL_NAME = "witness"
PRIMARY_RELEASE_URL = "https://github.com/in-toto/witness/releases/download"
FALLBACK_RELEASE_URL = "https://github.com/testifysec/witness/releases/download"
RELEASE_SOURCES = (PRIMARY_RELEASE_URL, FALLBACK_RELEASE_URL)


@dataclass(frozen=True)
class ToolInstall:
    path: Path
    version: str
    cached: bool

    @property
    def bin_dir(self) -> Path:
        return self.path.parent


def resolve_platform(system: str | None = None, machine: str | None = None) -> tuple[str, str]:
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    if system not in {"linux", "darwin", "windows"}:
        raise ToolDownloadFailed(f"Unsupported platform: {system}")
    if machine in {"x86_64", "amd64"}:
        arch = "amd64"
    elif machine in {"aarch64", "arm64"}:
        arch = "arm64"
    else:
        raise ToolDownloadFailed(f"Unsupported architecture: {machine}")
    return system, arch


def asset_name(version: str, os_name: str, arch: str) -> str:
    return f"{TOOL_NAME}_{version}_{os_name}_{arch}.tar.gz"


def binary_name(os_name: str) -> str:
    return f"{TOOL_NAME}.exe" if os_name == "windows" else TOOL_NAME


def tool_cache_root(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    runner_cache = env.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".cache" / "actwrap" / "tools"


def _locate_binary(extract_dir: Path, name: str) -> Path | None:
    direct = extract_dir / name
    if direct.is_file():
        return direct
    for child in sorted(extract_dir.iterdir()):
        if child.is_dir() and (child / name).is_file():
            return child / name
    return None


def ensure_witness(
    version: str,
    install_dir: Path | str,
    *,
    cache_root: Path | None = None,
    deadline: Deadline | None = None,
    system: str | None = None,
    machine: str | None = None,
    sources: Sequence[str] = RELEASE_SOURCES,
) -> ToolInstall:
    """Return a usable witness binary, downloading it when not cached.

    Raises:
        ToolDownloadFailed: every source failed, the archive was unreadable,
            or no binary was found after extraction.
    """
    version = version.strip().lstrip("v")
    os_name, arch = resolve_platform(system, machine)
    name = binary_name(os_name)
    cached = (cache_root or tool_cache_root()) / TOOL_NAME / version / os_name / arch / name
    if cached.is_file():
        github.info(f"Using cached {TOOL_NAME} {version} at {cached}")
        return ToolInstall(path=cached, version=version, cached=True)

    dest_dir = Path(install_dir).resolve()
    asset = asset_name(version, os_name, arch)
    archive_path = dest_dir / asset
    failures: list[str] = []
    for base in sources:
        url = f"{base}/v{version}/{asset}"
        github.info(f"Downloading {TOOL_NAME} from {url}")
        try:
            download_file(url, archive_path, deadline)
            break
        except DownloadFailed as exc:
            github.warning(exc.describe())
            failures.append(exc.describe())
    else:
        raise ToolDownloadFailed(f"Failed to download {TOOL_NAME} {version}: " + "; ".join(failures))

    extract_dir = dest_dir / f"{TOOL_NAME}-{version}"
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            tar.extractall(extract_dir, filter="data")
    except (tarfile.TarError, OSError) as exc:
        raise ToolDownloadFailed(f"Failed to extract {TOOL_NAME}: {exc}") from exc
    finally:
        archive_path.unlink(missing_ok=True)

    located = _locate_binary(extract_dir, name)
    if located is None:
        raise ToolDownloadFailed(f"{name} not found in {extract_dir}")
    try:
        cached.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(located, cached)
        cached.chmod(cached.stat().st_mode | stat.S_IEXEC)
    except OSError as exc:
        raise ToolDownloadFailed(f"Failed to cache {TOOL_NAME} at {cached}: {exc}") from exc
    github.info(f"{TOOL_NAME} {version} installed at {cached}")
    return ToolInstall(path=cached, version=version, cached=False)
