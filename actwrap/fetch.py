"""Download a GitHub action archive and locate its root directory."""

from __future__ import annotations

import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

from actwrap.errors import ArtifactLayoutUnresolvable, DownloadFailed
from actwrap.executor import Deadline
from actwrap.reference import ActionCoordinate
from actwrap.utils import github
from actwrap.utils.http import download_file

GITHUB_BASE_URL = "https://github.com"
ARCHIVE_NAME = ".action-archive.zip"


@dataclass(frozen=True)
class FetchResult:
    root_dir: Path
    url: str


def archive_url(coord: ActionCoordinate, branch: bool, base_url: str = GITHUB_BASE_URL) -> str:
    kind = "heads" if branch else "tags"
    return f"{base_url}/{coord.slug}/archive/refs/{kind}/{coord.ref}.zip"


def _download_and_extract(url: str, dest_dir: Path, deadline: Deadline | None) -> None:
    archive = dest_dir / ARCHIVE_NAME
    try:
        download_file(url, archive, deadline)
        try:
            with zipfile.ZipFile(archive) as bundle:
                bundle.extractall(dest_dir)
        except (zipfile.BadZipFile, OSError) as exc:
            raise DownloadFailed(f"Failed to extract archive from {url}: {exc}", url=url) from exc
    finally:
        archive.unlink(missing_ok=True)


def _make_temp_dir(temp_root: Path | None) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix="nested-action-", dir=temp_root))
    except OSError as exc:
        raise DownloadFailed(f"Failed to create a temporary directory: {exc}") from exc


def resolve_root(temp_dir: Path, coord: ActionCoordinate) -> Path:
    """Find the extracted root: ``{repo}-{ref}`` first, else the only directory."""
    conventional = temp_dir / f"{coord.repo}-{coord.ref}"
    if conventional.is_dir():
        return conventional
    candidates = sorted(path for path in temp_dir.iterdir() if path.is_dir())
    if len(candidates) == 1:
        github.info(f"Using alternative extracted folder: {candidates[0]}")
        return candidates[0]
    names = ", ".join(path.name for path in candidates) or "<none>"
    raise ArtifactLayoutUnresolvable(
        f"Extracted folder {conventional} not found and could not determine alternative (found: {names})"
    )


def fetch_action(
    coord: ActionCoordinate,
    *,
    deadline: Deadline | None = None,
    temp_root: Path | None = None,
    base_url: str = GITHUB_BASE_URL,
) -> FetchResult:
    """Download and unpack ``coord`` into a fresh temporary directory.

    Tag-like refs are tried as tags first and retried once as branches; a
    failure for a branch-like ref propagates. The directory is left for the
    OS to reap.
    """
    tag_like = not coord.is_branch_like
    url = archive_url(coord, branch=not tag_like, base_url=base_url)
    temp_dir = _make_temp_dir(temp_root)
    github.info(f"Downloading action from: {url}")
    try:
        _download_and_extract(url, temp_dir, deadline)
    except DownloadFailed as exc:
        if not tag_like:
            raise
        github.warning(exc.describe())
        url = archive_url(coord, branch=True, base_url=base_url)
        temp_dir = _make_temp_dir(temp_root)
        github.info(f"Trying alternative URL: {url}")
        _download_and_extract(url, temp_dir, deadline)
    github.info(f"Downloaded and extracted to {temp_dir}")
    github.debug(f"Temporary directory contents: {', '.join(sorted(p.name for p in temp_dir.iterdir()))}")
    return FetchResult(root_dir=resolve_root(temp_dir, coord), url=url)
