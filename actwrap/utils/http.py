"""HTTP download helpers (https only, streamed to disk)."""

from __future__ import annotations

import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

from actwrap import __version__
from actwrap.errors import DownloadFailed
from actwrap.executor import Deadline

USER_AGENT = f"actwrap/{__version__}"
HTTP_TIMEOUT = 60.0
CHUNK_SIZE = 64 * 1024


def safe_urlopen(req: urllib.request.Request, timeout: float):
    parsed = urlparse(req.full_url)
    if parsed.scheme != "https":
        raise ValueError(f"Unsupported URL scheme: {parsed.scheme}")
    return urllib.request.urlopen(req, timeout=timeout)  # noqa: S310


def download_file(url: str, dest: Path, deadline: Deadline | None = None) -> None:
    """Stream ``url`` into ``dest``.

    Raises:
        DownloadFailed: with the HTTP status and response headers when the
            server answered, or the transport error otherwise.
    """
    deadline = deadline or Deadline()
    deadline.check()
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with safe_urlopen(request, timeout=deadline.timeout_for(HTTP_TIMEOUT)) as response:
            with dest.open("wb") as handle:
                for chunk in iter(lambda: response.read(CHUNK_SIZE), b""):
                    deadline.check()
                    handle.write(chunk)
    except urllib.error.HTTPError as exc:
        raise DownloadFailed(
            f"Download failed for {url}: {exc.reason}",
            url=url,
            status=exc.code,
            headers=dict(exc.headers.items()) if exc.headers else None,
        ) from exc
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise DownloadFailed(f"Download failed for {url}: {exc}", url=url) from exc
