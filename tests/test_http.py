"""Tests for actwrap.utils.http (urlopen replaced with fakes)."""

from __future__ import annotations

import io
import urllib.error
import urllib.request
from email.message import Message
from pathlib import Path

import pytest

from actwrap.errors import DownloadFailed, RunInterrupted
from actwrap.executor import Deadline
from actwrap.utils import http
from actwrap.utils.http import USER_AGENT, download_file, safe_urlopen


class FakeResponse(io.BytesIO):
    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def test_streams_to_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[urllib.request.Request] = []

    def fake_urlopen(req: urllib.request.Request, timeout: float) -> FakeResponse:
        seen.append(req)
        return FakeResponse(b"x" * (http.CHUNK_SIZE + 10))

    monkeypatch.setattr(http, "safe_urlopen", fake_urlopen)
    dest = tmp_path / "nested" / "archive.zip"
    download_file("https://example.test/archive.zip", dest)

    assert dest.stat().st_size == http.CHUNK_SIZE + 10
    assert seen[0].get_header("User-agent") == USER_AGENT


def test_http_error_carries_status_and_headers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    headers = Message()
    headers["Content-Type"] = "text/plain"

    def not_found(req: urllib.request.Request, timeout: float) -> FakeResponse:
        raise urllib.error.HTTPError(req.full_url, 404, "Not Found", headers, None)

    monkeypatch.setattr(http, "safe_urlopen", not_found)
    with pytest.raises(DownloadFailed) as exc_info:
        download_file("https://example.test/missing.zip", tmp_path / "a.zip")

    error = exc_info.value
    assert error.status == 404
    assert error.url == "https://example.test/missing.zip"
    assert "HTTP status: 404" in error.describe()
    assert "Content-Type: text/plain" in error.describe()


def test_transport_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def offline(req: urllib.request.Request, timeout: float) -> FakeResponse:
        raise urllib.error.URLError("network unreachable")

    monkeypatch.setattr(http, "safe_urlopen", offline)
    with pytest.raises(DownloadFailed, match="network unreachable") as exc_info:
        download_file("https://example.test/a.zip", tmp_path / "a.zip")
    assert exc_info.value.status is None


def test_plain_http_rejected() -> None:
    with pytest.raises(ValueError, match="scheme"):
        safe_urlopen(urllib.request.Request("http://example.test/a.zip"), timeout=1)


def test_cancelled_before_request(tmp_path: Path) -> None:
    deadline = Deadline()
    deadline.cancel()
    with pytest.raises(RunInterrupted):
        download_file("https://example.test/a.zip", tmp_path / "a.zip", deadline)
