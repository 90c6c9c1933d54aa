"""Tests for actwrap.fetch module (network replaced by local zip files)."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from actwrap import fetch
from actwrap.errors import ArtifactLayoutUnresolvable, DownloadFailed
from actwrap.fetch import archive_url, fetch_action, resolve_root
from actwrap.reference import parse_action_ref


def _zip_with(dest: Path, files: dict[str, str]) -> None:
    with zipfile.ZipFile(dest, "w") as bundle:
        for name, content in files.items():
            bundle.writestr(name, content)


class FakeDownloads:
    """Stand-in for download_file: serves zip layouts by URL, 404 otherwise."""

    def __init__(self, layouts: dict[str, dict[str, str]]) -> None:
        self.layouts = layouts
        self.calls: list[str] = []

    def __call__(self, url: str, dest: Path, deadline=None) -> None:
        self.calls.append(url)
        if url not in self.layouts:
            raise DownloadFailed(f"Failed to download {url}", url=url, status=404, headers={"server": "test"})
        _zip_with(dest, self.layouts[url])


class TestArchiveUrl:
    def test_tag_url(self) -> None:
        coord = parse_action_ref("acme/demo@v1.2.3")
        assert archive_url(coord, branch=False) == "https://github.com/acme/demo/archive/refs/tags/v1.2.3.zip"

    def test_branch_url(self) -> None:
        coord = parse_action_ref("acme/demo@feature/x")
        assert archive_url(coord, branch=True) == "https://github.com/acme/demo/archive/refs/heads/feature/x.zip"


class TestFetchAction:
    def test_tag_download(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@v1")
        tag_url = archive_url(coord, branch=False)
        fake = FakeDownloads({tag_url: {"demo-v1/action.yml": "runs: {}\n"}})
        monkeypatch.setattr(fetch, "download_file", fake)

        result = fetch_action(coord, temp_root=tmp_path)

        assert result.url == tag_url
        assert result.root_dir.name == "demo-v1"
        assert (result.root_dir / "action.yml").is_file()
        assert fake.calls == [tag_url]

    def test_tag_failure_falls_back_to_branch(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        coord = parse_action_ref("acme/demo@v1.2.3")
        heads_url = archive_url(coord, branch=True)
        fake = FakeDownloads({heads_url: {"demo-v1.2.3/action.yml": "runs: {}\n"}})
        monkeypatch.setattr(fetch, "download_file", fake)

        result = fetch_action(coord, temp_root=tmp_path)

        assert fake.calls == [archive_url(coord, branch=False), heads_url]
        assert result.url == heads_url
        assert result.root_dir.name == "demo-v1.2.3"
        out = capsys.readouterr().out
        assert "::warning::" in out
        assert "HTTP status: 404" in out

    def test_branch_like_failure_propagates(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@feature/x")
        fake = FakeDownloads({})
        monkeypatch.setattr(fetch, "download_file", fake)

        with pytest.raises(DownloadFailed) as exc_info:
            fetch_action(coord, temp_root=tmp_path)

        assert exc_info.value.status == 404
        assert fake.calls == [archive_url(coord, branch=True)]

    def test_both_urls_fail(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@v1")
        fake = FakeDownloads({})
        monkeypatch.setattr(fetch, "download_file", fake)

        with pytest.raises(DownloadFailed):
            fetch_action(coord, temp_root=tmp_path)
        assert len(fake.calls) == 2

    def test_single_unconventional_folder(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@v1")
        tag_url = archive_url(coord, branch=False)
        fake = FakeDownloads({tag_url: {"acme-demo-3f2a1b/action.yml": "runs: {}\n"}})
        monkeypatch.setattr(fetch, "download_file", fake)

        result = fetch_action(coord, temp_root=tmp_path)

        assert result.root_dir.name == "acme-demo-3f2a1b"

    def test_archive_removed_after_extraction(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@v1")
        tag_url = archive_url(coord, branch=False)
        monkeypatch.setattr(fetch, "download_file", FakeDownloads({tag_url: {"demo-v1/a.txt": "x"}}))

        result = fetch_action(coord, temp_root=tmp_path)

        assert not (result.root_dir.parent / fetch.ARCHIVE_NAME).exists()

    def test_corrupt_archive(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(url: str, dest: Path, deadline=None) -> None:
            dest.write_bytes(b"not a zip")

        monkeypatch.setattr(fetch, "download_file", broken)
        with pytest.raises(DownloadFailed):
            fetch_action(parse_action_ref("acme/demo@feature/x"), temp_root=tmp_path)

    def test_branch_retry_uses_fresh_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        coord = parse_action_ref("acme/demo@v1")
        tag_url = archive_url(coord, branch=False)
        heads_url = archive_url(coord, branch=True)

        def partial_then_ok(url: str, dest: Path, deadline=None) -> None:
            if url == tag_url:
                (dest.parent / "half-extracted").mkdir()
                raise DownloadFailed("truncated archive", url=url)
            _zip_with(dest, {"acme-demo-3f2a1b/action.yml": "runs: {}\n"})

        monkeypatch.setattr(fetch, "download_file", partial_then_ok)
        result = fetch_action(coord, temp_root=tmp_path)

        assert result.url == heads_url
        assert result.root_dir.name == "acme-demo-3f2a1b"

    def test_temp_root_not_a_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        monkeypatch.setattr(fetch, "download_file", FakeDownloads({}))
        with pytest.raises(DownloadFailed, match="temporary directory"):
            fetch_action(parse_action_ref("acme/demo@v1"), temp_root=blocker)


class TestResolveRoot:
    def test_conventional_name_wins(self, tmp_path: Path) -> None:
        (tmp_path / "demo-v1").mkdir()
        (tmp_path / "other").mkdir()
        assert resolve_root(tmp_path, parse_action_ref("acme/demo@v1")) == tmp_path / "demo-v1"

    def test_two_candidates_unresolvable(self, tmp_path: Path) -> None:
        (tmp_path / "one").mkdir()
        (tmp_path / "two").mkdir()
        with pytest.raises(ArtifactLayoutUnresolvable, match="one, two"):
            resolve_root(tmp_path, parse_action_ref("acme/demo@v1"))

    def test_empty_unresolvable(self, tmp_path: Path) -> None:
        (tmp_path / "stray.txt").write_text("x", encoding="utf-8")
        with pytest.raises(ArtifactLayoutUnresolvable):
            resolve_root(tmp_path, parse_action_ref("acme/demo@v1"))
