"""Tests for actwrap.report and the GitHub runner helpers."""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest

from actwrap.errors import ReportFailed
from actwrap.options import WitnessOptions
from actwrap.report import SUMMARY_HEADER, report_results, summary_row
from actwrap.utils.github import append_github_path, mask, resolve_output_path, write_outputs

OID_A = "a" * 64
OID_B = "b" * 64
OPTIONS = WitnessOptions(step="build", attestations="environment git")


class TestReportResults:
    def test_outputs_one_line_per_oid(self, tmp_path: Path) -> None:
        output = tmp_path / "output"
        report_results([OID_A, OID_B], OPTIONS, output, None)
        assert output.read_text(encoding="utf-8") == f"git_oid={OID_A}\ngit_oid={OID_B}\n"

    def test_summary_table(self, tmp_path: Path) -> None:
        summary = tmp_path / "summary.md"
        report_results([OID_A], OPTIONS, tmp_path / "output", summary)
        text = summary.read_text(encoding="utf-8")
        assert SUMMARY_HEADER in text
        assert f"| build | environment, git | [{OID_A}](https://archivista.testifysec.io/download/{OID_A}) |" in text

    def test_header_written_once(self, tmp_path: Path) -> None:
        summary = tmp_path / "summary.md"
        report_results([OID_A], OPTIONS, tmp_path / "output", summary)
        report_results([OID_B], OPTIONS, tmp_path / "output", summary)
        text = summary.read_text(encoding="utf-8")
        assert text.count("## Attestations Created") == 1
        assert OID_A in text and OID_B in text

    def test_no_oids_writes_nothing(self, tmp_path: Path) -> None:
        output = tmp_path / "output"
        summary = tmp_path / "summary.md"
        report_results([], OPTIONS, output, summary)
        assert not output.exists()
        assert not summary.exists()

    def test_stdout_without_output_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        report_results([OID_A], OPTIONS, None, None)
        assert capsys.readouterr().out == f"git_oid={OID_A}\n"

    def test_custom_archivista_server(self) -> None:
        options = WitnessOptions(step="s", attestations="git", archivista_server="https://archivista.example/")
        assert f"(https://archivista.example/download/{OID_A})" in summary_row(options, OID_A)


class TestGithubHelpers:
    def test_write_outputs_appends(self, tmp_path: Path) -> None:
        output = tmp_path / "output"
        output.write_text("existing=1\n", encoding="utf-8")
        write_outputs([("path", "/opt/witness")], output)
        assert output.read_text(encoding="utf-8") == "existing=1\npath=/opt/witness\n"

    def test_resolve_output_path_from_env(self, tmp_path: Path) -> None:
        with mock.patch.dict("os.environ", {"GITHUB_OUTPUT": str(tmp_path / "out")}):
            assert resolve_output_path(None, True) == tmp_path / "out"
            assert resolve_output_path(None, False) is None
            assert resolve_output_path("explicit", True) == Path("explicit")

    def test_append_github_path(self, tmp_path: Path) -> None:
        path_file = tmp_path / "path"
        with mock.patch.dict("os.environ", {"GITHUB_PATH": str(path_file)}):
            append_github_path(Path("/opt/witness"))
        assert path_file.read_text(encoding="utf-8") == "/opt/witness\n"

    def test_append_github_path_without_runner(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_PATH", raising=False)
        append_github_path(tmp_path)

    def test_mask(self, capsys: pytest.CaptureFixture[str]) -> None:
        mask("")
        mask("s3cret")
        assert capsys.readouterr().out == "::add-mask::s3cret\n"


def test_unwritable_output_raises_report_failed(tmp_path: Path) -> None:
    with pytest.raises(ReportFailed, match="outputs"):
        report_results([OID_A], OPTIONS, tmp_path, None)
