"""Publish extracted GitOIDs to the runner's outputs and step summary."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from actwrap.errors import ReportFailed
from actwrap.options import DEFAULT_ARCHIVISTA_SERVER, WitnessOptions
from actwrap.utils.github import append_summary, write_outputs

OUTPUT_NAME = "git_oid"
SUMMARY_HEADER = "## Attestations Created\n| Step | Attestors Run | Attestation GitOID |\n| --- | --- | --- |\n"


def summary_row(options: WitnessOptions, oid: str) -> str:
    server = (options.archivista_server or DEFAULT_ARCHIVISTA_SERVER).rstrip("/")
    attestors = ", ".join(options.attestors)
    return f"| {options.step} | {attestors} | [{oid}]({server}/download/{oid}) |\n"


def report_results(
    oids: Sequence[str],
    options: WitnessOptions,
    output_path: Path | None,
    summary_path: Path | None,
) -> None:
    """Write one ``git_oid`` output and one summary row per identifier.

    The summary table is only written when a summary file is available; its
    header is added once per file.
    """
    if not oids:
        return
    try:
        write_outputs([(OUTPUT_NAME, oid) for oid in oids], output_path)
    except OSError as exc:
        raise ReportFailed(f"Failed to write outputs to {output_path}: {exc}") from exc
    if summary_path is None:
        return
    try:
        existing = summary_path.read_text(encoding="utf-8") if summary_path.exists() else ""
        text = "" if SUMMARY_HEADER in existing else "\n" + SUMMARY_HEADER
        text += "".join(summary_row(options, oid) for oid in oids)
        append_summary(text, summary_path)
    except OSError as exc:
        raise ReportFailed(f"Failed to write step summary to {summary_path}: {exc}") from exc
