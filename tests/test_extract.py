"""Tests for actwrap.extract module."""

from __future__ import annotations

from actwrap.extract import ARCHIVISTA_MARKER, extract_gitoids

OID_A = "deadbeef" * 8
OID_B = "0123456789abcdef" * 4


def test_extracts_marker_line() -> None:
    output = f"foo\nStored in archivista as {OID_A}\nbar"
    assert extract_gitoids(output) == [OID_A]


def test_ignores_hex_without_marker() -> None:
    output = f"digest {OID_A}\nnothing here"
    assert extract_gitoids(output) == []


def test_preserves_order_and_duplicates() -> None:
    output = "\n".join(
        [
            f"{ARCHIVISTA_MARKER}{OID_B}",
            "noise",
            f"{ARCHIVISTA_MARKER}{OID_A}",
            f"{ARCHIVISTA_MARKER}{OID_B}",
        ]
    )
    assert extract_gitoids(output) == [OID_B, OID_A, OID_B]


def test_marker_without_hex_yields_nothing() -> None:
    assert extract_gitoids(f"{ARCHIVISTA_MARKER}pending") == []


def test_requires_exactly_64_hex_characters() -> None:
    too_long = OID_A + "a"
    too_short = OID_A[:-1]
    output = f"{ARCHIVISTA_MARKER}{too_long}\n{ARCHIVISTA_MARKER}{too_short}"
    assert extract_gitoids(output) == []


def test_uppercase_hex_is_accepted() -> None:
    upper = OID_A.upper()
    assert extract_gitoids(f"time=1 msg={ARCHIVISTA_MARKER}{upper}") == [upper]


def test_handles_crlf_output() -> None:
    output = f"start\r\n{ARCHIVISTA_MARKER}{OID_A}\r\nend\r\n"
    assert extract_gitoids(output) == [OID_A]


def test_empty_output() -> None:
    assert extract_gitoids("") == []
