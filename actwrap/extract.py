"""Pull archivista GitOIDs out of witness output."""

from __future__ import annotations

import re

ARCHIVISTA_MARKER = "Stored in archivista as "
GITOID_RE = re.compile(r"(?<![0-9a-fA-F])[0-9a-fA-F]{64}(?![0-9a-fA-F])")


def extract_gitoids(output: str, marker: str = ARCHIVISTA_MARKER) -> list[str]:
    """Return every GitOID on a marker line, in output order.

    Lines without the marker are ignored even if they hold a 64-hex run.
    Duplicates are kept.
    """
    oids: list[str] = []
    for line in output.splitlines():
        if marker not in line:
            continue
        match = GITOID_RE.search(line)
        if match:
            oids.append(match.group(0))
    return oids
