"""Environment value parsing helpers."""

from __future__ import annotations


def parse_env_bool(value: str | None) -> bool | None:
    """Parse a truthy/falsy string; ``None`` when the value is unrecognized."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in {"true", "1", "yes", "y", "on"}:
        return True
    if text in {"false", "0", "no", "n", "off"}:
        return False
    return None
