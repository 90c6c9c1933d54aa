"""Schema loading and validation for wrapper inputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
SCHEMA_PATH = DATA_DIR / "inputs.schema.json"


def get_schema(path: Path = SCHEMA_PATH) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Schema at {path} is not a JSON object")
    return data


def input_names(schema: dict[str, Any] | None = None) -> list[str]:
    """Every input the wrapper owns, i.e. the names never passed through."""
    schema = schema or get_schema()
    return sorted(schema.get("properties", {}))


def input_types(schema: dict[str, Any] | None = None) -> dict[str, str]:
    schema = schema or get_schema()
    return {name: str(spec.get("type", "string")) for name, spec in schema.get("properties", {}).items()}


def validate_inputs(values: dict[str, Any], schema: dict[str, Any] | None = None) -> list[str]:
    """Validate merged inputs; returns sorted ``path: message`` strings."""
    validator = Draft7Validator(schema or get_schema())
    errors: list[str] = []
    for err in validator.iter_errors(values):
        path = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{path}: {err.message}")
    return sorted(errors)
