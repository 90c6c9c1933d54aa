"""Input configuration for actwrap."""

from __future__ import annotations

from actwrap.config.loader import (
    coerce_inputs,
    deep_merge,
    load_settings,
    load_yaml_file,
    parse_overrides,
    read_env_inputs,
    settings_from_inputs,
)
from actwrap.config.schema import get_schema, input_names, validate_inputs

__all__ = [
    "coerce_inputs",
    "deep_merge",
    "get_schema",
    "input_names",
    "load_settings",
    "load_yaml_file",
    "parse_overrides",
    "read_env_inputs",
    "settings_from_inputs",
    "validate_inputs",
]
