"""
actwrap - Input Loader

Merges wrapper inputs from multiple sources with proper precedence:
  1. --set NAME=VALUE overrides (highest priority)
  2. INPUT_* environment variables supplied by the runner
  3. The YAML file named by --config or the config-file input
  4. actwrap/data/defaults.yaml (lowest priority)
"""

from __future__ import annotations

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from actwrap.config.schema import DATA_DIR, get_schema, input_names, input_types, validate_inputs
from actwrap.environment import get_input
from actwrap.errors import ConfigError
from actwrap.options import WitnessOptions, WrapperSettings
from actwrap.utils.env import parse_env_bool

DEFAULTS_PATH = DATA_DIR / "defaults.yaml"


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries. Override values take precedence.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping, return empty dict if not found."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"Expected a mapping in {path}")
    return content


def read_env_inputs(env: Mapping[str, str], names: Iterable[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name in names:
        value = get_input(env, name)
        if value:
            values[name] = value
    return values


def parse_overrides(pairs: Iterable[str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid override {pair!r}; expected NAME=VALUE")
        overrides[name.strip()] = value
    return overrides


def coerce_inputs(values: dict[str, Any], types: dict[str, str]) -> dict[str, Any]:
    """Convert string inputs to the schema's types.

    Unconvertible values are left untouched so schema validation reports them.
    """
    coerced = dict(values)
    for name, value in values.items():
        kind = types.get(name)
        if kind == "boolean" and isinstance(value, str):
            parsed = parse_env_bool(value)
            if parsed is not None:
                coerced[name] = parsed
        elif kind == "number" and isinstance(value, str):
            try:
                coerced[name] = float(value)
            except ValueError:
                pass
        elif kind == "string" and isinstance(value, (int, float)) and not isinstance(value, bool):
            coerced[name] = str(value)
    return coerced


def settings_from_inputs(values: Mapping[str, Any]) -> WrapperSettings:
    def pick(cls: type) -> dict[str, Any]:
        names = {f.name for f in fields(cls)}
        return {
            name.replace("-", "_"): value for name, value in values.items() if name.replace("-", "_") in names
        }

    witness_values = pick(WitnessOptions)
    wrapper_values = pick(WrapperSettings)
    wrapper_values.pop("witness", None)
    return WrapperSettings(witness=WitnessOptions(**witness_values), **wrapper_values)


def load_settings(
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
    overrides: Iterable[str] = (),
) -> WrapperSettings:
    """
    Load, merge, and validate wrapper inputs.

    Args:
        env: Environment to read INPUT_* values from (defaults to os.environ)
        config_path: Optional YAML config file; falls back to the config-file input
        overrides: NAME=VALUE strings applied last

    Returns:
        Resolved WrapperSettings

    Raises:
        ConfigError: when the config file is missing or the merged inputs fail validation
    """
    env = os.environ if env is None else env
    schema = get_schema()
    names = input_names(schema)

    config = load_yaml_file(DEFAULTS_PATH)

    file_value = config_path or get_input(env, "config-file")
    if file_value:
        file_path = Path(file_value)
        if not file_path.is_file():
            raise ConfigError(f"Config file not found: {file_path}")
        config = deep_merge(config, load_yaml_file(file_path))

    config = deep_merge(config, read_env_inputs(env, names))
    config = deep_merge(config, parse_overrides(overrides))

    config = coerce_inputs(config, input_types(schema))
    errors = validate_inputs(config, schema)
    if errors:
        raise ConfigError("Invalid wrapper inputs", errors=errors)
    return settings_from_inputs(config)
