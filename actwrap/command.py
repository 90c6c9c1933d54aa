"""Build the witness command line and the nested target invocation."""

from __future__ import annotations

import shlex
from enum import Enum
from pathlib import Path
from typing import Sequence

from actwrap.errors import ConfigError, MissingTarget
from actwrap.options import WitnessOptions, resolve_sigstore_defaults, split_list

SEPARATOR = "--"

# (kind, flag, WitnessOptions attribute) in witness CLI order.
# "multi" repeats the flag per space-separated entry, "switch" is a bare flag
# emitted when true, "bool" renders as flag=true, "value" as flag=value.
FLAG_TABLE: tuple[tuple[str, str, str], ...] = (
    ("multi", "-a", "attestations"),
    ("switch", "--attestor-link-export", "attestor_link_export"),
    ("switch", "--attestor-sbom-export", "attestor_sbom_export"),
    ("switch", "--attestor-slsa-export", "attestor_slsa_export"),
    ("value", "--attestor-maven-pom-path", "attestor_maven_pom_path"),
    ("value", "--certificate", "certificate"),
    ("bool", "--enable-archivista", "enable_archivista"),
    ("value", "--archivista-server", "archivista_server"),
    ("value", "--signer-fulcio-url", "fulcio"),
    ("value", "--signer-fulcio-oidc-client-id", "fulcio_oidc_client_id"),
    ("value", "--signer-fulcio-oidc-issuer", "fulcio_oidc_issuer"),
    ("value", "--signer-fulcio-token", "fulcio_token"),
    ("multi", "-i", "intermediates"),
    ("value", "--key", "key"),
    ("value", "--attestor-product-exclude-glob", "product_exclude_glob"),
    ("value", "--attestor-product-include-glob", "product_include_glob"),
    ("value", "--spiffe-socket", "spiffe_socket"),
    ("value", "-s", "step"),
    ("multi", "--timestamp-servers", "timestamp_servers"),
    ("value", "--trace", "trace"),
    ("value", "--outfile", "outfile"),
)


class TargetMode(str, Enum):
    WRAPPED = "wrapped"
    DIRECT = "direct"


def wrapped_invocation(entry_file: Path, extra_args: str = "") -> list[str]:
    return ["node", str(entry_file), *extra_args.split()]


def direct_invocation(command: str, shell: str = "") -> list[str]:
    """Tokenize a raw command, or hand it to ``shell -c`` when a shell is named.

    Tokens are not escaped further; shell metacharacters are only meaningful
    with ``shell`` set and are then the caller's responsibility.
    """
    if shell:
        return [shell, "-c", command]
    try:
        tokens = shlex.split(command)
    except ValueError as exc:
        raise ConfigError(f"Cannot parse command {command!r}: {exc}") from exc
    if not tokens:
        raise MissingTarget("command is empty")
    return tokens


def build_witness_args(options: WitnessOptions, target: Sequence[str]) -> list[str]:
    """Return ``run <flags...> -- <target...>``.

    Sigstore defaults are resolved up front; the loop below only decides
    whether each flag is included.
    """
    resolved = resolve_sigstore_defaults(options)
    args = ["run"]
    for kind, flag, attr in FLAG_TABLE:
        value = getattr(resolved, attr)
        if kind == "multi":
            args.extend(f"{flag}={item}" for item in split_list(value))
        elif kind == "switch":
            if value:
                args.append(flag)
        elif kind == "bool":
            if value:
                args.append(f"{flag}=true")
        elif value:
            args.append(f"{flag}={value}")
    args.append(SEPARATOR)
    args.extend(target)
    return args


def build_command(options: WitnessOptions, target: Sequence[str], witness_bin: str = "witness") -> list[str]:
    return [witness_bin, *build_witness_args(options, target)]


def render_command(argv: Sequence[str], secrets: Sequence[str] = ()) -> str:
    """Shell-quote ``argv`` for display, replacing secret values with ``***``."""
    rendered = shlex.join(argv)
    for secret in secrets:
        if secret:
            rendered = rendered.replace(secret, "***")
    return rendered
