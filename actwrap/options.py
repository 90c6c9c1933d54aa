"""Execution options for the wrapper and the witness invocation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

SIGSTORE_FULCIO_URL = "https://fulcio.sigstore.dev"
SIGSTORE_OIDC_CLIENT_ID = "sigstore"
SIGSTORE_OIDC_ISSUER = "https://oauth2.sigstore.dev/auth"
SIGSTORE_TIMESTAMP_SERVER = "https://freetsa.org/tsr"
DEFAULT_ARCHIVISTA_SERVER = "https://archivista.testifysec.io"


@dataclass(frozen=True)
class WitnessOptions:
    step: str = ""
    attestations: str = ""
    outfile: str = ""
    enable_archivista: bool = False
    archivista_server: str = ""
    certificate: str = ""
    key: str = ""
    intermediates: str = ""
    enable_sigstore: bool = False
    fulcio: str = ""
    fulcio_oidc_client_id: str = ""
    fulcio_oidc_issuer: str = ""
    fulcio_token: str = ""
    timestamp_servers: str = ""
    trace: str = ""
    spiffe_socket: str = ""
    product_exclude_glob: str = ""
    product_include_glob: str = ""
    attestor_link_export: bool = False
    attestor_sbom_export: bool = False
    attestor_slsa_export: bool = False
    attestor_maven_pom_path: str = ""

    @property
    def attestors(self) -> list[str]:
        return split_list(self.attestations)


@dataclass(frozen=True)
class WrapperSettings:
    action_ref: str = ""
    command: str = ""
    extra_args: str = ""
    shell: str = ""
    working_directory: str = ""
    timeout_minutes: float = 0
    install_dependencies: bool = True
    witness_version: str = "0.8.1"
    witness_install_dir: str = "./"
    witness: WitnessOptions = field(default_factory=WitnessOptions)


def split_list(value: str) -> list[str]:
    """Split a space-separated input, dropping blank entries."""
    return value.split()


def resolve_sigstore_defaults(options: WitnessOptions) -> WitnessOptions:
    """Apply the sigstore convenience toggle.

    Fills the Fulcio URL, OIDC client id, and issuer only when unset, and
    always puts the public timestamp server first.
    """
    if not options.enable_sigstore:
        return options
    return replace(
        options,
        fulcio=options.fulcio or SIGSTORE_FULCIO_URL,
        fulcio_oidc_client_id=options.fulcio_oidc_client_id or SIGSTORE_OIDC_CLIENT_ID,
        fulcio_oidc_issuer=options.fulcio_oidc_issuer or SIGSTORE_OIDC_ISSUER,
        timestamp_servers=f"{SIGSTORE_TIMESTAMP_SERVER} {options.timestamp_servers}".strip(),
    )
