"""actwrap - run GitHub Actions and shell commands under witness attestation."""

__version__ = "0.3.0"
