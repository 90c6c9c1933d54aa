"""Parse ``owner/repo[/path]@ref`` action coordinates."""

from __future__ import annotations

from dataclasses import dataclass

from actwrap.errors import InvalidReferenceFormat


@dataclass(frozen=True)
class ActionCoordinate:
    owner: str
    repo: str
    ref: str
    path: str = ""

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_branch_like(self) -> bool:
        """Refs containing ``/`` are treated as branches; everything else as a tag first."""
        return "/" in self.ref

    def __str__(self) -> str:
        location = f"{self.slug}/{self.path}" if self.path else self.slug
        return f"{location}@{self.ref}"


def parse_action_ref(value: str) -> ActionCoordinate:
    """Split a coordinate into its parts.

    The owner/repo charset is not checked here; a bad name surfaces as an
    HTTP failure when the archive is fetched.

    Raises:
        InvalidReferenceFormat: unless the value holds exactly one ``@`` with
            non-empty sides and an ``owner/repo`` location.
    """
    parts = value.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidReferenceFormat(f"Invalid action-ref format {value!r}. Expected 'owner/repo@ref'")
    location, ref = parts
    owner, sep, remainder = location.partition("/")
    repo, _, path = remainder.partition("/")
    if not sep or not owner or not repo:
        raise InvalidReferenceFormat(f"Invalid action-ref format {value!r}. Expected 'owner/repo@ref'")
    return ActionCoordinate(owner=owner, repo=repo, ref=ref, path=path.strip("/"))
