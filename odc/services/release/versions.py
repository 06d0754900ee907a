"""Next-version rules for the release flow.

The interactive menu lives in ``odc.cli.version_menu``; this module holds
the parts that do not need a terminal: the canonical bump choices and the
validation applied to a manually entered version.
"""

from __future__ import annotations

from dataclasses import dataclass

from odc.core.result import Err, Ok, Result
from odc.services.release.errors import ReleaseError
from odc.services.release.semver import ReleaseBump, SemVer, parse_tag, parse_version

__all__ = [
    "BumpChoice",
    "PublishedVersions",
    "bump_choices",
    "validate_candidate",
]


@dataclass(frozen=True, slots=True)
class BumpChoice:
    kind: ReleaseBump
    label: str
    version: str


_BUMP_LABELS: tuple[tuple[ReleaseBump, str], ...] = (
    ("patch", "Patch (bug fixes)"),
    ("minor", "Minor (new functionality)"),
    ("major", "Major (significant changes)"),
)


@dataclass(frozen=True, slots=True)
class PublishedVersions:
    """Versions already released, newest first.

    ``source`` records where they came from (``gh`` releases or git tags).
    """

    versions: tuple[str, ...]
    source: str = "gh"

    @property
    def current(self) -> str | None:
        return self.versions[0] if self.versions else None

    @property
    def is_first_release(self) -> bool:
        return not self.versions

    def contains(self, candidate: str) -> bool:
        """True if ``candidate`` was already published.

        Compares the raw strings first, then semantically so ``1.2.3`` also
        collides with a ``v1.2.3`` tag.
        """
        if candidate in self.versions:
            return True
        wanted = parse_tag(candidate)
        if wanted is None:
            return False
        return any(parse_tag(v) == wanted for v in self.versions)


def bump_choices(current: SemVer) -> list[BumpChoice]:
    """Patch, minor and major bumps of ``current``, in that order."""
    return [
        BumpChoice(kind=kind, label=label, version=str(current.bump(kind)))
        for kind, label in _BUMP_LABELS
    ]


def validate_candidate(
    candidate: str,
    *,
    published: PublishedVersions,
    first_entry: bool,
) -> Result[SemVer, ReleaseError]:
    """Validate a manually entered version.

    Empty input is the caller's abort signal and must be handled before
    calling this. The duplicate check runs first so a published version is
    always reported as a duplicate, whatever its format.

    Args:
        candidate: Version typed by the operator.
        published: Versions already released.
        first_entry: True for the very first release, where there is no
            current version to compare against.
    """
    value = candidate.strip()

    if published.contains(value):
        return Err(
            ReleaseError(
                kind="duplicate_version",
                message="Version already exists. Please try again.",
            )
        )

    parsed = parse_version(value)
    if parsed is None:
        return Err(
            ReleaseError(
                kind="invalid_format",
                message=(
                    "Invalid version format. Please try again. "
                    "It should be semantic versioning (e.g., 1.2.3)"
                ),
            )
        )

    current = published.current
    if not first_entry and current is not None:
        current_v = parse_tag(current)
        if current_v is not None and not parsed > current_v:
            return Err(
                ReleaseError(
                    kind="not_greater_than_current",
                    message=(
                        "Version must be greater than current version. "
                        f"Current version is: {current}. Please try again."
                    ),
                )
            )

    return Ok(parsed)
