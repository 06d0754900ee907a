from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "gh_missing",
    "git_missing",
    "invalid_input",
    "invalid_format",
    "duplicate_version",
    "not_greater_than_current",
    "changelog_unreadable",
    "version_file_failed",
    "branch_mismatch",
    "git_failed",
    "build_failed",
    "gh_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
