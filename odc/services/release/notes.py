from __future__ import annotations


def compare_url(*, repo_url: str, previous_version: str, version: str) -> str:
    return f"{repo_url.rstrip('/')}/compare/{previous_version}...{version}"


def compose_release_notes(
    *,
    section: str,
    version: str,
    previous_version: str,
    repo_url: str | None,
) -> str:
    """Release body: the changelog section plus a compare link.

    The compare link needs both a previous version and a repository URL;
    without them the body is the section alone.
    """
    if not previous_version or not repo_url:
        return section
    url = compare_url(repo_url=repo_url, previous_version=previous_version, version=version)
    return f"{section}\n\n**Full Changelog**: {url}"
