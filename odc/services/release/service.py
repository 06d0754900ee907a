from __future__ import annotations

import shutil
from pathlib import Path

from odc.core.project import Project
from odc.core.result import Err, Ok, Result
from odc.git.repository import Repository
from odc.output.console import ConsoleProtocol, Style
from odc.platform.files import list_files, remove_tree
from odc.platform.process import run_silent
from odc.services.release.errors import ReleaseError
from odc.services.release.gh import ensure_gh_available, list_release_tags
from odc.services.release.versions import PublishedVersions


def ensure_release_tools() -> Result[None, ReleaseError]:
    """Check that gh and git are on PATH before any prompt is shown."""
    ok = ensure_gh_available()
    if isinstance(ok, Err):
        return ok
    if shutil.which("git") is None:
        return Err(
            ReleaseError(
                kind="git_missing",
                message="git was not found",
                hint="Install git: https://git-scm.com/downloads",
            )
        )
    return Ok(None)


def load_published_versions(
    *, project: Project, console: ConsoleProtocol
) -> Result[PublishedVersions, ReleaseError]:
    """Published versions, newest first.

    GitHub releases are the source of truth; git tags are the fallback when
    gh cannot list them (offline, not yet pushed to GitHub).
    """
    tags = list_release_tags(project_root=project.root, limit=project.config.release.list_limit)
    if isinstance(tags, Ok):
        return Ok(PublishedVersions(versions=tuple(tags.value), source="gh"))

    console.print(f"gh release list failed, using git tags ({tags.error.message})", Style.DIM)
    git_tags = Repository(project.root).tags()
    if isinstance(git_tags, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="cannot read published versions",
                hint=git_tags.error.message,
            )
        )
    return Ok(PublishedVersions(versions=tuple(git_tags.value), source="git"))


def clean_dist(*, dist_dir: Path) -> Result[bool, ReleaseError]:
    try:
        return Ok(remove_tree(dist_dir))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"cannot clear {dist_dir.name}: {e}",
                hint=str(dist_dir),
            )
        )


def build_plugin(*, project: Project, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    """Clear the build output directory and run the build command."""
    console.print("Cleaning and building...")

    cleared = clean_dist(dist_dir=project.dist_dir)
    if isinstance(cleared, Err):
        return cleared
    if cleared.value:
        console.print(f"The {project.config.paths.dist} folder is cleared", Style.DIM)

    cmd = list(project.config.release.build_command)
    result = run_silent(cmd, cwd=project.root)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"Build error: {result.error}",
                hint=result.error.stderr.strip() or " ".join(cmd),
            )
        )

    console.success("The build is completed")
    return Ok(None)


def release_assets(*, project: Project) -> list[Path]:
    return list_files(project.dist_dir)
