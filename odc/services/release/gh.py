from __future__ import annotations

import json
import re
import shutil
from pathlib import Path
from time import sleep

from odc.core.result import Err, Ok, Result
from odc.core.structured import as_obj_list, as_str_dict, get_str
from odc.platform.process import ProcessError
from odc.platform.process import run as run_process
from odc.platform.process import run_silent
from odc.services.release.errors import ReleaseError, ReleaseErrorKind

GH_TIMEOUT_SECONDS = 60.0
GH_READ_ATTEMPTS = 3
GH_READ_BACKOFF_SECONDS = 1.0

# gh output that points at a network hiccup; such reads are retried.
_TRANSIENT = re.compile(
    r"timed? ?out|connection (?:reset|refused)|temporarily unavailable"
    r"|service unavailable|bad gateway|network is unreachable|http (?:429|5\d\d)",
    re.IGNORECASE,
)


def is_transient(error: ProcessError) -> bool:
    return _TRANSIENT.search(f"{error.stderr}\n{error.stdout}") is not None


def run_gh_read(
    *,
    project_root: Path,
    cmd: list[str],
    kind: ReleaseErrorKind,
    message: str,
    hint: str | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
    attempts: int = GH_READ_ATTEMPTS,
) -> Result[str, ReleaseError]:
    """Run a read-only gh command.

    Transient failures are retried with a linear backoff (1s, 2s, ...). The
    last failure is reported with gh's stderr as the hint.
    """
    attempt = 1
    while True:
        result = run_process(cmd, cwd=project_root, timeout=timeout)
        if isinstance(result, Ok):
            return result
        if attempt >= attempts or not is_transient(result.error):
            return Err(
                ReleaseError(kind=kind, message=message, hint=result.error.stderr.strip() or hint)
            )
        sleep(GH_READ_BACKOFF_SECONDS * attempt)
        attempt += 1


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="GitHub CLI (gh) was not found",
                hint="Install it: https://cli.github.com/",
            )
        )
    return Ok(None)


def _load_json(text: str, *, what: str) -> Result[object, ReleaseError]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="gh_failed", message=f"invalid JSON from {what}: {e}"))
    return Ok(obj)


def list_release_tags(*, project_root: Path, limit: int) -> Result[list[str], ReleaseError]:
    """Tags of published releases, newest first."""
    result = run_gh_read(
        project_root=project_root,
        cmd=["gh", "release", "list", "--limit", str(limit), "--json", "tagName"],
        kind="gh_failed",
        message="failed to list releases",
    )
    if isinstance(result, Err):
        return result

    obj = _load_json(result.value, what="gh release list")
    if isinstance(obj, Err):
        return obj

    raw = as_obj_list(obj.value)
    if raw is None:
        return Err(ReleaseError(kind="gh_failed", message="unexpected payload: gh release list"))

    tags: list[str] = []
    for item in raw:
        d = as_str_dict(item)
        if d is None:
            continue
        tag = get_str(d, "tagName")
        if tag is not None:
            tags.append(tag)
    return Ok(tags)


def repo_url(*, project_root: Path) -> Result[str, ReleaseError]:
    result = run_gh_read(
        project_root=project_root,
        cmd=["gh", "repo", "view", "--json", "url"],
        kind="gh_failed",
        message="Error getting the repo URL",
    )
    if isinstance(result, Err):
        return result

    obj = _load_json(result.value, what="gh repo view")
    if isinstance(obj, Err):
        return obj

    data = as_str_dict(obj.value)
    url = get_str(data, "url") if data is not None else None
    if url is None:
        return Err(ReleaseError(kind="gh_failed", message="missing url in gh repo view"))
    return Ok(url.rstrip("/"))


def create_release(
    *,
    project_root: Path,
    tag: str,
    title: str,
    notes: str,
    assets: list[Path],
) -> Result[None, ReleaseError]:
    """Create and publish a release; gh output streams to the terminal."""
    cmd = [
        "gh",
        "release",
        "create",
        tag,
        *[str(p) for p in assets],
        "--title",
        title,
        "--notes",
        notes,
    ]
    result = run_silent(cmd, cwd=project_root)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_failed",
                message=f"Release creation error: {result.error}",
                hint=result.error.stderr.strip() or None,
            )
        )
    return Ok(None)
