"""Guided release flow.

The flow is a small state machine over ``ReleaseContext``:

    select_version -> confirm_version -> validate_changelog
    -> update_version_files -> confirm_git_ops -> verify_branch
    -> commit_and_push -> build -> publish_release

``confirm_version`` can send the operator back to ``select_version``. Every
handler returns a typed result; nothing here exits the process.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from odc.cli.prompts import PromptOption, PromptProtocol
from odc.cli.release_fsm import StepOutcome, advance, finish, run_state_machine
from odc.cli.version_menu import resolve_version
from odc.core.project import Project
from odc.core.result import Err, Ok, Result
from odc.git.repository import Repository
from odc.output.console import ConsoleProtocol, Style
from odc.services.release.changelog import read_section
from odc.services.release.errors import ReleaseError
from odc.services.release.gh import create_release, repo_url
from odc.services.release.notes import compose_release_notes
from odc.services.release.service import (
    build_plugin,
    ensure_release_tools,
    load_published_versions,
    release_assets,
)
from odc.services.release.version_files import apply_version, version_files
from odc.services.release.versions import PublishedVersions

ReleaseStep = Literal[
    "select_version",
    "confirm_version",
    "validate_changelog",
    "update_version_files",
    "confirm_git_ops",
    "verify_branch",
    "commit_and_push",
    "build",
    "publish_release",
]

ReleaseStatus = Literal["published", "dry_run_complete", "aborted", "changelog_missing"]

GOODBYE = "See you later!"

type _Step = Result[StepOutcome[ReleaseContext, ReleaseOutcome], ReleaseError]


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """State threaded through one release attempt. Never persisted."""

    step: ReleaseStep
    dry_run: bool
    published: PublishedVersions
    version: str = ""
    previous_version: str = ""
    changelog_section: str = ""
    branch: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    status: ReleaseStatus
    version: str = ""
    message: str = ""


@dataclass(frozen=True, slots=True)
class _Env:
    project: Project
    console: ConsoleProtocol
    prompt: PromptProtocol


def _to(ctx: ReleaseContext, step: ReleaseStep, **changes: object) -> _Step:
    return Ok(advance(replace(ctx, step=step, **changes)))


def _abort(env: _Env, ctx: ReleaseContext) -> _Step:
    env.console.print(GOODBYE)
    return Ok(finish(ReleaseOutcome(status="aborted", version=ctx.version, message=GOODBYE)))


def _select_version(env: _Env, ctx: ReleaseContext) -> _Step:
    chosen = resolve_version(published=ctx.published, prompt=env.prompt, console=env.console)
    if isinstance(chosen, Err):
        return chosen
    if chosen.value is None:
        return _abort(env, ctx)
    return _to(
        ctx,
        "confirm_version",
        version=chosen.value,
        previous_version=ctx.published.current or "",
    )


def _confirm_version(env: _Env, ctx: ReleaseContext) -> _Step:
    options: list[PromptOption[str]] = [
        PromptOption(value="yes", label="Yes"),
        PromptOption(value="no", label="No"),
        PromptOption(value="retry", label="Retry"),
    ]
    answer = env.prompt.select(f"You entered version {ctx.version}. Continue?", options)
    match answer:
        case "yes":
            return _to(ctx, "validate_changelog")
        case "retry":
            return _to(ctx, "select_version", version="", previous_version="")
        case _:
            return _abort(env, ctx)


def _validate_changelog(env: _Env, ctx: ReleaseContext) -> _Step:
    section = read_section(env.project.changelog_path, ctx.version)
    if isinstance(section, Err):
        return section
    if section.value is None:
        message = f"Changelog section for {ctx.version} not found. Please update the changelog."
        env.console.warning(message)
        return Ok(
            finish(ReleaseOutcome(status="changelog_missing", version=ctx.version, message=message))
        )
    return _to(ctx, "update_version_files", changelog_section=section.value)


def _update_version_files(env: _Env, ctx: ReleaseContext) -> _Step:
    files = version_files(env.project)
    if ctx.dry_run:
        for path in files.paths():
            env.console.dry_run(f"would set version {ctx.version} in {path.name}")
        return _to(ctx, "confirm_git_ops")

    updated = apply_version(
        files=files, version=ctx.version, indent=env.project.config.release.json_indent
    )
    if isinstance(updated, Err):
        return updated
    env.console.success(f"Version updated to {ctx.version} in package.json and manifest.json")
    return _to(ctx, "confirm_git_ops")


def _confirm_git_ops(env: _Env, ctx: ReleaseContext) -> _Step:
    if ctx.dry_run:
        env.console.dry_run("skipping confirmation for git operations and release")
        return _to(ctx, "verify_branch")
    if not env.prompt.confirm("Continue with git operations and release?", default=True):
        return _abort(env, ctx)
    return _to(ctx, "verify_branch")


def _verify_branch(env: _Env, ctx: ReleaseContext) -> _Step:
    allowed = env.project.config.release.branches
    branch = Repository(env.project.root).current_branch()
    if isinstance(branch, Err):
        if ctx.dry_run:
            env.console.warning(f"cannot read current branch: {branch.error.message}")
            return _to(ctx, "commit_and_push", branch=None)
        return Err(
            ReleaseError(
                kind="git_failed",
                message="cannot read current branch",
                hint=branch.error.message,
            )
        )

    env.console.print(f"Working with a branch: {branch.value}")
    if branch.value not in allowed:
        message = f"Expected one of branches: {', '.join(allowed)}, got branch: {branch.value}"
        if not ctx.dry_run:
            return Err(ReleaseError(kind="branch_mismatch", message=message))
        env.console.warning(message)
    return _to(ctx, "commit_and_push", branch=branch.value)


def _commit_and_push(env: _Env, ctx: ReleaseContext) -> _Step:
    release = env.project.config.release
    files = version_files(env.project)
    paths = [str(p.relative_to(env.project.root)) for p in files.paths()]
    message = release.format_commit_message(ctx.version)

    if ctx.dry_run:
        target = ctx.branch or "<current branch>"
        env.console.dry_run("git reset")
        env.console.dry_run(f"git add {' '.join(paths)}")
        env.console.dry_run(f"git commit -m '{message}'")
        env.console.dry_run(f"git push {release.remote} {target}")
        return _to(ctx, "build")

    assert ctx.branch is not None
    repo = Repository(env.project.root)
    for result in (
        repo.reset(),
        repo.add(paths),
        repo.commit(message),
        repo.push(release.remote, ctx.branch),
    ):
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"Error of git operations: git {result.error.command} failed",
                    hint=result.error.message,
                )
            )
    env.console.success("The changes are pushed to the repo")
    return _to(ctx, "build")


def _build(env: _Env, ctx: ReleaseContext) -> _Step:
    built = build_plugin(project=env.project, console=env.console)
    if isinstance(built, Err):
        if not ctx.dry_run:
            return built
        env.console.warning(f"{built.error.message} (ignored in dry run)")
    return _to(ctx, "publish_release")


def _publish_release(env: _Env, ctx: ReleaseContext) -> _Step:
    url = repo_url(project_root=env.project.root)
    if isinstance(url, Err):
        if not ctx.dry_run:
            return url
        env.console.warning(f"{url.error.message} (ignored in dry run)")
    notes = compose_release_notes(
        section=ctx.changelog_section,
        version=ctx.version,
        previous_version=ctx.previous_version,
        repo_url=url.value if isinstance(url, Ok) else None,
    )
    title = env.project.config.release.format_title(ctx.version)
    assets = release_assets(project=env.project)

    if ctx.dry_run:
        env.console.dry_run(f"would create release {ctx.version} titled {title!r}")
        for asset in assets:
            env.console.dry_run(f"asset: {asset.name}")
        env.console.print("Release notes:", Style.DIM)
        env.console.print(notes, Style.DIM)
        env.console.success("Dry run complete")
        return Ok(
            finish(
                ReleaseOutcome(
                    status="dry_run_complete", version=ctx.version, message="Dry run complete"
                )
            )
        )

    created = create_release(
        project_root=env.project.root,
        tag=ctx.version,
        title=title,
        notes=notes,
        assets=assets,
    )
    if isinstance(created, Err):
        return created
    message = f"Release {ctx.version} has been successfully created and published!"
    env.console.success(message)
    return Ok(finish(ReleaseOutcome(status="published", version=ctx.version, message=message)))


def run_release(
    *,
    project: Project,
    console: ConsoleProtocol,
    prompt: PromptProtocol,
    dry_run: bool = False,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Walk the operator through one release.

    Tool preconditions are checked before any prompt. Version files that were
    already written are left in place if a later step fails.
    """
    tools = ensure_release_tools()
    if isinstance(tools, Err):
        return tools

    if dry_run:
        console.header("Release (dry run)")

    published = load_published_versions(project=project, console=console)
    if isinstance(published, Err):
        return published

    env = _Env(project=project, console=console, prompt=prompt)
    handlers = {
        "select_version": lambda c: _select_version(env, c),
        "confirm_version": lambda c: _confirm_version(env, c),
        "validate_changelog": lambda c: _validate_changelog(env, c),
        "update_version_files": lambda c: _update_version_files(env, c),
        "confirm_git_ops": lambda c: _confirm_git_ops(env, c),
        "verify_branch": lambda c: _verify_branch(env, c),
        "commit_and_push": lambda c: _commit_and_push(env, c),
        "build": lambda c: _build(env, c),
        "publish_release": lambda c: _publish_release(env, c),
    }
    return run_state_machine(
        initial_state=ReleaseContext(
            step="select_version", dry_run=dry_run, published=published.value
        ),
        get_step=lambda c: c.step,
        handlers=handlers,
    )
