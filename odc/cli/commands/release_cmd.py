from __future__ import annotations

import typer

from odc.cli.context import build_context
from odc.cli.prompts import TerminalPrompt
from odc.cli.release_guided import run_release
from odc.core.errors import ErrorCode
from odc.core.result import Err

from odc.cli.commands._helpers import exit_on_release_error, exit_with_code, graceful_interrupt


def release(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Rehearse the release: no file writes, commits, pushes or publishing.",
    ),
) -> None:
    """Cut a plugin release: bump versions, push, build and publish on GitHub."""
    ctx = build_context()

    with graceful_interrupt(ctx.console):
        result = run_release(
            project=ctx.project,
            console=ctx.console,
            prompt=TerminalPrompt(),
            dry_run=dry_run,
        )

    if isinstance(result, Err):
        exit_on_release_error(result.error, ctx.console)

    # aborted and changelog_missing are operator-level outcomes, not failures
    exit_with_code(int(ErrorCode.OK))
