"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click
import typer

from odc.core.errors import ErrorCode
from odc.output.console import ConsoleProtocol, Style
from odc.services.release.errors import ReleaseError, ReleaseErrorKind

INTERRUPT_MESSAGE = "Process terminated. Exiting gracefully..."

_RELEASE_ERROR_CODES: dict[ReleaseErrorKind, ErrorCode] = {
    "gh_missing": ErrorCode.ENV_ERROR,
    "git_missing": ErrorCode.ENV_ERROR,
    "invalid_input": ErrorCode.USER_ERROR,
    "invalid_format": ErrorCode.USER_ERROR,
    "duplicate_version": ErrorCode.USER_ERROR,
    "not_greater_than_current": ErrorCode.USER_ERROR,
    "branch_mismatch": ErrorCode.USER_ERROR,
    "changelog_unreadable": ErrorCode.IO_ERROR,
    "version_file_failed": ErrorCode.IO_ERROR,
    "git_failed": ErrorCode.GIT_ERROR,
    "build_failed": ErrorCode.BUILD_ERROR,
    "gh_failed": ErrorCode.NETWORK_ERROR,
}


def release_error_code(kind: ReleaseErrorKind) -> ErrorCode:
    return _RELEASE_ERROR_CODES.get(kind, ErrorCode.USER_ERROR)


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def exit_on_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    exit_with_code(int(release_error_code(error.kind)))


@contextmanager
def graceful_interrupt(console: ConsoleProtocol) -> Iterator[None]:
    """Turn Ctrl-C into a closing message and exit code 0.

    click raises ``Abort`` when an interrupt lands inside one of its prompts.
    """
    try:
        yield
    except (KeyboardInterrupt, click.exceptions.Abort):
        console.newline()
        console.print(INTERRUPT_MESSAGE)
        exit_with_code(int(ErrorCode.OK))
