from __future__ import annotations

import os
import sys
from pathlib import Path

import click
import typer

from odc import __version__
from odc.cli.commands._helpers import INTERRUPT_MESSAGE
from odc.cli.commands.release_cmd import release
from odc.cli.commands.start_cmd import start
from odc.core.errors import ErrorCode
from odc.core.project import PROJECT_ENV_VAR, PROJECT_MARKER, is_project_root


app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(start)
app.command()(release)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Plugin project root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir() or not is_project_root(root):
            typer.echo(
                f"error: --project '{root}' is not a plugin project (missing {PROJECT_MARKER})",
                err=True,
            )
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[PROJECT_ENV_VAR] = str(root)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_usage())
        raise typer.Exit(code=0)


def main() -> None:
    """Console entry point.

    An unknown command prints the usage line and exits 0; Ctrl-C outside a
    command exits 0 with a closing message.
    """
    try:
        rv = app(standalone_mode=False)
    except click.exceptions.NoSuchCommand as e:
        if e.ctx is not None:
            typer.echo(e.ctx.get_usage())
        typer.echo(e.format_message(), err=True)
        sys.exit(int(ErrorCode.OK))
    except click.exceptions.Abort:
        typer.echo(f"\n{INTERRUPT_MESSAGE}")
        sys.exit(int(ErrorCode.OK))
    except click.exceptions.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    sys.exit(rv if isinstance(rv, int) else int(ErrorCode.OK))
