from __future__ import annotations

from dataclasses import dataclass

import typer

from odc.core.config import load_config_or_default
from odc.core.errors import ErrorCode
from odc.core.project import Project, detect_project
from odc.core.result import Err
from odc.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    console: ConsoleProtocol


def build_context() -> CLIContext:
    """Locate the plugin project and load its odc.toml.

    Exits with ENV_ERROR when no project is found or the config is malformed.
    """
    project_result = detect_project()
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        if project_result.error.hint:
            typer.echo(f"hint: {project_result.error.hint}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    project = project_result.value
    config_result = load_config_or_default(project.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message} ({project.config_path})", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(project=project.with_config(config_result.value), console=RichConsole())
