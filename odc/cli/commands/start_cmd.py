from __future__ import annotations

import os

from odc.core.config import Config, load_config_or_default
from odc.core.project import detect_project
from odc.core.result import Err, Ok
from odc.output.console import ConsoleProtocol, RichConsole, Style
from odc.services.launcher import LauncherService


def _app_config(console: ConsoleProtocol) -> Config:
    # Outside a plugin project the launcher still works with defaults
    project = detect_project()
    if isinstance(project, Err):
        return Config()
    loaded = load_config_or_default(project.value.config_path)
    if isinstance(loaded, Err):
        console.warning(f"{loaded.error.message}, using defaults")
        return Config()
    return loaded.value


def start() -> None:
    """Start Obsidian with the remote debugging port open."""
    console = RichConsole()
    app = _app_config(console).app
    service = LauncherService(app=app, environ=os.environ)

    match service.ensure_running():
        case Ok(status) if status.already_running:
            console.info("Obsidian already running")
        case Ok(_):
            console.success(f"Starting Obsidian with debug port {app.debug_port}")
        case Err(error):
            console.error(error.message)
            for hint in error.hints:
                console.print(hint, Style.DIM)
