"""Launch the companion desktop application with remote debugging enabled.

The executable comes from an environment variable (``OBSIDIAN_PATH`` by
default) so every developer can point at their own install, including
wrapped ones such as ``flatpak run md.obsidian.Obsidian``.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

import psutil

from odc.core.config import AppConfig
from odc.core.result import Err, Ok, Result
from odc.platform.process import spawn_detached

__all__ = [
    "LaunchConfig",
    "LaunchError",
    "LaunchStatus",
    "LauncherService",
    "locate_app",
    "running_process_names",
]


@dataclass(frozen=True, slots=True)
class LaunchConfig:
    command: str
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


@dataclass(frozen=True, slots=True)
class LaunchStatus:
    already_running: bool
    pid: int | None = None


@dataclass(frozen=True, slots=True)
class LaunchError:
    kind: Literal["cannot_locate", "spawn_failed"]
    message: str
    hints: tuple[str, ...] = ()


def locate_app(*, app: AppConfig, environ: Mapping[str, str]) -> LaunchConfig | None:
    """Build the launch command from the environment, or None if unset."""
    raw = environ.get(app.env_var, "").strip()
    if not raw:
        return None
    try:
        parts = shlex.split(raw)
    except ValueError:
        parts = [raw]
    if not parts:
        return None
    return LaunchConfig(command=parts[0], args=(*parts[1:], app.debug_flag))


def running_process_names() -> list[str]:
    names: list[str] = []
    for proc in psutil.process_iter(["name"]):
        name = proc.info.get("name")
        if isinstance(name, str) and name:
            names.append(name)
    return names


def _matches(names: Iterable[str], needle: str) -> bool:
    wanted = needle.lower()
    return any(wanted in name.lower() for name in names)


class LauncherService:
    def __init__(
        self,
        *,
        app: AppConfig,
        environ: Mapping[str, str],
        list_processes: Callable[[], list[str]] = running_process_names,
    ) -> None:
        self._app = app
        self._environ = environ
        self._list_processes = list_processes

    def is_running(self) -> bool:
        return _matches(self._list_processes(), self._app.process_name)

    def ensure_running(self) -> Result[LaunchStatus, LaunchError]:
        """Start the app unless a matching process already exists.

        Never raises: a missing launch configuration or a failed spawn is
        returned as a LaunchError carrying guidance for the user.
        """
        config = locate_app(app=self._app, environ=self._environ)
        if config is None:
            return Err(
                LaunchError(
                    kind="cannot_locate",
                    message="Cannot detect Obsidian installation",
                    hints=(
                        f"Set {self._app.env_var} environment variable:",
                        f"   export {self._app.env_var}=/path/to/obsidian",
                        "   # or",
                        f'   export {self._app.env_var}="flatpak run md.obsidian.Obsidian"',
                    ),
                )
            )

        try:
            running = self.is_running()
        except psutil.Error:
            # Partial process listings are common without privileges; try to start anyway
            running = False
        if running:
            return Ok(LaunchStatus(already_running=True))

        spawned = spawn_detached(config.argv)
        if isinstance(spawned, Err):
            return Err(
                LaunchError(
                    kind="spawn_failed",
                    message=f"Failed to start Obsidian: {spawned.error.stderr}",
                    hints=(f"Try setting {self._app.env_var} manually",),
                )
            )
        return Ok(LaunchStatus(already_running=False, pid=spawned.value))
