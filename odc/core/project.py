"""Plugin project detection and paths.

The project root is the nearest directory, starting from the current one and
walking up, that contains a ``manifest.json``. ``ODC_PROJECT_ROOT`` (or the
``--project`` option, which sets it) overrides the search.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .config import CONFIG_FILE_NAME, Config
from .result import Err, Ok, Result

__all__ = [
    "PROJECT_ENV_VAR",
    "PROJECT_MARKER",
    "Project",
    "ProjectError",
    "detect_project",
    "find_project_upward",
    "is_project_root",
]

PROJECT_ENV_VAR = "ODC_PROJECT_ROOT"
PROJECT_MARKER = "manifest.json"


@dataclass(frozen=True)
class ProjectError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected plugin project.

    Paths are resolved against ``config.paths`` so a project can relocate its
    changelog or build output in ``odc.toml``.
    """

    root: Path
    config: Config = field(default_factory=Config)

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.paths.manifest

    @property
    def package_path(self) -> Path:
        return self.root / self.config.paths.package

    @property
    def changelog_path(self) -> Path:
        return self.root / self.config.paths.changelog

    @property
    def dist_dir(self) -> Path:
        return self.root / self.config.paths.dist

    def with_config(self, config: Config) -> Project:
        return Project(root=self.root, config=config)

    def __str__(self) -> str:
        return str(self.root)


def is_project_root(path: Path) -> bool:
    return (path / PROJECT_MARKER).is_file()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start directory for a project root."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project(
    *,
    start_dir: Path | None = None,
    env_var: str = PROJECT_ENV_VAR,
) -> Result[Project, ProjectError]:
    """Detect the project root directory.

    Detection order:
    1. ``env_var`` environment variable (if set it must be valid)
    2. Search upward from start_dir (or cwd) for manifest.json
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_project_root(env_path):
            return Ok(Project(root=env_path))
        return Err(
            ProjectError(
                message=f"${env_var} is set to '{env_value}' but it has no {PROJECT_MARKER}",
                searched_from=env_path if env_path.is_dir() else None,
                hint=f"Unset {env_var} or point it at the plugin root",
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_project_upward(search_start)
    if found is None:
        return Err(
            ProjectError(
                message=f"{PROJECT_MARKER} not found in any parent directories",
                searched_from=search_start,
                hint="Run odc from inside the plugin project",
            )
        )
    return Ok(Project(root=found))
