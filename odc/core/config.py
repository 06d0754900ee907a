"""Typed configuration loading and access.

The optional ``odc.toml`` in the project root overrides file locations,
release policy and the desktop app launch settings. Every key has a default
matching the layout of a stock Obsidian plugin project.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "AppConfig",
    "Config",
    "ConfigError",
    "PathsConfig",
    "ReleaseConfig",
    "CONFIG_FILE_NAME",
    "DEFAULT_DEBUG_PORT",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "odc.toml"

DEFAULT_DEBUG_PORT = 9222
DEFAULT_RELEASE_BRANCHES = ("main", "master")
DEFAULT_BUILD_COMMAND = ("npm", "run", "build")
DEFAULT_COMMIT_MESSAGE = "chore: update plugin version to {version}"
DEFAULT_RELEASE_TITLE = "Release {version}"
DEFAULT_RELEASE_LIST_LIMIT = 100


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Project-relative locations of the files a release touches."""

    manifest: str = "manifest.json"
    package: str = "package.json"
    changelog: str = "CHANGELOG.md"
    dist: str = "dist"


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release policy.

    ``commit_message`` and ``title`` are ``str.format`` templates receiving
    ``version``.
    """

    branches: tuple[str, ...] = DEFAULT_RELEASE_BRANCHES
    remote: str = "origin"
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    title: str = DEFAULT_RELEASE_TITLE
    list_limit: int = DEFAULT_RELEASE_LIST_LIMIT
    json_indent: int = 2

    def format_commit_message(self, version: str) -> str:
        return self.commit_message.format(version=version)

    def format_title(self, version: str) -> str:
        return self.title.format(version=version)


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Companion desktop application launched by ``odc start``."""

    env_var: str = "OBSIDIAN_PATH"
    process_name: str = "obsidian"
    debug_port: int = DEFAULT_DEBUG_PORT

    @property
    def debug_flag(self) -> str:
        return f"--remote-debugging-port={self.debug_port}"


def _checked_template(release: StrDict, key: str, default: str) -> str:
    template = get_str(release, key) or default
    try:
        template.format(version="0.0.0")
    except (AttributeError, IndexError, KeyError, ValueError) as e:
        raise ValueError(f"release.{key}: bad template {template!r} ({e!r})") from e
    return template


def _checked_path(paths: StrDict, key: str, default: str) -> str:
    value = get_str(paths, key) or default
    p = PurePath(value)
    if p.is_absolute() or p.anchor or ".." in p.parts:
        raise ValueError(f"paths.{key} must stay inside the project root: {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    app: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        paths: StrDict = get_table(data, "paths") or {}
        release: StrDict = get_table(data, "release") or {}
        app: StrDict = get_table(data, "app") or {}

        branches = get_str_list(release, "branches")
        build_command = get_str_list(release, "build_command")
        list_limit = get_int(release, "list_limit")
        json_indent = get_int(release, "json_indent")
        debug_port = get_int(app, "debug_port")

        if list_limit is not None and list_limit < 1:
            raise ValueError("release.list_limit must be >= 1")
        if json_indent is not None and json_indent < 0:
            raise ValueError("release.json_indent must be >= 0")
        if debug_port is not None and not 0 < debug_port < 65536:
            raise ValueError("app.debug_port must be a TCP port")

        return cls(
            paths=PathsConfig(
                manifest=_checked_path(paths, "manifest", "manifest.json"),
                package=_checked_path(paths, "package", "package.json"),
                changelog=_checked_path(paths, "changelog", "CHANGELOG.md"),
                dist=_checked_path(paths, "dist", "dist"),
            ),
            release=ReleaseConfig(
                branches=tuple(branches) if branches else DEFAULT_RELEASE_BRANCHES,
                remote=get_str(release, "remote") or "origin",
                build_command=tuple(build_command) if build_command else DEFAULT_BUILD_COMMAND,
                commit_message=_checked_template(release, "commit_message", DEFAULT_COMMIT_MESSAGE),
                title=_checked_template(release, "title", DEFAULT_RELEASE_TITLE),
                list_limit=list_limit if list_limit is not None else DEFAULT_RELEASE_LIST_LIMIT,
                json_indent=json_indent if json_indent is not None else 2,
            ),
            app=AppConfig(
                env_var=get_str(app, "env_var") or "OBSIDIAN_PATH",
                process_name=get_str(app, "process_name") or "obsidian",
                debug_port=debug_port if debug_port is not None else DEFAULT_DEBUG_PORT,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to odc.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
        return Ok(config)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
