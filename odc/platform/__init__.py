"""Platform abstraction layer."""

from .files import atomic_write_text, list_files, remove_tree
from .process import (
    ProcessError,
    run,
    run_silent,
    spawn_detached,
)

__all__ = [
    # files
    "atomic_write_text",
    "list_files",
    "remove_tree",
    # process
    "ProcessError",
    "run",
    "run_silent",
    "spawn_detached",
]
