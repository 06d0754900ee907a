"""Application services for the odc CLI.

Services implement the workflows (launching the desktop app, cutting a
release) on top of core/, platform/ and git/.
"""

from odc.services.launcher import LaunchError, LaunchStatus, LauncherService

__all__ = [
    "LaunchError",
    "LaunchStatus",
    "LauncherService",
]
