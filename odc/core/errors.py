"""Error codes for CLI exit status.

Every command maps its failures onto these codes so scripts wrapping ``odc``
can tell a declined prompt from a broken environment or a failed push.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success, including an operator abort
    - 1: User error (bad input, wrong branch)
    - 2: Environment error (no project root, missing gh/git, bad config)
    - 3: Build error (build command failed)
    - 4: Network error (GitHub CLI call failed)
    - 5: I/O error (version file unreadable or unwritable)
    - 6: Git error (commit or push failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    GIT_ERROR = 6
