"""Git repository abstraction.

The release flow needs a handful of git operations on the plugin checkout:
read the branch, list tags, and stage/commit/push the version files. Every
method that can fail returns a Result.

Usage:
    repo = Repository(project.root)

    match repo.current_branch():
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from odc.core.result import Err, Ok, Result
from odc.platform.process import ProcessError
from odc.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A git working tree.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def current_branch(self) -> Result[str, GitError]:
        """Get the current branch name.

        A detached HEAD is reported as an error since there is nothing to
        push to.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse", e, "cannot read current branch"))
            case Ok(stdout):
                branch = stdout.strip()
                if not branch or branch == "HEAD":
                    return Err(GitError(command="rev-parse", message="HEAD is detached"))
                return Ok(branch)

    def tags(self) -> Result[list[str], GitError]:
        """List tags, highest version first."""
        result = self._run(["tag", "--list", "--sort=-v:refname"])
        match result:
            case Err(e):
                return Err(self._error("tag", e, "git tag failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def reset(self) -> Result[None, GitError]:
        """Unstage everything (``git reset``), leaving the working tree alone."""
        return self._simple(["reset", "--quiet"], "reset")

    def add(self, paths: list[str]) -> Result[None, GitError]:
        return self._simple(["add", "--", *paths], "add")

    def commit(self, message: str) -> Result[None, GitError]:
        return self._simple(["commit", "--quiet", "-m", message], "commit")

    def push(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._simple(["push", remote, branch], "push")

    def _simple(self, args: list[str], command: str) -> Result[None, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(command, result.error, f"git {command} failed"))
        return Ok(None)

    def _error(self, command: str, error: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=error.stderr.strip() or error.stdout.strip() or fallback,
            returncode=error.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
