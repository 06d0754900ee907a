"""Subprocess execution with Result-based error handling.

Wraps subprocess so callers get ``Ok``/``Err`` instead of exceptions:

    result = run(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=root)
    match result:
        case Ok(stdout):
            branch = stdout.strip()
        case Err(error):
            console.error(str(error))

A command that never ran (missing executable, timeout) reports
``returncode == -1``.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from odc.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent", "spawn_detached"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran).
        stdout: Standard output (may be empty).
        stderr: Standard error, or why the command never ran.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _not_run(cmd: list[str], reason: str, *, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout=stdout, stderr=reason))


def _timed_out(timeout: float | None) -> str:
    return f"Command timed out after {timeout}s"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` with captured output and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _not_run(cmd, _timed_out(timeout), stdout=partial)
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode == 0:
        return Ok(proc.stdout)
    return Err(
        ProcessError(
            command=tuple(cmd),
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
    )


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Run ``cmd`` with stdout/stderr inherited from this process.

    For commands whose output should stream to the terminal (the build,
    ``gh release create``). Nothing is captured, so a failure only carries
    the exit code.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, timeout=timeout, check=False)
    except subprocess.TimeoutExpired:
        return _not_run(cmd, _timed_out(timeout))
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode == 0:
        return Ok(None)
    return Err(ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr=""))


def spawn_detached(cmd: list[str], *, cwd: Path | None = None) -> Result[int, ProcessError]:
    """Start a process that outlives this one and return its pid.

    The child gets its own session (POSIX) or a detached process group
    (Windows) and no standard streams; it is never waited on.
    """
    kwargs: dict[str, object] = {}
    if os.name == "nt":
        kwargs["creationflags"] = (
            subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP  # type: ignore[attr-defined]
        )
    else:
        kwargs["start_new_session"] = True

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **kwargs,  # type: ignore[arg-type]
        )
    except (OSError, ValueError) as e:
        return _not_run(cmd, str(e))

    return Ok(proc.pid)
