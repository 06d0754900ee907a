"""Tests for odc.platform.process module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from odc.core.result import Err, Ok
from odc.platform import process
from odc.platform.process import ProcessError, run, run_silent, spawn_detached


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "push"), returncode=1, stdout="", stderr="denied")
        assert str(error) == "git push failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("gh", "release", "create", "1.0.0", "--notes", "x"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "gh release create ... failed (exit 1)"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert "bad" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["odc_nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(*args: object, **kwargs: object) -> object:
            raise subprocess.TimeoutExpired(cmd="gh", timeout=1.0)

        monkeypatch.setattr(process.subprocess, "run", fake_run)

        result = run(["gh", "repo", "view"], cwd=tmp_path, timeout=1.0)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr


class TestRunSilent:
    def test_success(self, tmp_path: Path) -> None:
        assert run_silent([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_silent([sys.executable, "-c", "import sys; sys.exit(2)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 2


class TestSpawnDetached:
    def test_detaches_and_returns_pid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, object] = {}

        class FakePopen:
            pid = 4321

            def __init__(self, cmd: list[str], **kwargs: object) -> None:
                seen["cmd"] = cmd
                seen.update(kwargs)

        monkeypatch.setattr(process.subprocess, "Popen", FakePopen)

        result = spawn_detached(["obsidian", "--remote-debugging-port=9222"])

        assert result == Ok(4321)
        assert seen["cmd"] == ["obsidian", "--remote-debugging-port=9222"]
        assert seen["stdout"] is subprocess.DEVNULL
        assert seen["stderr"] is subprocess.DEVNULL
        if process.os.name != "nt":
            assert seen["start_new_session"] is True

    def test_missing_executable(self) -> None:
        result = spawn_detached(["odc_nonexistent_command_12345"])

        assert isinstance(result, Err)
        assert result.error.returncode == -1
