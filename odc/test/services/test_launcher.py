"""Tests for odc.services.launcher module."""

from __future__ import annotations

import psutil
import pytest

from odc.core.config import AppConfig
from odc.core.result import Err, Ok
from odc.platform.process import ProcessError
from odc.services import launcher
from odc.services.launcher import LaunchConfig, LauncherService, locate_app


class TestLocateApp:
    def test_unset(self) -> None:
        assert locate_app(app=AppConfig(), environ={}) is None
        assert locate_app(app=AppConfig(), environ={"OBSIDIAN_PATH": "  "}) is None

    def test_plain_path(self) -> None:
        config = locate_app(app=AppConfig(), environ={"OBSIDIAN_PATH": "/opt/Obsidian/obsidian"})
        assert config == LaunchConfig(
            command="/opt/Obsidian/obsidian", args=("--remote-debugging-port=9222",)
        )

    def test_flatpak_command(self) -> None:
        config = locate_app(
            app=AppConfig(debug_port=9333),
            environ={"OBSIDIAN_PATH": "flatpak run md.obsidian.Obsidian"},
        )
        assert config is not None
        assert config.argv == [
            "flatpak",
            "run",
            "md.obsidian.Obsidian",
            "--remote-debugging-port=9333",
        ]

    def test_quoted_path_with_spaces(self) -> None:
        config = locate_app(
            app=AppConfig(), environ={"OBSIDIAN_PATH": '"/Applications/My Apps/Obsidian"'}
        )
        assert config is not None
        assert config.command == "/Applications/My Apps/Obsidian"

    def test_custom_env_var(self) -> None:
        app = AppConfig(env_var="MY_OBSIDIAN")
        assert locate_app(app=app, environ={"OBSIDIAN_PATH": "obsidian"}) is None
        assert locate_app(app=app, environ={"MY_OBSIDIAN": "obsidian"}) is not None


class TestLauncherService:
    def test_cannot_locate(self) -> None:
        service = LauncherService(app=AppConfig(), environ={}, list_processes=lambda: [])

        result = service.ensure_running()

        assert isinstance(result, Err)
        assert result.error.kind == "cannot_locate"
        assert result.error.message == "Cannot detect Obsidian installation"
        assert any("flatpak run md.obsidian.Obsidian" in h for h in result.error.hints)

    def test_already_running_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail_spawn(cmd: list[str], **kwargs: object):
            raise AssertionError("must not spawn")

        monkeypatch.setattr(launcher, "spawn_detached", fail_spawn)
        service = LauncherService(
            app=AppConfig(),
            environ={"OBSIDIAN_PATH": "obsidian"},
            list_processes=lambda: ["bash", "Obsidian Helper (Renderer)"],
        )

        result = service.ensure_running()

        assert result == Ok(launcher.LaunchStatus(already_running=True))

    def test_spawns_when_not_running(self, monkeypatch: pytest.MonkeyPatch) -> None:
        spawned: list[list[str]] = []

        def fake_spawn(cmd: list[str], **kwargs: object):
            spawned.append(cmd)
            return Ok(1234)

        monkeypatch.setattr(launcher, "spawn_detached", fake_spawn)
        service = LauncherService(
            app=AppConfig(),
            environ={"OBSIDIAN_PATH": "/usr/bin/obsidian"},
            list_processes=lambda: ["bash", "python"],
        )

        result = service.ensure_running()

        assert result == Ok(launcher.LaunchStatus(already_running=False, pid=1234))
        assert spawned == [["/usr/bin/obsidian", "--remote-debugging-port=9222"]]

    def test_process_listing_error_still_spawns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def denied() -> list[str]:
            raise psutil.AccessDenied()

        monkeypatch.setattr(launcher, "spawn_detached", lambda cmd, **kw: Ok(99))
        service = LauncherService(
            app=AppConfig(), environ={"OBSIDIAN_PATH": "obsidian"}, list_processes=denied
        )

        assert service.ensure_running() == Ok(launcher.LaunchStatus(already_running=False, pid=99))

    def test_spawn_failure_is_returned(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            launcher,
            "spawn_detached",
            lambda cmd, **kw: Err(
                ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr="No such file")
            ),
        )
        service = LauncherService(
            app=AppConfig(), environ={"OBSIDIAN_PATH": "/missing/obsidian"}, list_processes=list
        )

        result = service.ensure_running()

        assert isinstance(result, Err)
        assert result.error.kind == "spawn_failed"
        assert "No such file" in result.error.message


def test_running_process_names(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeProc:
        def __init__(self, name: object) -> None:
            self.info = {"name": name}

    monkeypatch.setattr(
        launcher.psutil,
        "process_iter",
        lambda attrs: iter([FakeProc("obsidian"), FakeProc(None), FakeProc("")]),
    )

    assert launcher.running_process_names() == ["obsidian"]
