"""Tests for odc.services.release.version_files module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from odc.core.project import Project
from odc.core.result import Err, Ok
from odc.services.release.version_files import (
    apply_version,
    version_files,
    write_json_version,
)


@pytest.fixture
def project(tmp_path: Path) -> Project:
    (tmp_path / "manifest.json").write_text(
        json.dumps(
            {"id": "sample-plugin", "name": "Sample", "version": "1.0.0", "minAppVersion": "1.4.0"},
            indent=2,
        ),
        encoding="utf-8",
    )
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "sample-plugin", "version": "1.0.0", "scripts": {"build": "x"}}),
        encoding="utf-8",
    )
    return Project(root=tmp_path)


def test_version_files_order(project: Project) -> None:
    files = version_files(project)
    assert [p.name for p in files.paths()] == ["package.json", "manifest.json"]


def _version(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8")).get("version")


def test_write_preserves_other_fields_and_order(project: Project) -> None:
    result = write_json_version(path=project.manifest_path, version="1.1.0")

    assert isinstance(result, Ok)
    assert result.value.previous == "1.0.0"

    text = project.manifest_path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    data = json.loads(text)
    assert list(data) == ["id", "name", "version", "minAppVersion"]
    assert data["version"] == "1.1.0"
    assert data["minAppVersion"] == "1.4.0"


def test_write_without_previous_version(tmp_path: Path) -> None:
    path = tmp_path / "manifest.json"
    path.write_text('{"id": "x"}', encoding="utf-8")

    result = write_json_version(path=path, version="0.1.0")

    assert isinstance(result, Ok)
    assert result.value.previous is None
    assert _version(path) == "0.1.0"


def test_write_keeps_non_ascii(tmp_path: Path) -> None:
    path = tmp_path / "manifest.json"
    path.write_text('{"author": "Zoë", "version": "0.1.0"}', encoding="utf-8")

    write_json_version(path=path, version="0.2.0")

    assert '"Zoë"' in path.read_text(encoding="utf-8")


def test_write_honours_indent(project: Project) -> None:
    write_json_version(path=project.package_path, version="1.1.0", indent=4)
    assert '\n    "version": "1.1.0"' in project.package_path.read_text(encoding="utf-8")


def test_apply_updates_both(project: Project) -> None:
    result = apply_version(files=version_files(project), version="2.0.0")

    assert isinstance(result, Ok)
    assert [u.path.name for u in result.value] == ["package.json", "manifest.json"]
    assert _version(project.package_path) == "2.0.0"
    assert _version(project.manifest_path) == "2.0.0"


def test_apply_stops_on_invalid_json(project: Project) -> None:
    project.manifest_path.write_text("{not json", encoding="utf-8")

    result = apply_version(files=version_files(project), version="2.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "version_file_failed"
    assert "manifest.json" in result.error.message
    # package.json was written first and is not restored
    assert _version(project.package_path) == "2.0.0"


def test_json_root_must_be_object(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("[1, 2]", encoding="utf-8")

    result = write_json_version(path=path, version="1.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "version_file_failed"
