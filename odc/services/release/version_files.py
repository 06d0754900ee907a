from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from odc.core.project import Project
from odc.core.result import Err, Ok, Result
from odc.core.structured import StrDict, as_str_dict, get_str
from odc.platform.files import atomic_write_text
from odc.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class VersionFiles:
    package_json: Path
    manifest_json: Path

    def paths(self) -> tuple[Path, Path]:
        # package.json first, then manifest.json
        return (self.package_json, self.manifest_json)


@dataclass(frozen=True, slots=True)
class VersionUpdate:
    path: Path
    previous: str | None
    version: str


def version_files(project: Project) -> VersionFiles:
    return VersionFiles(package_json=project.package_path, manifest_json=project.manifest_path)


def write_json_version(
    *, path: Path, version: str, indent: int = 2
) -> Result[VersionUpdate, ReleaseError]:
    """Set ``version`` in a JSON document and rewrite it.

    Key order and every other field are preserved; the document is always
    re-serialized so the pair of version files stays consistently formatted.
    """
    data = _read_json(path=path)
    if isinstance(data, Err):
        return data

    previous = get_str(data.value, "version")
    data.value["version"] = version

    text = json.dumps(data.value, indent=indent if indent > 0 else None, ensure_ascii=False)
    try:
        atomic_write_text(path, text + "\n", encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="version_file_failed",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )

    return Ok(VersionUpdate(path=path, previous=previous, version=version))


def apply_version(
    *, files: VersionFiles, version: str, indent: int = 2
) -> Result[list[VersionUpdate], ReleaseError]:
    """Write ``version`` into package.json and manifest.json.

    Stops at the first failure. A file already written is not restored.
    """
    updates: list[VersionUpdate] = []
    for path in files.paths():
        result = write_json_version(path=path, version=version, indent=indent)
        if isinstance(result, Err):
            return result
        updates.append(result.value)
    return Ok(updates)


def _read_json(*, path: Path) -> Result[StrDict, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="version_file_failed",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="version_file_failed",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="version_file_failed",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok(data)
