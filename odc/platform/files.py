"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "list_files", "remove_tree"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``content`` in one rename.

    Readers see either the old file or the new one, never a partial write.
    An existing file keeps its permission bits.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else None
    with tempfile.NamedTemporaryFile(
        "w",
        encoding=encoding,
        newline="",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        staged = Path(tmp.name)
        try:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            staged.unlink(missing_ok=True)
            raise
    try:
        if mode is not None:
            os.chmod(staged, mode)
        os.replace(staged, path)
    except OSError:
        staged.unlink(missing_ok=True)
        raise


def remove_tree(path: Path) -> bool:
    """Remove a directory tree; return False if there was nothing to remove."""
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


def list_files(directory: Path) -> list[Path]:
    """Regular files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())
