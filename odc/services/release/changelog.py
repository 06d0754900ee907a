"""Changelog section extraction.

The changelog is Markdown with one depth-1 heading per release:

    # 1.1.0

    - Added a command

    # [1.0.0]

    - First release

A heading is a version marker when its text, once decorative brackets are
stripped, parses as a semantic version. The section of a version is every
top-level block after its marker up to the next depth-1 heading. Blocks are
re-rendered from the mistune AST rather than sliced out line by line, so
lists, code and links inside the section survive intact.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import mistune
from mistune.renderers.markdown import MarkdownRenderer

from odc.core.result import Err, Ok, Result
from odc.services.release.errors import ReleaseError
from odc.services.release.semver import SemVer, parse_version

__all__ = [
    "extract_section",
    "heading_version",
    "read_section",
]

Token = Mapping[str, Any]


def _parse(document: str) -> tuple[list[Token], Any]:
    md = mistune.create_markdown(renderer=None)
    tokens, state = md.parse(document)
    return list(tokens), state  # type: ignore[arg-type]


def _flatten_text(children: Sequence[Token]) -> str:
    parts: list[str] = []
    for child in children:
        raw = child.get("raw")
        if isinstance(raw, str):
            parts.append(raw)
            continue
        nested = child.get("children")
        if isinstance(nested, list):
            parts.append(_flatten_text(nested))
    return "".join(parts)


def _is_top_heading(token: Token) -> bool:
    if token.get("type") != "heading":
        return False
    attrs = token.get("attrs") or {}
    return attrs.get("level") == 1


def heading_version(token: Token) -> SemVer | None:
    """Return the version a depth-1 heading marks, or None."""
    if not _is_top_heading(token):
        return None
    children = token.get("children")
    if not isinstance(children, list):
        return None
    text = _flatten_text(children).strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1].strip()
    return parse_version(text)


def extract_section(document: str, version: str) -> str | None:
    """Extract the release notes of ``version`` from a changelog.

    Returns:
        The section text (possibly empty), or None when no marker matches.
    """
    wanted = parse_version(version)
    if wanted is None:
        return None

    tokens, state = _parse(document)

    start: int | None = None
    for i, token in enumerate(tokens):
        if heading_version(token) == wanted:
            start = i + 1
            break
    if start is None:
        return None

    end = len(tokens)
    for i in range(start, len(tokens)):
        if _is_top_heading(tokens[i]):
            end = i
            break

    section = [t for t in tokens[start:end] if t.get("type") != "blank_line"]
    if not section:
        return ""
    return MarkdownRenderer()(section, state).strip()  # type: ignore[arg-type]


def read_section(path: Path, version: str) -> Result[str | None, ReleaseError]:
    """Read the changelog at ``path`` and extract ``version``'s section."""
    try:
        document = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Ok(None)
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="changelog_unreadable",
                message=f"Error reading changelog: {e}",
                hint=str(path),
            )
        )
    return Ok(extract_section(document, version))
