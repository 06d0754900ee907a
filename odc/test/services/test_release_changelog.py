"""Tests for odc.services.release.changelog module."""

from __future__ import annotations

from pathlib import Path

from odc.core.result import Err, Ok
from odc.services.release.changelog import extract_section, read_section

TWO_RELEASES = """\
# 1.0.0

First release.

# 1.1.0

Second release.
"""


class TestExtractSection:
    def test_section_stops_at_next_heading(self) -> None:
        assert extract_section(TWO_RELEASES, "1.0.0") == "First release."

    def test_last_section_runs_to_end(self) -> None:
        assert extract_section(TWO_RELEASES, "1.1.0") == "Second release."

    def test_missing_version(self) -> None:
        assert extract_section(TWO_RELEASES, "2.0.0") is None
        assert extract_section(TWO_RELEASES, "2.0.0") is None

    def test_brackets_are_decorative(self) -> None:
        doc = "# [1.2.3]\n\nFixed bug X\n"
        assert extract_section(doc, "1.2.3") == "Fixed bug X"

    def test_bracketed_heading_with_reference_link(self) -> None:
        doc = (
            "# [1.2.3]\n\nFixed bug X\n\n"
            "[1.2.3]: https://example.com/org/repo/releases/tag/1.2.3\n"
        )
        assert extract_section(doc, "1.2.3") is not None

    def test_no_prefix_match(self) -> None:
        doc = "# 1.2.30\n\nLater release\n"
        assert extract_section(doc, "1.2.3") is None

    def test_subheadings_stay_in_section(self) -> None:
        doc = "# 1.1.0\n\n## Features\n\n- Added a command\n\n## Fixes\n\n- Fixed a crash\n\n# 1.0.0\n\nOld\n"

        section = extract_section(doc, "1.1.0")

        assert section is not None
        assert "## Features" in section
        assert "- Added a command" in section
        assert "## Fixes" in section
        assert "Old" not in section

    def test_nested_lists_and_code_survive(self) -> None:
        doc = (
            "# 2.0.0\n\n"
            "- Top item\n"
            "  - Nested item\n\n"
            "```ts\n"
            "this.addCommand({ id: 'x' });\n"
            "```\n\n"
            "See [docs](https://example.com/docs).\n"
        )

        section = extract_section(doc, "2.0.0")

        assert section is not None
        assert "Top item" in section
        assert "Nested item" in section
        assert "this.addCommand({ id: 'x' });" in section
        assert "```" in section
        assert "[docs](https://example.com/docs)" in section

    def test_non_version_headings_ignored(self) -> None:
        doc = "# Changelog\n\nIntro\n\n# 1.0.0\n\nNotes\n"
        assert extract_section(doc, "1.0.0") == "Notes"

    def test_empty_section(self) -> None:
        doc = "# 1.1.0\n\n# 1.0.0\n\nOld\n"
        assert extract_section(doc, "1.1.0") == ""
        assert extract_section(doc, "1.1.0") is not None

    def test_invalid_requested_version(self) -> None:
        assert extract_section(TWO_RELEASES, "latest") is None


class TestReadSection:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.write_text(TWO_RELEASES, encoding="utf-8")

        assert read_section(path, "1.1.0") == Ok("Second release.")

    def test_missing_file_is_not_found(self, tmp_path: Path) -> None:
        assert read_section(tmp_path / "CHANGELOG.md", "1.0.0") == Ok(None)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.mkdir()

        result = read_section(path, "1.0.0")

        assert isinstance(result, Err)
        assert result.error.kind == "changelog_unreadable"

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.write_bytes(b"\xff\xfe\x00bad")

        result = read_section(path, "1.0.0")

        assert isinstance(result, Err)
        assert result.error.kind == "changelog_unreadable"
