"""Tests for odc.services.release.semver module."""

from __future__ import annotations

import pytest

from odc.services.release.semver import SemVer, parse_tag, parse_version


@pytest.mark.parametrize(
    "text",
    ["0.0.1", "1.2.3", "10.20.30", "1.0.0-alpha", "1.0.0-rc.1", "1.0.0+build.5", "2.0.0-beta.2+sha"],
)
def test_valid_versions(text: str) -> None:
    assert parse_version(text) is not None


@pytest.mark.parametrize("text", ["", "1", "1.2", "1.2.3.4", "01.2.3", "v1.2.3", "1.2.x", "1.2.3-"])
def test_invalid_versions(text: str) -> None:
    assert parse_version(text) is None


def test_parse_components() -> None:
    v = parse_version("1.4.2-rc.1+build.7")
    assert v == SemVer(1, 4, 2, ("rc", "1"))
    assert v is not None
    assert v.build == ("build", "7")
    assert str(v) == "1.4.2-rc.1+build.7"


def test_parse_tag_allows_v_prefix() -> None:
    assert parse_tag("v2.3.5") == SemVer(2, 3, 5)
    assert parse_tag("V2.3.5") == SemVer(2, 3, 5)
    assert parse_tag("2.3.5") == SemVer(2, 3, 5)
    assert parse_tag("release-2") is None


class TestOrdering:
    def test_numeric_not_lexical(self) -> None:
        assert SemVer(1, 10, 0) > SemVer(1, 9, 0)
        assert SemVer(1, 2, 30) > SemVer(1, 2, 3)

    def test_prerelease_below_release(self) -> None:
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0")  # type: ignore[operator]

    def test_prerelease_precedence(self) -> None:
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        parsed = [parse_version(s) for s in ordered]
        assert all(p is not None for p in parsed)
        assert sorted(parsed) == parsed  # type: ignore[type-var]

    def test_build_metadata_ignored(self) -> None:
        assert parse_version("1.0.0+a") == parse_version("1.0.0+b")


def test_bump() -> None:
    current = SemVer(2, 3, 5)
    assert str(current.bump("patch")) == "2.3.6"
    assert str(current.bump("minor")) == "2.4.0"
    assert str(current.bump("major")) == "3.0.0"


def test_bump_drops_prerelease() -> None:
    assert str(SemVer(1, 0, 0, ("beta",)).bump("patch")) == "1.0.1"
