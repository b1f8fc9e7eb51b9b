"""Tests for bpinspect.core.summary module."""

from __future__ import annotations

import semantic_version
from packaging.version import Version

from bpinspect.core.model import APIVersions, BuildpackInfo, LifecycleDescriptor
from bpinspect.core.summary import (
    LifecycleFeature,
    earliest_buildpack_api,
    earliest_platform_api,
    earliest_version,
    render_buildpacks,
    render_lifecycle,
    stringify_apis,
    supports_feature,
)

from builders import make_buildpacks, make_remote_info
from golden import REMOTE_SECTION


def _section(text: str, title: str) -> str:
    """Block of `text` from `title` up to the next blank line, newline-terminated."""
    start = text.index(title)
    end = text.index("\n\n", start)
    return text[start:end + 1]


class TestRenderBuildpacks:
    """Tests for render_buildpacks function."""

    def test_table_matches_report(self) -> None:
        text, warnings = render_buildpacks(make_buildpacks(), "some/builder")
        assert text == _section(REMOTE_SECTION, "Buildpacks:")
        assert warnings == []

    def test_single_buildpack(self) -> None:
        text, _ = render_buildpacks([BuildpackInfo("a", "1", "http://a")], "b")
        assert text == (
            "Buildpacks:\n"
            "  ID        VERSION        HOMEPAGE\n"
            "  a         1              http://a\n"
        )

    def test_empty(self) -> None:
        text, warnings = render_buildpacks([], "some/builder")
        assert text == "Buildpacks:\n  (none)\n"
        assert warnings == [
            "'some/builder' has no buildpacks",
            "Users must supply buildpacks from the host machine",
        ]


class TestStringifyApis:
    """Tests for stringify_apis function."""

    def test_joins_in_input_order(self) -> None:
        assert stringify_apis([Version("2.3"), Version("1.2")]) == "2.3, 1.2"

    def test_empty(self) -> None:
        assert stringify_apis([]) == "(none)"

    def test_skips_none(self) -> None:
        assert stringify_apis([None, Version("0.4")]) == "0.4"
        assert stringify_apis([None]) == "(none)"


class TestEarliestVersion:
    """Tests for earliest_version and its lifecycle helpers."""

    def test_picks_smallest(self) -> None:
        assert earliest_version([Version("0.10"), Version("0.2"), Version("1.0")]) == Version("0.2")

    def test_numeric_not_lexical(self) -> None:
        assert earliest_version([Version("10.11"), Version("8.9")]) == Version("8.9")

    def test_ignores_none(self) -> None:
        assert earliest_version([None, Version("0.3"), None]) == Version("0.3")

    def test_empty(self) -> None:
        assert earliest_version([]) is None
        assert earliest_version([None]) is None

    def test_lifecycle_helpers(self) -> None:
        lifecycle = make_remote_info().lifecycle
        assert earliest_buildpack_api(lifecycle) == Version("1.2")
        assert earliest_platform_api(lifecycle) == Version("4.5")

    def test_lifecycle_helpers_ignore_deprecated(self) -> None:
        lifecycle = LifecycleDescriptor(
            buildpack_apis=APIVersions(deprecated=[Version("0.1")], supported=[]),
        )
        assert earliest_buildpack_api(lifecycle) is None
        assert earliest_platform_api(lifecycle) is None


class TestRenderLifecycle:
    """Tests for render_lifecycle function."""

    def test_matches_report(self) -> None:
        text, warnings = render_lifecycle(make_remote_info().lifecycle, "some/builder")
        assert text == _section(REMOTE_SECTION, "Lifecycle:")
        assert warnings == []

    def test_unspecified_lifecycle_warns(self) -> None:
        text, warnings = render_lifecycle(LifecycleDescriptor(), "some/builder")
        assert text == (
            "Lifecycle:\n"
            "  Version: (none)\n"
            "  Buildpack APIs:\n"
            "    Deprecated: (none)\n"
            "    Supported: (none)\n"
            "  Platform APIs:\n"
            "    Deprecated: (none)\n"
            "    Supported: (none)\n"
        )
        assert warnings == [
            "'some/builder' does not specify a Lifecycle version",
            "'some/builder' does not specify supported Lifecycle Buildpack APIs",
            "'some/builder' does not specify supported Lifecycle Platform APIs",
        ]

    def test_only_platform_missing(self) -> None:
        lifecycle = LifecycleDescriptor(
            version=semantic_version.Version("0.9.0"),
            buildpack_apis=APIVersions(supported=[Version("0.2")]),
        )
        _, warnings = render_lifecycle(lifecycle, "b")
        assert warnings == ["'b' does not specify supported Lifecycle Platform APIs"]


class TestSupportsFeature:
    """Tests for supports_feature function."""

    def test_creator_boundary(self) -> None:
        assert supports_feature(semantic_version.Version("0.7.4"), LifecycleFeature.CREATOR)
        assert supports_feature(semantic_version.Version("0.8.0"), LifecycleFeature.CREATOR)
        assert not supports_feature(semantic_version.Version("0.7.3"), LifecycleFeature.CREATOR)

    def test_unknown_version(self) -> None:
        assert supports_feature(None, LifecycleFeature.CREATOR) is False
