"""Render the buildpack table and lifecycle API summary; lifecycle feature gates."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable

import semantic_version
from packaging.version import Version

from bpinspect.core.model import APIVersions, BuildpackInfo, LifecycleDescriptor
from bpinspect.core.render import NONE_LINE, align_columns

BUILDPACKS_TITLE = "Buildpacks:"
LIFECYCLE_TITLE = "Lifecycle:"
NONE_TEXT = "(none)"

TABLE_PADDING = 8


def render_buildpacks(
    buildpacks: list[BuildpackInfo],
    builder_name: str,
) -> tuple[str, list[str]]:
    """
    Render the flat buildpack table.

    Returns (text, warnings). An empty list renders `(none)` and warns that
    buildpacks must be supplied by the user.
    """
    if not buildpacks:
        warnings = [
            f"'{builder_name}' has no buildpacks",
            "Users must supply buildpacks from the host machine",
        ]
        return f"{BUILDPACKS_TITLE}\n{NONE_LINE}\n", warnings

    rows = [("  ID", "VERSION", "HOMEPAGE")]
    rows.extend((f"  {bp.id}", bp.version, bp.homepage) for bp in buildpacks)
    lines = align_columns(rows, TABLE_PADDING)
    return "\n".join([BUILDPACKS_TITLE, *lines]) + "\n", []


def stringify_apis(versions: Iterable[Version | None]) -> str:
    """Comma-join versions in input order, or `(none)` when there are none."""
    names = [str(v) for v in versions if v is not None]
    if not names:
        return NONE_TEXT
    return ", ".join(names)


def earliest_version(versions: Iterable[Version | None]) -> Version | None:
    """Smallest version, ignoring None entries; None when nothing is left."""
    earliest: Version | None = None
    for version in versions:
        if version is None:
            continue
        if earliest is None or version < earliest:
            earliest = version
    return earliest


def earliest_buildpack_api(lifecycle: LifecycleDescriptor) -> Version | None:
    return earliest_version(lifecycle.buildpack_apis.supported)


def earliest_platform_api(lifecycle: LifecycleDescriptor) -> Version | None:
    return earliest_version(lifecycle.platform_apis.supported)


def _api_lines(label: str, apis: APIVersions) -> list[str]:
    return [
        f"  {label} APIs:",
        f"    Deprecated: {stringify_apis(apis.deprecated)}",
        f"    Supported: {stringify_apis(apis.supported)}",
    ]


def render_lifecycle(
    lifecycle: LifecycleDescriptor,
    builder_name: str,
) -> tuple[str, list[str]]:
    """
    Render the lifecycle version and its buildpack/platform API sets.

    Returns (text, warnings); warnings name whatever the builder leaves
    unspecified (lifecycle version, supported buildpack or platform APIs).
    """
    warnings: list[str] = []
    lines = [LIFECYCLE_TITLE]
    if lifecycle.version is not None:
        lines.append(f"  Version: {lifecycle.version}")
    else:
        lines.append(f"  Version: {NONE_TEXT}")
        warnings.append(f"'{builder_name}' does not specify a Lifecycle version")
    lines.extend(_api_lines("Buildpack", lifecycle.buildpack_apis))
    lines.extend(_api_lines("Platform", lifecycle.platform_apis))
    if earliest_buildpack_api(lifecycle) is None:
        warnings.append(f"'{builder_name}' does not specify supported Lifecycle Buildpack APIs")
    if earliest_platform_api(lifecycle) is None:
        warnings.append(f"'{builder_name}' does not specify supported Lifecycle Platform APIs")
    return "\n".join(lines) + "\n", warnings


class LifecycleFeature(Enum):
    """Lifecycle capabilities that depend on the lifecycle version."""

    CREATOR = "creator"


def _at_least(minimum: str) -> Callable[[semantic_version.Version], bool]:
    floor = semantic_version.Version(minimum)
    return lambda version: version >= floor


_FEATURE_TESTS: MappingProxyType[LifecycleFeature, Callable[[semantic_version.Version], bool]] = (
    MappingProxyType(
        {
            LifecycleFeature.CREATOR: _at_least("0.7.4"),
        }
    )
)


def supports_feature(
    lifecycle_version: semantic_version.Version | None,
    feature: LifecycleFeature,
) -> bool:
    """True if a lifecycle of this version provides `feature`; False if unknown."""
    if lifecycle_version is None:
        return False
    return _FEATURE_TESTS[feature](lifecycle_version)
