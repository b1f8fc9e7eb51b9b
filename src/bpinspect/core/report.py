"""Compose the full human-readable builder inspection report."""

from __future__ import annotations

from bpinspect.core.config import Config
from bpinspect.core.errors import BuilderNotFoundError
from bpinspect.core.model import BuilderInfo
from bpinspect.core.render import NONE_LINE, TREE_PADDING, align_columns, render_detection_order
from bpinspect.core.resolver import resolve_order
from bpinspect.core.summary import render_buildpacks, render_lifecycle

USER_CONFIGURED = "(user-configured)"
NOT_PRESENT = "(not present)"


def _creator_section(info: BuilderInfo) -> str:
    if not info.created_by.name and not info.created_by.version:
        return ""
    return f"Created By:\n  Name: {info.created_by.name}\n  Version: {info.created_by.version}\n"


def _stack_section(info: BuilderInfo, verbose: bool) -> str:
    lines = ["Stack:", f"  ID: {info.stack_id}"]
    if verbose and info.mixins:
        lines.append("  Mixins:")
        lines.extend(f"    {m}" for m in info.mixins)
    return "\n".join(lines) + "\n"


def _run_images_section(
    info: BuilderInfo,
    builder_name: str,
    config: Config,
) -> tuple[str, list[str]]:
    if not info.run_image:
        warnings = [
            f"'{builder_name}' does not specify a run image",
            "Users must build with an explicitly specified run image",
        ]
        return f"Run Images:\n{NONE_LINE}\n", warnings
    rows: list[tuple[str, ...]] = [
        (f"  {m}", USER_CONFIGURED) for m in config.run_image_mirrors(info.run_image)
    ]
    rows.append((f"  {info.run_image}",))
    rows.extend((f"  {m}",) for m in info.run_image_mirrors)
    return "\n".join(["Run Images:", *align_columns(rows, TREE_PADDING)]) + "\n", []


def _detection_order_section(
    info: BuilderInfo,
    builder_name: str,
    max_depth: int | None,
) -> tuple[str, list[str]]:
    groups = resolve_order(info.order, info.layers, max_depth)
    warnings = []
    if not groups:
        warnings = [
            f"'{builder_name}' does not specify detection order",
            "Users must build with explicitly specified buildpacks",
        ]
    return render_detection_order(groups), warnings


def render_builder_info(
    info: BuilderInfo,
    builder_name: str,
    *,
    config: Config | None = None,
    verbose: bool = False,
    max_depth: int | None = None,
) -> tuple[str, list[str]]:
    """
    Render every section of one builder view (local or remote).

    Sections are separated by blank lines; empty description and creator
    sections are skipped. Returns (text, warnings).
    """
    config = config or Config()
    warnings: list[str] = []
    sections: list[str] = []
    if info.description:
        sections.append(f"Description: {info.description}\n")
    creator = _creator_section(info)
    if creator:
        sections.append(creator)
    trusted = "Yes" if config.is_trusted_builder(builder_name) else "No"
    sections.append(f"Trusted: {trusted}\n")
    sections.append(_stack_section(info, verbose))

    for text, section_warnings in (
        render_lifecycle(info.lifecycle, builder_name),
        _run_images_section(info, builder_name, config),
        render_buildpacks(info.buildpacks, builder_name),
        _detection_order_section(info, builder_name, max_depth),
    ):
        sections.append(text)
        warnings.extend(section_warnings)
    return "\n".join(sections), warnings


def _side_section(
    label: str,
    kind: str,
    builder_name: str,
    info: BuilderInfo | None,
    error: Exception | None,
    **render_kwargs,
) -> tuple[str, list[str]]:
    if error is not None:
        return f"\n{label}:\nERROR: inspecting {kind} image '{builder_name}': {error}\n", []
    if info is None:
        return f"\n{label}:\n{NOT_PRESENT}\n", []
    text, warnings = render_builder_info(info, builder_name, **render_kwargs)
    return f"\n{label}:\n\n{text}", warnings


def render_report(
    builder_name: str,
    *,
    remote: BuilderInfo | None,
    local: BuilderInfo | None,
    remote_error: Exception | None = None,
    local_error: Exception | None = None,
    is_default: bool = False,
    config: Config | None = None,
    verbose: bool = False,
    max_depth: int | None = None,
) -> tuple[str, list[str]]:
    """
    Render the REMOTE and LOCAL views of a builder under one banner.

    Raises BuilderNotFoundError when neither view exists and neither lookup
    failed. Returns (text, warnings).
    """
    if remote is None and local is None and remote_error is None and local_error is None:
        raise BuilderNotFoundError(builder_name)
    if max_depth is not None and max_depth < 0:
        raise ValueError(f"depth must be a non-negative integer, got {max_depth}")

    banner = "Inspecting default builder" if is_default else "Inspecting builder"
    kwargs = {"config": config, "verbose": verbose, "max_depth": max_depth}
    remote_text, remote_warnings = _side_section(
        "REMOTE", "remote", builder_name, remote, remote_error, **kwargs
    )
    local_text, local_warnings = _side_section(
        "LOCAL", "local", builder_name, local, local_error, **kwargs
    )
    text = f"{banner}: '{builder_name}'\n{remote_text}{local_text}"
    return text, remote_warnings + local_warnings


def builder_info_to_dict(info: BuilderInfo, *, max_depth: int | None = None) -> dict:
    """Serialize a builder view, with its resolved detection order, to a JSON-friendly dict."""
    lifecycle = info.lifecycle

    def _apis(versions: list) -> list[str]:
        return [str(v) for v in versions if v is not None]

    return {
        "description": info.description,
        "created_by": {"name": info.created_by.name, "version": info.created_by.version},
        "stack": {"id": info.stack_id, "mixins": list(info.mixins)},
        "run_images": [info.run_image, *info.run_image_mirrors] if info.run_image else [],
        "lifecycle": {
            "version": str(lifecycle.version) if lifecycle.version is not None else None,
            "buildpack_apis": {
                "deprecated": _apis(lifecycle.buildpack_apis.deprecated),
                "supported": _apis(lifecycle.buildpack_apis.supported),
            },
            "platform_apis": {
                "deprecated": _apis(lifecycle.platform_apis.deprecated),
                "supported": _apis(lifecycle.platform_apis.supported),
            },
        },
        "buildpacks": [
            {"id": bp.id, "version": bp.version, "homepage": bp.homepage} for bp in info.buildpacks
        ],
        "detection_order": [
            [node.to_dict() for node in group]
            for group in resolve_order(info.order, info.layers, max_depth)
        ],
    }
