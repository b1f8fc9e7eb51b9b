"""Public API: use bpinspect from Python or from other tools."""

from __future__ import annotations

from pathlib import Path

from bpinspect.core.config import Config, load_config
from bpinspect.core.model import BuilderInfo, ResolvedNode
from bpinspect.core.provider import fetch_local_and_remote, load_builder_info
from bpinspect.core.render import render_detection_order
from bpinspect.core.report import render_report
from bpinspect.core.resolver import resolve_order


def load_builder(path: Path) -> BuilderInfo:
    """
    Read builder metadata from a JSON file.

    The file may hold `docker image inspect` or `skopeo inspect` output, or
    the builder's label map itself.
    """
    return load_builder_info(Path(path))


def resolve_detection_order(
    info: BuilderInfo,
    *,
    max_depth: int | None = None,
) -> list[list[ResolvedNode]]:
    """
    Expand a builder's detection order into its full nested tree.

    Args:
        info: Builder metadata.
        max_depth: Optional number of order levels to expand; None = unlimited.

    Returns:
        One list of ResolvedNode per root group.
    """
    return resolve_order(info.order, info.layers, max_depth)


def detection_order_text(info: BuilderInfo, *, max_depth: int | None = None) -> str:
    """Render a builder's detection order as the `Detection Order:` tree."""
    return render_detection_order(resolve_detection_order(info, max_depth=max_depth))


def inspect_builder(
    image: str,
    *,
    depth: int | None = None,
    verbose: bool = False,
    config: Config | None = None,
    is_default: bool = False,
) -> tuple[str, list[str]]:
    """
    Inspect the remote and local views of a builder image.

    Fetches both views concurrently (skopeo for the registry, docker for the
    daemon) and renders the full report.

    Args:
        image: Builder image reference.
        depth: Optional detection order depth; None = unlimited.
        verbose: Include stack mixins.
        config: Config to use; loaded from config.toml when None.
        is_default: Label the report as inspecting the default builder.

    Returns:
        (report text, warnings).
    """
    if config is None:
        config = load_config()
    remote, remote_error, local, local_error = fetch_local_and_remote(image)
    return render_report(
        image,
        remote=remote,
        local=local,
        remote_error=remote_error,
        local_error=local_error,
        is_default=is_default,
        config=config,
        verbose=verbose,
        max_depth=depth,
    )
