"""Expand a builder's root detection order into the full nested tree."""

from __future__ import annotations

import logging

from bpinspect.core.model import (
    BuildpackIdentity,
    BuildpackRef,
    Layers,
    Order,
    ResolvedNode,
)

logger = logging.getLogger(__name__)


def resolve_order(
    order: Order,
    layers: Layers,
    max_depth: int | None = None,
) -> list[list[ResolvedNode]]:
    """
    Resolve every group of a root detection order into ResolvedNodes.

    Buildpacks carrying a nested order in `layers` are expanded depth-first.
    The root order is expansion level 1; a buildpack whose nested order would
    live below `max_depth` becomes a truncated leaf. A buildpack already on
    its own expansion path becomes a cyclic leaf. Buildpacks without a
    version or without layer metadata are plain leaves.

    Args:
        order: Root detection order.
        layers: Layer metadata keyed by exact buildpack identity.
        max_depth: Optional number of expansion levels; None = unlimited.

    Returns:
        One list of ResolvedNode per root group, in input order.
    """
    if max_depth is not None and max_depth < 0:
        raise ValueError(f"depth must be a non-negative integer, got {max_depth}")
    groups = _resolve_groups(order, layers, max_depth, level=1, path=[])
    logger.debug("resolved %d root group(s) (max_depth=%s)", len(groups), max_depth)
    return groups


def _resolve_groups(
    order: Order,
    layers: Layers,
    max_depth: int | None,
    *,
    level: int,
    path: list[BuildpackIdentity],
) -> list[list[ResolvedNode]]:
    return [
        [_resolve_ref(ref, layers, max_depth, level=level, path=path) for ref in group]
        for group in order
    ]


def _resolve_ref(
    ref: BuildpackRef,
    layers: Layers,
    max_depth: int | None,
    *,
    level: int,
    path: list[BuildpackIdentity],
) -> ResolvedNode:
    identity = ref.identity
    # Unversioned refs cannot be looked up, so they never reach the path either.
    layer = layers.get(identity) if identity.version else None
    if layer is None or not layer.order:
        return ResolvedNode(ref=ref)
    if max_depth is not None and level >= max_depth:
        return ResolvedNode(ref=ref, truncated=True)
    if identity in path:
        logger.debug("cycle at %s (path: %s)", identity.full_name, [p.full_name for p in path])
        return ResolvedNode(ref=ref, cyclic=True)

    path.append(identity)
    children = _resolve_groups(layer.order, layers, max_depth, level=level + 1, path=path)
    popped = path.pop()
    assert popped == identity, f"expansion path corrupted: expected {identity}, got {popped}"
    return ResolvedNode(ref=ref, children=children)
