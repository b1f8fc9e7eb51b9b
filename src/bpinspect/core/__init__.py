"""Core library: builder metadata model, order resolution, text rendering."""

from bpinspect.core.errors import (
    BpInspectError,
    BuilderNotFoundError,
    ConfigError,
    MetadataError,
    ProviderError,
)
from bpinspect.core.model import (
    BuilderInfo,
    BuildpackIdentity,
    BuildpackInfo,
    BuildpackLayerInfo,
    BuildpackRef,
    LifecycleDescriptor,
    ResolvedNode,
)
from bpinspect.core.render import render_detection_order
from bpinspect.core.resolver import resolve_order
from bpinspect.core.summary import (
    LifecycleFeature,
    earliest_version,
    render_buildpacks,
    render_lifecycle,
    supports_feature,
)

__all__ = [
    "BpInspectError",
    "BuilderNotFoundError",
    "ConfigError",
    "MetadataError",
    "ProviderError",
    "BuilderInfo",
    "BuildpackIdentity",
    "BuildpackInfo",
    "BuildpackLayerInfo",
    "BuildpackRef",
    "LifecycleDescriptor",
    "ResolvedNode",
    "render_detection_order",
    "resolve_order",
    "LifecycleFeature",
    "earliest_version",
    "render_buildpacks",
    "render_lifecycle",
    "supports_feature",
]
