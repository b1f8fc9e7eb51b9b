"""Parse builder image labels into BuilderInfo."""

from __future__ import annotations

import json
from typing import Any

import semantic_version
from packaging.version import InvalidVersion, Version

from bpinspect.core.errors import MetadataError
from bpinspect.core.model import (
    APIVersions,
    BuilderInfo,
    BuildpackIdentity,
    BuildpackInfo,
    BuildpackLayerInfo,
    BuildpackRef,
    CreatorMetadata,
    Layers,
    LifecycleDescriptor,
    Order,
)

# OCI labels a builder image carries (each value is a JSON document).
METADATA_LABEL = "io.buildpacks.builder.metadata"
ORDER_LABEL = "io.buildpacks.buildpack.order"
LAYERS_LABEL = "io.buildpacks.buildpack.layers"
STACK_ID_LABEL = "io.buildpacks.stack.id"
MIXINS_LABEL = "io.buildpacks.stack.mixins"


def extract_labels(document: Any) -> dict[str, str]:
    """
    Find the label map in a decoded inspect document.

    Accepts `docker image inspect` output (a list of images with
    Config.Labels), `skopeo inspect` output (top-level Labels), or a plain
    label mapping.
    """
    if isinstance(document, list):
        if not document:
            return {}
        document = document[0]
    if not isinstance(document, dict):
        raise MetadataError(f"expected a JSON object or array, got {type(document).__name__}")
    if isinstance(document.get("Config"), dict):
        document = document["Config"]
    if "Labels" in document:
        document = document["Labels"] or {}
    if not isinstance(document, dict):
        raise MetadataError("image labels must be a JSON object")
    return {str(k): v for k, v in document.items() if isinstance(v, str)}


def _decode_label(labels: dict[str, str], name: str, default: Any) -> Any:
    raw = labels.get(name)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataError(f"label {name} is not valid JSON: {e}") from e


def _expect(value: Any, kind: type, what: str) -> Any:
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise MetadataError(f"{what} must be a {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_api(raw: Any, what: str) -> Version | None:
    if raw in (None, ""):
        return None
    try:
        return Version(str(raw))
    except InvalidVersion as e:
        raise MetadataError(f"invalid {what} API version {raw!r}") from e


def parse_order(raw: Any) -> Order:
    """Parse `[{"group": [{"id", "version", "optional"}]}]` into an Order."""
    order: Order = []
    for entry in _expect(raw, list, "order"):
        entry = _expect(entry, dict, "order entry")
        group = []
        for ref in _expect(entry.get("group"), list, "group"):
            ref = _expect(ref, dict, "group entry")
            group.append(
                BuildpackRef(
                    identity=BuildpackIdentity(str(ref.get("id", "")), str(ref.get("version") or "")),
                    optional=_expect(ref.get("optional"), bool, "optional flag"),
                )
            )
        order.append(group)
    return order


def parse_layers(raw: Any) -> Layers:
    """Parse the `{id: {version: layer-info}}` buildpack layers label."""
    layers: Layers = {}
    for bp_id, versions in _expect(raw, dict, "buildpack layers").items():
        for bp_version, info in _expect(versions, dict, f"layers of {bp_id}").items():
            info = _expect(info, dict, f"layer {bp_id}@{bp_version}")
            stacks = [
                str(s.get("id", "")) for s in _expect(info.get("stacks"), list, "stacks") if isinstance(s, dict)
            ]
            layers[BuildpackIdentity(bp_id, bp_version)] = BuildpackLayerInfo(
                api=_parse_api(info.get("api"), f"{bp_id}@{bp_version}"),
                order=parse_order(info.get("order")),
                homepage=str(info.get("homepage") or ""),
                stacks=stacks,
                layer_diff_id=str(info.get("layerDiffID") or ""),
            )
    return layers


def _parse_api_versions(raw: Any, fallback: Any, what: str) -> APIVersions:
    raw = _expect(raw, dict, f"{what} APIs")
    deprecated = _expect(raw.get("deprecated"), list, f"deprecated {what} APIs")
    supported = _expect(raw.get("supported"), list, f"supported {what} APIs")
    # Older lifecycles only declare a single API version.
    if not supported and fallback:
        supported = [fallback]
    return APIVersions(
        deprecated=[_parse_api(v, what) for v in deprecated],
        supported=[_parse_api(v, what) for v in supported],
    )


def parse_lifecycle(raw: Any) -> LifecycleDescriptor:
    """Parse the `lifecycle` object of the builder metadata label."""
    raw = _expect(raw, dict, "lifecycle")
    version = None
    if raw.get("version"):
        try:
            version = semantic_version.Version.coerce(str(raw["version"]))
        except ValueError as e:
            raise MetadataError(f"invalid lifecycle version {raw['version']!r}") from e
    single = _expect(raw.get("api"), dict, "lifecycle api")
    apis = _expect(raw.get("apis"), dict, "lifecycle apis")
    return LifecycleDescriptor(
        version=version,
        buildpack_apis=_parse_api_versions(apis.get("buildpack"), single.get("buildpack"), "buildpack"),
        platform_apis=_parse_api_versions(apis.get("platform"), single.get("platform"), "platform"),
    )


def parse_builder_labels(labels: dict[str, str]) -> BuilderInfo:
    """
    Build a BuilderInfo from a builder image's labels.

    Missing labels leave the corresponding fields empty. Raises MetadataError
    if a label is present but malformed.
    """
    metadata = _expect(_decode_label(labels, METADATA_LABEL, {}), dict, "builder metadata")
    stack = _expect(metadata.get("stack"), dict, "stack")
    run_image = _expect(stack.get("runImage"), dict, "run image")
    created_by = _expect(metadata.get("createdBy"), dict, "createdBy")

    buildpacks = [
        BuildpackInfo(
            id=str(bp.get("id", "")),
            version=str(bp.get("version") or ""),
            homepage=str(bp.get("homepage") or ""),
        )
        for bp in _expect(metadata.get("buildpacks"), list, "buildpacks")
        if isinstance(bp, dict)
    ]

    return BuilderInfo(
        description=str(metadata.get("description") or ""),
        stack_id=labels.get(STACK_ID_LABEL, ""),
        mixins=[str(m) for m in _expect(_decode_label(labels, MIXINS_LABEL, []), list, "mixins")],
        run_image=str(run_image.get("image") or ""),
        run_image_mirrors=[str(m) for m in _expect(run_image.get("mirrors"), list, "mirrors")],
        buildpacks=buildpacks,
        order=parse_order(_decode_label(labels, ORDER_LABEL, [])),
        layers=parse_layers(_decode_label(labels, LAYERS_LABEL, {})),
        lifecycle=parse_lifecycle(metadata.get("lifecycle")),
        created_by=CreatorMetadata(
            name=str(created_by.get("name") or ""),
            version=str(created_by.get("version") or ""),
        ),
    )


def parse_inspect_document(document: Any) -> BuilderInfo:
    """Parse decoded docker/skopeo inspect output (or a plain label map)."""
    return parse_builder_labels(extract_labels(document))
