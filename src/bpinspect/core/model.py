"""Value types describing a builder image: buildpacks, detection order, lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field

import semantic_version
from packaging.version import Version


@dataclass(frozen=True)
class BuildpackIdentity:
    """The (id, version) pair naming one buildpack release."""

    id: str
    version: str = ""

    @property
    def full_name(self) -> str:
        """`id@version`, or just `id` when the version is unspecified."""
        if self.version:
            return f"{self.id}@{self.version}"
        return self.id


@dataclass(frozen=True)
class BuildpackInfo:
    """One entry of the builder's flat buildpack list."""

    id: str
    version: str = ""
    homepage: str = ""

    @property
    def identity(self) -> BuildpackIdentity:
        return BuildpackIdentity(self.id, self.version)


@dataclass(frozen=True)
class BuildpackRef:
    """A buildpack referenced from a detection group."""

    identity: BuildpackIdentity
    optional: bool = False


# A group is attempted as a unit; an order is a list of alternative groups.
Group = list[BuildpackRef]
Order = list[Group]


@dataclass
class BuildpackLayerInfo:
    """Per-release metadata stored in the builder's buildpack layers label."""

    api: Version | None = None
    order: Order = field(default_factory=list)
    homepage: str = ""
    stacks: list[str] = field(default_factory=list)
    layer_diff_id: str = ""


Layers = dict[BuildpackIdentity, BuildpackLayerInfo]


@dataclass
class APIVersions:
    """Deprecated and supported API versions, in the order the builder lists them."""

    deprecated: list[Version | None] = field(default_factory=list)
    supported: list[Version | None] = field(default_factory=list)


@dataclass
class LifecycleDescriptor:
    """Lifecycle version plus the buildpack and platform APIs it speaks."""

    version: semantic_version.Version | None = None
    buildpack_apis: APIVersions = field(default_factory=APIVersions)
    platform_apis: APIVersions = field(default_factory=APIVersions)


@dataclass
class CreatorMetadata:
    """Name and version of the tool that created the builder."""

    name: str = ""
    version: str = ""


@dataclass
class BuilderInfo:
    """Everything known about one builder image (local or remote view)."""

    description: str = ""
    stack_id: str = ""
    mixins: list[str] = field(default_factory=list)
    run_image: str = ""
    run_image_mirrors: list[str] = field(default_factory=list)
    buildpacks: list[BuildpackInfo] = field(default_factory=list)
    order: Order = field(default_factory=list)
    layers: Layers = field(default_factory=dict)
    lifecycle: LifecycleDescriptor = field(default_factory=LifecycleDescriptor)
    created_by: CreatorMetadata = field(default_factory=CreatorMetadata)


@dataclass
class ResolvedNode:
    """A buildpack reference expanded into its nested detection groups."""

    ref: BuildpackRef
    children: list[list[ResolvedNode]] = field(default_factory=list)
    cyclic: bool = False
    truncated: bool = False

    @property
    def name(self) -> str:
        return self.ref.identity.full_name

    def to_dict(self) -> dict:
        """Serialize node to a JSON-friendly dict."""
        return {
            "id": self.ref.identity.id,
            "version": self.ref.identity.version,
            "optional": self.ref.optional,
            "cyclic": self.cyclic,
            "truncated": self.truncated,
            "groups": [[c.to_dict() for c in group] for group in self.children],
        }
