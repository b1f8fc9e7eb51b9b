"""Exceptions raised by bpinspect."""

from __future__ import annotations


class BpInspectError(Exception):
    """Base class for all bpinspect errors."""


class MetadataError(BpInspectError):
    """Builder labels are present but cannot be decoded."""


class ProviderError(BpInspectError):
    """The metadata provider (docker, skopeo, file) failed."""


class ConfigError(BpInspectError):
    """The config file exists but cannot be parsed."""


class BuilderNotFoundError(BpInspectError):
    """Neither a local nor a remote builder image could be found."""

    def __init__(self, builder_name: str) -> None:
        super().__init__(f"Unable to find builder '{builder_name}' locally or remotely.")
        self.builder_name = builder_name
