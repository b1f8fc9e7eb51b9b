"""Read the pack-compatible config file: default builder, trusted builders, run image mirrors."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from bpinspect.core.errors import ConfigError


@dataclass(frozen=True)
class SuggestedBuilder:
    """A well-known builder that is trusted without configuration."""

    vendor: str
    image: str


SUGGESTED_BUILDERS = (
    SuggestedBuilder("Google", "gcr.io/buildpacks/builder:v1"),
    SuggestedBuilder("Heroku", "heroku/buildpacks:18"),
    SuggestedBuilder("Paketo Buildpacks", "paketobuildpacks/builder:base"),
    SuggestedBuilder("Paketo Buildpacks", "paketobuildpacks/builder:full"),
    SuggestedBuilder("Paketo Buildpacks", "paketobuildpacks/builder:tiny"),
)


@dataclass
class RunImageConfig:
    """User-configured mirrors for a run image."""

    image: str
    mirrors: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Settings read from config.toml."""

    default_builder: str = ""
    trusted_builders: list[str] = field(default_factory=list)
    run_images: list[RunImageConfig] = field(default_factory=list)

    def is_trusted_builder(self, builder_name: str) -> bool:
        """True for suggested builders and builders the user trusted."""
        if any(b.image == builder_name for b in SUGGESTED_BUILDERS):
            return True
        return builder_name in self.trusted_builders

    def run_image_mirrors(self, run_image: str) -> list[str]:
        """Mirrors the user configured locally for `run_image`."""
        for ri in self.run_images:
            if ri.image == run_image:
                return list(ri.mirrors)
        return []


def default_config_path() -> Path:
    """
    Location of config.toml.

    BPINSPECT_CONFIG names the file directly; otherwise PACK_HOME (default
    ~/.pack) holds config.toml, so pack's own configuration is reused.
    """
    explicit = os.environ.get("BPINSPECT_CONFIG", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    home = os.environ.get("PACK_HOME", "").strip()
    base = Path(home).expanduser() if home else Path.home() / ".pack"
    return base / "config.toml"


def parse_config(data: dict) -> Config:
    """Build a Config from decoded TOML."""
    trusted = [
        str(entry["name"])
        for entry in data.get("trusted-builders", [])
        if isinstance(entry, dict) and entry.get("name")
    ]
    run_images = [
        RunImageConfig(image=str(entry["image"]), mirrors=[str(m) for m in entry.get("mirrors", [])])
        for entry in data.get("run-images", [])
        if isinstance(entry, dict) and entry.get("image")
    ]
    return Config(
        default_builder=str(data.get("default-builder-image", "")),
        trusted_builders=trusted,
        run_images=run_images,
    )


def load_config(path: Path | None = None) -> Config:
    """
    Load config.toml; a missing file yields an empty Config.

    Raises ConfigError if the file exists but is not valid TOML.
    """
    path = path or default_config_path()
    if not path.exists():
        return Config()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigError(f"reading config {path}: {e}") from e
    return parse_config(data)
