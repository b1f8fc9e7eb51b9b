"""Tests for bpinspect.core.config module."""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest

from bpinspect.core.config import (
    Config,
    RunImageConfig,
    default_config_path,
    load_config,
    parse_config,
)
from bpinspect.core.errors import ConfigError

CONFIG_TOML = """\
default-builder-image = "paketobuildpacks/builder:base"

[[trusted-builders]]
name = "my/builder"

[[run-images]]
image = "some/run-image"
mirrors = ["first/local", "second/local"]
"""


class TestDefaultConfigPath:
    """Tests for default_config_path function."""

    def test_explicit_file(self, tmp_path) -> None:
        target = tmp_path / "custom.toml"
        with mock.patch.dict("os.environ", {"BPINSPECT_CONFIG": str(target)}):
            assert default_config_path() == target

    def test_pack_home(self, tmp_path) -> None:
        env = {"PACK_HOME": str(tmp_path), "BPINSPECT_CONFIG": ""}
        with mock.patch.dict("os.environ", env):
            assert default_config_path() == tmp_path / "config.toml"

    def test_home_fallback(self, tmp_path) -> None:
        env = {"PACK_HOME": "", "BPINSPECT_CONFIG": ""}
        with mock.patch.dict("os.environ", env), mock.patch.object(Path, "home", return_value=tmp_path):
            assert default_config_path() == tmp_path / ".pack" / "config.toml"


class TestLoadConfig:
    """Tests for load_config and parse_config."""

    def test_missing_file(self, tmp_path) -> None:
        assert load_config(tmp_path / "absent.toml") == Config()

    def test_full_file(self, tmp_path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(CONFIG_TOML)
        config = load_config(path)
        assert config.default_builder == "paketobuildpacks/builder:base"
        assert config.trusted_builders == ["my/builder"]
        assert config.run_images == [
            RunImageConfig(image="some/run-image", mirrors=["first/local", "second/local"])
        ]

    def test_invalid_toml(self, tmp_path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("default-builder-image = \n")
        with pytest.raises(ConfigError, match="reading config"):
            load_config(path)

    def test_uses_env_path(self, tmp_path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(CONFIG_TOML)
        with mock.patch.dict("os.environ", {"BPINSPECT_CONFIG": str(path)}):
            assert load_config().default_builder == "paketobuildpacks/builder:base"

    def test_skips_incomplete_entries(self) -> None:
        config = parse_config({"trusted-builders": [{}, {"name": "a"}], "run-images": [{"mirrors": ["x"]}]})
        assert config.trusted_builders == ["a"]
        assert config.run_images == []


class TestConfig:
    """Tests for Config methods."""

    def test_suggested_builders_trusted(self) -> None:
        config = Config()
        assert config.is_trusted_builder("gcr.io/buildpacks/builder:v1")
        assert config.is_trusted_builder("paketobuildpacks/builder:tiny")
        assert not config.is_trusted_builder("some/builder")

    def test_user_trusted(self) -> None:
        assert Config(trusted_builders=["some/builder"]).is_trusted_builder("some/builder")

    def test_run_image_mirrors(self) -> None:
        config = Config(run_images=[RunImageConfig("a", ["m1"]), RunImageConfig("b", ["m2"])])
        assert config.run_image_mirrors("b") == ["m2"]
        assert config.run_image_mirrors("c") == []
