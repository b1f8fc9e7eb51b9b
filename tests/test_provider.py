"""Tests for bpinspect.core.provider module."""

from __future__ import annotations

import json
import subprocess
from unittest import mock

import pytest

from bpinspect.core.errors import MetadataError, ProviderError
from bpinspect.core.provider import (
    fetch_builder_info,
    fetch_local_and_remote,
    load_builder_info,
)

from builders import make_remote_info


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def tools_present():
    with mock.patch("bpinspect.core.provider.shutil.which", return_value="/usr/bin/tool"):
        yield


class TestFetchBuilderInfo:
    """Tests for fetch_builder_info function."""

    def test_docker_command(self, tools_present, labels) -> None:
        stdout = json.dumps([{"Config": {"Labels": labels}}])
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=_completed(stdout=stdout)) as run:
            info = fetch_builder_info("some/builder", daemon=True)
        assert run.call_args[0][0] == ["docker", "image", "inspect", "some/builder"]
        assert info == make_remote_info()

    def test_skopeo_command(self, tools_present, labels) -> None:
        stdout = json.dumps({"Name": "some/builder", "Labels": labels})
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=_completed(stdout=stdout)) as run:
            info = fetch_builder_info("some/builder", daemon=False)
        assert run.call_args[0][0] == ["skopeo", "inspect", "docker://some/builder"]
        assert info.description == "Some remote description"

    def test_not_found(self, tools_present) -> None:
        result = _completed(returncode=1, stderr="Error: No such image: some/builder")
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=result):
            assert fetch_builder_info("some/builder", daemon=True) is None

    def test_manifest_unknown(self, tools_present) -> None:
        result = _completed(returncode=1, stderr="manifest unknown: manifest unknown")
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=result):
            assert fetch_builder_info("some/builder", daemon=False) is None

    def test_empty_docker_list(self, tools_present) -> None:
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=_completed(stdout="[]")):
            assert fetch_builder_info("some/builder", daemon=True) is None

    def test_other_failure(self, tools_present) -> None:
        result = _completed(returncode=1, stderr="Cannot connect to the Docker daemon")
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=result):
            with pytest.raises(ProviderError, match="Cannot connect"):
                fetch_builder_info("some/builder", daemon=True)

    def test_failure_without_stderr(self, tools_present) -> None:
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=_completed(returncode=3)):
            with pytest.raises(ProviderError, match="exited with status 3"):
                fetch_builder_info("some/builder", daemon=True)

    def test_timeout(self, tools_present) -> None:
        error = subprocess.TimeoutExpired(cmd="docker", timeout=120)
        with mock.patch("bpinspect.core.provider.subprocess.run", side_effect=error):
            with pytest.raises(ProviderError, match="timed out"):
                fetch_builder_info("some/builder", daemon=True)

    def test_tool_missing(self) -> None:
        with mock.patch("bpinspect.core.provider.shutil.which", return_value=None):
            with pytest.raises(ProviderError, match="skopeo not found"):
                fetch_builder_info("some/builder", daemon=False)

    def test_invalid_json(self, tools_present) -> None:
        with mock.patch("bpinspect.core.provider.subprocess.run", return_value=_completed(stdout="nope")):
            with pytest.raises(MetadataError, match="invalid JSON"):
                fetch_builder_info("some/builder", daemon=True)


class TestLoadBuilderInfo:
    """Tests for load_builder_info function."""

    def test_docker_inspect_file(self, labels_file) -> None:
        assert load_builder_info(labels_file) == make_remote_info()

    def test_label_map_file(self, tmp_path, labels) -> None:
        path = tmp_path / "labels.json"
        path.write_text(json.dumps(labels))
        assert load_builder_info(path).stack_id == "test.stack.id"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ProviderError, match="reading"):
            load_builder_info(tmp_path / "absent.json")

    def test_invalid_file(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(MetadataError, match="not valid JSON"):
            load_builder_info(path)


class TestFetchLocalAndRemote:
    """Tests for fetch_local_and_remote function."""

    def test_both_sides(self) -> None:
        remote, local = make_remote_info(), make_remote_info()

        def fake_fetch(image: str, *, daemon: bool):
            return local if daemon else remote

        with mock.patch("bpinspect.core.provider.fetch_builder_info", side_effect=fake_fetch):
            result = fetch_local_and_remote("some/builder")
        assert result[0] is remote
        assert result[1] is None
        assert result[2] is local
        assert result[3] is None

    def test_errors_are_returned(self) -> None:
        def fake_fetch(image: str, *, daemon: bool):
            if daemon:
                raise ProviderError("docker not found in PATH")
            return None

        with mock.patch("bpinspect.core.provider.fetch_builder_info", side_effect=fake_fetch):
            remote, remote_error, local, local_error = fetch_local_and_remote("some/builder")
        assert remote is None and remote_error is None
        assert local is None
        assert isinstance(local_error, ProviderError)
