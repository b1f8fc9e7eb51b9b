"""Shared builder fixtures for bpinspect tests."""

from __future__ import annotations

import json

import pytest

from bpinspect.core.model import BuilderInfo

from builders import make_labels, make_local_info, make_remote_info


@pytest.fixture
def remote_info() -> BuilderInfo:
    return make_remote_info()


@pytest.fixture
def local_info() -> BuilderInfo:
    return make_local_info()


@pytest.fixture
def labels() -> dict[str, str]:
    return make_labels()


@pytest.fixture
def labels_file(tmp_path, labels):
    path = tmp_path / "builder.json"
    path.write_text(json.dumps([{"Id": "sha256:abc", "Config": {"Labels": labels}}]))
    return path
