"""Fetch builder metadata from the docker daemon, a registry, or a file."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bpinspect.core.errors import MetadataError, ProviderError
from bpinspect.core.model import BuilderInfo
from bpinspect.core.parser import parse_inspect_document

logger = logging.getLogger(__name__)

INSPECT_TIMEOUT = 120

# Substrings the tools print when the image simply is not there.
_NOT_FOUND_MARKERS = (
    "no such image",
    "no such object",
    "manifest unknown",
    "not found",
)


def _inspect_command(image: str, daemon: bool) -> list[str]:
    if daemon:
        return ["docker", "image", "inspect", image]
    return ["skopeo", "inspect", f"docker://{image}"]


def fetch_builder_info(image: str, *, daemon: bool) -> BuilderInfo | None:
    """
    Inspect `image` locally (docker daemon) or remotely (registry via skopeo).

    Returns None if the image is not present. Raises ProviderError if the
    tool is unavailable, times out, or fails for another reason, and
    MetadataError if the labels cannot be decoded.
    """
    cmd = _inspect_command(image, daemon)
    if shutil.which(cmd[0]) is None:
        raise ProviderError(f"{cmd[0]} not found in PATH")
    logger.debug("running %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=INSPECT_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise ProviderError(f"{cmd[0]} timed out after {INSPECT_TIMEOUT}s") from e
    except OSError as e:
        raise ProviderError(f"running {cmd[0]}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if any(marker in stderr.lower() for marker in _NOT_FOUND_MARKERS):
            logger.debug("%s: image not present: %s", cmd[0], stderr)
            return None
        raise ProviderError(stderr or f"{cmd[0]} exited with status {result.returncode}")

    try:
        document = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise MetadataError(f"{cmd[0]} returned invalid JSON: {e}") from e
    if isinstance(document, list) and not document:
        return None
    return parse_inspect_document(document)


def load_builder_info(path: Path) -> BuilderInfo:
    """
    Read builder metadata from a JSON file.

    The file may hold docker or skopeo inspect output, or a plain label map.
    """
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ProviderError(f"reading {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise MetadataError(f"{path} is not valid JSON: {e}") from e
    return parse_inspect_document(document)


def fetch_local_and_remote(
    image: str,
) -> tuple[BuilderInfo | None, Exception | None, BuilderInfo | None, Exception | None]:
    """
    Inspect the remote and local views of `image` concurrently.

    Returns (remote, remote_error, local, local_error); at most one of each
    pair is set.
    """

    def _fetch(daemon: bool) -> tuple[BuilderInfo | None, Exception | None]:
        try:
            return fetch_builder_info(image, daemon=daemon), None
        except (ProviderError, MetadataError) as e:
            return None, e

    with ThreadPoolExecutor(max_workers=2) as pool:
        remote_future = pool.submit(_fetch, False)
        local_future = pool.submit(_fetch, True)
        remote, remote_error = remote_future.result()
        local, local_error = local_future.result()
    return remote, remote_error, local, local_error
