"""bpinspect: inspect buildpack builder images (library, TUI, CLI)."""

from importlib.metadata import version, PackageNotFoundError

from bpinspect.api import (
    detection_order_text,
    inspect_builder,
    load_builder,
    resolve_detection_order,
)

__all__ = [
    "detection_order_text",
    "inspect_builder",
    "load_builder",
    "resolve_detection_order",
    "__version__",
]

try:
    __version__ = version("bpinspect")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
