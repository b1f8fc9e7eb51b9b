"""Command-line interface for bpinspect: inspect builders, show detection orders, browse them."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from bpinspect.api import inspect_builder
from bpinspect.core.config import SUGGESTED_BUILDERS, load_config
from bpinspect.core.errors import BpInspectError, BuilderNotFoundError
from bpinspect.core.model import BuilderInfo
from bpinspect.core.provider import fetch_builder_info, fetch_local_and_remote, load_builder_info
from bpinspect.core.render import align_columns, render_detection_order
from bpinspect.core.report import builder_info_to_dict, render_builder_info
from bpinspect.core.resolver import resolve_order

SELECT_DEFAULT_BUILDER = """\
Please select a default builder with:

\tpack set-default-builder <builder-image>
"""


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def _check_depth(depth: int | None) -> bool:
    if depth is not None and depth < 0:
        print(f"Error: --depth must be a non-negative integer, got {depth}", file=sys.stderr)
        return False
    return True


def _suggest_builders() -> str:
    """Guidance printed when no builder was given and no default is configured."""
    rows = [(f"\t{b.vendor}:", f"'{b.image}'") for b in SUGGESTED_BUILDERS]
    return SELECT_DEFAULT_BUILDER + "\nSuggested builders:\n" + "\n".join(align_columns(rows, 4))


def _load_single(args: argparse.Namespace) -> tuple[str, BuilderInfo | None]:
    """Load one builder view: from --file if given, else the local daemon."""
    if args.file:
        return str(args.file), load_builder_info(Path(args.file))
    return args.image, fetch_builder_info(args.image, daemon=True)


def cmd_inspect(args: argparse.Namespace) -> int:
    """Show the full inspection report for a builder."""
    if not _check_depth(args.depth):
        return 1
    try:
        config = load_config()
        if args.file:
            name = args.image or str(args.file)
            info = load_builder_info(Path(args.file))
            if args.json:
                payload = {"builder": name, "local": builder_info_to_dict(info, max_depth=args.depth)}
                print(json.dumps(payload, indent=2))
                return 0
            text, warnings = render_builder_info(
                info, name, config=config, verbose=args.verbose, max_depth=args.depth
            )
            print(f"Inspecting builder: '{name}'\n\n{text}", end="")
            _print_warnings(warnings)
            return 0

        image = args.image
        is_default = False
        if not image:
            image = config.default_builder
            is_default = True
        if not image:
            print(_suggest_builders())
            return 1

        if args.json:
            remote, remote_error, local, local_error = fetch_local_and_remote(image)
            if remote is None and local is None and remote_error is None and local_error is None:
                raise BuilderNotFoundError(image)
            payload = {"builder": image}
            for key, info, error in (("remote", remote, remote_error), ("local", local, local_error)):
                if error is not None:
                    payload[key] = {"error": str(error)}
                else:
                    payload[key] = builder_info_to_dict(info, max_depth=args.depth) if info else None
            print(json.dumps(payload, indent=2))
            return 0

        text, warnings = inspect_builder(
            image,
            depth=args.depth,
            verbose=args.verbose,
            config=config,
            is_default=is_default,
        )
    except BpInspectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(text, end="")
    _print_warnings(warnings)
    return 0


def cmd_order(args: argparse.Namespace) -> int:
    """Show only the detection order of a builder."""
    if not _check_depth(args.depth):
        return 1
    if not args.image and not args.file:
        print("Error: specify a builder image or --file", file=sys.stderr)
        return 1
    try:
        name, info = _load_single(args)
    except BpInspectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if info is None:
        print(f"Builder not found: {name}", file=sys.stderr)
        return 1

    groups = resolve_order(info.order, info.layers, args.depth)
    if args.json:
        print(json.dumps([[node.to_dict() for node in group] for group in groups], indent=2))
    else:
        print(render_detection_order(groups), end="")
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    if not _check_depth(args.depth):
        return 1
    if not args.image and not args.file:
        print("Error: specify a builder image or --file", file=sys.stderr)
        return 1
    try:
        name, info = _load_single(args)
    except BpInspectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if info is None:
        print(f"Builder not found: {name}", file=sys.stderr)
        return 1

    from bpinspect.tui.app import BuilderTreeApp

    app = BuilderTreeApp(info, builder_name=name, max_depth=args.depth)
    app.run()
    return 0


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "image",
        nargs="?",
        help="Builder image reference",
    )
    parser.add_argument(
        "-f",
        "--file",
        metavar="PATH",
        help="Read builder labels from a JSON file (docker/skopeo inspect output or a label map)",
    )
    parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        help="Maximum detection order depth (default: unlimited)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bpinspect CLI."""
    parser = argparse.ArgumentParser(
        prog="bpinspect",
        description="Inspect buildpack builder images from the command line.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug messages to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # bpinspect inspect
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show builder information for the local and remote image",
        description=(
            "Show description, lifecycle, run images, buildpacks and detection order "
            "of a builder. Without an image, inspects the configured default builder."
        ),
    )
    _add_source_arguments(inspect_parser)
    inspect_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show stack mixins",
    )
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    inspect_parser.set_defaults(func=cmd_inspect)

    # bpinspect order
    order_parser = subparsers.add_parser(
        "order",
        help="Show the detection order of a builder",
        description="Resolve and display the nested detection order of a local builder image or file.",
    )
    _add_source_arguments(order_parser)
    order_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    order_parser.set_defaults(func=cmd_order)

    # bpinspect tui
    tui_parser = subparsers.add_parser(
        "tui",
        help="Browse the detection order in an interactive terminal UI",
        description="Start the interactive TUI for a local builder image or file.",
    )
    _add_source_arguments(tui_parser)
    tui_parser.set_defaults(func=cmd_tui)

    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
