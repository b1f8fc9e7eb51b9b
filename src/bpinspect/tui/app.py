"""Textual TUI for browsing a builder's resolved detection order."""

from __future__ import annotations

from typing import Any

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Static, Tree
from textual.widgets.tree import TreeNode

from bpinspect.core.model import BuilderInfo, ResolvedNode
from bpinspect.core.render import node_label, node_marker
from bpinspect.core.resolver import resolve_order
from bpinspect.core.summary import stringify_apis

EXPAND_DEPTH_DEFAULT = 3

COLOR_HEADER = "bold magenta"
COLOR_GROUP = "bold cyan"
COLOR_BP = "white"
COLOR_OPTIONAL = "dim"
COLOR_CYCLIC = "bold red"
COLOR_STATS = "cyan"


def _child_nodes(node: Any) -> list[Any]:
    """Buildpacks of all nested groups of a node, flattened."""
    return [c for group in getattr(node, "children", []) or [] for c in group]


def _count_nodes(node: Any) -> int:
    """Count buildpack nodes in a subtree, including `node`."""
    return 1 + sum(_count_nodes(c) for c in _child_nodes(node))


def _node_stats(node: Any) -> tuple[int, int, int]:
    """Return (direct_children, total_descendants, max_depth) for a node."""
    children = _child_nodes(node)
    total = 0
    max_d = 0
    for c in children:
        _, sub_total, sub_depth = _node_stats(c)
        total += 1 + sub_total
        max_d = max(max_d, 1 + sub_depth)
    return len(children), total, max_d


def _markup_label(node: ResolvedNode) -> str:
    label = escape(node_label(node))
    marker = escape(node_marker(node))
    if node.cyclic:
        return f"[{COLOR_BP}]{label}[/] [{COLOR_CYCLIC}]{marker}[/]"
    if marker:
        return f"[{COLOR_BP}]{label}[/] [{COLOR_OPTIONAL}]{marker}[/]"
    return f"[{COLOR_BP}]{label}[/]"


def _populate_textual_tree(tn: TreeNode, groups: list[list[ResolvedNode]]) -> None:
    """Add one tree node per group and per buildpack, recursively."""
    for number, group in enumerate(groups, start=1):
        group_tn = tn.add(f"[{COLOR_GROUP}]Group #{number}[/]", expand=False)
        for node in group:
            if node.children:
                child_tn = group_tn.add(_markup_label(node), expand=False)
                child_tn.data = node
                _populate_textual_tree(child_tn, node.children)
            else:
                group_tn.add_leaf(_markup_label(node), data=node)


def _expand_to_depth(tn: TreeNode, depth: int, current: int = 0) -> None:
    """Expand tree nodes up to given depth (0 = root only)."""
    if current >= depth:
        return
    tn.expand()
    for child in tn.children:
        _expand_to_depth(child, depth, current + 1)


class BuilderTreeApp(App[None]):
    """Terminal UI to explore a builder's detection order."""

    TITLE = "bpinspect"
    BINDINGS = [
        Binding("d", "toggle_details", "Details"),
        Binding("e", "expand_all", "Expand all"),
        Binding("c", "collapse_all", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(
        self,
        info: BuilderInfo,
        *,
        builder_name: str,
        max_depth: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._info = info
        self._builder_name = builder_name
        self._groups = resolve_order(info.order, info.layers, max_depth)
        self._details_visible = True

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Container(id="main_container"):
            yield Tree("Detection Order", id="order_tree")
            yield Static(
                "[dim]↑/↓[/] move  ·  [dim]Enter[/]/[dim]Space[/] select  ·  [dim]q[/] quit",
                id="details",
            )
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self._builder_name
        tree = self.query_one("#order_tree", Tree)
        tree.root.label = f"[{COLOR_HEADER}]Detection Order[/]"
        if not self._groups:
            tree.root.add_leaf("[dim](none)[/]")
            self._set_details(f"'{self._builder_name}' does not specify detection order")
        else:
            _populate_textual_tree(tree.root, self._groups)
            _expand_to_depth(tree.root, EXPAND_DEPTH_DEFAULT)
            self._set_details(self._format_builder())
        tree.focus()

    def _format_builder(self) -> str:
        lifecycle = self._info.lifecycle
        version = str(lifecycle.version) if lifecycle.version is not None else "(none)"
        lines = [
            f"[{COLOR_HEADER}]Builder[/]",
            f"  {escape(self._builder_name)}",
            "",
            f"[{COLOR_HEADER}]Lifecycle[/]",
            f"  Version: {version}",
            f"  Buildpack APIs: {stringify_apis(lifecycle.buildpack_apis.supported)}",
            f"  Platform APIs: {stringify_apis(lifecycle.platform_apis.supported)}",
            "",
            f"  Groups: [{COLOR_STATS}]{len(self._groups)}[/]  ·  "
            f"Buildpacks: [{COLOR_STATS}]{len(self._info.buildpacks)}[/]",
        ]
        return "\n".join(lines)

    def _format_node(self, node: ResolvedNode) -> str:
        layer = self._info.layers.get(node.ref.identity)
        api = str(layer.api) if layer and layer.api is not None else "?"
        homepage = (layer.homepage if layer else "") or "(none)"
        stacks = ", ".join(layer.stacks) if layer and layer.stacks else "(none)"
        diff_id = (layer.layer_diff_id if layer else "") or "(none)"
        direct, _, max_depth = _node_stats(node)

        flags = []
        if node.ref.optional:
            flags.append("optional")
        if node.cyclic:
            flags.append(f"[{COLOR_CYCLIC}]cyclic[/]")
        if node.truncated:
            flags.append("not expanded (depth limit)")

        identity = node.ref.identity
        lines = [
            f"[{COLOR_HEADER}]Buildpack[/]",
            f"  [{COLOR_BP}]{escape(identity.id)}[/]  [dim]{escape(identity.version or '(any version)')}[/]",
            f"  {'  ·  '.join(flags)}" if flags else "",
            f"[{COLOR_HEADER}]Metadata[/]",
            f"  API: {api}",
            f"  Homepage: {escape(homepage)}",
            f"  Stacks: {escape(stacks)}",
            f"  Layer: {escape(diff_id)}",
            "",
            f"[{COLOR_HEADER}]Stats[/]",
            f"  Nested buildpacks:    [{COLOR_STATS}]{direct}[/]",
            f"  Subtree size:         [{COLOR_STATS}]{_count_nodes(node)}[/] [dim]buildpacks[/]",
            f"  Max depth from here:  [{COLOR_STATS}]{max_depth}[/] [dim]levels[/]",
        ]
        return "\n".join(lines)

    def _set_details(self, text: str) -> None:
        details = self.query_one("#details", Static)
        details.update(text)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node = event.node.data
        if isinstance(node, ResolvedNode):
            self._set_details(self._format_node(node))

    def action_expand_all(self) -> None:
        self.query_one("#order_tree", Tree).root.expand_all()

    def action_collapse_all(self) -> None:
        tree = self.query_one("#order_tree", Tree)
        tree.root.collapse_all()
        tree.root.expand()

    def action_toggle_details(self) -> None:
        """Toggle visibility of the details panel."""
        self._details_visible = not self._details_visible
        details = self.query_one("#details", Static)
        details.styles.display = "block" if self._details_visible else "none"

    def action_quit(self) -> None:
        self.exit()
