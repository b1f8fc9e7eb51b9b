"""Render resolved detection orders as aligned tree-art text."""

from __future__ import annotations

from bpinspect.core.model import ResolvedNode

DETECTION_ORDER_TITLE = "Detection Order:"
NONE_LINE = "  (none)"

# Spaces added after the widest cell of an aligned column.
TREE_PADDING = 4

LAST_CONNECTOR = " └ "
MIDDLE_CONNECTOR = " ├ "
LAST_CONTINUATION = "   "
MIDDLE_CONTINUATION = " │ "

CYCLIC_MARKER = "[cyclic]"
OPTIONAL_MARKER = "(optional)"

Row = tuple[str, ...]


def align_columns(rows: list[Row], padding: int) -> list[str]:
    """
    Join rows of cells into lines with left-aligned columns.

    Every cell but the last of a row is a column cell. A column is aligned
    over each run of consecutive rows that have a cell in it, padded to the
    widest cell of that run plus `padding`; a row without that column ends
    the run. The last cell of a row is appended as-is.
    """
    widths: list[list[int]] = [[0] * (len(row) - 1) for row in rows]
    max_cols = max((len(row) - 1 for row in rows), default=0)
    for col in range(max_cols):
        run: list[int] = []
        for i, row in enumerate(rows + [()]):
            if len(row) - 1 > col:
                run.append(i)
                continue
            if run:
                width = max(len(rows[j][col]) for j in run) + padding
                for j in run:
                    widths[j][col] = width
                run = []
    lines = []
    for row, row_widths in zip(rows, widths):
        cells = [cell.ljust(w) for cell, w in zip(row, row_widths)]
        lines.append("".join(cells) + (row[-1] if row else ""))
    return lines


def node_label(node: ResolvedNode) -> str:
    """`ID@Version` (or `ID` when unversioned) for a resolved node."""
    return node.ref.identity.full_name


def node_marker(node: ResolvedNode) -> str:
    """Suffix shown after a node's label; cyclic wins over optional."""
    if node.cyclic:
        return CYCLIC_MARKER
    if node.ref.optional:
        return OPTIONAL_MARKER
    return ""


def _connector(prefix: str, last: bool) -> tuple[str, str]:
    """Return (line prefix, prefix for this entry's children)."""
    if last:
        return prefix + LAST_CONNECTOR, prefix + LAST_CONTINUATION
    return prefix + MIDDLE_CONNECTOR, prefix + MIDDLE_CONTINUATION


def _group_rows(groups: list[list[ResolvedNode]], prefix: str) -> list[Row]:
    rows: list[Row] = []
    for number, group in enumerate(groups, start=1):
        line_prefix, child_prefix = _connector(prefix, number == len(groups))
        rows.append((f"{line_prefix}Group #{number}:",))
        for i, node in enumerate(group):
            node_prefix, nested_prefix = _connector(child_prefix, i == len(group) - 1)
            rows.append((node_prefix + node_label(node), node_marker(node)))
            if node.children:
                rows.extend(_group_rows(node.children, nested_prefix))
    return rows


def detection_order_lines(groups: list[list[ResolvedNode]]) -> list[str]:
    """Tree-art lines (without title) for resolved groups."""
    if not groups:
        return [NONE_LINE]
    return align_columns(_group_rows(groups, ""), TREE_PADDING)


def render_detection_order(
    groups: list[list[ResolvedNode]],
    title: str = DETECTION_ORDER_TITLE,
) -> str:
    """
    Render resolved detection groups as a titled tree.

    Group headers and buildpack entries share one tree; each buildpack's
    nested groups hang below it. Suffix markers are aligned across runs of
    consecutive buildpack lines. Truncated nodes render as plain leaves.
    """
    return "\n".join([title, *detection_order_lines(groups)]) + "\n"
