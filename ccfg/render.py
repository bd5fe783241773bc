"""Screen composition for the tree pane, preview pane, and status row."""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import pad_ansi_line
from .artifacts import Scope
from .tree_model import TreeModel, VisibleRow, walk_nodes

SCOPE_COLORS = {
    Scope.MANAGED: "\033[31m",
    Scope.USER: "\033[32m",
    Scope.PROJECT: "\033[36m",
}
RESET = "\033[0m"
REVERSE = "\033[7m"
DIM = "\033[2m"
BOLD = "\033[1m"


def format_tree_row(row: VisibleRow, no_color: bool = False) -> str:
    """Format one flattened row without selection styling."""
    node = row.node
    indent = "  " * row.depth
    arrow = "▼" if node.expanded else "▶"

    if node.artifact is None:
        text = f"{arrow} {node.label.upper()}"
        if no_color:
            return text
        return f"{BOLD}{SCOPE_COLORS.get(node.scope, '')}{text}{RESET}"

    if node.children:
        # Virtual groups already carry their count in the label.
        count = "" if node.artifact.is_virtual else f" ({len(node.children)})"
        text = f"{indent}{arrow} {node.label}{count}"
        return text if no_color else f"{BOLD}{text}{RESET}"

    artifact = node.artifact
    marker = "●" if artifact.exists else "○"
    text = f"{indent}{marker} {node.label}"
    if no_color or artifact.exists:
        return text
    return f"{DIM}{text}{RESET}"


def format_tree_lines(rows: list[VisibleRow], no_color: bool = False) -> list[str]:
    return [format_tree_row(row, no_color=no_color) for row in rows]


def expand_all(tree: TreeModel) -> None:
    """Expand every node (used for non-interactive printing)."""
    for node in walk_nodes(tree.roots):
        node.expanded = True


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    """Left/right aligned status text clipped to ``width``."""
    if width <= 0:
        return ""
    gap = width - len(left_text) - len(right_text)
    if gap < 1:
        return (left_text + " " + right_text)[:width]
    return left_text + " " * gap + right_text


@dataclass(frozen=True)
class ScreenContext:
    tree: TreeModel
    preview_lines: list[str]
    preview_start: int
    width: int
    height: int
    tree_width: int
    status_left: str
    status_right: str = ""
    no_color: bool = False


def tree_pane_lines(tree: TreeModel, rows_available: int, width: int, no_color: bool = False) -> list[str]:
    rows = tree.rows()
    lines: list[str] = []
    for idx in range(tree.offset, min(len(rows), tree.offset + rows_available)):
        text = format_tree_row(rows[idx], no_color=no_color)
        if idx == tree.cursor:
            plain = format_tree_row(rows[idx], no_color=True)
            text = f"{REVERSE}{pad_ansi_line(plain, width)}{RESET}"
        lines.append(pad_ansi_line(text, width))
    while len(lines) < rows_available:
        lines.append(" " * width)
    return lines


def render_screen(context: ScreenContext) -> str:
    """Return one full frame (cursor-home prefixed) for the terminal."""
    content_rows = max(1, context.height - 1)
    tree_width = max(1, min(context.tree_width, context.width - 2))
    preview_width = max(1, context.width - tree_width - 1)

    left = tree_pane_lines(context.tree, content_rows, tree_width, no_color=context.no_color)
    right_source = context.preview_lines[context.preview_start : context.preview_start + content_rows]
    out: list[str] = []
    for row in range(content_rows):
        preview = right_source[row] if row < len(right_source) else ""
        out.append(f"{left[row]}│{pad_ansi_line(preview, preview_width)}")

    status = build_status_line(context.status_left, context.width, context.status_right)
    out.append(status if context.no_color else f"{REVERSE}{status}{RESET}")
    return "\x1b[H" + "\r\n".join(out)


__all__ = [
    "ScreenContext",
    "format_tree_row",
    "format_tree_lines",
    "expand_all",
    "build_status_line",
    "tree_pane_lines",
    "render_screen",
]
