"""Navigable, filterable tree state for the artifact browser."""

from __future__ import annotations

from collections.abc import Iterator

from ..artifacts import Artifact, ScanResult
from .build import build_roots
from .types import VisibleNode, VisibleRow


def _expanded_rows(nodes: list[VisibleNode], depth: int) -> Iterator[VisibleRow]:
    for node in nodes:
        yield VisibleRow(node, depth)
        if node.expanded and node.children:
            yield from _expanded_rows(node.children, depth + 1)


def node_matches(node: VisibleNode, needle: str) -> bool:
    """Case-insensitive substring match on label or artifact path key."""
    if needle in node.label.lower():
        return True
    return node.artifact is not None and needle in node.artifact.path_key.lower()


class TreeModel:
    """Cursor, scroll window, expansion, and filter over scope roots.

    The flattened view is recomputed on demand; nodes are the only mutable
    parts and only their ``expanded`` flags change.
    """

    def __init__(self, roots: list[VisibleNode], height: int = 0) -> None:
        self.roots = roots
        self.cursor = 0
        self.offset = 0
        self.height = height
        self.filter = ""

    @classmethod
    def from_scan(cls, result: ScanResult, height: int = 0) -> "TreeModel":
        return cls(build_roots(result), height=height)

    def rows(self) -> list[VisibleRow]:
        """Flattened rows with depths, honoring expansion or the active filter.

        A filter only looks at direct children of each scope root and ignores
        expansion state; roots without a matching child are omitted.
        """
        needle = self.filter.lower()
        if not needle:
            rows: list[VisibleRow] = []
            for root in self.roots:
                rows.append(VisibleRow(root, 0))
                if root.expanded:
                    rows.extend(_expanded_rows(root.children, 1))
            return rows

        rows = []
        for root in self.roots:
            matched = [child for child in root.children if node_matches(child, needle)]
            if not matched:
                continue
            rows.append(VisibleRow(root, 0))
            rows.extend(VisibleRow(child, 1) for child in matched)
        return rows

    def flatten(self) -> list[VisibleNode]:
        return [row.node for row in self.rows()]

    def current_node(self) -> VisibleNode | None:
        visible = self.flatten()
        if 0 <= self.cursor < len(visible):
            return visible[self.cursor]
        return None

    def selected(self) -> Artifact | None:
        """Artifact under the cursor; ``None`` on a scope header or an empty tree."""
        node = self.current_node()
        return node.artifact if node is not None else None

    def move_up(self) -> bool:
        if self.cursor <= 0:
            return False
        self.cursor -= 1
        self._adjust_scroll()
        return True

    def move_down(self) -> bool:
        if self.cursor >= len(self.flatten()) - 1:
            return False
        self.cursor += 1
        self._adjust_scroll()
        return True

    def move_to(self, index: int) -> None:
        """Place the cursor at ``index`` clamped into the visible range."""
        self.cursor = index
        self._clamp_cursor()

    def find_index(self, key: tuple[str, ...]) -> int | None:
        """Visible index of the node whose ``state_key`` equals ``key``."""
        for idx, node in enumerate(self.flatten()):
            if node.state_key == key:
                return idx
        return None

    def toggle(self) -> bool:
        """Flip expansion of a header or of a node with children; leaves are a no-op."""
        node = self.current_node()
        if node is None or not node.expandable:
            return False
        node.expanded = not node.expanded
        self._clamp_cursor()
        return True

    def set_filter(self, text: str) -> None:
        self.filter = text
        self.cursor = 0
        self.offset = 0

    def clear_filter(self) -> None:
        self.filter = ""
        self._clamp_cursor()

    def set_height(self, rows: int) -> None:
        self.height = max(0, rows)
        self._adjust_scroll()

    def _clamp_cursor(self) -> None:
        count = len(self.flatten())
        self.cursor = max(0, min(self.cursor, count - 1))
        self.offset = max(0, min(self.offset, max(0, count - 1)))
        self._adjust_scroll()

    def _adjust_scroll(self) -> None:
        if self.height <= 0:
            return
        if self.cursor < self.offset:
            self.offset = self.cursor
        if self.cursor >= self.offset + self.height:
            self.offset = self.cursor - self.height + 1
