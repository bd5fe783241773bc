"""Carry expansion and selection across full tree rebuilds.

Nodes have no identity across scans, so state is keyed by ``state_key``:
the scope label for headers and the artifact identity (path based) for
everything else.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .model import TreeModel
from .types import VisibleNode


@dataclass(frozen=True)
class TreeState:
    """UI state captured from one tree, replayable onto a rebuilt one."""

    expanded: dict[tuple[str, ...], bool] = field(default_factory=dict)
    selected_key: tuple[str, ...] | None = None
    cursor: int = 0
    filter: str = ""


def walk_nodes(nodes: list[VisibleNode]) -> Iterator[VisibleNode]:
    for node in nodes:
        yield node
        yield from walk_nodes(node.children)


def capture_tree_state(tree: TreeModel) -> TreeState:
    expanded: dict[tuple[str, ...], bool] = {}
    for node in walk_nodes(tree.roots):
        if node.is_header or node.children:
            expanded[node.state_key] = node.expanded

    selected = tree.selected()
    return TreeState(
        expanded=expanded,
        selected_key=selected.identity if selected is not None else None,
        cursor=tree.cursor,
        filter=tree.filter,
    )


def restore_tree_state(tree: TreeModel, state: TreeState) -> None:
    """Apply captured expansion flags, filter, and cursor onto ``tree``.

    The cursor lands on the previously selected artifact when it is still
    visible; otherwise the old cursor index is clamped into range.
    """
    for node in walk_nodes(tree.roots):
        flag = state.expanded.get(node.state_key)
        if flag is not None:
            node.expanded = flag

    if state.filter:
        tree.set_filter(state.filter)

    target = None
    if state.selected_key is not None:
        target = tree.find_index(state.selected_key)
    tree.move_to(state.cursor if target is None else target)


__all__ = ["TreeState", "walk_nodes", "capture_tree_state", "restore_tree_state"]
