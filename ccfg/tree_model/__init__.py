"""Tree-model projection, navigation, filtering, and state reconciliation.

Defines ``VisibleNode`` and ``TreeModel`` over scanned artifacts.
"""

from __future__ import annotations

from .build import build_roots, make_artifact_node, make_scope_node
from .model import TreeModel, node_matches
from .reconcile import TreeState, capture_tree_state, restore_tree_state, walk_nodes
from .types import VisibleNode, VisibleRow

__all__ = [
    "VisibleNode",
    "VisibleRow",
    "TreeModel",
    "TreeState",
    "build_roots",
    "make_artifact_node",
    "make_scope_node",
    "node_matches",
    "capture_tree_state",
    "restore_tree_state",
    "walk_nodes",
]
