"""Rescan-and-rebuild with UI state carried over from the previous tree."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from ..artifacts import ScanError, Scanner, ScanResult
from ..tree_model import TreeModel, TreeState, capture_tree_state, restore_tree_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadOutcome:
    """Result of one reload; ``error`` is set when the previous tree was kept."""

    tree: TreeModel
    result: ScanResult | None
    duration: float
    error: ScanError | None = None


class ReloadCoordinator:
    """Rebuild the tree from a fresh scan while keeping expansion and selection."""

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner

    def capture_state(self, tree: TreeModel) -> TreeState:
        return capture_tree_state(tree)

    def restore_state(self, tree: TreeModel, state: TreeState) -> None:
        restore_tree_state(tree, state)

    def rebuild(self, tree: TreeModel, result: ScanResult) -> TreeModel:
        """Project ``result`` into a new tree and replay ``tree``'s UI state onto it."""
        state = self.capture_state(tree)
        new_tree = TreeModel.from_scan(result, height=tree.height)
        self.restore_state(new_tree, state)
        return new_tree

    def reload(self, tree: TreeModel) -> ReloadOutcome:
        start = time.monotonic()
        try:
            result = self.scanner.scan()
        except ScanError as exc:
            logger.warning("rescan failed, keeping previous tree: %s", exc)
            return ReloadOutcome(tree, None, time.monotonic() - start, error=exc)
        new_tree = self.rebuild(tree, result)
        return ReloadOutcome(new_tree, result, time.monotonic() - start)


__all__ = ["ReloadOutcome", "ReloadCoordinator"]
