"""Interactive browser state and key/change handlers.

The session owns the current tree, the preview buffer, and the optional
watcher. Every handler runs on the interactive thread; rescans triggered by
change notifications happen synchronously here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..artifacts import ScanError, ScanResult, merge_settings, render_merged
from ..config import AppConfig
from ..preview import preview_text
from ..render import ScreenContext
from ..tree_model import TreeModel
from ..watch import ChangeWatcher, watch_plan
from .reload import ReloadCoordinator

logger = logging.getLogger(__name__)

FILTER_PROMPT = "/"


@dataclass
class SessionState:
    tree: TreeModel
    result: ScanResult
    scan_duration: float
    width: int = 80
    height: int = 24
    preview_lines: list[str] = field(default_factory=list)
    preview_start: int = 0
    filter_editing: bool = False
    merged_view: bool = False
    preview_focused: bool = False
    status_message: str = ""
    dirty: bool = True


class BrowserSession:
    def __init__(
        self,
        state: SessionState,
        coordinator: ReloadCoordinator,
        config: AppConfig,
        watcher: ChangeWatcher | None = None,
        no_color: bool = False,
    ) -> None:
        self.state = state
        self.coordinator = coordinator
        self.config = config
        self.watcher = watcher
        self.no_color = no_color
        self.refresh_preview()

    @property
    def content_rows(self) -> int:
        return max(1, self.state.height - 1)

    def tree_width(self) -> int:
        width = int(self.state.width * self.config.tree_percent / 100)
        return max(20, min(width, max(1, self.state.width - 2)))

    def preview_width(self) -> int:
        return max(1, self.state.width - self.tree_width() - 1)

    def resize(self, columns: int, lines: int) -> None:
        state = self.state
        if (columns, lines) != (state.width, state.height):
            width_changed = columns != state.width
            state.width = columns
            state.height = lines
            state.dirty = True
            if width_changed:
                self.refresh_preview(reset_scroll=False)
        if state.tree.height != self.content_rows:
            state.tree.set_height(self.content_rows)

    def refresh_preview(self, reset_scroll: bool = True) -> None:
        state = self.state
        if state.merged_view:
            text = render_merged(merge_settings(state.result))
        else:
            text = preview_text(
                state.tree.selected(),
                style=self.config.style,
                no_color=self.no_color,
                width=self.preview_width(),
            )
        state.preview_lines = text.splitlines()
        if reset_scroll:
            state.preview_start = 0
        else:
            state.preview_start = max(0, min(state.preview_start, len(state.preview_lines) - 1))
        state.dirty = True

    def scroll_preview(self, delta: int) -> None:
        state = self.state
        max_start = max(0, len(state.preview_lines) - self.content_rows)
        start = max(0, min(max_start, state.preview_start + delta))
        if start != state.preview_start:
            state.preview_start = start
            state.dirty = True

    def status_text(self) -> tuple[str, str]:
        state = self.state
        if state.filter_editing:
            return f" {FILTER_PROMPT}{state.tree.filter}", ""
        exist, total = state.result.file_stats()
        selected = state.tree.current_node()
        scope = selected.scope.label if selected is not None else "-"
        watch = "watch: on" if self.watcher is not None else "watch: off"
        left = f" {exist}/{total} files | {scope} | scan {state.scan_duration:.3f}s | {watch}"
        if state.preview_focused:
            left += " | preview"
        if state.tree.filter:
            left += f" | filter: {state.tree.filter}"
        if state.status_message:
            left += f" | {state.status_message}"
        return left, "q quit  / filter  tab pane  r rescan  m merged "

    def screen_context(self) -> ScreenContext:
        left, right = self.status_text()
        return ScreenContext(
            tree=self.state.tree,
            preview_lines=self.state.preview_lines,
            preview_start=self.state.preview_start,
            width=self.state.width,
            height=self.state.height,
            tree_width=self.tree_width(),
            status_left=left,
            status_right=right,
            no_color=self.no_color,
        )

    def _after_tree_change(self, selection_before) -> None:
        if self.state.tree.selected() != selection_before:
            self.refresh_preview()
        self.state.dirty = True

    def handle_change(self) -> None:
        """Rescan after a change notification and rebuild with state carried over."""
        state = self.state
        outcome = self.coordinator.reload(state.tree)
        if outcome.error is not None or outcome.result is None:
            state.status_message = f"rescan failed: {outcome.error}"
            state.dirty = True
            return
        state.tree = outcome.tree
        state.tree.set_height(self.content_rows)
        state.result = outcome.result
        state.scan_duration = outcome.duration
        state.status_message = ""
        self.refresh_preview(reset_scroll=False)
        if self.watcher is not None:
            try:
                self.watcher.rewatch(watch_plan(self.coordinator.scanner.layouts()))
            except ScanError as exc:
                logger.debug("keeping previous watch set: %s", exc)

    def handle_watch_error(self, error: Exception) -> None:
        logger.debug("watcher reported: %s", error)
        self.state.status_message = f"watch error: {error}"
        self.state.dirty = True

    def _handle_filter_key(self, key: str) -> None:
        state = self.state
        tree = state.tree
        before = tree.selected()
        if key == "ENTER":
            state.filter_editing = False
        elif key == "ESC":
            state.filter_editing = False
            tree.clear_filter()
        elif key == "BACKSPACE":
            tree.set_filter(tree.filter[:-1])
        elif key == "CTRL_U":
            tree.set_filter("")
        elif key == "UP":
            tree.move_up()
        elif key == "DOWN":
            tree.move_down()
        elif len(key) == 1 and key.isprintable():
            tree.set_filter(tree.filter + key)
        self._after_tree_change(before)

    def _handle_preview_key(self, key: str) -> bool:
        """Line movement keys scroll the preview while it has focus."""
        if key in {"j", "DOWN"}:
            self.scroll_preview(1)
        elif key in {"k", "UP"}:
            self.scroll_preview(-1)
        elif key in {"g", "HOME"}:
            self.scroll_preview(-len(self.state.preview_lines))
        elif key in {"G", "END"}:
            self.scroll_preview(len(self.state.preview_lines))
        else:
            return False
        return True

    def handle_key(self, key: str) -> bool:
        """Apply one key; return ``True`` when the session should quit."""
        if not key:
            return False
        state = self.state
        if state.filter_editing:
            self._handle_filter_key(key)
            return False

        tree = state.tree
        before = tree.selected()
        if key in {"q", "CTRL_C"}:
            return True
        if key == "TAB":
            state.preview_focused = not state.preview_focused
            state.dirty = True
            return False
        if state.preview_focused and self._handle_preview_key(key):
            return False
        if key in {"j", "DOWN"}:
            tree.move_down()
        elif key in {"k", "UP"}:
            tree.move_up()
        elif key in {"g", "HOME"}:
            tree.move_to(0)
        elif key in {"G", "END"}:
            tree.move_to(len(tree.flatten()) - 1)
        elif key in {"ENTER", " ", "l", "h", "RIGHT", "LEFT"}:
            tree.toggle()
        elif key == FILTER_PROMPT:
            state.filter_editing = True
        elif key == "ESC" and tree.filter:
            tree.clear_filter()
        elif key == "r":
            self.handle_change()
            return False
        elif key == "m":
            state.merged_view = not state.merged_view
            self.refresh_preview()
            return False
        elif key in {"PAGE_DOWN", "J"}:
            self.scroll_preview(self.content_rows)
            return False
        elif key in {"PAGE_UP", "K"}:
            self.scroll_preview(-self.content_rows)
            return False
        self._after_tree_change(before)
        return False


__all__ = ["SessionState", "BrowserSession", "FILTER_PROMPT"]
