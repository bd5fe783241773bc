"""Key dispatch, change handling, and the interactive loop."""

from __future__ import annotations

import contextlib
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ccfg.artifacts import Scanner
from ccfg.config import AppConfig
from ccfg.runtime.app import build_session
from ccfg.runtime.loop import drain_watcher, run_main_loop


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        base = Path(self._tmp.name).resolve()
        self.home = base / "home"
        self.home.mkdir()
        self.project = base / "p"
        (self.project / ".git").mkdir(parents=True)
        (self.project / ".claude").mkdir()
        self.settings = self.project / ".claude" / "settings.json"
        self.settings.write_text('{"model": "x"}', encoding="utf-8")
        self.scanner = Scanner(self.project, home_dir=self.home, resolve_system_dirs=False)
        self.session = build_session(self.scanner, AppConfig(), no_color=True)
        self.session.resize(80, 24)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def press(self, *keys: str) -> bool:
        quit_requested = False
        for key in keys:
            quit_requested = self.session.handle_key(key)
        return quit_requested


class SessionKeyTests(SessionTestCase):
    def test_navigation_updates_preview(self) -> None:
        tree = self.session.state.tree
        self.assertEqual(self.session.state.preview_lines, [])
        self.press("j")
        self.assertEqual(tree.cursor, 1)
        self.assertTrue(any("not found" in line for line in self.session.state.preview_lines))
        self.press("k", "UP")
        self.assertEqual(tree.cursor, 0)

    def test_toggle_keys(self) -> None:
        tree = self.session.state.tree
        self.assertTrue(tree.roots[0].expanded)
        self.press("ENTER")
        self.assertFalse(tree.roots[0].expanded)
        self.press("l")
        self.assertTrue(tree.roots[0].expanded)

    def test_filter_editing_keeps_filter_on_enter(self) -> None:
        self.press("/", "s", "e", "t", "x", "BACKSPACE")
        self.assertTrue(self.session.state.filter_editing)
        self.assertEqual(self.session.state.tree.filter, "set")
        left, _right = self.session.status_text()
        self.assertEqual(left, " /set")

        self.press("ENTER")
        self.assertFalse(self.session.state.filter_editing)
        self.assertEqual(self.session.state.tree.filter, "set")
        self.assertIn("filter: set", self.session.status_text()[0])

    def test_escape_clears_filter_while_editing(self) -> None:
        self.press("/", "q", "ESC")
        self.assertFalse(self.session.state.filter_editing)
        self.assertEqual(self.session.state.tree.filter, "")

    def test_q_inside_filter_is_text_not_quit(self) -> None:
        self.assertFalse(self.press("/", "q"))
        self.assertTrue(self.press("ENTER", "q"))

    def test_merged_view_toggles_preview(self) -> None:
        self.press("m")
        self.assertTrue(self.session.state.merged_view)
        self.assertIn("Merged Settings (Project > User > Managed)", self.session.state.preview_lines)
        self.press("m")
        self.assertFalse(self.session.state.merged_view)

    def test_status_reports_degraded_watch(self) -> None:
        left, right = self.session.status_text()
        self.assertIn("watch: off", left)
        self.assertIn("files", left)
        self.assertIn("q quit", right)

    def test_tab_moves_line_keys_to_preview(self) -> None:
        state = self.session.state
        state.preview_lines = [f"line {i}" for i in range(100)]

        self.press("TAB", "j", "j")
        self.assertTrue(state.preview_focused)
        self.assertEqual(state.tree.cursor, 0)
        self.assertEqual(state.preview_start, 2)
        self.assertIn("preview", self.session.status_text()[0])

        self.press("G")
        self.assertEqual(state.preview_start, 100 - self.session.content_rows)
        self.press("k", "g")
        self.assertEqual(state.preview_start, 0)

        self.press("TAB", "j")
        self.assertFalse(state.preview_focused)
        self.assertEqual(state.tree.cursor, 1)

    def test_rescan_key_picks_up_new_file(self) -> None:
        (self.project / "CLAUDE.md").write_text("# hi\n", encoding="utf-8")
        before = self.session.state.result
        self.press("r")
        self.assertIsNot(self.session.state.result, before)
        self.assertEqual(self.session.state.result.file_stats()[0], before.file_stats()[0] + 1)


class SessionChangeTests(SessionTestCase):
    def test_drain_watcher_reloads_and_rewatches(self) -> None:
        watcher = mock.Mock()
        watcher.poll_change.return_value = True
        watcher.poll_error.return_value = None
        self.session.watcher = watcher

        drain_watcher(self.session, watcher)

        watcher.rewatch.assert_called_once()
        plan = watcher.rewatch.call_args.args[0]
        self.assertIn(self.settings, plan.targets)
        self.assertIn("watch: on", self.session.status_text()[0])

    def test_watch_errors_surface_in_status(self) -> None:
        watcher = mock.Mock()
        watcher.poll_change.return_value = False
        watcher.poll_error.return_value = OSError("queue overflow")

        drain_watcher(self.session, watcher)

        self.assertIn("watch error: queue overflow", self.session.status_text()[0])


class MainLoopTests(SessionTestCase):
    def test_loop_renders_and_quits_on_q(self) -> None:
        read_fd, write_fd = os.pipe()
        terminal = mock.Mock()
        terminal.raw_mode.return_value = contextlib.nullcontext()
        try:
            os.write(write_fd, b"jq")
            with mock.patch(
                "ccfg.runtime.loop.shutil.get_terminal_size",
                return_value=os.terminal_size((60, 12)),
            ):
                run_main_loop(self.session, terminal, read_fd)
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertGreaterEqual(terminal.write.call_count, 2)
        frame = terminal.write.call_args_list[-1].args[0]
        self.assertTrue(frame.startswith("\x1b[H"))
        self.assertEqual(self.session.state.tree.cursor, 1)
        self.assertEqual(self.session.state.tree.height, 11)


if __name__ == "__main__":
    unittest.main()
