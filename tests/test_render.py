"""Tree row formatting and full-screen composition."""

from __future__ import annotations

import unittest
from pathlib import Path

from ccfg.ansi import display_width
from ccfg.artifacts import Category, FileType, RealArtifact, ScanResult, Scope
from ccfg.render import (
    ScreenContext,
    build_status_line,
    expand_all,
    format_tree_lines,
    format_tree_row,
    render_screen,
)
from ccfg.tree_model import TreeModel


def _artifact(path: str, scope: Scope, exists: bool = True, children=()) -> RealArtifact:
    return RealArtifact(
        path=Path(path),
        scope=scope,
        file_type=FileType.MARKDOWN,
        category=Category.COMMANDS,
        label=Path(path).name,
        exists=exists,
        is_dir=bool(children),
        children=tuple(children),
    )


def _tree() -> TreeModel:
    commands = _artifact(
        "/p/.claude/commands",
        Scope.PROJECT,
        children=[_artifact("/p/.claude/commands/a.md", Scope.PROJECT)],
    )
    result = ScanResult(
        user=(_artifact("/h/CLAUDE.md", Scope.USER, exists=False),),
        project=(commands,),
    )
    return TreeModel.from_scan(result)


class FormatTreeRowTests(unittest.TestCase):
    def test_plain_rows_after_expand_all(self) -> None:
        tree = _tree()
        expand_all(tree)
        self.assertEqual(
            format_tree_lines(tree.rows(), no_color=True),
            ["▼ USER", "  ○ CLAUDE.md", "▼ PROJECT", "  ▼ commands (1)", "    ● a.md"],
        )

    def test_collapsed_rows_use_right_arrow(self) -> None:
        tree = _tree()
        rows = tree.rows()
        self.assertEqual(format_tree_row(rows[2], no_color=True), "▶ PROJECT")

    def test_missing_leaf_is_dimmed_with_color(self) -> None:
        row = _tree().rows()[1]
        self.assertEqual(format_tree_row(row), "\033[2m  ○ CLAUDE.md\033[0m")

    def test_header_uses_scope_color(self) -> None:
        row = _tree().rows()[0]
        self.assertTrue(format_tree_row(row).startswith("\033[1m\033[32m"))


class StatusLineTests(unittest.TestCase):
    def test_left_and_right_alignment(self) -> None:
        self.assertEqual(build_status_line("L", 6, "R"), "L    R")

    def test_overflow_is_clipped(self) -> None:
        self.assertEqual(build_status_line("left", 6, "right"), "left r")
        self.assertEqual(build_status_line("x", 0), "")


class RenderScreenTests(unittest.TestCase):
    def test_frame_has_one_row_per_line_and_fixed_width(self) -> None:
        tree = _tree()
        context = ScreenContext(
            tree=tree,
            preview_lines=["line one", "line two"],
            preview_start=1,
            width=40,
            height=5,
            tree_width=20,
            status_left=" status",
            no_color=True,
        )

        frame = render_screen(context)

        self.assertTrue(frame.startswith("\x1b[H"))
        rows = frame[len("\x1b[H"):].split("\r\n")
        self.assertEqual(len(rows), 5)
        self.assertIn("│line two", rows[0])
        for row in rows[:-1]:
            self.assertEqual(display_width(row), 40)
        self.assertTrue(rows[-1].startswith(" status"))

    def test_cursor_row_is_reverse_video(self) -> None:
        tree = _tree()
        tree.move_down()
        context = ScreenContext(
            tree=tree,
            preview_lines=[],
            preview_start=0,
            width=30,
            height=4,
            tree_width=15,
            status_left="",
        )
        rows = render_screen(context)[len("\x1b[H"):].split("\r\n")
        self.assertTrue(rows[1].startswith("\033[7m"))
        self.assertFalse(rows[0].startswith("\033[7m"))


if __name__ == "__main__":
    unittest.main()
