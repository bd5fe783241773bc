"""Navigation, expansion, and filter behavior of ``TreeModel``."""

from __future__ import annotations

import unittest
from pathlib import Path

from ccfg.artifacts import Category, FileType, RealArtifact, ScanResult, Scope, VirtualArtifact
from ccfg.tree_model import TreeModel


def _file(path: str, scope: Scope, label: str, exists: bool = True, children=()) -> RealArtifact:
    return RealArtifact(
        path=Path(path),
        scope=scope,
        file_type=FileType.MARKDOWN if path.endswith(".md") else FileType.JSON,
        category=Category.SETTINGS,
        label=label,
        exists=exists,
        children=tuple(children),
    )


def _sample_result() -> ScanResult:
    hooks = VirtualArtifact(
        owner_path=Path("/p/.claude/settings.json"),
        section_path=("hooks",),
        scope=Scope.PROJECT,
        file_type=FileType.JSON,
        category=Category.HOOKS,
        label="Hooks (1)",
        is_dir=True,
        children=(
            VirtualArtifact(
                owner_path=Path("/p/.claude/settings.json"),
                section_path=("hooks", "Stop"),
                scope=Scope.PROJECT,
                file_type=FileType.JSON,
                category=Category.HOOKS,
                label="Stop",
            ),
        ),
    )
    return ScanResult(
        managed=(_file("/etc/claude-code/managed_settings.json", Scope.MANAGED, "Managed settings", exists=False),),
        user=(
            _file("/h/.claude/settings.json", Scope.USER, "User settings"),
            _file("/h/.claude/CLAUDE.md", Scope.USER, "User instructions"),
        ),
        project=(
            _file("/p/.claude/settings.json", Scope.PROJECT, "Project settings", children=[hooks]),
            _file("/p/CLAUDE.md", Scope.PROJECT, "Project instructions"),
        ),
        root_dir=Path("/p"),
    )


def _labels(tree: TreeModel) -> list[str]:
    return [node.label for node in tree.flatten()]


class TreeBuildTests(unittest.TestCase):
    def test_roots_follow_fixed_scope_order_with_first_expanded(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        self.assertEqual([root.label for root in tree.roots], ["Managed", "User", "Project"])
        self.assertEqual([root.expanded for root in tree.roots], [True, False, False])
        self.assertEqual(_labels(tree), ["Managed", "Managed settings", "User", "Project"])

    def test_empty_scopes_get_no_header(self) -> None:
        result = _sample_result()
        tree = TreeModel.from_scan(ScanResult(user=result.user, project=result.project))
        self.assertEqual([root.label for root in tree.roots], ["User", "Project"])
        self.assertTrue(tree.roots[0].expanded)

    def test_virtual_children_of_files_are_projected(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        project = tree.roots[2]
        settings = project.children[0]
        self.assertEqual([child.label for child in settings.children], ["Hooks (1)"])
        self.assertEqual([child.label for child in settings.children[0].children], ["Stop"])

    def test_empty_scan_has_no_rows(self) -> None:
        tree = TreeModel.from_scan(ScanResult())
        self.assertEqual(tree.flatten(), [])
        self.assertIsNone(tree.selected())
        self.assertFalse(tree.move_down())
        self.assertFalse(tree.toggle())


class TreeNavigationTests(unittest.TestCase):
    def test_moves_stop_at_both_ends(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        self.assertFalse(tree.move_up())
        self.assertEqual(tree.cursor, 0)
        for _ in range(10):
            tree.move_down()
        self.assertEqual(tree.cursor, len(tree.flatten()) - 1)
        self.assertFalse(tree.move_down())

    def test_selected_is_none_on_header(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        self.assertIsNone(tree.selected())
        tree.move_down()
        self.assertEqual(tree.selected().label, "Managed settings")

    def test_toggle_on_childless_node_is_noop(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.move_down()
        before = _labels(tree)
        self.assertFalse(tree.toggle())
        self.assertFalse(tree.current_node().expanded)
        self.assertEqual(_labels(tree), before)

    def test_toggle_expands_nested_virtual_groups(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.move_to(3)
        self.assertTrue(tree.toggle())
        tree.move_down()
        self.assertTrue(tree.toggle())
        tree.move_down()
        self.assertTrue(tree.toggle())
        self.assertEqual(
            _labels(tree),
            [
                "Managed",
                "Managed settings",
                "User",
                "Project",
                "Project settings",
                "Hooks (1)",
                "Stop",
                "Project instructions",
            ],
        )
        self.assertEqual([row.depth for row in tree.rows()], [0, 1, 0, 0, 1, 2, 3, 1])

    def test_collapse_keeps_cursor_on_toggled_node(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.move_to(0)
        tree.toggle()
        self.assertEqual(_labels(tree), ["Managed", "User", "Project"])
        tree.move_to(2)
        tree.toggle()
        tree.move_to(4)
        self.assertEqual(tree.selected().label, "Project instructions")

        tree.move_to(2)
        tree.toggle()
        self.assertEqual(_labels(tree), ["Managed", "User", "Project"])
        self.assertEqual(tree.cursor, 2)

    def test_move_to_clamps_into_visible_range(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.move_to(99)
        self.assertEqual(tree.cursor, 3)
        tree.move_to(-5)
        self.assertEqual(tree.cursor, 0)

    def test_scroll_window_follows_cursor(self) -> None:
        tree = TreeModel.from_scan(_sample_result(), height=2)
        tree.roots[1].expanded = True
        tree.roots[2].expanded = True
        for _ in range(4):
            tree.move_down()
        self.assertEqual(tree.cursor, 4)
        self.assertEqual(tree.offset, 3)
        tree.move_to(0)
        self.assertEqual(tree.offset, 0)
        tree.set_height(1)
        tree.move_down()
        self.assertEqual(tree.offset, 1)

    def test_find_index_uses_identity(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.roots[2].expanded = True
        self.assertEqual(tree.find_index(("file", "/p/CLAUDE.md")), 5)
        self.assertEqual(tree.find_index(("scope", "User")), 2)
        self.assertIsNone(tree.find_index(("file", "/missing")))


class TreeFilterTests(unittest.TestCase):
    def test_filter_matches_direct_children_case_insensitively(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.move_to(2)
        tree.set_filter("SETTINGS")
        self.assertEqual(tree.cursor, 0)
        self.assertEqual(tree.offset, 0)
        self.assertEqual(
            _labels(tree),
            ["Managed", "Managed settings", "User", "User settings", "Project", "Project settings"],
        )

    def test_filter_matches_path_key(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.set_filter("/h/.claude/claude")
        self.assertEqual(_labels(tree), ["User", "User instructions"])

    def test_filter_ignores_expansion_and_nested_nodes(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.set_filter("stop")
        self.assertEqual(tree.flatten(), [])
        self.assertEqual(tree.rows(), [])

    def test_filter_without_match_yields_zero_roots(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.set_filter("zzz-nothing")
        self.assertEqual(tree.flatten(), [])
        self.assertIsNone(tree.selected())

    def test_clear_filter_restores_expansion_view(self) -> None:
        tree = TreeModel.from_scan(_sample_result())
        tree.set_filter("instructions")
        tree.move_to(10)
        tree.clear_filter()
        self.assertEqual(tree.filter, "")
        self.assertEqual(_labels(tree), ["Managed", "Managed settings", "User", "Project"])
        self.assertLessEqual(tree.cursor, 3)


if __name__ == "__main__":
    unittest.main()
