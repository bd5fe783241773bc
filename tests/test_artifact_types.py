"""Artifact identity, synthetic path keys, and file-type detection."""

from __future__ import annotations

import unittest
from pathlib import Path

from ccfg.artifacts import Category, FileType, RealArtifact, Scope, VirtualArtifact, split_section_key
from ccfg.artifacts.types import detect_file_type


class ArtifactIdentityTests(unittest.TestCase):
    def test_real_path_containing_separator_never_collides_with_section(self) -> None:
        real = RealArtifact(Path("/p/a.json#hooks"), Scope.PROJECT, FileType.JSON, Category.SETTINGS, "odd")
        virtual = VirtualArtifact(Path("/p/a.json"), ("hooks",), Scope.PROJECT, FileType.JSON, Category.HOOKS, "Hooks (1)")

        self.assertEqual(real.path_key, virtual.path_key)
        self.assertNotEqual(real.identity, virtual.identity)

    def test_virtual_defaults(self) -> None:
        virtual = VirtualArtifact(Path("/p/s.json"), ("hooks", "Stop"), Scope.USER, FileType.JSON, Category.HOOKS, "Stop")
        self.assertTrue(virtual.exists)
        self.assertTrue(virtual.is_virtual)
        self.assertIsNone(virtual.size)
        self.assertEqual(virtual.section_key, "hooks.Stop")
        self.assertEqual(virtual.path_key, "/p/s.json#hooks.Stop")

    def test_dotted_item_name_keeps_distinct_identity(self) -> None:
        dotted = VirtualArtifact(
            Path("/p/.mcp.json"), ("mcpServers", "docs.example"), Scope.PROJECT, FileType.JSON, Category.MCP, "docs.example"
        )
        nested = VirtualArtifact(
            Path("/p/.mcp.json"), ("mcpServers", "docs", "example"), Scope.PROJECT, FileType.JSON, Category.MCP, "example"
        )

        self.assertEqual(dotted.path_key, nested.path_key)
        self.assertNotEqual(dotted.identity, nested.identity)
        self.assertEqual(dotted.identity, ("section", "/p/.mcp.json", "mcpServers", "docs.example"))

    def test_split_section_key_uses_first_separator(self) -> None:
        self.assertEqual(split_section_key("/p/s.json#hooks.Stop"), (Path("/p/s.json"), "hooks.Stop"))
        self.assertEqual(split_section_key("/p/s.json#a#b"), (Path("/p/s.json"), "a#b"))
        self.assertEqual(split_section_key("/p/s.json"), (Path("/p/s.json"), None))

    def test_scope_order_and_labels(self) -> None:
        self.assertLess(Scope.MANAGED, Scope.USER)
        self.assertLess(Scope.USER, Scope.PROJECT)
        self.assertEqual([scope.label for scope in Scope], ["Managed", "User", "Project"])


class DetectFileTypeTests(unittest.TestCase):
    def test_extensions(self) -> None:
        self.assertEqual(detect_file_type("CLAUDE.md"), FileType.MARKDOWN)
        self.assertEqual(detect_file_type("x.JSONC"), FileType.JSONC)
        self.assertEqual(detect_file_type("settings.json"), FileType.JSON)
        self.assertEqual(detect_file_type("noext"), FileType.JSON)


if __name__ == "__main__":
    unittest.main()
