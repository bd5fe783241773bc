"""Static tables of configuration locations per scope.

Each scope resolves to a base directory (or ``None`` when the scope is
inactive on this machine) plus the relative entries to look for under it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from .types import Category, Scope

MANAGED_BASES = {
    "darwin": Path("/Library/Application Support/ClaudeCode"),
    "linux": Path("/etc/claude-code"),
}


@dataclass(frozen=True)
class RegistryEntry:
    """One expected file or directory relative to a scope base."""

    rel_path: str
    label: str
    category: Category
    is_dir: bool = False


@dataclass(frozen=True)
class ScopeLayout:
    scope: Scope
    base: Path | None
    entries: tuple[RegistryEntry, ...] = ()

    @property
    def active(self) -> bool:
        return self.base is not None

    def resolved(self) -> list[tuple[RegistryEntry, Path]]:
        """Pair each entry with its absolute path; empty for inactive scopes."""
        if self.base is None:
            return []
        return [(entry, self.base / entry.rel_path) for entry in self.entries]


MANAGED_ENTRIES = (
    RegistryEntry("managed_settings.json", "Managed settings", Category.SETTINGS),
    RegistryEntry("policies.json", "Policies", Category.POLICY),
)

USER_ENTRIES = (
    RegistryEntry(".claude/settings.json", "User settings", Category.SETTINGS),
    RegistryEntry(".claude/settings.local.json", "User local settings", Category.SETTINGS),
    RegistryEntry(".claude.json", "Legacy global settings", Category.SETTINGS),
    RegistryEntry(".claude/CLAUDE.md", "User instructions", Category.INSTRUCTIONS),
    RegistryEntry(".mcp.json", "User MCP servers", Category.MCP),
    RegistryEntry(".claude/commands", "User commands", Category.COMMANDS, is_dir=True),
    RegistryEntry(".claude/skills", "User skills", Category.SKILLS, is_dir=True),
    RegistryEntry(".claude/agents", "User agents", Category.AGENTS, is_dir=True),
    RegistryEntry(".claude/keybindings.json", "Keybindings", Category.KEYBINDINGS),
)

PROJECT_ENTRIES = (
    RegistryEntry(".claude/settings.json", "Project settings", Category.SETTINGS),
    RegistryEntry(".claude/settings.local.json", "Project local settings", Category.SETTINGS),
    RegistryEntry("CLAUDE.md", "Project instructions", Category.INSTRUCTIONS),
    RegistryEntry(".claude/CLAUDE.md", "Project instructions (alt location)", Category.INSTRUCTIONS),
    RegistryEntry(".mcp.json", "Project MCP servers", Category.MCP),
    RegistryEntry(".claude/commands", "Project commands", Category.COMMANDS, is_dir=True),
    RegistryEntry(".claude/skills", "Project skills", Category.SKILLS, is_dir=True),
    RegistryEntry(".claude/agents", "Project agents", Category.AGENTS, is_dir=True),
)


def managed_base_dir(platform: str | None = None) -> Path | None:
    """Return the admin-managed config directory for ``platform`` (default: this OS)."""
    if platform is None:
        platform = sys.platform
    return MANAGED_BASES.get(platform)


def user_home_dir() -> Path | None:
    """Return the current user's home directory, or ``None`` if it cannot be resolved."""
    try:
        return Path.home()
    except (RuntimeError, KeyError, OSError):
        return None


def _layout(scope: Scope, base: Path | None, entries: tuple[RegistryEntry, ...]) -> ScopeLayout:
    if base is None:
        return ScopeLayout(scope, None)
    return ScopeLayout(scope, base, entries)


def managed_paths(platform: str | None = None) -> ScopeLayout:
    return _layout(Scope.MANAGED, managed_base_dir(platform), MANAGED_ENTRIES)


def user_paths(home: Path | None = None) -> ScopeLayout:
    if home is None:
        home = user_home_dir()
    return _layout(Scope.USER, home, USER_ENTRIES)


def project_paths(root: Path | None) -> ScopeLayout:
    return _layout(Scope.PROJECT, root, PROJECT_ENTRIES)


def scope_layouts(
    root: Path | None,
    home: Path | None,
    managed_base: Path | None,
) -> tuple[ScopeLayout, ScopeLayout, ScopeLayout]:
    """Build layouts from already-resolved bases in fixed scope order.

    A ``None`` base marks that scope inactive.
    """
    return (
        _layout(Scope.MANAGED, managed_base, MANAGED_ENTRIES),
        _layout(Scope.USER, home, USER_ENTRIES),
        project_paths(root),
    )


__all__ = [
    "RegistryEntry",
    "ScopeLayout",
    "MANAGED_ENTRIES",
    "USER_ENTRIES",
    "PROJECT_ENTRIES",
    "managed_base_dir",
    "user_home_dir",
    "managed_paths",
    "user_paths",
    "project_paths",
    "scope_layouts",
]
