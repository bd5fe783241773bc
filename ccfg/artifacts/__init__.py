"""Domain model for configuration artifacts across precedence scopes.

This package contains the non-UI pieces:
- artifact datatypes (real files and synthesized JSON sections)
- the static path registry and project-root detection
- the filesystem scanner and section synthesis
- the last-scope-wins settings merge
"""

from __future__ import annotations

from .merge import MergedConfig, SourcedValue, merge_settings, render_merged
from .paths import RegistryEntry, ScopeLayout, scope_layouts
from .root import find_project_root
from .scanner import ScanError, Scanner, scan
from .types import (
    Artifact,
    Category,
    FileType,
    RealArtifact,
    ScanResult,
    Scope,
    VirtualArtifact,
    split_section_key,
)

__all__ = [
    "Artifact",
    "Category",
    "FileType",
    "RealArtifact",
    "VirtualArtifact",
    "ScanResult",
    "Scope",
    "split_section_key",
    "RegistryEntry",
    "ScopeLayout",
    "scope_layouts",
    "find_project_root",
    "ScanError",
    "Scanner",
    "scan",
    "MergedConfig",
    "SourcedValue",
    "merge_settings",
    "render_merged",
]
