"""Filesystem scanning of registry entries into artifact trees.

Every scan builds a fresh tree. Missing paths become placeholder artifacts
with ``exists=False``; only an unresolvable working directory is an error.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .paths import RegistryEntry, ScopeLayout, managed_base_dir, scope_layouts, user_home_dir
from .root import find_project_root
from .sections import mcp_sections, settings_sections
from .types import Artifact, Category, RealArtifact, ScanResult, Scope, detect_file_type

logger = logging.getLogger(__name__)


class ScanError(RuntimeError):
    """Raised when a scan cannot start (no usable working directory)."""


def _safe_stat(path: Path) -> os.stat_result | None:
    """``os.stat`` following symlinks, or ``None`` when the path is unusable."""
    try:
        return os.stat(path)
    except (OSError, ValueError):
        return None


def _directory_key(path: Path) -> str:
    try:
        return os.path.realpath(path)
    except (OSError, ValueError):
        return str(path)


def scan_directory(
    directory: Path,
    scope: Scope,
    category: Category,
    _ancestors: frozenset[str] = frozenset(),
) -> tuple[Artifact, ...]:
    """Recursively list non-hidden children of ``directory`` sorted by name.

    Symlinks are followed; a link back into a directory already on the current
    branch is recorded but not descended into. Enumeration errors truncate
    only the affected subtree.
    """
    ancestors = _ancestors | {_directory_key(directory)}
    try:
        with os.scandir(directory) as entries:
            names = sorted(entry.name for entry in entries)
    except OSError as exc:
        logger.debug("cannot enumerate %s: %s", directory, exc)
        return ()

    children: list[Artifact] = []
    for name in names:
        if name.startswith("."):
            continue
        child_path = directory / name
        st = _safe_stat(child_path)
        if st is None:
            continue
        is_dir = stat.S_ISDIR(st.st_mode)
        grandchildren: tuple[Artifact, ...] = ()
        if is_dir and _directory_key(child_path) not in ancestors:
            grandchildren = scan_directory(child_path, scope, category, ancestors)
        children.append(
            RealArtifact(
                path=child_path,
                scope=scope,
                file_type=detect_file_type(name),
                category=category,
                label=name,
                exists=True,
                is_dir=is_dir,
                size=int(st.st_size),
                mtime_ns=int(st.st_mtime_ns),
                children=grandchildren,
            )
        )
    return tuple(children)


def scan_entry(entry: RegistryEntry, path: Path, scope: Scope) -> RealArtifact:
    """Stat one registry entry and build its artifact (plus children)."""
    st = _safe_stat(path)
    if st is None:
        return RealArtifact(
            path=path,
            scope=scope,
            file_type=detect_file_type(entry.rel_path),
            category=entry.category,
            label=entry.label,
        )

    is_dir = stat.S_ISDIR(st.st_mode)
    # Only regular files are opened; a FIFO or device would block the read.
    is_regular = stat.S_ISREG(st.st_mode)
    children: tuple[Artifact, ...] = ()
    if entry.is_dir and is_dir:
        children = scan_directory(path, scope, entry.category)
    elif is_regular and entry.category == Category.SETTINGS:
        children = settings_sections(path, scope)
    elif is_regular and entry.category == Category.MCP:
        children = mcp_sections(path, scope)

    return RealArtifact(
        path=path,
        scope=scope,
        file_type=detect_file_type(entry.rel_path),
        category=entry.category,
        label=entry.label,
        exists=True,
        is_dir=is_dir,
        size=int(st.st_size),
        mtime_ns=int(st.st_mtime_ns),
        children=children,
    )


def scan_layout(layout: ScopeLayout) -> tuple[Artifact, ...]:
    return tuple(scan_entry(entry, path, layout.scope) for entry, path in layout.resolved())


class Scanner:
    """Discover configuration artifacts for all three scopes.

    ``work_dir`` seeds project-root detection (defaults to the process working
    directory at scan time). ``home_dir`` and ``managed_dir`` override the
    User and Managed bases; with ``resolve_system_dirs=False`` an unset
    override disables that scope instead of falling back to the real system
    location.
    """

    def __init__(
        self,
        work_dir: Path | None = None,
        home_dir: Path | None = None,
        managed_dir: Path | None = None,
        resolve_system_dirs: bool = True,
    ) -> None:
        self.work_dir = work_dir
        self.home_dir = home_dir
        self.managed_dir = managed_dir
        self.resolve_system_dirs = resolve_system_dirs

    def resolve_work_dir(self) -> Path:
        if self.work_dir is not None:
            return Path(self.work_dir).absolute()
        try:
            return Path(os.getcwd())
        except OSError as exc:
            raise ScanError(f"failed to get working directory: {exc}") from exc

    def layouts(self) -> tuple[ScopeLayout, ScopeLayout, ScopeLayout]:
        """Resolve the three scope bases for the current filesystem state."""
        work_dir = self.resolve_work_dir()
        managed = self.managed_dir
        home = self.home_dir
        if self.resolve_system_dirs:
            if managed is None:
                managed = managed_base_dir()
            if home is None:
                home = user_home_dir()
        return scope_layouts(find_project_root(work_dir), home, managed)

    def scan(self) -> ScanResult:
        managed, user, project = self.layouts()
        return ScanResult(
            managed=scan_layout(managed),
            user=scan_layout(user),
            project=scan_layout(project),
            root_dir=project.base,
        )


def scan(work_dir: Path | None = None) -> ScanResult:
    """Scan with system defaults for the Managed and User scopes."""
    return Scanner(work_dir).scan()


__all__ = [
    "ScanError",
    "Scanner",
    "scan",
    "scan_directory",
    "scan_entry",
    "scan_layout",
]
