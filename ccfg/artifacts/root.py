"""Project-root detection by upward search for a version-control marker."""

from __future__ import annotations

from pathlib import Path

VCS_MARKER = ".git"


def is_project_root(directory: Path) -> bool:
    """Return whether ``directory`` holds a ``.git`` subdirectory."""
    try:
        return (directory / VCS_MARKER).is_dir()
    except OSError:
        return False


def find_project_root(start_dir: Path) -> Path | None:
    """Walk up from ``start_dir`` to the nearest directory containing ``.git``.

    Returns ``None`` once the filesystem root is passed without a match.
    """
    directory = Path(start_dir).absolute()
    while True:
        if is_project_root(directory):
            return directory
        parent = directory.parent
        if parent == directory:
            return None
        directory = parent
