"""Domain datatypes for scanned configuration artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path

SECTION_SEPARATOR = "#"


class Scope(IntEnum):
    """Precedence tier owning an artifact. Integer order is display order."""

    MANAGED = 0
    USER = 1
    PROJECT = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class FileType(Enum):
    JSON = "JSON"
    JSONC = "JSONC"
    MARKDOWN = "Markdown"


class Category(Enum):
    SETTINGS = "Settings"
    INSTRUCTIONS = "Instructions"
    MCP = "MCP"
    POLICY = "Policy"
    COMMANDS = "Commands"
    SKILLS = "Skills"
    AGENTS = "Agents"
    KEYBINDINGS = "Keybindings"
    HOOKS = "Hooks"


def detect_file_type(name: str) -> FileType:
    """Classify by extension; unknown extensions are treated as JSON."""
    suffix = Path(name).suffix.lower()
    if suffix == ".md":
        return FileType.MARKDOWN
    if suffix == ".jsonc":
        return FileType.JSONC
    return FileType.JSON


@dataclass(frozen=True)
class RealArtifact:
    """A file or directory observed (or expected) on disk."""

    path: Path
    scope: Scope
    file_type: FileType
    category: Category
    label: str
    exists: bool = False
    is_dir: bool = False
    size: int | None = None
    mtime_ns: int | None = None
    children: tuple["Artifact", ...] = ()

    is_virtual = False

    @property
    def path_key(self) -> str:
        return str(self.path)

    @property
    def identity(self) -> tuple[str, ...]:
        return ("file", str(self.path))


@dataclass(frozen=True)
class VirtualArtifact:
    """A named section inside a JSON document, synthesized by the scanner.

    ``section_path`` holds the object keys leading from the document root to
    the section, e.g. ``("hooks",)`` for a group or ``("hooks", "Stop")`` for
    one item. Keys may themselves contain dots.
    """

    owner_path: Path
    section_path: tuple[str, ...]
    scope: Scope
    file_type: FileType
    category: Category
    label: str
    is_dir: bool = False
    children: tuple["Artifact", ...] = ()

    exists = True
    is_virtual = True
    size = None
    mtime_ns = None

    @property
    def section_key(self) -> str:
        """Dotted display form of ``section_path``."""
        return ".".join(self.section_path)

    @property
    def path_key(self) -> str:
        return f"{self.owner_path}{SECTION_SEPARATOR}{self.section_key}"

    @property
    def identity(self) -> tuple[str, ...]:
        return ("section", str(self.owner_path), *self.section_path)


Artifact = RealArtifact | VirtualArtifact


def split_section_key(path_key: str) -> tuple[Path, str | None]:
    """Split ``<file>#<dotted.key>`` on the first ``#``.

    Returns ``(Path(path_key), None)`` when no separator is present.
    """
    owner, sep, section = path_key.partition(SECTION_SEPARATOR)
    if not sep:
        return Path(path_key), None
    return Path(owner), section


@dataclass(frozen=True)
class ScanResult:
    """All artifacts discovered by one scan, grouped by scope."""

    managed: tuple[Artifact, ...] = ()
    user: tuple[Artifact, ...] = ()
    project: tuple[Artifact, ...] = ()
    root_dir: Path | None = None

    def scopes(self) -> list[tuple[Scope, tuple[Artifact, ...]]]:
        return [
            (Scope.MANAGED, self.managed),
            (Scope.USER, self.user),
            (Scope.PROJECT, self.project),
        ]

    def all(self) -> list[Artifact]:
        return [*self.managed, *self.user, *self.project]

    def file_stats(self) -> tuple[int, int]:
        """Return ``(existing, total)`` over top-level entries and their real children."""
        exist = 0
        total = 0
        for artifact in self.all():
            total += 1
            exist += 1 if artifact.exists else 0
            for child in artifact.children:
                if child.is_virtual:
                    continue
                total += 1
                exist += 1 if child.exists else 0
        return exist, total


__all__ = [
    "SECTION_SEPARATOR",
    "Scope",
    "FileType",
    "Category",
    "detect_file_type",
    "RealArtifact",
    "VirtualArtifact",
    "Artifact",
    "split_section_key",
    "ScanResult",
]
