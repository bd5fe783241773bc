"""Presentation-tree datatypes."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..artifacts import Artifact, Scope


@dataclass(eq=False)
class VisibleNode:
    """One node of the navigable tree.

    ``artifact`` is ``None`` only for scope headers. ``expanded`` is UI state
    and the only field mutated after construction.
    """

    label: str
    scope: Scope
    artifact: Artifact | None = None
    expanded: bool = False
    children: list["VisibleNode"] = field(default_factory=list)

    @property
    def is_header(self) -> bool:
        return self.artifact is None

    @property
    def expandable(self) -> bool:
        return self.is_header or bool(self.children)

    @property
    def state_key(self) -> tuple[str, ...]:
        """Key that survives a rebuild: scope label for headers, artifact identity otherwise."""
        if self.artifact is None:
            return ("scope", self.scope.label)
        return self.artifact.identity


@dataclass(frozen=True)
class VisibleRow:
    """A flattened node with its indentation depth."""

    node: VisibleNode
    depth: int
