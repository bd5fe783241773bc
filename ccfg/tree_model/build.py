"""Projection of scan results into visible-node trees."""

from __future__ import annotations

from ..artifacts import Artifact, ScanResult, Scope
from .types import VisibleNode


def make_artifact_node(artifact: Artifact) -> VisibleNode:
    """Project ``artifact`` and all of its descendants, collapsed."""
    return VisibleNode(
        label=artifact.label,
        scope=artifact.scope,
        artifact=artifact,
        children=[make_artifact_node(child) for child in artifact.children],
    )


def make_scope_node(scope: Scope, artifacts: tuple[Artifact, ...]) -> VisibleNode:
    return VisibleNode(
        label=scope.label,
        scope=scope,
        children=[make_artifact_node(artifact) for artifact in artifacts],
    )


def build_roots(result: ScanResult) -> list[VisibleNode]:
    """One header per non-empty scope in fixed order; the first one starts expanded."""
    roots = [make_scope_node(scope, artifacts) for scope, artifacts in result.scopes() if artifacts]
    if roots:
        roots[0].expanded = True
    return roots
