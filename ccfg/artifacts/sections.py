"""Synthesis of virtual artifacts for sections embedded in JSON documents.

Settings files get one group per populated section (``hooks``,
``mcpServers``) with one leaf per item. ``.mcp.json`` files expose their
servers directly as children. Failures to read or parse yield no children.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .settings import (
    HOOKS_KEY,
    MCP_SERVERS_KEY,
    hooks_from_document,
    load_document,
    mcp_servers_from_document,
)
from .types import Artifact, Category, FileType, Scope, VirtualArtifact

logger = logging.getLogger(__name__)


def _read_document(path: Path) -> dict | None:
    try:
        raw = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("cannot read %s for section synthesis: %s", path, exc)
        return None
    document = load_document(raw)
    if document is None:
        logger.debug("%s is not a parseable JSON object; no sections synthesized", path)
    return document


def _leaves(
    path: Path,
    scope: Scope,
    key: str,
    names: list[str],
    category: Category,
) -> tuple[Artifact, ...]:
    return tuple(
        VirtualArtifact(
            owner_path=path,
            section_path=(key, name),
            scope=scope,
            file_type=FileType.JSON,
            category=category,
            label=name,
        )
        for name in sorted(names)
    )


def _group(
    path: Path,
    scope: Scope,
    key: str,
    title: str,
    names: list[str],
    category: Category,
) -> VirtualArtifact:
    return VirtualArtifact(
        owner_path=path,
        section_path=(key,),
        scope=scope,
        file_type=FileType.JSON,
        category=category,
        label=f"{title} ({len(names)})",
        is_dir=True,
        children=_leaves(path, scope, key, names, category),
    )


def sections_from_document(path: Path, scope: Scope, document: dict | None) -> tuple[Artifact, ...]:
    """Build virtual groups for every populated known section of ``document``."""
    groups: list[Artifact] = []

    hook_events = [entry.event for entry in hooks_from_document(document)]
    if hook_events:
        groups.append(_group(path, scope, HOOKS_KEY, "Hooks", hook_events, Category.HOOKS))

    server_names = [entry.name for entry in mcp_servers_from_document(document)]
    if server_names:
        groups.append(_group(path, scope, MCP_SERVERS_KEY, "MCP Servers", server_names, Category.MCP))

    return tuple(groups)


def settings_sections(path: Path, scope: Scope) -> tuple[Artifact, ...]:
    """Virtual children for a settings file: one group per populated section."""
    return sections_from_document(path, scope, _read_document(path))


def mcp_sections(path: Path, scope: Scope) -> tuple[Artifact, ...]:
    """Virtual children for an MCP server list file: one leaf per server."""
    document = _read_document(path)
    names = [entry.name for entry in mcp_servers_from_document(document)]
    return _leaves(path, scope, MCP_SERVERS_KEY, names, Category.MCP)


__all__ = ["sections_from_document", "settings_sections", "mcp_sections"]
