"""Parsers for named sections inside settings and MCP JSON documents.

All parsers are tolerant: malformed documents or unexpected shapes produce an
empty list rather than an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..jsonc import loads_jsonc

HOOKS_KEY = "hooks"
MCP_SERVERS_KEY = "mcpServers"


@dataclass(frozen=True)
class HookEntry:
    """One event under ``hooks`` with its registered command strings."""

    event: str
    count: int
    commands: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class McpServerEntry:
    name: str
    type: str = ""
    command: str = ""


def load_document(raw: str) -> dict | None:
    """Parse JSONC text, returning ``None`` unless it is a top-level object."""
    try:
        data = loads_jsonc(raw)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _section(document: dict | None, key: str) -> dict | None:
    if document is None:
        return None
    section = document.get(key)
    return section if isinstance(section, dict) else None


def _entry_commands(entry: dict) -> list[str]:
    """Collect ``command`` strings from one hook entry and its nested ``hooks`` list."""
    commands: list[str] = []
    command = entry.get("command")
    if isinstance(command, str):
        commands.append(command)
    nested = entry.get("hooks")
    if isinstance(nested, list):
        for item in nested:
            if isinstance(item, dict) and isinstance(item.get("command"), str):
                commands.append(item["command"])
    return commands


def hooks_from_document(document: dict | None) -> list[HookEntry]:
    """Read the ``hooks`` map (event -> entry or list of entries).

    Events whose value is neither an object nor a list of objects are skipped.
    """
    hooks = _section(document, HOOKS_KEY)
    if hooks is None:
        return []

    entries: list[HookEntry] = []
    for event, value in hooks.items():
        if isinstance(value, dict):
            items = [value]
        elif isinstance(value, list) and all(isinstance(item, dict) for item in value):
            items = value
        else:
            continue
        commands: list[str] = []
        for item in items:
            commands.extend(_entry_commands(item))
        entries.append(HookEntry(event=event, count=len(items), commands=commands))
    return entries


def mcp_servers_from_document(document: dict | None) -> list[McpServerEntry]:
    """Read the ``mcpServers`` map (server name -> descriptor)."""
    servers = _section(document, MCP_SERVERS_KEY)
    if servers is None:
        return []

    entries: list[McpServerEntry] = []
    for name, descriptor in servers.items():
        if not isinstance(descriptor, dict):
            entries.append(McpServerEntry(name=name))
            continue
        server_type = descriptor.get("type")
        command = descriptor.get("command")
        entries.append(
            McpServerEntry(
                name=name,
                type=server_type if isinstance(server_type, str) else "",
                command=command if isinstance(command, str) else "",
            )
        )
    return entries


def parse_settings_hooks(raw: str) -> list[HookEntry]:
    return hooks_from_document(load_document(raw))


def parse_mcp_servers(raw: str) -> list[McpServerEntry]:
    return mcp_servers_from_document(load_document(raw))


__all__ = [
    "HOOKS_KEY",
    "MCP_SERVERS_KEY",
    "HookEntry",
    "McpServerEntry",
    "load_document",
    "hooks_from_document",
    "mcp_servers_from_document",
    "parse_settings_hooks",
    "parse_mcp_servers",
]
