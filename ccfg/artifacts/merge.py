"""Last-scope-wins flattening of settings across scopes.

Values from later scopes (Project over User over Managed) simply overwrite
earlier ones per dotted key; there is no conflict resolution.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from ..jsonc import loads_jsonc
from .types import Artifact, Category, FileType, ScanResult, Scope


@dataclass(frozen=True)
class SourcedValue:
    key: str
    value: object
    scope: Scope


@dataclass(frozen=True)
class MergedConfig:
    values: tuple[SourcedValue, ...] = ()


def _flatten(prefix: str, obj: dict, scope: Scope, out: dict[str, SourcedValue]) -> None:
    for key, value in obj.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            _flatten(dotted, value, scope, out)
        else:
            out[dotted] = SourcedValue(dotted, value, scope)


def _apply_scope(merged: dict[str, SourcedValue], artifacts: tuple[Artifact, ...], scope: Scope) -> None:
    for artifact in artifacts:
        if artifact.is_virtual or not artifact.exists or artifact.is_dir:
            continue
        if artifact.category != Category.SETTINGS:
            continue
        if artifact.file_type not in {FileType.JSON, FileType.JSONC}:
            continue
        try:
            document = loads_jsonc(artifact.path.read_text(encoding="utf-8", errors="replace"))
        except (OSError, ValueError):
            continue
        if isinstance(document, dict):
            _flatten("", document, scope, merged)


def merge_settings(result: ScanResult) -> MergedConfig:
    """Merge settings files of ``result`` into a key-sorted flat list."""
    merged: dict[str, SourcedValue] = {}
    for scope, artifacts in result.scopes():
        _apply_scope(merged, artifacts, scope)
    return MergedConfig(tuple(merged[key] for key in sorted(merged)))


def _format_value(value: object, limit: int = 60) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def render_merged(config: MergedConfig) -> str:
    """Format merged values as a plain-text table."""
    if not config.values:
        return "(no settings to merge)\n"
    lines = ["Merged Settings (Project > User > Managed)", "-" * 50, ""]
    for item in config.values:
        lines.append(f"  {item.key:<35} = {_format_value(item.value):<20} [{item.scope.label}]")
    return "\n".join(lines) + "\n"


__all__ = ["SourcedValue", "MergedConfig", "merge_settings", "render_merged"]
