"""Metadata extraction for agent and skill Markdown files.

Agents and skills carry a flat ``key: value`` frontmatter block between
``---`` lines. When ``name`` or ``description`` is missing, the first
``# heading`` and the first body paragraph stand in for them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

MAX_DESCRIPTION_CHARS = 150
SKILL_FILE_NAME = "SKILL.md"

_FRONTMATTER_RE = re.compile(r"\A\s*---[ \t]*\n(.*?)^---[ \t]*$\n?", re.DOTALL | re.MULTILINE)
_HEADING_SEPARATORS = (" \u2014 ", " - ", " \u2013 ")
_ELLIPSIS = "\u2026"


@dataclass(frozen=True)
class AgentMeta:
    name: str
    role: str = ""
    description: str = ""
    model: str = ""
    color: str = ""


@dataclass(frozen=True)
class SkillMeta:
    name: str
    description: str = ""
    category: str = ""
    tags: str = ""


def parse_frontmatter(text: str) -> tuple[dict[str, str], str]:
    """Split ``text`` into its frontmatter fields and the remaining body.

    Only flat ``key: value`` lines are understood; surrounding quotes are
    stripped and keys with empty values are dropped.
    """
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return {}, text

    fields: dict[str, str] = {}
    for line in match.group(1).splitlines():
        key, sep, value = line.strip().partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip().strip("\"'")
        if key and value:
            fields[key] = value
    return fields, text[match.end() :]


def parse_heading(body: str) -> tuple[str, str]:
    """Return ``(name, role)`` from the first ``# name - role`` heading."""
    for line in body.splitlines():
        line = line.strip()
        if not line.startswith("# "):
            continue
        heading = line[2:]
        for sep in _HEADING_SEPARATORS:
            idx = heading.find(sep)
            if idx > 0:
                return heading[:idx].strip(), heading[idx + len(sep) :].strip()
        return heading.strip(), ""
    return "", ""


def first_paragraph(body: str) -> str:
    """First run of non-blank, non-heading lines joined with spaces."""
    para: list[str] = []
    for line in body.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            if para:
                break
            continue
        para.append(stripped)
    return " ".join(para)


def parse_tag_list(body: str) -> str:
    """Collect ``- item`` lines under the first heading mentioning tags."""
    tags: list[str] = []
    in_section = False
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith("#") and "tag" in stripped.lower():
            in_section = True
            continue
        if not in_section:
            continue
        if stripped.startswith("- "):
            tag = stripped[2:].strip()
            if tag:
                tags.append(tag)
        elif stripped.startswith("#"):
            break
    return ", ".join(tags)


def truncate(text: str, limit: int = MAX_DESCRIPTION_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + _ELLIPSIS


def clean_description(text: str) -> str:
    """Collapse whitespace and escaped newlines, keep the first sentence."""
    text = " ".join(text.replace("\\n", " ").split())
    idx = text.find(". ")
    if 0 < idx < MAX_DESCRIPTION_CHARS:
        text = text[: idx + 1]
    return truncate(text)


def _read(path: Path) -> str | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return text if text.strip() else None


def agent_meta_from_text(text: str) -> AgentMeta | None:
    fields, body = parse_frontmatter(text)
    name = fields.get("name", "")
    role = ""
    if not name:
        name, role = parse_heading(body)
    if not name:
        return None
    description = fields.get("description", "")
    description = clean_description(description) if description else truncate(first_paragraph(body))
    return AgentMeta(
        name=name,
        role=role,
        description=description,
        model=fields.get("model", ""),
        color=fields.get("color", ""),
    )


def skill_meta_from_text(text: str) -> SkillMeta | None:
    fields, body = parse_frontmatter(text)
    name = fields.get("name", "") or parse_heading(body)[0]
    if not name:
        return None
    description = fields.get("description", "")
    description = clean_description(description) if description else truncate(first_paragraph(body))
    return SkillMeta(
        name=name,
        description=description,
        category=fields.get("category", ""),
        tags=fields.get("tags", "") or parse_tag_list(body),
    )


def parse_agent_meta(path: Path) -> AgentMeta | None:
    """Read one agent file; ``None`` when unreadable, blank, or nameless."""
    text = _read(path)
    return agent_meta_from_text(text) if text is not None else None


def parse_skill_meta(skill_dir: Path) -> SkillMeta | None:
    """Read ``SKILL.md`` inside ``skill_dir``; ``None`` when absent or nameless."""
    text = _read(skill_dir / SKILL_FILE_NAME)
    return skill_meta_from_text(text) if text is not None else None


__all__ = [
    "MAX_DESCRIPTION_CHARS",
    "SKILL_FILE_NAME",
    "AgentMeta",
    "SkillMeta",
    "parse_frontmatter",
    "parse_heading",
    "first_paragraph",
    "parse_tag_list",
    "truncate",
    "clean_description",
    "agent_meta_from_text",
    "skill_meta_from_text",
    "parse_agent_meta",
    "parse_skill_meta",
]
