"""Preview text for the selected artifact.

JSON sections are pretty-printed and highlighted with Pygments when it can be
loaded; Markdown and other text is shown as-is. Terminal control bytes are
neutralized before anything reaches the screen.
"""

from __future__ import annotations

import json
import re
import textwrap
from pathlib import Path

from .ansi import display_width, pad_ansi_line
from .artifacts import Artifact, Category, FileType, RealArtifact, VirtualArtifact
from .artifacts.agentcard import AgentMeta, SkillMeta, parse_agent_meta, parse_skill_meta
from .jsonc import loads_jsonc

CARD_CATEGORIES = frozenset({Category.AGENTS, Category.SKILLS})
CARD_MIN_WIDTH = 20

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_HIGHLIGHT = None
_PYGMENTS_JSON_LEXER = None
_PYGMENTS_FORMATTER = None
_PYGMENTS_GET_STYLE_BY_NAME = None
_PYGMENTS_FORMATTERS: dict[str, object] = {}


def read_text(path: Path) -> str:
    """Read text trying UTF-8, UTF-8 with BOM, then latin-1."""
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _ensure_pygments_loaded() -> bool:
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_HIGHLIGHT
    global _PYGMENTS_JSON_LEXER
    global _PYGMENTS_FORMATTER
    global _PYGMENTS_GET_STYLE_BY_NAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments import highlight as pygments_highlight
        from pygments.formatters import Terminal256Formatter
        from pygments.lexers import JsonLexer
        from pygments.styles import get_style_by_name
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_HIGHLIGHT = pygments_highlight
    _PYGMENTS_JSON_LEXER = JsonLexer
    _PYGMENTS_FORMATTER = Terminal256Formatter
    _PYGMENTS_GET_STYLE_BY_NAME = get_style_by_name
    _PYGMENTS_AVAILABLE = True
    return True


def _formatter_for_style(style: str):
    formatter = _PYGMENTS_FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    assert _PYGMENTS_GET_STYLE_BY_NAME is not None and _PYGMENTS_FORMATTER is not None
    try:
        _PYGMENTS_GET_STYLE_BY_NAME(style)
    except Exception:
        style = "monokai"
    formatter = _PYGMENTS_FORMATTER(style=style)
    _PYGMENTS_FORMATTERS[style] = formatter
    return formatter


def highlight_json(source: str, style: str = "monokai") -> str:
    """Highlight JSON with Pygments, returning ``source`` unchanged on any failure."""
    if not _ensure_pygments_loaded():
        return source
    try:
        assert _PYGMENTS_HIGHLIGHT is not None and _PYGMENTS_JSON_LEXER is not None
        return _PYGMENTS_HIGHLIGHT(source, _PYGMENTS_JSON_LEXER(), _formatter_for_style(style)).rstrip("\n")
    except Exception:
        return source


def navigate_section(document: object, section_path: tuple[str, ...]) -> object | None:
    """Follow object keys through nested objects; ``None`` if any step is missing."""
    current = document
    for part in section_path:
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _pretty_json(value: object) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _directory_listing(artifact: RealArtifact) -> str:
    if not artifact.children:
        return f"{artifact.path}\n\n(empty directory)"
    lines = [str(artifact.path), ""]
    for child in artifact.children:
        if child.is_dir:
            lines.append(f"  {child.label}/")
        elif child.exists and child.size is not None:
            lines.append(f"  {child.label}  ({child.size} bytes)")
        else:
            lines.append(f"  {child.label}")
    return "\n".join(lines)


def _styled(text: str, code: str, no_color: bool) -> str:
    return text if no_color else f"{code}{text}{RESET}"


def _card(lines: list[str], width: int) -> list[str]:
    """Frame ``lines`` in a rounded box exactly ``width`` columns wide."""
    inner = width - 4
    out = ["╭" + "─" * (width - 2) + "╮"]
    out.extend(f"│ {pad_ansi_line(line, inner)} │" for line in lines)
    out.append("╰" + "─" * (width - 2) + "╯")
    return out


def _description_lines(description: str, inner: int) -> list[str]:
    if not description:
        return []
    return ["", *textwrap.wrap(description, max(1, inner)), ""]


def agent_card(meta: AgentMeta, width: int, no_color: bool = False) -> list[str]:
    inner = width - 4
    clean = sanitize_terminal_text
    lines = [_styled(f"🤖 {clean(meta.name)}", BOLD + MAGENTA, no_color)]
    role_line = "━━"
    if meta.role:
        role_line += f" {clean(meta.role)} "
    role_line += "━" * max(0, inner - display_width(role_line))
    lines.append(_styled(role_line, MAGENTA, no_color))
    lines.extend(_description_lines(clean(meta.description), inner))
    details = []
    if meta.model:
        details.append(f"🧠 {clean(meta.model)}")
    if meta.color:
        details.append(f"🎨 {clean(meta.color)}")
    if details:
        lines.append(_styled("   ".join(details), GREEN, no_color))
    return _card(lines, width)


def skill_card(meta: SkillMeta, width: int, no_color: bool = False) -> list[str]:
    inner = width - 4
    clean = sanitize_terminal_text
    title = f"⚡ {clean(meta.name)}"
    if meta.category:
        tag = f"[{clean(meta.category)}]"
        gap = max(1, inner - display_width(title) - display_width(tag))
        title = _styled(title, BOLD + CYAN, no_color) + " " * gap + _styled(tag, YELLOW, no_color)
    else:
        title = _styled(title, BOLD + CYAN, no_color)
    lines = [title, _styled("━" * inner, CYAN, no_color)]
    lines.extend(_description_lines(clean(meta.description), inner))
    if meta.tags:
        lines.append(_styled(f"🎯 {clean(meta.tags)}", GREEN, no_color))
    return _card(lines, width)


def _cards(artifact: RealArtifact, width: int, no_color: bool) -> str:
    """Agent or skill directory rendered as one card per parseable entry."""
    card_width = max(width - 2, CARD_MIN_WIDTH)
    out: list[str] = []
    if artifact.category == Category.AGENTS:
        for child in artifact.children:
            if child.is_dir or not child.exists or child.file_type != FileType.MARKDOWN:
                continue
            meta = parse_agent_meta(child.path)
            if meta is not None:
                out.extend(agent_card(meta, card_width, no_color))
        empty = "(no agent files)"
    else:
        for child in artifact.children:
            if not child.is_dir:
                continue
            meta = parse_skill_meta(child.path)
            if meta is not None:
                out.extend(skill_card(meta, card_width, no_color))
        empty = "(no skill files)"
    return "\n".join(out) if out else empty


def _virtual_preview(artifact: VirtualArtifact) -> tuple[str, bool]:
    try:
        document = loads_jsonc(read_text(artifact.owner_path))
    except OSError as exc:
        return f"(failed to read: {exc})", False
    except ValueError as exc:
        return f"(failed to parse JSON: {exc})", False
    section = navigate_section(document, artifact.section_path)
    if section is None:
        return f"(section not found: {artifact.section_key})", False
    return _pretty_json(section), True


def _file_preview(artifact: RealArtifact) -> tuple[str, bool]:
    try:
        raw = read_text(artifact.path)
    except OSError as exc:
        return f"(failed to read: {exc})", False
    if artifact.file_type == FileType.MARKDOWN:
        return raw, False
    try:
        return _pretty_json(loads_jsonc(raw)), True
    except ValueError:
        return raw, False


def preview_text(
    artifact: Artifact | None,
    style: str = "monokai",
    no_color: bool = False,
    width: int = 60,
) -> str:
    """Return display text for ``artifact`` (empty for a scope header).

    Agent and skill directories render as metadata cards sized to ``width``.
    """
    if artifact is None:
        return ""
    if isinstance(artifact, VirtualArtifact):
        text, is_json = _virtual_preview(artifact)
    elif not artifact.exists:
        return f"{artifact.path}\n\n(not found)"
    elif artifact.is_dir and artifact.category in CARD_CATEGORIES:
        return _cards(artifact, width, no_color)
    elif artifact.is_dir:
        return sanitize_terminal_text(_directory_listing(artifact))
    else:
        text, is_json = _file_preview(artifact)

    text = sanitize_terminal_text(text)
    if is_json and not no_color:
        return highlight_json(text, style)
    return text


__all__ = [
    "read_text",
    "sanitize_terminal_text",
    "highlight_json",
    "navigate_section",
    "agent_card",
    "skill_card",
    "preview_text",
]
