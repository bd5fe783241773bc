"""JSON-with-comments normalization.

Strips ``//`` and ``/* */`` comments plus trailing commas so the result can be
handed to ``json.loads``. No grammar validation happens here; malformed input
simply fails the later parse.
"""

from __future__ import annotations

import json

_WHITESPACE = frozenset(" \t\n\r")


def _drop_trailing_commas(out: list[str]) -> None:
    """Remove commas separated from the end of ``out`` only by whitespace."""
    idx = len(out) - 1
    while idx >= 0:
        ch = out[idx]
        if ch in _WHITESPACE:
            idx -= 1
            continue
        if ch == ",":
            del out[idx]
            idx -= 1
            continue
        return


def strip_jsonc(text: str) -> str:
    """Return ``text`` with comments and trailing commas removed.

    String literals are copied verbatim (escape pairs are consumed together,
    so ``\\"`` never ends a string). Comment newlines are preserved so line
    numbers in later parse errors still line up with the source.
    """
    out: list[str] = []
    in_string = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                i += 1
                out.append(text[i])
            elif ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < n:
            nxt = text[i + 1]
            if nxt == "/":
                end = text.find("\n", i + 2)
                i = n if end < 0 else end
                continue
            if nxt == "*":
                end = text.find("*/", i + 2)
                i = n if end < 0 else end + 2
                continue

        if ch in "]}":
            _drop_trailing_commas(out)

        out.append(ch)
        i += 1

    return "".join(out)


def loads_jsonc(text: str) -> object:
    """Normalize JSONC text and parse it, raising ``json.JSONDecodeError`` on failure."""
    return json.loads(strip_jsonc(text))


__all__ = ["strip_jsonc", "loads_jsonc"]
