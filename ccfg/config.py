"""Read-only JSON config helpers.

Supplies the debounce delay, Pygments style, and tree-pane width.
Malformed or missing config falls back to defaults.
Nothing is ever written back.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "ccfg"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_DEBOUNCE_MS = 300
DEFAULT_STYLE = "monokai"
DEFAULT_TREE_PERCENT = 30.0


@dataclass(frozen=True)
class AppConfig:
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    style: str = DEFAULT_STYLE
    tree_percent: float = DEFAULT_TREE_PERCENT

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


def load_config_data() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _style_name(value: object) -> str:
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def _percent(value: object) -> float:
    """Accept numbers in the open interval (0, 100)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_TREE_PERCENT
    if value <= 0 or value >= 100:
        return DEFAULT_TREE_PERCENT
    return float(value)


def load_config() -> AppConfig:
    data = load_config_data()
    return AppConfig(
        debounce_ms=_positive_int(data.get("debounce_ms"), DEFAULT_DEBOUNCE_MS),
        style=_style_name(data.get("style")),
        tree_percent=_percent(data.get("tree_percent")),
    )


__all__ = ["APP_NAME", "CONFIG_PATH", "AppConfig", "load_config", "load_config_data"]
