"""Persistent JSON config helpers.

Stores the UI theme, Pygments style for tagged snippets, flash-message
duration, and maximum left-pane width. All access is defensive: malformed or
missing config falls back to defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .layout import DEFAULT_LEFT_PANE_MAX

APP_NAME = "lazyfindings"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_FLASH_SECONDS = 2.0


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_str(key: str) -> str | None:
    value = load_config().get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def load_theme_name() -> str | None:
    """Return the configured UI theme name, if any."""
    return _load_str("theme")


def load_code_style() -> str | None:
    """Return the configured Pygments style for language-tagged snippets."""
    return _load_str("code_style")


def load_flash_seconds() -> float:
    """Return how long footer flash messages stay visible.

    Booleans and non-positive numbers fall back to the default.
    """
    value = load_config().get("flash_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_FLASH_SECONDS
    return float(value)


def load_left_pane_max() -> int:
    """Return the widest the left pane may grow, in columns."""
    value = load_config().get("left_pane_max")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_LEFT_PANE_MAX
    return value
