"""UI theme definitions and selection helpers.

Themes are semantic ANSI palettes for the browser chrome, severity colors,
and snippet highlighting. ``PLAIN_THEME`` carries empty strings everywhere and
is used when color output is disabled.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Severity


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    bold: str
    dim: str
    divider: str
    banner: str
    selected: str
    severity_error: str
    severity_warning: str
    severity_info: str
    fix_auto: str
    fix_manual: str
    code_comment: str
    code_key: str
    code_punctuation: str
    code_string: str
    code_array: str
    code_boolean: str
    code_number: str
    flash_ok: str
    flash_error: str
    hint: str

    def severity_color(self, severity: Severity) -> str:
        """Return the color fragment for one severity."""
        if severity is Severity.ERROR:
            return self.severity_error
        if severity is Severity.WARNING:
            return self.severity_warning
        return self.severity_info

    def style(self, tag: str) -> str:
        """Return the ``code_<tag>`` fragment for a highlighter style tag."""
        if not tag:
            return ""
        return getattr(self, f"code_{tag}", "")


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    bold="\033[1m",
    dim="\033[2m",
    divider="\033[2m",
    banner="\033[46;30m",
    selected="\033[1;97m",
    severity_error="\033[31m",
    severity_warning="\033[33m",
    severity_info="\033[34m",
    fix_auto="\033[32m",
    fix_manual="\033[2m",
    code_comment="\033[2m",
    code_key="\033[34m",
    code_punctuation="\033[2m",
    code_string="\033[32m",
    code_array="\033[36m",
    code_boolean="\033[35m",
    code_number="\033[33m",
    flash_ok="\033[32m",
    flash_error="\033[31m",
    hint="\033[2m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    bold="\033[1m",
    dim="\033[2;38;5;110m",
    divider="\033[2;38;5;31m",
    banner="\033[48;5;24;38;5;231m",
    selected="\033[1;38;5;45m",
    severity_error="\033[38;5;203m",
    severity_warning="\033[38;5;215m",
    severity_info="\033[38;5;117m",
    fix_auto="\033[38;5;84m",
    fix_manual="\033[2;38;5;110m",
    code_comment="\033[2;38;5;110m",
    code_key="\033[38;5;39m",
    code_punctuation="\033[2;38;5;110m",
    code_string="\033[38;5;84m",
    code_array="\033[38;5;153m",
    code_boolean="\033[38;5;213m",
    code_number="\033[38;5;215m",
    flash_ok="\033[38;5;84m",
    flash_error="\033[38;5;203m",
    hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    bold="",
    dim="",
    divider="",
    banner="",
    selected="",
    severity_error="",
    severity_warning="",
    severity_info="",
    fix_auto="",
    fix_manual="",
    code_comment="",
    code_key="",
    code_punctuation="",
    code_string="",
    code_array="",
    code_boolean="",
    code_number="",
    flash_ok="",
    flash_error="",
    hint="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
