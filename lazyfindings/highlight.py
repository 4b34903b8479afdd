"""Line highlighting for configuration snippets embedded in fix instructions.

The default highlighter is a small ordered set of line-shape classifiers
(comment, ``key: value``, ``- item``) that split a line into style-tagged
segments. Fenced blocks tagged with a non-YAML language go through Pygments
one line at a time instead. Both paths are deterministic.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ui_theme import UITheme

DEFAULT_CODE_STYLE = "monokai"
YAML_LANGUAGES = frozenset({"", "yaml", "yml", "compose"})

COMMENT_RE = re.compile(r"^\s*#")
KEY_VALUE_RE = re.compile(r"^(\s*)([\w.-]+)(\s*:\s*)(.*)$")
LIST_ITEM_RE = re.compile(r"^(\s*-\s+)(.*)$")
QUOTED_RE = re.compile(r"^[\"'].*[\"']$")
NUMBER_RE = re.compile(r"^\d+(\.\d+)?(s|m|ms|h|d|g|mb|gb|k|kb)?$", re.IGNORECASE)
BOOLEAN_RE = re.compile(r"^(true|false)$", re.IGNORECASE)
ARRAY_RE = re.compile(r"^\[.*\]$")

Segment = tuple[str, str]

_LEXERS: dict[str, object | None] = {}
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def classify_value(value: str) -> str:
    """Return the style tag for a scalar value, or ``""`` when unstyled."""
    stripped = value.strip()
    if not stripped:
        return ""
    if QUOTED_RE.match(stripped):
        return "string"
    if NUMBER_RE.match(stripped):
        return "number"
    if BOOLEAN_RE.match(stripped):
        return "boolean"
    if ARRAY_RE.match(stripped):
        return "array"
    return ""


def highlight_segments(line: str) -> list[Segment]:
    """Split one snippet line into ``(style_tag, text)`` segments.

    Joining the segment texts always reproduces ``line`` exactly.
    """
    if COMMENT_RE.match(line):
        return [("comment", line)]

    match = KEY_VALUE_RE.match(line)
    if match:
        indent, key, separator, value = match.groups()
        segments: list[Segment] = []
        if indent:
            segments.append(("", indent))
        segments.append(("key", key))
        segments.append(("punctuation", separator))
        if value:
            segments.append((classify_value(value), value))
        return segments

    match = LIST_ITEM_RE.match(line)
    if match:
        dash, value = match.groups()
        segments = [("punctuation", dash)]
        if value:
            segments.append((classify_value(value), value))
        return segments

    return [("", line)]


def render_segments(segments: list[Segment], theme: UITheme) -> str:
    """Apply theme styles to tagged segments."""
    out: list[str] = []
    for tag, text in segments:
        style = theme.style(tag)
        if style:
            out.append(f"{style}{text}{theme.reset}")
        else:
            out.append(text)
    return "".join(out)


def normalize_code_style(style: str | None) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if not style:
        return DEFAULT_CODE_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_CODE_STYLE
    return style


def _lexer_for_language(language: str):
    if language in _LEXERS:
        return _LEXERS[language]
    try:
        lexer = get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = None
    _LEXERS[language] = lexer
    return lexer


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=normalize_code_style(style))
        _FORMATTERS[style] = formatter
    return formatter


def highlight_with_pygments(line: str, language: str, style: str = DEFAULT_CODE_STYLE) -> str | None:
    """Highlight one line with the Pygments lexer for ``language``.

    Returns ``None`` when Pygments has no lexer registered under that name.
    """
    lexer = _lexer_for_language(language)
    if lexer is None:
        return None
    return pygments_highlight(line, lexer, _formatter_for_style(style)).rstrip("\n")


def highlight_line(
    line: str,
    theme: UITheme,
    *,
    language: str | None = None,
    code_style: str = DEFAULT_CODE_STYLE,
) -> str:
    """Return ``line`` styled for display inside a snippet block.

    Plain themes never receive color, whichever highlighter would apply.
    """
    lang = (language or "").strip().lower()
    if lang not in YAML_LANGUAGES and theme.reset:
        rendered = highlight_with_pygments(line, lang, code_style)
        if rendered is not None:
            return rendered
    return render_segments(highlight_segments(line), theme)
