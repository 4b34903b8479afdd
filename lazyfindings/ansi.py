"""ANSI-aware text measurement and line shaping utilities.

Provides measuring, clipping, padding, centering, and word-wrapping that treat
escape sequences as zero-width. These helpers keep pane columns aligned when
styled text is mixed with plain text in one frame.
"""

from __future__ import annotations

import re

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"


def strip_ansi(text: str) -> str:
    """Return ``text`` with every escape sequence removed."""
    return ANSI_ESCAPE_RE.sub("", text)


def visible_length(text: str) -> int:
    """Count the characters of ``text`` that are not part of escape sequences."""
    return len(strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` visible characters.

    Escape sequences before the cut are preserved verbatim. Everything after
    the cut is dropped, including styling that would only apply to dropped
    characters.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        out.append(text[i])
        col += 1
        i += 1

    return "".join(out)


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Hard-wrap a styled line into chunks of at most ``width`` visible characters.

    Escape sequences remain attached to the chunk they were read into.
    """
    if width <= 0 or not text:
        return [""]

    wrapped: list[str] = []
    chunk: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                chunk.append(match.group(0))
                i = match.end()
                continue

        if col >= width:
            wrapped.append("".join(chunk))
            chunk = []
            col = 0

        chunk.append(text[i])
        col += 1
        i += 1

    wrapped.append("".join(chunk))
    return wrapped


def truncate(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` visible characters, ending in an ellipsis.

    Text that already fits is returned unchanged. Otherwise the first
    ``width - 1`` visible characters are kept and followed by one ellipsis
    glyph. Callers append a reset sequence when the kept part was styled.
    """
    width = max(1, width)
    if visible_length(text) <= width:
        return text
    return clip_ansi_line(text, width - 1) + ELLIPSIS


def pad(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to exactly ``width`` visible columns."""
    width = max(1, width)
    length = visible_length(text)
    if length > width:
        return truncate(text, width)
    return text + " " * (width - length)


def center(text: str, width: int) -> str:
    """Center ``text`` in ``width`` columns; an odd leftover space goes right."""
    length = visible_length(text)
    if length >= width:
        return text
    left = (width - length) // 2
    return " " * left + text + " " * (width - length - left)


def wrap(text: str, width: int) -> list[str]:
    """Word-wrap ``text`` into lines of at most ``width`` visible characters.

    Explicit newlines are honored first and blank paragraphs become empty
    lines. Words are packed greedily with single spaces between them; a word
    longer than ``width`` is hard-cut into ``width``-sized pieces. Always
    returns at least one line.
    """
    width = max(1, width)
    lines: list[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        line = ""
        line_len = 0
        for word in words:
            word_len = visible_length(word)
            if word_len > width:
                if line:
                    lines.append(line)
                pieces = wrap_ansi_line(word, width)
                lines.extend(pieces[:-1])
                line = pieces[-1]
                line_len = visible_length(line)
                continue
            if not line:
                line, line_len = word, word_len
            elif line_len + 1 + word_len > width:
                lines.append(line)
                line, line_len = word, word_len
            else:
                line = f"{line} {word}"
                line_len += 1 + word_len
        lines.append(line)

    return lines or [""]
