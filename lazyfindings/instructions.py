"""Fix-instruction formatting and code-block extraction.

Instruction text mixes prose with configuration snippets, either fenced with
triple backticks or indented. Snippet lines have tabs expanded to fixed stops,
are highlighted, and stay on one row each; prose lines are word-wrapped.
"""

from __future__ import annotations

import re

from .ansi import truncate, wrap
from .highlight import DEFAULT_CODE_STYLE, highlight_line
from .ui_theme import UITheme

FENCE_RE = re.compile(r"^\s*```\s*([\w+#.-]*)")
TAB_WIDTH = 4


def _split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")


def _is_indented(line: str) -> bool:
    return bool(line) and line[0].isspace()


def format_instructions(
    text: str,
    width: int,
    theme: UITheme,
    *,
    code_style: str = DEFAULT_CODE_STYLE,
) -> list[str]:
    """Convert instruction text into display lines no wider than ``width``.

    Fence markers toggle snippet mode and are not emitted. Snippet lines and
    indented lines are highlighted and truncated, never wrapped. Blank lines
    are kept as single empty lines.
    """
    width = max(1, width)
    lines: list[str] = []
    in_fence = False
    language: str | None = None
    for raw in _split_lines(text):
        fence = FENCE_RE.match(raw)
        if fence:
            in_fence = not in_fence
            language = (fence.group(1) or None) if in_fence else None
            continue
        if not raw.strip():
            lines.append("")
        elif in_fence or _is_indented(raw):
            highlighted = highlight_line(
                raw.expandtabs(TAB_WIDTH),
                theme,
                language=language if in_fence else None,
                code_style=code_style,
            )
            lines.append(truncate(highlighted, width))
        else:
            lines.extend(wrap(raw, width))
    return lines or [""]


def _dedent_block(block: list[str]) -> str:
    indents = [len(line) - len(line.lstrip()) for line in block if line.strip()]
    shift = min(indents) if indents else 0
    return "\n".join(line[shift:] if line.strip() else line for line in block)


def extract_code_blocks(text: str) -> str:
    """Extract pasteable code from instruction text.

    Fenced blocks and runs of indented lines each form one block. A prose
    line at column 0 ends an indented block, trailing blank lines are
    trimmed, and every block is dedented to its own minimum indentation.
    Blocks are joined with one blank line; ``""`` means nothing was found.
    """
    blocks: list[list[str]] = []
    current: list[str] = []
    in_fence = False

    def flush() -> None:
        nonlocal current
        while current and not current[-1].strip():
            current.pop()
        if current:
            blocks.append(current)
        current = []

    for line in _split_lines(text):
        if FENCE_RE.match(line):
            if in_fence:
                flush()
            in_fence = not in_fence
            continue
        if in_fence:
            current.append(line)
        elif _is_indented(line) and line.strip():
            current.append(line)
        elif not line.strip():
            if current:
                current.append(line)
        else:
            flush()

    flush()
    return "\n\n".join(_dedent_block(block) for block in blocks)
