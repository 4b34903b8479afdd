"""Right-pane detail content for one finding."""

from __future__ import annotations

from .ansi import wrap
from .highlight import DEFAULT_CODE_STYLE
from .instructions import format_instructions
from .models import Finding, Fix, FixKind
from .ui_theme import UITheme

INSTRUCTION_INDENT = "  "


def fix_tag(fix: Fix, theme: UITheme) -> str:
    """Return the styled ``[auto]``/``[manual]`` tag for a fix."""
    if fix.kind is FixKind.AUTO:
        return f"{theme.fix_auto}[auto]{theme.reset}"
    return f"{theme.fix_manual}[manual]{theme.reset}"


def build_detail(
    finding: Finding,
    width: int,
    theme: UITheme,
    *,
    code_style: str = DEFAULT_CODE_STYLE,
) -> list[str]:
    """Assemble the detail pane lines for ``finding`` at ``width`` columns.

    The result is rebuilt for every frame; its length depends on the message,
    the fixes, and the width.
    """
    width = max(1, width)
    color = theme.severity_color(finding.severity)
    lines: list[str] = [
        f"{color}{theme.bold}{finding.severity.icon} {finding.title}{theme.reset}",
        f"{theme.dim}[{finding.id}]{theme.reset}",
        "",
        f"{theme.dim}Category:{theme.reset} {finding.category}",
    ]
    location = finding.location_label
    if location is not None:
        lines.append(f"{theme.dim}Location:{theme.reset} {location}")
    lines.append("")

    lines.append(f"{theme.bold}Description{theme.reset}")
    lines.extend(wrap(finding.message, width))
    lines.append("")

    if not finding.fixes:
        return lines

    lines.append(f"{theme.bold}Fixes{theme.reset}")
    lines.append("")
    instruction_width = max(1, width - len(INSTRUCTION_INDENT))
    for fix in finding.fixes:
        lines.append(f"{fix_tag(fix, theme)} {fix.description}")
        if fix.instructions:
            lines.append("")
            formatted = format_instructions(fix.instructions, instruction_width, theme, code_style=code_style)
            lines.extend(f"{INSTRUCTION_INDENT}{line}" for line in formatted)
        lines.append("")
    return lines
