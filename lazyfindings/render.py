"""Rendering engine for the split category/findings terminal view.

Composes one complete ANSI frame from navigation state and pane content and
writes it in a single call. Frames are never diffed; each one repaints the
whole screen. Composition does not mutate the state it reads.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from .ansi import center, clip_ansi_line, pad, truncate
from .detail import build_detail
from .highlight import DEFAULT_CODE_STYLE
from .layout import PaneGeometry
from .models import Category
from .state import NavigationState, Screen
from .ui_theme import UITheme

CLEAR_SCREEN = "\033[2J\033[H"
SELECTED_MARKER = "▸"
MAIN_HINT = " ↑↓ Navigate  Enter: Open  q: Exit"
RESULTS_HINT = " ↑↓ Navigate  ←/q: Back  Shift+↑↓: Scroll  PgUp/PgDn: Page  c: Copy fix"
MAIN_TITLE = " Browse Results "


@dataclass(frozen=True)
class RenderContext:
    state: NavigationState
    geometry: PaneGeometry
    theme: UITheme
    detail_lines: list[str]


def move_to(row: int, col: int) -> str:
    return f"\033[{row};{col}H"


def fit_cell(text: str, width: int, theme: UITheme) -> str:
    """Truncate or pad ``text`` to exactly ``width`` columns.

    A reset is inserted before the padding so styles never bleed into the
    filler spaces or the next cell.
    """
    width = max(1, width)
    return pad(truncate(text, width) + theme.reset, width)


def issue_count_label(count: int) -> str:
    return f"{count} issue" if count == 1 else f"{count} issues"


def banner_title(state: NavigationState) -> str:
    if state.screen is Screen.MAIN:
        return MAIN_TITLE
    category = state.selected_category
    return f" {category.label} ({category.count}) "


def main_preview_lines(category: Category, theme: UITheme) -> list[str]:
    """Title-only listing of one category, shown beside the category list."""
    lines = [
        f"{theme.bold}{category.label}{theme.reset}",
        f"{theme.dim}{issue_count_label(category.count)}{theme.reset}",
        "",
    ]
    for finding in category.findings:
        color = theme.severity_color(finding.severity)
        lines.append(f"{color}{finding.severity.icon} {finding.title}{theme.reset}")
    return lines


def detail_lines_for(
    state: NavigationState,
    geometry: PaneGeometry,
    theme: UITheme,
    code_style: str = DEFAULT_CODE_STYLE,
) -> list[str]:
    """Build detail content for the selected finding; empty on the main screen."""
    if state.screen is not Screen.RESULTS:
        return []
    return build_detail(state.current_finding, geometry.detail_width, theme, code_style=code_style)


def _list_row(label: str, color: str, selected: bool, width: int, theme: UITheme) -> str:
    if selected:
        return f"{theme.selected}{fit_cell(f' {SELECTED_MARKER} {label}', width, theme)}"
    return f"{color}{fit_cell(f'   {label}', width, theme)}"


def _category_rows(state: NavigationState, geometry: PaneGeometry, theme: UITheme) -> list[str]:
    rows: list[str] = []
    for idx, category in enumerate(state.categories):
        label = f"{category.severity.icon} {category.label} ({category.count})"
        color = theme.severity_color(category.severity)
        rows.append(_list_row(label, color, idx == state.category_index, geometry.left_width, theme))
    return rows


def _finding_rows(state: NavigationState, geometry: PaneGeometry, theme: UITheme) -> list[str]:
    findings = state.selected_category.findings
    visible = findings[state.result_scroll : state.result_scroll + geometry.body_rows]
    rows: list[str] = []
    for offset, finding in enumerate(visible):
        idx = state.result_scroll + offset
        label = f"{finding.severity.icon} {truncate(finding.title, geometry.result_label_width)}"
        color = theme.severity_color(finding.severity)
        rows.append(_list_row(label, color, idx == state.result_index, geometry.left_width, theme))
    return rows


def _footer(state: NavigationState, geometry: PaneGeometry, theme: UITheme) -> str:
    if state.flash_message:
        color = theme.flash_ok if state.flash_ok else theme.flash_error
        mark = "✓" if state.flash_ok else "✗"
        return f"{color}{fit_cell(f' {mark} {state.flash_message}', geometry.columns, theme)}"
    hint = MAIN_HINT if state.screen is Screen.MAIN else RESULTS_HINT
    return f"{theme.hint}{fit_cell(hint, geometry.columns, theme)}"


def compose_frame(context: RenderContext) -> str:
    """Return the full escape-sequence-annotated frame for ``context``."""
    state = context.state
    geometry = context.geometry
    theme = context.theme
    columns = geometry.columns

    out: list[str] = [CLEAR_SCREEN]
    out.append(move_to(1, 1))
    out.append(f"{theme.banner}{fit_cell(center(banner_title(state), columns), columns, theme)}")

    sub_header = (
        f" {theme.dim}Dir:{theme.reset} {state.scan_dir}"
        f"  {theme.dim}Scan:{theme.reset} {state.check_scope}"
    )
    out.append(move_to(2, 1))
    out.append(fit_cell(sub_header, columns, theme))

    divider = "─" * geometry.left_width + "┬" + "─" * max(0, columns - geometry.left_width - 1)
    out.append(move_to(3, 1))
    out.append(f"{theme.divider}{clip_ansi_line(divider, columns)}{theme.reset}")

    if state.screen is Screen.MAIN:
        left_rows = _category_rows(state, geometry, theme)
        right_lines = main_preview_lines(state.selected_category, theme)
        right_start = 0
    else:
        left_rows = _finding_rows(state, geometry, theme)
        right_lines = context.detail_lines
        right_start = state.detail_scroll

    blank_left = " " * geometry.left_width
    blank_right = " " * geometry.right_width
    for row in range(geometry.body_rows):
        out.append(move_to(geometry.body_top + row, 1))
        out.append(left_rows[row] if row < len(left_rows) else blank_left)
        out.append(f"{theme.divider}│{theme.reset}")
        right_idx = right_start + row
        if right_idx < len(right_lines):
            out.append(fit_cell(f" {right_lines[right_idx]}", geometry.right_width, theme))
        else:
            out.append(blank_right)

    out.append(move_to(geometry.rows, 1))
    out.append(_footer(state, geometry, theme))
    out.append(theme.reset)
    return "".join(out)


def write_frame(frame: str, fd: int | None = None) -> None:
    """Write one composed frame to the terminal in a single call."""
    if fd is None:
        fd = sys.stdout.fileno()
    os.write(fd, frame.encode("utf-8", errors="replace"))
