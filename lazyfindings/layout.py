"""Split-pane geometry derived from the terminal size."""

from __future__ import annotations

from dataclasses import dataclass

HEADER_ROWS = 3
FOOTER_ROWS = 1
SEPARATOR_COLUMNS = 1
LEFT_PANE_RATIO = 0.38
DEFAULT_LEFT_PANE_MAX = 50


@dataclass(frozen=True)
class PaneGeometry:
    columns: int
    rows: int
    left_width: int
    right_width: int
    body_rows: int

    @property
    def body_top(self) -> int:
        """1-based terminal row of the first body row."""
        return HEADER_ROWS + 1

    @property
    def detail_width(self) -> int:
        """Content width of the right pane after its one-column margin on each side."""
        return max(1, self.right_width - 2)

    @property
    def result_label_width(self) -> int:
        """Room for a finding title after the row marker and severity icon."""
        return max(1, self.left_width - 5)


def compute_geometry(columns: int, rows: int, left_pane_max: int = DEFAULT_LEFT_PANE_MAX) -> PaneGeometry:
    """Split ``columns`` x ``rows`` into header, two panes, and footer.

    Every width and height is clamped to at least one cell so undersized
    terminals still produce a valid (if cramped) frame.
    """
    columns = max(1, columns)
    rows = max(1, rows)
    left_width = max(1, min(int(columns * LEFT_PANE_RATIO), max(1, left_pane_max)))
    right_width = max(1, columns - left_width - SEPARATOR_COLUMNS)
    body_rows = max(1, rows - HEADER_ROWS - FOOTER_ROWS)
    return PaneGeometry(
        columns=columns,
        rows=rows,
        left_width=left_width,
        right_width=right_width,
        body_rows=body_rows,
    )
