"""Navigation state machine for the two-level findings browser.

Consumes decoded key tokens and moves between the category list (``MAIN``)
and the findings of one category (``RESULTS``). All indices are clamped; no
list wraps around. Scroll helpers keep the selected finding inside the left
viewport and the detail offset inside the detail content.
"""

from __future__ import annotations

import logging

from .key_registry import KeyComboBinding, KeyComboRegistry
from .state import NavigationState, Screen

LOGGER = logging.getLogger(__name__)

FORCE_QUIT_KEYS = frozenset({"CTRL_C", "EOF"})
DETAIL_PAGE_ROWS = 5


def max_detail_scroll(detail_line_count: int, viewport_rows: int) -> int:
    """Return the largest detail offset that still fills the viewport."""
    return max(0, detail_line_count - max(1, viewport_rows))


def keep_selected_visible(state: NavigationState, viewport_rows: int) -> None:
    """Shift ``result_scroll`` minimally so ``result_index`` is on screen."""
    rows = max(1, viewport_rows)
    if state.result_index < state.result_scroll:
        state.result_scroll = state.result_index
    elif state.result_index >= state.result_scroll + rows:
        state.result_scroll = state.result_index - rows + 1


def clamp_detail_scroll(state: NavigationState, viewport_rows: int, detail_line_count: int) -> None:
    state.detail_scroll = max(0, min(state.detail_scroll, max_detail_scroll(detail_line_count, viewport_rows)))


def sync_viewport(state: NavigationState, viewport_rows: int, detail_line_count: int) -> None:
    """Restore both scroll invariants for the current viewport size."""
    keep_selected_visible(state, viewport_rows)
    clamp_detail_scroll(state, viewport_rows, detail_line_count)


class NavigationController:
    """Apply key tokens to a ``NavigationState``.

    ``handle_key`` returns ``True`` when the session should end.
    """

    def __init__(self, state: NavigationState) -> None:
        self.state = state
        self._max_detail_scroll = 0
        self._main_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: self._move_category(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: self._move_category(1)),
            KeyComboBinding(("ENTER", "RIGHT", "l"), self._open_results),
            KeyComboBinding(("q", "ESC", "LEFT", "BACKSPACE", "h"), self._request_quit),
        )
        self._results_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: self._move_result(-1)),
            KeyComboBinding(("DOWN", "j"), lambda: self._move_result(1)),
            KeyComboBinding(("SHIFT_UP", "ALT_UP", "K"), lambda: self._scroll_detail(-1)),
            KeyComboBinding(("SHIFT_DOWN", "ALT_DOWN", "J"), lambda: self._scroll_detail(1)),
            KeyComboBinding(("PAGE_UP",), lambda: self._scroll_detail(-DETAIL_PAGE_ROWS)),
            KeyComboBinding(("PAGE_DOWN",), lambda: self._scroll_detail(DETAIL_PAGE_ROWS)),
            KeyComboBinding(("q", "ESC", "LEFT", "BACKSPACE", "h"), self._back_to_main),
        )

    def handle_key(self, key: str, *, viewport_rows: int = 1, detail_line_count: int = 0) -> bool:
        """Apply one key; unbound keys leave the state untouched."""
        if key in FORCE_QUIT_KEYS:
            LOGGER.debug("force quit via %s", key)
            return True
        self._max_detail_scroll = max_detail_scroll(detail_line_count, viewport_rows)
        registry = self._main_keys if self.state.screen is Screen.MAIN else self._results_keys
        if registry.dispatch(key):
            return True
        keep_selected_visible(self.state, viewport_rows)
        return False

    def _move_category(self, delta: int) -> None:
        last = len(self.state.categories) - 1
        self.state.category_index = max(0, min(last, self.state.category_index + delta))

    def _open_results(self) -> None:
        self.state.screen = Screen.RESULTS
        self.state.result_index = 0
        self.state.result_scroll = 0
        self.state.detail_scroll = 0
        LOGGER.debug("opened %s", self.state.selected_category.label)

    def _back_to_main(self) -> None:
        self.state.screen = Screen.MAIN
        LOGGER.debug("returned to category list")

    def _request_quit(self) -> bool:
        return True

    def _move_result(self, delta: int) -> None:
        last = self.state.selected_category.count - 1
        self.state.result_index = max(0, min(last, self.state.result_index + delta))
        self.state.detail_scroll = 0

    def _scroll_detail(self, delta: int) -> None:
        self.state.detail_scroll = max(0, min(self._max_detail_scroll, self.state.detail_scroll + delta))
