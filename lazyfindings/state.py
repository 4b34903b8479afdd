"""Mutable navigation state for one browse session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import Category, Finding


class Screen(Enum):
    MAIN = "main"
    RESULTS = "results"


@dataclass
class NavigationState:
    categories: tuple[Category, ...]
    scan_dir: str
    check_scope: str
    screen: Screen = Screen.MAIN
    category_index: int = 0
    result_index: int = 0
    result_scroll: int = 0
    detail_scroll: int = 0
    flash_message: str = ""
    flash_ok: bool = True

    @property
    def selected_category(self) -> Category:
        return self.categories[self.category_index]

    @property
    def current_finding(self) -> Finding:
        return self.selected_category.findings[self.result_index]
