"""Interactive browse session.

Owns the terminal mode, runs the single-threaded input loop, and performs
the copy-to-clipboard action. The loop polls stdin with a short timeout;
between keys it checks the terminal size (a change re-renders) and the flash
timer (expiry clears the footer message and re-renders once). Every exit
path, including SIGTERM/SIGHUP, restores the terminal and cancels the timer.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import sys
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .clipboard import copy_text_to_clipboard
from .config import DEFAULT_FLASH_SECONDS
from .highlight import DEFAULT_CODE_STYLE
from .input import read_key
from .instructions import extract_code_blocks
from .layout import DEFAULT_LEFT_PANE_MAX, compute_geometry
from .models import Finding, group_by_severity
from .navigation import NavigationController, sync_viewport
from .render import RenderContext, compose_frame, detail_lines_for, write_frame
from .state import NavigationState, Screen
from .terminal import TerminalController
from .ui_theme import DEFAULT_THEME, UITheme

LOGGER = logging.getLogger(__name__)

POLL_TIMEOUT_MS = 120
COPY_KEY = "c"
COPIED_MESSAGE = "Copied to clipboard!"
NO_CLIPBOARD_MESSAGE = "Clipboard not available"
NO_INSTRUCTIONS_MESSAGE = "No fix instructions"
COPY_FAILED_MESSAGE = "Copy failed"
TERMINATING_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig is not None
)


class SessionTerminated(Exception):
    """Raised inside the loop when a terminating signal arrives."""

    def __init__(self, signum: int) -> None:
        super().__init__(f"terminated by signal {signum}")
        self.signum = signum


def _raise_terminated(signum: int, _frame) -> None:
    raise SessionTerminated(signum)


def _terminal_size() -> os.terminal_size:
    return shutil.get_terminal_size((80, 24))


class FlashTimer:
    """One-shot deadline for clearing the footer flash message."""

    def __init__(self) -> None:
        self._deadline: float | None = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def arm(self, now: float, seconds: float) -> None:
        """Start (or restart) the countdown from ``now``."""
        self._deadline = now + max(0.0, seconds)

    def cancel(self) -> None:
        self._deadline = None

    def expired(self, now: float) -> bool:
        """Return ``True`` exactly once when the deadline has passed."""
        if self._deadline is None or now < self._deadline:
            return False
        self._deadline = None
        return True


@dataclass(frozen=True)
class SessionOptions:
    theme: UITheme = DEFAULT_THEME
    code_style: str = DEFAULT_CODE_STYLE
    flash_seconds: float = DEFAULT_FLASH_SECONDS
    left_pane_max: int = DEFAULT_LEFT_PANE_MAX
    handle_signals: bool = True


@dataclass(frozen=True)
class SessionCallbacks:
    """Injected collaborators used by ``BrowserSession``.

    ``write`` defaults to writing frames to the session's stdout descriptor.
    """

    read_key: Callable[[int, int | None], str] = read_key
    terminal_size: Callable[[], os.terminal_size] = _terminal_size
    extract_code_blocks: Callable[[str], str] = extract_code_blocks
    copy_text_to_clipboard: Callable[[str], bool] = copy_text_to_clipboard
    clock: Callable[[], float] = time.monotonic
    write: Callable[[str], None] | None = None


class BrowserSession:
    """One interactive browse over a fixed set of categories."""

    def __init__(
        self,
        state: NavigationState,
        terminal: TerminalController,
        *,
        stdin_fd: int,
        stdout_fd: int,
        options: SessionOptions | None = None,
        callbacks: SessionCallbacks | None = None,
    ) -> None:
        self.state = state
        self.terminal = terminal
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.options = options if options is not None else SessionOptions()
        self.callbacks = callbacks if callbacks is not None else SessionCallbacks()
        self.navigation = NavigationController(state)
        self.flash_timer = FlashTimer()
        self._viewport_rows = 1
        self._detail_line_count = 0
        self._ended = False

    def _write(self, frame: str) -> None:
        if self.callbacks.write is not None:
            self.callbacks.write(frame)
        else:
            write_frame(frame, self.stdout_fd)

    def render(self, size: os.terminal_size | None = None) -> None:
        """Compose and write one frame for the current state and terminal size."""
        if self._ended:
            return
        if size is None:
            size = self.callbacks.terminal_size()
        geometry = compute_geometry(size.columns, size.lines, self.options.left_pane_max)
        detail = detail_lines_for(self.state, geometry, self.options.theme, self.options.code_style)
        self._viewport_rows = geometry.body_rows
        self._detail_line_count = len(detail)
        sync_viewport(self.state, geometry.body_rows, len(detail))
        self._write(compose_frame(RenderContext(self.state, geometry, self.options.theme, detail)))

    def set_flash(self, message: str, *, ok: bool) -> None:
        self.state.flash_message = message
        self.state.flash_ok = ok
        self.flash_timer.arm(self.callbacks.clock(), self.options.flash_seconds)

    def clear_flash(self) -> bool:
        """Drop any flash message and its pending timer; return whether one was shown."""
        self.flash_timer.cancel()
        if not self.state.flash_message:
            return False
        self.state.flash_message = ""
        self.state.flash_ok = True
        return True

    def copy_current_fixes(self) -> None:
        """Copy code from the current finding's fix instructions to the clipboard."""
        finding = self.state.current_finding
        text = "\n\n".join(fix.instructions for fix in finding.fixes if fix.instructions)
        try:
            code = self.callbacks.extract_code_blocks(text)
            copied = bool(code) and self.callbacks.copy_text_to_clipboard(code)
        except Exception:
            LOGGER.exception("copying fixes for %s failed", finding.id or finding.title)
            self.set_flash(COPY_FAILED_MESSAGE, ok=False)
            return

        if copied:
            self.set_flash(COPIED_MESSAGE, ok=True)
        elif code:
            self.set_flash(NO_CLIPBOARD_MESSAGE, ok=False)
        else:
            self.set_flash(NO_INSTRUCTIONS_MESSAGE, ok=False)
        LOGGER.info("copy for %s: %s", finding.id or finding.title, self.state.flash_message)

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return ``True`` when the session should end."""
        if key == COPY_KEY and self.state.screen is Screen.RESULTS:
            self.copy_current_fixes()
            return False
        self.clear_flash()
        return self.navigation.handle_key(
            key,
            viewport_rows=self._viewport_rows,
            detail_line_count=self._detail_line_count,
        )

    def _install_signal_handlers(self) -> dict[int, object]:
        if not self.options.handle_signals or threading.current_thread() is not threading.main_thread():
            return {}
        previous: dict[int, object] = {}
        for signum in TERMINATING_SIGNALS:
            previous[signum] = signal.signal(signum, _raise_terminated)
        return previous

    @staticmethod
    def _restore_signal_handlers(previous: dict[int, object]) -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    def _loop(self) -> None:
        last_size: os.terminal_size | None = None
        dirty = True
        while True:
            size = self.callbacks.terminal_size()
            if size != last_size:
                last_size = size
                dirty = True
            if self.flash_timer.armed and self.flash_timer.expired(self.callbacks.clock()):
                self.clear_flash()
                dirty = True
            if dirty:
                self.render(size)
                dirty = False

            key = self.callbacks.read_key(self.stdin_fd, POLL_TIMEOUT_MS)
            if not key:
                continue
            if self.handle_key(key):
                return
            dirty = True

    def run(self) -> None:
        """Run the session until the user quits; the terminal is always restored."""
        LOGGER.info(
            "browse session started: %s",
            ", ".join(f"{category.label}={category.count}" for category in self.state.categories),
        )
        previous_handlers = self._install_signal_handlers()
        try:
            with self.terminal.raw_mode():
                self._loop()
        except SessionTerminated as exc:
            LOGGER.info("%s", exc)
        finally:
            self._ended = True
            self.flash_timer.cancel()
            self._restore_signal_handlers(previous_handlers)
            LOGGER.info("browse session ended")


def browse_findings(
    findings: Iterable[Finding],
    scan_dir: str,
    check_scope: str = "All checks",
    *,
    options: SessionOptions | None = None,
    callbacks: SessionCallbacks | None = None,
    terminal: TerminalController | None = None,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> None:
    """Browse ``findings`` interactively and return when the user exits.

    With no findings this returns immediately without touching the terminal.
    """
    categories = group_by_severity(findings)
    if not categories:
        LOGGER.info("no findings to browse")
        return

    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()
    if terminal is None:
        terminal = TerminalController(stdin_fd, stdout_fd)

    state = NavigationState(categories=categories, scan_dir=scan_dir, check_scope=check_scope)
    session = BrowserSession(
        state,
        terminal,
        stdin_fd=stdin_fd,
        stdout_fd=stdout_fd,
        options=options,
        callbacks=callbacks,
    )
    session.run()
