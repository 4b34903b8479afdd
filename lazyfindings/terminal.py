"""Terminal control helpers for the browse session.

Owns the raw-mode lifecycle, alternate-screen switching, and cursor
visibility. Restoring the terminal is idempotent so every exit path can call
it without writing the restore sequence twice.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import termios
import tty
from typing import TextIO

LOGGER = logging.getLogger(__name__)

MIN_COLUMNS = 60
MIN_ROWS = 12


class TerminalController:
    """Manage terminal mode transitions for one interactive session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._active = True
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Restore the saved tty mode, the cursor, and the main screen buffer.

        A terminal that has gone away (hangup, closed pty) cannot be restored;
        those failures are logged rather than raised.
        """
        if not self._active:
            return
        self._active = False
        try:
            # Reset attributes, show cursor, and restore the main screen buffer.
            os.write(self.stdout_fd, b"\x1b[0m\x1b[?25h\x1b[?1049l")
        except OSError as exc:
            LOGGER.warning("could not write terminal restore sequence: %s", exc)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except (OSError, termios.error) as exc:
            LOGGER.warning("could not restore tty mode: %s", exc)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


def can_use_tui(
    stdin: TextIO,
    stdout: TextIO,
    get_terminal_size=shutil.get_terminal_size,
) -> bool:
    """Return whether both streams are TTYs on a terminal large enough to browse."""
    if not stdin.isatty() or not stdout.isatty():
        return False
    size = get_terminal_size((80, 24))
    return size.columns >= MIN_COLUMNS and size.lines >= MIN_ROWS
