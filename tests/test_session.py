"""Behavior tests for the interactive session driver.

The terminal, key source, terminal size, clipboard, and clock are all
injected so the loop runs headless and deterministically.
"""

from __future__ import annotations

import contextlib
import os
import signal
import unittest
from unittest import mock

from lazyfindings import input as input_mod
from lazyfindings.models import Finding, Fix, FixKind, Severity, group_by_severity
from lazyfindings.session import (
    COPIED_MESSAGE,
    COPY_FAILED_MESSAGE,
    NO_CLIPBOARD_MESSAGE,
    NO_INSTRUCTIONS_MESSAGE,
    BrowserSession,
    FlashTimer,
    SessionCallbacks,
    SessionOptions,
    SessionTerminated,
    browse_findings,
)
from lazyfindings.state import NavigationState, Screen
from lazyfindings.terminal import TerminalController
from lazyfindings.ui_theme import PLAIN_THEME

INSTRUCTIONS = "Add to the service:\n```yaml\nhealthcheck:\n  test: curl -f localhost\n```"


def _findings() -> list[Finding]:
    return [
        Finding(
            "E1",
            "Broken healthcheck",
            Severity.ERROR,
            "compose",
            "Healthcheck command fails.",
            fixes=(Fix("Fix the command", FixKind.MANUAL, INSTRUCTIONS),),
        ),
        Finding("E2", "No fixes here", Severity.ERROR, "compose", "Nothing to copy."),
        Finding("W1", "Missing USER", Severity.WARNING, "dockerfile", "Container runs as root."),
    ]


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextlib.contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Harness:
    """Scripted key source plus frame capture around one ``BrowserSession``."""

    def __init__(self, keys, *, sizes=None, copy_result=True, extract=None) -> None:
        self.keys = list(keys)
        self.sizes = list(sizes or [(80, 24)])
        self.frames: list[str] = []
        self.copied: list[str] = []
        self.clock = _Clock()
        self.copy_result = copy_result
        self.terminal = _FakeTerminal()
        self.state = NavigationState(
            categories=group_by_severity(_findings()),
            scan_dir="/repo",
            check_scope="All checks",
        )
        callbacks = SessionCallbacks(
            read_key=self._read_key,
            terminal_size=self._terminal_size,
            copy_text_to_clipboard=self._copy,
            clock=self.clock,
            write=self.frames.append,
            **({"extract_code_blocks": extract} if extract is not None else {}),
        )
        self.session = BrowserSession(
            self.state,
            self.terminal,
            stdin_fd=0,
            stdout_fd=1,
            options=SessionOptions(theme=PLAIN_THEME, handle_signals=False),
            callbacks=callbacks,
        )

    def _read_key(self, _fd: int, _timeout_ms: int | None) -> str:
        if not self.keys:
            return "EOF"
        key = self.keys.pop(0)
        if callable(key):
            return key()
        return key

    def _terminal_size(self) -> os.terminal_size:
        if len(self.sizes) > 1:
            return os.terminal_size(self.sizes.pop(0))
        return os.terminal_size(self.sizes[0])

    def _copy(self, text: str) -> bool:
        self.copied.append(text)
        return self.copy_result

    def advance(self, seconds: float):
        def tick() -> str:
            self.clock.now += seconds
            return ""

        return tick


class FlashTimerTests(unittest.TestCase):
    def test_expires_exactly_once(self) -> None:
        timer = FlashTimer()
        timer.arm(10.0, 2.0)

        self.assertFalse(timer.expired(11.9))
        self.assertTrue(timer.expired(12.0))
        self.assertFalse(timer.expired(13.0))
        self.assertFalse(timer.armed)

    def test_rearm_restarts_countdown(self) -> None:
        timer = FlashTimer()
        timer.arm(0.0, 2.0)
        timer.arm(1.5, 2.0)

        self.assertFalse(timer.expired(2.5))
        self.assertTrue(timer.expired(3.5))

    def test_cancel_disarms(self) -> None:
        timer = FlashTimer()
        timer.arm(0.0, 2.0)
        timer.cancel()

        self.assertFalse(timer.expired(100.0))


class CopyActionTests(unittest.TestCase):
    def _open_results(self, harness: _Harness, result_index: int = 0) -> None:
        harness.session.handle_key("ENTER")
        for _ in range(result_index):
            harness.session.handle_key("DOWN")

    def test_copy_success_flashes_confirmation(self) -> None:
        harness = _Harness([])
        self._open_results(harness)

        self.assertFalse(harness.session.handle_key("c"))

        self.assertEqual(harness.copied, ["healthcheck:\n  test: curl -f localhost"])
        self.assertEqual(harness.state.flash_message, COPIED_MESSAGE)
        self.assertTrue(harness.state.flash_ok)
        self.assertTrue(harness.session.flash_timer.armed)

    def test_copy_failure_flashes_error_and_keeps_navigation(self) -> None:
        harness = _Harness([], copy_result=False)
        self._open_results(harness)
        before = (harness.state.screen, harness.state.result_index, harness.state.detail_scroll)

        harness.session.handle_key("c")

        self.assertEqual(harness.state.flash_message, NO_CLIPBOARD_MESSAGE)
        self.assertFalse(harness.state.flash_ok)
        self.assertEqual((harness.state.screen, harness.state.result_index, harness.state.detail_scroll), before)

    def test_finding_without_instructions_reports_nothing_to_copy(self) -> None:
        harness = _Harness([])
        self._open_results(harness, result_index=1)

        harness.session.handle_key("c")

        self.assertEqual(harness.copied, [])
        self.assertEqual(harness.state.flash_message, NO_INSTRUCTIONS_MESSAGE)
        self.assertFalse(harness.state.flash_ok)

    def test_extraction_error_is_reported_as_flash(self) -> None:
        def explode(_text: str) -> str:
            raise RuntimeError("bad instructions")

        harness = _Harness([], extract=explode)
        self._open_results(harness)

        with self.assertLogs("lazyfindings.session", level="ERROR"):
            harness.session.handle_key("c")

        self.assertEqual(harness.state.flash_message, COPY_FAILED_MESSAGE)
        self.assertFalse(harness.state.flash_ok)

    def test_copy_key_on_main_screen_is_ignored(self) -> None:
        harness = _Harness([])

        self.assertFalse(harness.session.handle_key("c"))

        self.assertEqual(harness.copied, [])
        self.assertEqual(harness.state.flash_message, "")

    def test_other_keys_clear_flash(self) -> None:
        harness = _Harness([])
        self._open_results(harness)
        harness.session.handle_key("c")

        harness.session.handle_key("DOWN")

        self.assertEqual(harness.state.flash_message, "")
        self.assertFalse(harness.session.flash_timer.armed)


class SessionLoopTests(unittest.TestCase):
    def test_navigation_and_quit_restore_terminal(self) -> None:
        harness = _Harness(["DOWN", "ENTER", "q", "q"])

        harness.session.run()

        self.assertEqual((harness.terminal.entered, harness.terminal.exited), (1, 1))
        self.assertEqual(len(harness.frames), 4)
        self.assertIs(harness.state.screen, Screen.MAIN)
        self.assertEqual(harness.state.category_index, 1)

    def test_unrecognized_terminal_keys_on_main_keep_session_running(self) -> None:
        def decoded(payload: bytes):
            def read() -> str:
                read_fd, write_fd = os.pipe()
                try:
                    os.write(write_fd, payload)
                    return input_mod.read_key(read_fd, timeout_ms=20)
                finally:
                    os.close(read_fd)
                    os.close(write_fd)

            return read

        harness = _Harness([decoded(b"\x1b[1;5A"), decoded(b"\x1b[H"), decoded(b"\x1bOP"), "DOWN", "CTRL_C"])

        harness.session.run()

        self.assertIs(harness.state.screen, Screen.MAIN)
        self.assertEqual(harness.state.category_index, 1)
        self.assertEqual(len(harness.frames), 5)

    def test_timeouts_do_not_rerender(self) -> None:
        harness = _Harness(["", "", "", "CTRL_C"])

        harness.session.run()

        self.assertEqual(len(harness.frames), 1)

    def test_flash_expiry_rerenders_once(self) -> None:
        harness = _Harness(["ENTER", "c", "", None, "", "CTRL_C"])
        harness.keys[3] = harness.advance(5.0)

        harness.session.run()

        self.assertEqual(len(harness.frames), 4)
        self.assertIn(COPIED_MESSAGE, harness.frames[2])
        self.assertNotIn(COPIED_MESSAGE, harness.frames[3])
        self.assertEqual(harness.state.flash_message, "")

    def test_flash_timer_is_cancelled_on_exit(self) -> None:
        harness = _Harness(["ENTER", "c", "CTRL_C"])

        harness.session.run()
        frames = len(harness.frames)
        harness.session.render()

        self.assertFalse(harness.session.flash_timer.armed)
        self.assertEqual(len(harness.frames), frames)

    def test_resize_rerenders_without_state_change(self) -> None:
        harness = _Harness(["", "", "CTRL_C"], sizes=[(80, 24), (80, 24), (100, 30), (100, 30)])

        harness.session.run()

        self.assertEqual(len(harness.frames), 2)
        self.assertIs(harness.state.screen, Screen.MAIN)
        self.assertEqual(harness.state.category_index, 0)

    def test_terminating_signal_ends_session_cleanly(self) -> None:
        def terminate() -> str:
            raise SessionTerminated(signal.SIGTERM)

        harness = _Harness(["DOWN", terminate])

        harness.session.run()

        self.assertEqual(harness.terminal.exited, 1)
        harness.session.render()
        self.assertEqual(len(harness.frames), 2)

    def test_hangup_with_lost_terminal_returns_to_caller(self) -> None:
        def hangup() -> str:
            raise SessionTerminated(signal.SIGTERM)

        harness = _Harness([hangup])
        with mock.patch("lazyfindings.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "lazyfindings.terminal.tty.setraw"
        ), mock.patch("lazyfindings.terminal.os.write", side_effect=[None, OSError(5, "EIO")]), mock.patch(
            "lazyfindings.terminal.termios.tcsetattr"
        ) as setattr_mock:
            harness.session.terminal = TerminalController(stdin_fd=0, stdout_fd=1)
            with self.assertLogs("lazyfindings.terminal", level="WARNING"):
                harness.session.run()

        setattr_mock.assert_called_once()
        self.assertEqual(len(harness.frames), 1)

    def test_render_error_still_restores_terminal(self) -> None:
        harness = _Harness(["DOWN"])
        harness.session.callbacks = SessionCallbacks(
            read_key=harness.session.callbacks.read_key,
            terminal_size=harness.session.callbacks.terminal_size,
            write=mock.Mock(side_effect=RuntimeError("write failed")),
        )

        with self.assertRaises(RuntimeError):
            harness.session.run()

        self.assertEqual(harness.terminal.exited, 1)

    def test_signal_handlers_are_restored(self) -> None:
        harness = _Harness(["CTRL_C"])
        harness.session.options = SessionOptions(theme=PLAIN_THEME, handle_signals=True)
        previous = signal.getsignal(signal.SIGTERM)

        harness.session.run()

        self.assertEqual(signal.getsignal(signal.SIGTERM), previous)


class BrowseFindingsTests(unittest.TestCase):
    def test_empty_findings_return_without_touching_terminal(self) -> None:
        with mock.patch("lazyfindings.session.TerminalController") as terminal_cls, mock.patch(
            "lazyfindings.session.BrowserSession"
        ) as session_cls:
            browse_findings([], "/repo")

        terminal_cls.assert_not_called()
        session_cls.assert_not_called()

    def test_findings_are_grouped_and_browsed(self) -> None:
        terminal = _FakeTerminal()
        frames: list[str] = []
        callbacks = SessionCallbacks(
            read_key=lambda _fd, _timeout: "q",
            terminal_size=lambda: os.terminal_size((80, 24)),
            write=frames.append,
        )

        browse_findings(
            _findings(),
            "/repo",
            "Compose",
            options=SessionOptions(theme=PLAIN_THEME, handle_signals=False),
            callbacks=callbacks,
            terminal=terminal,
            stdin_fd=0,
            stdout_fd=1,
        )

        self.assertEqual(terminal.exited, 1)
        self.assertEqual(len(frames), 1)
        self.assertIn("Errors (2)", frames[0])
        self.assertIn("Scan:", frames[0])
        self.assertIn("Compose", frames[0])


if __name__ == "__main__":
    unittest.main()
