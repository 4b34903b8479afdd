"""Best-effort clipboard writes through platform clipboard tools."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

LOGGER = logging.getLogger(__name__)


def clipboard_commands() -> list[list[str]]:
    """Return candidate clipboard commands for the current platform, in try order."""
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["clip.exe"],
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> bool:
    """Copy ``text`` with the first working clipboard tool.

    Tools that are not installed are skipped. Returns ``False`` when no tool
    accepted the text; never raises.
    """
    if not text:
        return False

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            LOGGER.debug("clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            LOGGER.info("copied %d characters with %s", len(text), command[0])
            return True
        LOGGER.debug("clipboard command %s exited with %s", command[0], proc.returncode)
    LOGGER.info("no clipboard tool accepted the text")
    return False
