"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, shift/alt arrow combos, and page keys. Raw mode
disables signal generation, so Ctrl+C arrives here as the ``CTRL_C`` token.
Escape sequences that are not recognized are consumed whole and decode to
``UNKNOWN``, which no screen binds.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
UNKNOWN_KEY = "UNKNOWN"
_CSI_MAX_LENGTH = 16
_PENDING_BYTES: list[bytes] = []

_SINGLE_BYTE_KEYS = {
    b"\x03": "CTRL_C",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\t": "TAB",
}
_ARROW_KEYS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}
_TILDE_KEYS = {b"5": "PAGE_UP", b"6": "PAGE_DOWN", b"3": "DELETE"}
_MODIFIER_PREFIXES = {b"2": "SHIFT_", b"3": "ALT_", b"9": "ALT_"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, first: bytes) -> bytes:
    lead = first[0]
    if lead >= 0xF0:
        extra = 3
    elif lead >= 0xE0:
        extra = 2
    elif lead >= 0xC0:
        extra = 1
    else:
        return first
    data = first
    for _ in range(extra):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data


def _read_csi_body(fd: int) -> tuple[bytes, bytes] | None:
    """Read CSI parameter bytes up to and including the final byte (``@``-``~``)."""
    params = b""
    while len(params) < _CSI_MAX_LENGTH:
        ch = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if ch is None:
            return None
        if 0x40 <= ch[0] <= 0x7E:
            return params, ch
        params += ch
    return None


def _decode_csi(fd: int) -> str:
    body = _read_csi_body(fd)
    if body is None:
        return UNKNOWN_KEY
    params, final = body
    if final in _ARROW_KEYS:
        if params in (b"", b"1"):
            return _ARROW_KEYS[final]
        # ESC [ 1 ; <modifier> <arrow>
        prefix, _, modifier = params.partition(b";")
        if prefix == b"1" and modifier in _MODIFIER_PREFIXES:
            return _MODIFIER_PREFIXES[modifier] + _ARROW_KEYS[final]
        return UNKNOWN_KEY
    if final == b"~" and params in _TILDE_KEYS:
        return _TILDE_KEYS[params]
    return UNKNOWN_KEY


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read and decode one key token from ``fd``.

    Returns ``""`` when ``timeout_ms`` elapses without input and ``"EOF"``
    when the input stream has closed. ``"ESC"`` is only returned for a lone
    escape byte.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return "EOF"

    if ch in _SINGLE_BYTE_KEYS:
        return _SINGLE_BYTE_KEYS[ch]

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch).decode("utf-8", errors="replace")

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"O":
        # SS3 keys: application cursor arrows ESC O A..D, F1-F4 ESC O P..S.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return UNKNOWN_KEY
        return _ARROW_KEYS.get(final, UNKNOWN_KEY)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    # Alt+key chord.
    _read_utf8_tail(fd, seq)
    return UNKNOWN_KEY
