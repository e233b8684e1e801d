"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens:
printable characters, ``ENTER``, ``ESC``, arrows, editing keys, and the
function keys ``F1`` to ``F10``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\x01": "CTRL_A",
    b"\x05": "CTRL_E",
    b"\x15": "CTRL_U",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

# ESC [ <letter>
_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
    b"Z": "BACKTAB",
}

# ESC O <letter>
_SS3_KEYS = {
    b"P": "F1",
    b"Q": "F2",
    b"R": "F3",
    b"S": "F4",
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

# ESC [ <number> ~
_TILDE_KEYS = {
    "1": "HOME",
    "2": "INSERT",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
    "7": "HOME",
    "8": "END",
    "11": "F1",
    "12": "F2",
    "13": "F3",
    "14": "F4",
    "15": "F5",
    "17": "F6",
    "18": "F7",
    "19": "F8",
    "20": "F9",
    "21": "F10",
}

# Linux console: ESC [ [ <letter>
_LINUX_CONSOLE_KEYS = {
    b"A": "F1",
    b"B": "F2",
    b"C": "F3",
    b"D": "F4",
    b"E": "F5",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, first: bytes) -> str:
    """Complete a multi-byte UTF-8 character whose lead byte is ``first``."""
    lead = first[0]
    if lead >= 0xF0:
        needed = 3
    elif lead >= 0xE0:
        needed = 2
    elif lead >= 0xC0:
        needed = 1
    else:
        needed = 0
    data = first
    for _ in range(needed):
        more = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    """Decode the remainder of an ``ESC [`` sequence."""
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[seq]
    if seq == b"[":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        return _LINUX_CONSOLE_KEYS.get(final or b"", "ESC")
    if not seq.isdigit():
        return "ESC"

    params = seq
    while len(params) < 16:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part == b"~":
            number = params.decode("ascii").split(";", 1)[0]
            return _TILDE_KEYS.get(number, "ESC")
        if part in _CSI_FINAL_KEYS:
            # Modified arrows / Home / End, e.g. ESC [ 1 ; 5 C.
            return _CSI_FINAL_KEYS[part]
        if part in {b"P", b"Q", b"R", b"S"}:
            return _SS3_KEYS[part]
        params += part
    return "ESC"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Return the next key token, or ``""`` when ``timeout_ms`` elapses first."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch != b"\x1b":
        if ch[0] < 0x20:
            return ""
        return _read_utf8_tail(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _SS3_KEYS.get(final, "ESC")
    _PENDING_BYTES.append(seq)
    return "ESC"
