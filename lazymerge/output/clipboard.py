"""System clipboard sink."""

from __future__ import annotations

import pyperclip

from ..errors import ClipboardError


def copy_clipboard(text: str) -> None:
    """Copy ``text`` to the clipboard or raise ``ClipboardError``."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"clipboard unavailable: {exc}") from exc
