"""ANSI-aware text measurement for panel rendering.

Width math ignores escape sequences and counts East Asian wide characters as
two cells so boxes stay aligned with colored content.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return visible width of ``text`` with escape sequences stripped."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim and tabs expand to spaces.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        if col >= max_cols:
            i += 1
            continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            col = max_cols
            i += 1
            continue
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1
    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip or right-pad ``text`` to exactly ``width`` visible columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def slice_ansi_line(text: str, start_cols: int) -> str:
    """Return ``text`` from display column ``start_cols`` onward.

    The last SGR sequence seen before the cut is replayed so the remaining
    text keeps its style.
    """
    if not text:
        return ""
    start_cols = max(0, start_cols)
    out: list[str] = []
    pending_sgr = ""
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if col >= start_cols:
                    out.append(seq)
                elif seq.endswith("m"):
                    pending_sgr = seq
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col >= start_cols:
            out.append(" " * w if ch == "\t" else ch)
        elif col + w > start_cols:
            out.append(" " * (col + w - start_cols))
        col += w
        i += 1
    if pending_sgr and out:
        out.insert(0, pending_sgr)
    return "".join(out)
