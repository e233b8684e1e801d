"""Frame composition: boxed panels, hint row, status row, and overlay.

Every helper returns lists of display lines exactly ``width`` columns wide so
the controller can stack them vertically or side by side.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import clip_ansi_line, display_width, fit_ansi_line, slice_ansi_line
from .ui_theme import UITheme

OVERLAY_WIDTH = 30
OVERLAY_HEIGHT = 5


def box_lines(
    title: str,
    body: Sequence[str],
    width: int,
    height: int,
    focused: bool,
    theme: UITheme,
) -> list[str]:
    """Draw ``body`` inside a titled single-line border."""
    if width <= 0 or height <= 0:
        return []
    if width < 2 or height < 2:
        return [" " * width for _ in range(height)]
    inner = width - 2
    border = theme.border_focused if focused else theme.border
    title_style = theme.title_focused if focused else theme.title
    label = clip_ansi_line(f" {title} ", max(0, inner - 1)) if title else ""
    fill = "─" * max(0, inner - 1 - display_width(label))
    top = f"{border}┌─{theme.reset}{title_style}{label}{theme.reset}{border}{fill}┐{theme.reset}"
    if inner < 1:
        top = f"{border}┌┐{theme.reset}"
    out = [top]
    for row in range(height - 2):
        text = body[row] if row < len(body) else ""
        out.append(f"{border}│{theme.reset}{fit_ansi_line(text, inner)}{theme.reset}{border}│{theme.reset}")
    out.append(f"{border}└{'─' * inner}┘{theme.reset}")
    return out


def join_columns(left: Sequence[str], right: Sequence[str]) -> list[str]:
    """Place two equally tall column blocks side by side."""
    return [f"{a}{b}" for a, b in zip(left, right)]


def centered_line(text: str, width: int, style: str, reset: str) -> str:
    clipped = clip_ansi_line(text, width)
    pad = max(0, width - display_width(clipped))
    left = pad // 2
    return f"{' ' * left}{style}{clipped}{reset}{' ' * (pad - left)}"


def overlay_box(lines: list[str], text: str, columns: int, theme: UITheme) -> list[str]:
    """Stamp a centered message box over already composed ``lines``."""
    rows = len(lines)
    width = min(OVERLAY_WIDTH, columns)
    height = min(OVERLAY_HEIGHT, rows)
    if width < 2 or height < 2:
        return lines
    left = max(0, (columns - width) // 2)
    top = max(0, (rows - height) // 2)
    body = ["" for _ in range(max(0, height - 2))]
    if body:
        body[len(body) // 2] = f" {text}"
    box = box_lines("", body, width, height, True, theme)
    out = list(lines)
    for offset, box_line in enumerate(box):
        row = top + offset
        base = out[row]
        prefix = fit_ansi_line(base, left)
        suffix = slice_ansi_line(base, left + width)
        out[row] = f"{prefix}{theme.reset}{theme.overlay}{box_line}{theme.reset}{suffix}"
    return out


def compose_frame(lines: Sequence[str], theme: UITheme) -> str:
    """Join rows into one full-screen write starting from the home position."""
    out = ["\033[H\033[J"]
    for idx, line in enumerate(lines):
        if idx:
            out.append("\r\n")
        out.append(line)
        out.append(theme.reset)
    return "".join(out)
