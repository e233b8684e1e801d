"""Single-line text input shared by the source-path and output-file panels."""

from __future__ import annotations

from .base import PanelContext


class TextInputPanel:
    """Editable one-line value with a caret."""

    title = ""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.cursor_pos = len(value)

    def clear(self) -> None:
        self.value = ""
        self.cursor_pos = 0

    def set_cursor_to_end(self) -> None:
        self.cursor_pos = len(self.value)

    def handle_input(self, key: str) -> bool:
        """Apply one editing key; return whether it was consumed."""
        self.cursor_pos = max(0, min(self.cursor_pos, len(self.value)))
        if key == "LEFT":
            self.cursor_pos = max(0, self.cursor_pos - 1)
            return True
        if key == "RIGHT":
            self.cursor_pos = min(len(self.value), self.cursor_pos + 1)
            return True
        if key in {"HOME", "CTRL_A"}:
            self.cursor_pos = 0
            return True
        if key in {"END", "CTRL_E"}:
            self.cursor_pos = len(self.value)
            return True
        if key == "BACKSPACE":
            if self.cursor_pos > 0:
                self.value = self.value[: self.cursor_pos - 1] + self.value[self.cursor_pos :]
                self.cursor_pos -= 1
            return True
        if key == "DELETE":
            self.value = self.value[: self.cursor_pos] + self.value[self.cursor_pos + 1 :]
            return True
        if key == "CTRL_U":
            self.value = self.value[self.cursor_pos :]
            self.cursor_pos = 0
            return True
        if len(key) == 1 and key.isprintable():
            self.value = self.value[: self.cursor_pos] + key + self.value[self.cursor_pos :]
            self.cursor_pos += 1
            return True
        return False

    def title_text(self) -> str:
        return self.title

    def render_rows(self, context: PanelContext, width: int, rows: int, focused: bool) -> list[str]:
        return [self.render_value(width, focused)] if rows > 0 else []

    def render_value(self, width: int, focused: bool) -> str:
        """Return the visible slice of the value, keeping the caret in view.

        When focused the caret cell is wrapped in reverse video.
        """
        width = max(1, width)
        value = self.value
        cursor = max(0, min(self.cursor_pos, len(value)))
        start = max(0, cursor - width + 1)
        visible = value[start : start + width]
        if not focused:
            return visible
        local = cursor - start
        caret_char = visible[local] if local < len(visible) else " "
        return visible[:local] + "\033[7m" + caret_char + "\033[27m" + visible[local + 1 :]


class SourcePathPanel(TextInputPanel):
    title = "Source"


class OutputFilePanel(TextInputPanel):
    title = "Output File"
