"""Where a merged artifact goes."""

from __future__ import annotations

from enum import Enum


class OutputDestination(Enum):
    FILE = "file"
    CLIPBOARD = "clipboard"
    FILE_AND_CLIPBOARD = "file_and_clipboard"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def writes_file(self) -> bool:
        return self is not OutputDestination.CLIPBOARD

    def toggled(self, step: int) -> OutputDestination:
        """Return the neighbouring destination, wrapping around."""
        members = list(OutputDestination)
        return members[(members.index(self) + step) % len(members)]

    @classmethod
    def parse(cls, value: object, default: OutputDestination | None = None) -> OutputDestination:
        """Parse a config or CLI value, falling back to ``default`` or ``FILE``."""
        fallback = default if default is not None else cls.FILE
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return fallback
        normalized = value.strip().lower().replace("-", "_").replace("+", "_and_")
        for member in cls:
            if member.value == normalized:
                return member
        return fallback


_LABELS = {
    OutputDestination.FILE: "File",
    OutputDestination.CLIPBOARD: "Clipboard",
    OutputDestination.FILE_AND_CLIPBOARD: "File + Clipboard",
}
