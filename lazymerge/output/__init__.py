"""Output sinks for merged artifacts: file writer and clipboard."""

from .clipboard import copy_clipboard
from .destination import OutputDestination
from .writer import format_merged, language_hint, write_merged

__all__ = [
    "OutputDestination",
    "copy_clipboard",
    "format_merged",
    "language_hint",
    "write_merged",
]
