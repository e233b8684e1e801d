"""Panels: self-contained editing state plus row rendering.

Every panel exposes ``title_text``, ``handle_input`` and ``render_rows``;
cross-panel selection and token state live on the controller.
"""

from .base import Panel, PanelContext
from .filters import FiltersPanel
from .output import OutputPanel
from .source_files import SourceFilesPanel
from .text_input import OutputFilePanel, SourcePathPanel, TextInputPanel

__all__ = [
    "FiltersPanel",
    "OutputFilePanel",
    "OutputPanel",
    "Panel",
    "PanelContext",
    "SourceFilesPanel",
    "SourcePathPanel",
    "TextInputPanel",
]
