"""Panel focus cycle.

Focus moves ``SOURCE_PATH -> FILTERS -> SOURCE_FILES -> OUTPUT -> OUTPUT_FILE``
and wraps. The output-file panel is hidden for clipboard-only output, so the
cycle skips it in both directions.
"""

from __future__ import annotations

from enum import Enum

from ..output import OutputDestination


class FocusedPanel(Enum):
    SOURCE_PATH = "source_path"
    FILTERS = "filters"
    SOURCE_FILES = "source_files"
    OUTPUT = "output"
    OUTPUT_FILE = "output_file"


def output_file_visible(destination: OutputDestination) -> bool:
    """Return whether the output-file panel takes part in the cycle."""
    return destination is not OutputDestination.CLIPBOARD


def next_panel(panel: FocusedPanel, destination: OutputDestination) -> FocusedPanel:
    """Return the panel after ``panel`` for the current destination."""
    if panel is FocusedPanel.SOURCE_PATH:
        return FocusedPanel.FILTERS
    if panel is FocusedPanel.FILTERS:
        return FocusedPanel.SOURCE_FILES
    if panel is FocusedPanel.SOURCE_FILES:
        return FocusedPanel.OUTPUT
    if panel is FocusedPanel.OUTPUT:
        return FocusedPanel.OUTPUT_FILE if output_file_visible(destination) else FocusedPanel.SOURCE_PATH
    return FocusedPanel.SOURCE_PATH


def prev_panel(panel: FocusedPanel, destination: OutputDestination) -> FocusedPanel:
    """Return the panel before ``panel`` for the current destination.

    ``OUTPUT_FILE`` always steps back to ``OUTPUT``; with clipboard-only output
    it is unreachable, so that branch only matters if focus was left there.
    """
    if panel is FocusedPanel.SOURCE_PATH:
        return FocusedPanel.OUTPUT_FILE if output_file_visible(destination) else FocusedPanel.OUTPUT
    if panel is FocusedPanel.FILTERS:
        return FocusedPanel.SOURCE_PATH
    if panel is FocusedPanel.SOURCE_FILES:
        return FocusedPanel.FILTERS
    return FocusedPanel.SOURCE_FILES if panel is FocusedPanel.OUTPUT else FocusedPanel.OUTPUT


__all__ = [
    "FocusedPanel",
    "next_panel",
    "output_file_visible",
    "prev_panel",
]
