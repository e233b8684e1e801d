"""Interactive controller: focus routing, selection, counting, and drawing.

``App`` owns all UI state and is driven by the host loop: ``update`` for each
key, ``draw`` for each frame, and the ``*_immediate`` pipelines whenever the
matching one-shot flag is raised and no other pipeline is running.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable

from ..ansi import fit_ansi_line
from ..errors import MergeError
from ..output import OutputDestination, copy_clipboard, write_merged
from ..panels import (
    FiltersPanel,
    OutputFilePanel,
    OutputPanel,
    PanelContext,
    SourceFilesPanel,
    SourcePathPanel,
    TextInputPanel,
)
from ..render import box_lines, centered_line, compose_frame, join_columns, overlay_box
from ..selection import derive_selected_extensions, reconcile_selected_files
from ..sources import FilterConfig, SourceFile, TextSource, create_text_source, display_path
from ..tokens import DEFAULT_TOKEN_ENCODING, count_tokens as tiktoken_count
from ..ui_theme import UITheme, resolve_theme
from .config import DEFAULT_OUTPUT_PATH
from .focus import FocusedPanel, next_panel, output_file_visible, prev_panel
from .pipelines import MergeOutcome, merge_files, reload_files
from .token_counts import TokenCountDispatcher

logger = logging.getLogger(__name__)

FILTERS_WIDTH = 30
TEXT_INPUT_ROWS = 3
OUTPUT_ROWS = 3
PROCESSING_TEXT = "Processing..."

_HINTS = {
    FocusedPanel.SOURCE_PATH: "enter - focus Filters  •  F1 - reload  •  F2 - generate  •  F3 - clear  •  F10/esc - close",
    FocusedPanel.FILTERS: (
        "↑/↓ - navigate  •  space - (de)select  •  enter - focus Files  •  esc - focus Source  •  "
        "F1 - reload  •  F2 - generate  •  F10 - close"
    ),
    FocusedPanel.SOURCE_FILES: (
        "↑/↓ - navigate  •  space - (de)select  •  enter - count tokens & focus Output  •  "
        "esc - focus Filters  •  F1 - reload  •  F2 - generate  •  F10 - close"
    ),
    FocusedPanel.OUTPUT_FILE: "enter/F2 - generate  •  esc - focus Output  •  F1 - reload  •  F3 - clear  •  F10 - close",
}
_OUTPUT_FILE_HINT = (
    "←/→ - toggle  •  enter - focus Output File  •  esc - focus Files  •  F1 - reload  •  F2 - generate  •  F10 - close"
)
_OUTPUT_CLIPBOARD_HINT = "←/→ - toggle  •  enter/F2 - generate  •  esc - focus Files  •  F1 - reload  •  F10 - close"


class App:
    def __init__(
        self,
        source_path: str = "",
        output_path: str = DEFAULT_OUTPUT_PATH,
        destination: OutputDestination = OutputDestination.FILE,
        filter_config: FilterConfig | None = None,
        count_tokens: Callable[[str], int] | None = None,
        theme: UITheme | None = None,
        create_source: Callable[[str], TextSource] = create_text_source,
        writer: Callable[..., str] = write_merged,
        clipboard: Callable[[str], None] = copy_clipboard,
        on_destination_change: Callable[[OutputDestination], None] | None = None,
    ) -> None:
        self.source_path_panel = SourcePathPanel(source_path)
        self.filters_panel = FiltersPanel()
        self.source_files_panel = SourceFilesPanel()
        self.output_panel = OutputPanel(destination)
        self.output_file_panel = OutputFilePanel(output_path)
        self.panels = {
            FocusedPanel.SOURCE_PATH: self.source_path_panel,
            FocusedPanel.FILTERS: self.filters_panel,
            FocusedPanel.SOURCE_FILES: self.source_files_panel,
            FocusedPanel.OUTPUT: self.output_panel,
            FocusedPanel.OUTPUT_FILE: self.output_file_panel,
        }
        self.focused_panel = FocusedPanel.SOURCE_PATH

        self.loaded_files: list[SourceFile] = []
        self.selected_extensions: set[str] = set()
        self.selected_files: set[str] = set()
        self.filter_config = filter_config if filter_config is not None else FilterConfig()
        self.text_source: TextSource | None = None
        self.generation = 0

        self.processing = False
        self.exit_requested = False
        self.reload_files_needed = False
        self.merge_needed = False
        self.prev_source_path = source_path
        self.dirty = True

        self.status_message = ""
        self.status_is_error = False
        self.theme = theme if theme is not None else resolve_theme(None)

        if count_tokens is None:
            count_tokens = functools.partial(tiktoken_count, encoding=DEFAULT_TOKEN_ENCODING)
        self.dispatcher = TokenCountDispatcher(count_tokens)
        self._create_source = create_source
        self._writer = writer
        self._clipboard = clipboard
        self._on_destination_change = on_destination_change

    @property
    def destination(self) -> OutputDestination:
        return self.output_panel.destination

    def set_status(self, message: str, error: bool = False) -> None:
        # Messages may quote undecodable file names.
        self.status_message = display_path(message)
        self.status_is_error = error
        self.dirty = True

    # Key routing

    def update(self, key: str) -> None:
        """Route one decoded key to the global shortcuts or the focused panel."""
        if not key:
            return
        old_focused_panel = self.focused_panel
        if key == "F10":
            self.exit_requested = True
        elif key == "ESC":
            if self.focused_panel is FocusedPanel.SOURCE_PATH:
                self.exit_requested = True
            else:
                self.focused_panel = prev_panel(self.focused_panel, self.destination)
                self.set_cursor_to_end()
        elif key == "F1":
            if not self.processing:
                self.reload_files_needed = True
        elif key == "F2":
            if not self.processing:
                self.merge_needed = True
        elif key == "F3":
            panel = self.panels[self.focused_panel]
            if isinstance(panel, TextInputPanel):
                panel.clear()
        elif key == "ENTER":
            self.handle_enter()
        elif key == " " and self.focused_panel is FocusedPanel.FILTERS:
            self.filters_panel.toggle_selected(self.selected_extensions, self.selected_files, self.loaded_files)
            self.source_files_panel.update_title_sum(self.selected_files)
        elif key == " " and self.focused_panel is FocusedPanel.SOURCE_FILES:
            self.source_files_panel.toggle_selected(self.selected_extensions, self.selected_files, self.loaded_files)
            self.source_files_panel.update_title_sum(self.selected_files)
        else:
            self._handle_panel_key(key)

        if old_focused_panel is FocusedPanel.SOURCE_PATH and self.focused_panel is not FocusedPanel.SOURCE_PATH:
            if self.source_path_panel.value != self.prev_source_path:
                self.reload_files_needed = True
                self.prev_source_path = self.source_path_panel.value
        self.dirty = True

    def _handle_panel_key(self, key: str) -> None:
        before = self.destination
        self.panels[self.focused_panel].handle_input(key)
        if self.destination is not before and self._on_destination_change is not None:
            self._on_destination_change(self.destination)

    def handle_enter(self) -> None:
        if self.focused_panel is FocusedPanel.SOURCE_FILES:
            self.focused_panel = next_panel(self.focused_panel, self.destination)
            self.start_token_count_for_selected_files()
            self.set_cursor_to_end()
        elif self.focused_panel is FocusedPanel.OUTPUT:
            if self.destination is OutputDestination.CLIPBOARD:
                if not self.processing:
                    self.merge_needed = True
            else:
                self.focused_panel = next_panel(self.focused_panel, self.destination)
                self.set_cursor_to_end()
        elif self.focused_panel is FocusedPanel.OUTPUT_FILE:
            if not self.processing:
                self.merge_needed = True
        else:
            self.focused_panel = next_panel(self.focused_panel, self.destination)
            self.set_cursor_to_end()

    def set_cursor_to_end(self) -> None:
        panel = self.panels[self.focused_panel]
        if isinstance(panel, TextInputPanel):
            panel.set_cursor_to_end()

    # Pipelines

    def reload_files_immediate(self) -> None:
        """Reload the file list from the source path and reconcile selection.

        Every reload starts a new load generation so token-count results from
        earlier loads are discarded when they arrive.
        """
        self.reload_files_needed = False
        path = self.source_path_panel.value
        previous_loaded = {source_file.path for source_file in self.loaded_files}
        previous_selected = set(self.selected_files)

        self.text_source, self.loaded_files = reload_files(path, self.filter_config, self._create_source)
        self.prev_source_path = path
        self.generation += 1
        self.selected_files = reconcile_selected_files(self.loaded_files, previous_loaded, previous_selected)
        self.selected_extensions = derive_selected_extensions(self.loaded_files, self.selected_files)
        self.filters_panel.init_values(self.loaded_files)
        self.source_files_panel.init_values(self.loaded_files)
        self.source_files_panel.update_title_sum(self.selected_files)

        if self.text_source is None:
            self.set_status(f"Cannot open source: {path or '(empty)'}", error=True)
        else:
            self.set_status(f"Loaded {len(self.loaded_files)} file(s) from {path}")

    def merge_immediate(self) -> MergeOutcome | None:
        """Merge the current selection; failures go to the status row."""
        self.merge_needed = False
        try:
            outcome = merge_files(
                self.selected_files,
                self.loaded_files,
                self.destination,
                self.output_file_panel.value,
                self.text_source,
                writer=self._writer,
                clipboard=self._clipboard,
            )
        except MergeError as exc:
            logger.error("merge failed: %s", exc)
            self.set_status(f"Merge failed: {exc}", error=True)
            return None
        logger.info("merged %d file(s) to %s", outcome.file_count, outcome.destination.value)
        self.set_status(outcome.describe(), error=outcome.clipboard_error is not None)
        return outcome

    # Token counting

    def start_token_count_for_selected_files(self) -> list[str]:
        dispatched = self.dispatcher.dispatch(
            self.selected_files,
            self.loaded_files,
            self.text_source,
            self.source_files_panel.file_token_status,
            self.generation,
        )
        self.source_files_panel.update_title_sum(self.selected_files)
        return dispatched

    def process_token_count_results(self) -> bool:
        """Apply every queued result and refresh the title sum.

        Returns whether any status changed.
        """
        changed = False
        for result in self.dispatcher.drain_results():
            if self.source_files_panel.set_count_result(result, self.generation):
                changed = True
        self.source_files_panel.update_title_sum(self.selected_files)
        if changed:
            self.dirty = True
        return changed

    # Drawing

    def bottom_text(self) -> str:
        if self.focused_panel is FocusedPanel.OUTPUT:
            if self.destination is OutputDestination.CLIPBOARD:
                return _OUTPUT_CLIPBOARD_HINT
            return _OUTPUT_FILE_HINT
        return _HINTS[self.focused_panel]

    def _panel_box(self, focus: FocusedPanel, context: PanelContext, width: int, height: int) -> list[str]:
        panel = self.panels[focus]
        focused = self.focused_panel is focus
        body = panel.render_rows(context, max(0, width - 2), max(0, height - 2), focused)
        return box_lines(panel.title_text(), body, width, height, focused, self.theme)

    def draw(self, columns: int, rows: int) -> str:
        """Return one full ANSI frame for a ``columns`` x ``rows`` screen."""
        self.process_token_count_results()
        theme = self.theme
        columns = max(1, columns)
        rows = max(1, rows)
        show_output_file = output_file_visible(self.destination)
        fixed = TEXT_INPUT_ROWS + OUTPUT_ROWS + (TEXT_INPUT_ROWS if show_output_file else 0) + 2
        middle = max(0, rows - fixed)
        context = PanelContext(
            theme=theme,
            loaded_files=self.loaded_files,
            selected_extensions=self.selected_extensions,
            selected_files=self.selected_files,
        )

        lines = self._panel_box(FocusedPanel.SOURCE_PATH, context, columns, TEXT_INPUT_ROWS)
        filters_width = min(FILTERS_WIDTH, columns // 2)
        lines += join_columns(
            self._panel_box(FocusedPanel.FILTERS, context, filters_width, middle),
            self._panel_box(FocusedPanel.SOURCE_FILES, context, columns - filters_width, middle),
        )
        lines += self._panel_box(FocusedPanel.OUTPUT, context, columns, OUTPUT_ROWS)
        if show_output_file:
            lines += self._panel_box(FocusedPanel.OUTPUT_FILE, context, columns, TEXT_INPUT_ROWS)
        lines.append(centered_line(self.bottom_text(), columns, theme.hint, theme.reset))
        status_style = theme.status_error if self.status_is_error else theme.status_ok
        lines.append(fit_ansi_line(f"{status_style}{self.status_message}{theme.reset}", columns))

        lines = lines[:rows]
        while len(lines) < rows:
            lines.append(" " * columns)
        if self.processing:
            lines = overlay_box(lines, PROCESSING_TEXT, columns, theme)
        self.dirty = False
        return compose_frame(lines, theme)
