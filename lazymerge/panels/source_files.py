"""File list with per-file token status and the aggregate title."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..ansi import char_display_width, clip_ansi_line
from ..runtime.token_counts import (
    NOT_COUNTED,
    Counted,
    Counting,
    Failed,
    TokenCountResult,
    TokenStatus,
    TokenSummary,
    apply_token_count_result,
    summarize_token_counts,
)
from ..selection import toggle_file
from ..sources import SourceFile, display_path
from .base import PanelContext
from .list_view import ListCursor

BADGE_WIDTH = 9


class SourceFilesPanel(ListCursor):
    title = "Files"

    def __init__(self) -> None:
        super().__init__()
        self.files: list[SourceFile] = []
        self.file_token_status: dict[str, TokenStatus] = {}
        self.summary = TokenSummary()
        self.selected_count = 0

    def item_count(self) -> int:
        return len(self.files)

    def init_values(self, loaded_files: Sequence[SourceFile]) -> None:
        """Adopt a new file list; every path starts ``NotCounted``."""
        current = self.highlighted_path()
        self.files = list(loaded_files)
        self.file_token_status = {source_file.path: NOT_COUNTED for source_file in self.files}
        self.summary = TokenSummary()
        paths = [source_file.path for source_file in self.files]
        if current in paths:
            self.selected_idx = paths.index(current)
        self.clamp()

    def highlighted_path(self) -> str | None:
        if not self.files:
            return None
        self.clamp()
        return self.files[self.selected_idx].path

    def toggle_selected(
        self,
        selected_extensions: set[str],
        selected_files: set[str],
        loaded_files: Sequence[SourceFile],
    ) -> None:
        path = self.highlighted_path()
        if path is None:
            return
        toggle_file(path, selected_extensions, selected_files, loaded_files)

    def set_count_result(self, result: TokenCountResult, generation: int) -> bool:
        return apply_token_count_result(self.file_token_status, result, generation)

    def update_title_sum(self, selected_files: Iterable[str]) -> None:
        selected = list(selected_files)
        self.selected_count = len(selected)
        self.summary = summarize_token_counts(self.file_token_status, selected)

    def title_text(self) -> str:
        text = f"{self.title} ({self.selected_count}/{len(self.files)})"
        summary = self.summary
        if summary.pending and not summary.counted and not summary.failed:
            return f"{text} - counting..."
        described = summary.describe()
        return f"{text} - {described}" if described else text

    def handle_input(self, key: str) -> bool:
        return self.handle_navigation(key)

    @staticmethod
    def _badge(status: TokenStatus | None, context: PanelContext) -> str:
        theme = context.theme
        if isinstance(status, Counted):
            return f"{theme.token_count}{status.count:>{BADGE_WIDTH},}{theme.reset}"
        if isinstance(status, Counting):
            return f"{theme.token_pending}{'...':>{BADGE_WIDTH}}{theme.reset}"
        if isinstance(status, Failed):
            return f"{theme.token_failed}{'err':>{BADGE_WIDTH}}{theme.reset}"
        return f"{theme.dim}{'-':>{BADGE_WIDTH}}{theme.reset}"

    def render_rows(self, context: PanelContext, width: int, rows: int, focused: bool) -> list[str]:
        theme = context.theme
        if not self.files:
            return [f"{theme.dim}(no files loaded){theme.reset}"][:rows]
        out: list[str] = []
        name_width = max(1, width - 4 - BADGE_WIDTH - 1)
        for idx in self.visible_range(rows):
            source_file = self.files[idx]
            if source_file.path in context.selected_files:
                marker = f"{theme.marker_on}[x]{theme.reset}"
            else:
                marker = f"{theme.marker_off}[ ]{theme.reset}"
            name = clip_ansi_line(display_path(source_file.path), name_width)
            padding = " " * max(0, name_width - sum(char_display_width(ch, 0) for ch in name))
            if focused and idx == self.selected_idx:
                name = f"{theme.reverse}{name}{theme.reset}"
            badge = self._badge(self.file_token_status.get(source_file.path), context)
            out.append(f"{marker} {name}{padding} {badge}")
        return out

    def failure_for(self, path: str) -> str | None:
        status = self.file_token_status.get(path)
        return status.message if isinstance(status, Failed) else None
