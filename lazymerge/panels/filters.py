"""Extension filter list.

Shows one row per extension present in the loaded files with a marker for
all / some / none of its files selected. Space on a row selects or deselects
every file with that extension.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..selection import loaded_extensions, toggle_extension
from ..sources import SourceFile
from .base import PanelContext
from .list_view import ListCursor


def extension_label(extension: str) -> str:
    return f".{extension}" if extension else "(none)"


class FiltersPanel(ListCursor):
    title = "Filters"

    def __init__(self) -> None:
        super().__init__()
        self.extensions: list[str] = []

    def item_count(self) -> int:
        return len(self.extensions)

    def title_text(self) -> str:
        return self.title

    def init_values(self, loaded_files: Sequence[SourceFile]) -> None:
        """Rebuild the extension list after a reload, keeping the highlight if possible."""
        current = self.extensions[self.selected_idx] if self.extensions else None
        self.extensions = loaded_extensions(loaded_files)
        if current in self.extensions:
            self.selected_idx = self.extensions.index(current)
        self.clamp()

    def highlighted_extension(self) -> str | None:
        if not self.extensions:
            return None
        self.clamp()
        return self.extensions[self.selected_idx]

    def toggle_selected(
        self,
        selected_extensions: set[str],
        selected_files: set[str],
        loaded_files: Sequence[SourceFile],
    ) -> None:
        extension = self.highlighted_extension()
        if extension is None:
            return
        toggle_extension(extension, selected_extensions, selected_files, loaded_files)

    def handle_input(self, key: str) -> bool:
        return self.handle_navigation(key)

    def render_rows(self, context: PanelContext, width: int, rows: int, focused: bool) -> list[str]:
        theme = context.theme
        if not self.extensions:
            return [f"{theme.dim}(no files){theme.reset}"][:rows]

        totals: dict[str, int] = {}
        chosen: dict[str, int] = {}
        for source_file in context.loaded_files:
            totals[source_file.extension] = totals.get(source_file.extension, 0) + 1
            if source_file.path in context.selected_files:
                chosen[source_file.extension] = chosen.get(source_file.extension, 0) + 1

        out: list[str] = []
        for idx in self.visible_range(rows):
            extension = self.extensions[idx]
            total = totals.get(extension, 0)
            picked = chosen.get(extension, 0)
            if picked and picked == total:
                marker = f"{theme.marker_on}[x]{theme.reset}"
            elif picked:
                marker = f"{theme.marker_partial}[-]{theme.reset}"
            else:
                marker = f"{theme.marker_off}[ ]{theme.reset}"
            label = f"{extension_label(extension)} ({picked}/{total})"
            label = label[: max(0, width - 4)]
            if focused and idx == self.selected_idx:
                label = f"{theme.reverse}{label}{theme.reset}"
            out.append(f"{marker} {label}")
        return out
