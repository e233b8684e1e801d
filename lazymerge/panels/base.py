"""Capability contract shared by all panels."""

from __future__ import annotations

from collections.abc import Sequence, Set
from dataclasses import dataclass
from typing import Protocol

from ..sources import SourceFile
from ..ui_theme import UITheme


@dataclass(frozen=True)
class PanelContext:
    """Read-only controller state panels may consult while drawing."""

    theme: UITheme
    loaded_files: Sequence[SourceFile]
    selected_extensions: Set[str]
    selected_files: Set[str]


class Panel(Protocol):
    def title_text(self) -> str:
        ...

    def handle_input(self, key: str) -> bool:
        ...

    def render_rows(self, context: PanelContext, width: int, rows: int, focused: bool) -> list[str]:
        ...
