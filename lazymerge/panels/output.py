"""Output destination picker."""

from __future__ import annotations

from ..output import OutputDestination
from .base import PanelContext


class OutputPanel:
    title = "Output"

    def __init__(self, destination: OutputDestination = OutputDestination.FILE) -> None:
        self.destination = destination

    def title_text(self) -> str:
        return self.title

    def handle_input(self, key: str) -> bool:
        if key in {"LEFT", "h"}:
            self.destination = self.destination.toggled(-1)
            return True
        if key in {"RIGHT", "l", "TAB"}:
            self.destination = self.destination.toggled(1)
            return True
        return False

    def render_rows(self, context: PanelContext, width: int, rows: int, focused: bool) -> list[str]:
        if rows <= 0:
            return []
        theme = context.theme
        parts: list[str] = []
        for destination in OutputDestination:
            if destination is self.destination:
                label = f"(*) {destination.label}"
                style = theme.reverse if focused else theme.marker_on
                parts.append(f"{style}{label}{theme.reset}")
            else:
                parts.append(f"{theme.marker_off}( ) {destination.label}{theme.reset}")
        return ["   ".join(parts)]
