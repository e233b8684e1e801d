"""Cursor and scroll bookkeeping for list panels."""

from __future__ import annotations


class ListCursor:
    """Highlighted row plus first visible row for a scrolling list."""

    def __init__(self) -> None:
        self.selected_idx = 0
        self.list_start = 0

    def item_count(self) -> int:
        raise NotImplementedError

    def clamp(self) -> None:
        count = self.item_count()
        self.selected_idx = max(0, min(self.selected_idx, count - 1)) if count else 0

    def move(self, delta: int) -> bool:
        """Move the highlight by ``delta`` rows; return whether it moved."""
        count = self.item_count()
        if not count:
            return False
        target = max(0, min(count - 1, self.selected_idx + delta))
        if target == self.selected_idx:
            return False
        self.selected_idx = target
        return True

    def handle_navigation(self, key: str, page_rows: int = 10) -> bool:
        """Apply a navigation key; return whether it was consumed."""
        if key in {"UP", "k"}:
            self.move(-1)
            return True
        if key in {"DOWN", "j"}:
            self.move(1)
            return True
        if key == "PAGE_UP":
            self.move(-max(1, page_rows))
            return True
        if key == "PAGE_DOWN":
            self.move(max(1, page_rows))
            return True
        if key in {"HOME", "g"}:
            self.selected_idx = 0
            return True
        if key in {"END", "G"}:
            self.selected_idx = max(0, self.item_count() - 1)
            return True
        return False

    def visible_range(self, rows: int) -> range:
        """Scroll so the highlight is visible and return indices to draw."""
        rows = max(1, rows)
        self.clamp()
        if self.selected_idx < self.list_start:
            self.list_start = self.selected_idx
        elif self.selected_idx >= self.list_start + rows:
            self.list_start = self.selected_idx - rows + 1
        self.list_start = max(0, min(self.list_start, max(0, self.item_count() - rows)))
        return range(self.list_start, min(self.item_count(), self.list_start + rows))
