"""Main interactive event loop for the terminal UI.

Each tick drains token-count results, redraws when something changed, runs at
most one round of pending reload/merge work under the ``processing`` gate, and
then waits briefly for a key.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..input import read_key
from .terminal import TerminalController

if TYPE_CHECKING:
    from .app import App

TICK_MS = 50


def run_pending_actions(app: App, redraw: Callable[[], None] | None = None) -> bool:
    """Run flagged reload/merge work synchronously.

    ``processing`` is raised for the duration (``redraw`` is called once so the
    overlay is visible) and always cleared afterwards. Returns whether any
    work ran.
    """
    if app.processing:
        return False
    if not (app.reload_files_needed or app.merge_needed):
        return False
    app.processing = True
    try:
        if redraw is not None:
            redraw()
        if app.reload_files_needed:
            app.reload_files_immediate()
        if app.merge_needed:
            app.merge_immediate()
    finally:
        app.processing = False
        app.dirty = True
    return True


def run_main_loop(
    app: App,
    terminal: TerminalController,
    stdin_fd: int,
    tick_ms: int = TICK_MS,
) -> None:
    """Run the TUI until the controller requests exit."""
    last_size: tuple[int, int] | None = None

    def redraw() -> None:
        term = shutil.get_terminal_size((80, 24))
        terminal.write(app.draw(term.columns, term.lines))

    with terminal.raw_mode():
        while not app.exit_requested:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                app.dirty = True
            app.process_token_count_results()
            if app.dirty:
                terminal.write(app.draw(*size))

            if run_pending_actions(app, redraw):
                continue

            key = read_key(stdin_fd, timeout_ms=tick_ms)
            if key:
                app.update(key)
