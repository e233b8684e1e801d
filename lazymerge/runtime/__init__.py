"""Public runtime orchestration entry points.

This package groups the controller (`App`), the focus cycle, the background
token counter and the host loop. Imports are lazy because panels depend on
``runtime.token_counts`` while ``runtime.app`` depends on panels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import App


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name == "App":
        from . import app as _app

        return _app.App
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "App",
    "run_main_loop",
]
