"""Text-source backends and the capability contract they implement.

The controller only depends on ``TextSource``; ``create_text_source`` picks a
concrete backend for a user-entered location.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import TextSourceError
from .local import LocalDirectorySource
from .types import (
    DEFAULT_EXCLUDE_GLOBS,
    FilterConfig,
    MemoryTextSource,
    SourceFile,
    TextSource,
    display_path,
    normalize_extensions,
)


def create_text_source(location: str) -> TextSource:
    """Open a text source for ``location`` or raise ``TextSourceError``."""
    raw = location.strip()
    if not raw:
        raise TextSourceError("empty source path")
    root = Path(raw).expanduser()
    try:
        resolved = root.resolve()
    except (OSError, RuntimeError) as exc:
        raise TextSourceError(f"cannot resolve {raw}: {exc}") from exc
    if not resolved.is_dir():
        raise TextSourceError(f"not a directory: {raw}")
    return LocalDirectorySource(resolved)


__all__ = [
    "DEFAULT_EXCLUDE_GLOBS",
    "FilterConfig",
    "LocalDirectorySource",
    "MemoryTextSource",
    "SourceFile",
    "TextSource",
    "create_text_source",
    "display_path",
    "normalize_extensions",
]
