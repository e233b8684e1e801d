"""Reload and merge pipelines run by the host loop between ticks."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ..errors import ClipboardError, MergeError, TextSourceError
from ..output import OutputDestination, copy_clipboard, write_merged
from ..sources import FilterConfig, SourceFile, TextSource, create_text_source

logger = logging.getLogger(__name__)


def reload_files(
    path: str,
    filter_config: FilterConfig,
    create_source: Callable[[str], TextSource] = create_text_source,
) -> tuple[TextSource | None, list[SourceFile]]:
    """Open ``path`` and list its files.

    Never raises for an unusable source: construction failure yields
    ``(None, [])`` and a listing failure yields ``(source, [])``.
    """
    try:
        source = create_source(path)
    except TextSourceError as exc:
        logger.warning("cannot open source %r: %s", path, exc)
        return None, []
    try:
        files = source.list_files(filter_config)
    except TextSourceError as exc:
        logger.warning("cannot list files in %r: %s", path, exc)
        return source, []
    logger.info("loaded %d file(s) from %s", len(files), path)
    return source, files


@dataclass(frozen=True)
class MergeOutcome:
    merged: str
    output_path: str
    destination: OutputDestination
    clipboard_error: str | None = None
    file_count: int = 0

    def describe(self) -> str:
        """Return a one-line status message for the user."""
        size = f"{len(self.merged):,} chars"
        if self.destination is OutputDestination.CLIPBOARD:
            return f"Copied {size} to clipboard"
        text = f"Wrote {size} to {self.output_path}"
        if self.destination is OutputDestination.FILE_AND_CLIPBOARD:
            if self.clipboard_error:
                return f"{text}; clipboard failed: {self.clipboard_error}"
            return f"{text} and clipboard"
        return text


def merge_files(
    selected_files: Iterable[str],
    loaded_files: Sequence[SourceFile],
    destination: OutputDestination,
    output_path: str,
    text_source: TextSource | None,
    writer: Callable[..., str] = write_merged,
    clipboard: Callable[[str], None] = copy_clipboard,
) -> MergeOutcome:
    """Merge the selected loaded files into ``destination``.

    Raises ``MergeError`` when there is no source or the writer fails. For
    ``FILE_AND_CLIPBOARD`` the clipboard copy happens after the file write, and
    a copy failure is recorded on the outcome instead of raised.
    """
    if text_source is None:
        raise MergeError("no source loaded")
    selected = set(selected_files)
    files = {source_file.path: source_file for source_file in loaded_files if source_file.path in selected}
    merged = writer(destination, output_path, files, text_source.fetch_content, clipboard)

    clipboard_error: str | None = None
    if destination is OutputDestination.FILE_AND_CLIPBOARD:
        try:
            clipboard(merged)
        except ClipboardError as exc:
            clipboard_error = str(exc) or type(exc).__name__
            logger.warning("clipboard copy failed after writing %s: %s", output_path, clipboard_error)
    return MergeOutcome(
        merged=merged,
        output_path=output_path,
        destination=destination,
        clipboard_error=clipboard_error,
        file_count=len(files),
    )
