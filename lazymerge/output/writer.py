"""Merged-document builder and destination writer.

The merged artifact is Markdown: one ``## path`` section per file followed by
a fenced block whose language hint comes from the Pygments lexer registry.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import Path

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ..errors import LazyMergeError, MergeError
from ..sources import SourceFile, display_path
from .destination import OutputDestination

_BACKTICK_RUN_RE = re.compile(r"`{3,}")


@lru_cache(maxsize=512)
def language_hint(path: str) -> str:
    """Return the fence language tag for ``path`` or ``""`` when unknown."""
    name = path.rsplit("/", 1)[-1]
    try:
        lexer = get_lexer_for_filename(name)
    except ClassNotFound:
        return ""
    return lexer.aliases[0] if lexer.aliases else ""


def _fence_for(content: str) -> str:
    longest = max((len(match.group(0)) for match in _BACKTICK_RUN_RE.finditer(content)), default=2)
    return "`" * max(3, longest + 1)


def format_merged(contents: Mapping[str, str]) -> str:
    """Concatenate ``path -> content`` pairs into one Markdown document.

    Sections are emitted in case-insensitive path order so output is stable
    regardless of selection order.
    """
    sections: list[str] = []
    for path in sorted(contents, key=str.lower):
        content = contents[path]
        fence = _fence_for(content)
        body = content if content.endswith("\n") or not content else content + "\n"
        sections.append(f"## {display_path(path)}\n\n{fence}{language_hint(path)}\n{body}{fence}\n")
    return "\n".join(sections)


def write_merged(
    destination: OutputDestination,
    output_path: str,
    files: Mapping[str, SourceFile],
    fetch_content: Callable[[SourceFile], str],
    copy: Callable[[str], None],
) -> str:
    """Build the merged document and deliver it to ``destination``.

    ``FILE`` and ``FILE_AND_CLIPBOARD`` write ``output_path``; ``CLIPBOARD``
    copies through ``copy``. Copying for the dual destination is left to the
    caller so a clipboard failure cannot undo a completed write. Any failure,
    including one unreadable file, raises ``MergeError`` before anything is
    written.
    """
    if not files:
        raise MergeError("no files selected")

    contents: dict[str, str] = {}
    for path, source_file in files.items():
        try:
            contents[path] = fetch_content(source_file)
        except LazyMergeError as exc:
            raise MergeError(f"cannot read {path}: {exc}") from exc
        except (OSError, UnicodeError) as exc:
            raise MergeError(f"cannot read {path}: {exc}") from exc
    merged = format_merged(contents)

    if destination.writes_file:
        if not output_path.strip():
            raise MergeError("output file path is empty")
        target = Path(output_path).expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(merged, encoding="utf-8")
        except OSError as exc:
            raise MergeError(f"cannot write {target}: {exc.strerror or exc}") from exc
        except UnicodeError as exc:
            raise MergeError(f"cannot encode merged output for {target}: {exc}") from exc
    else:
        try:
            copy(merged)
        except (LazyMergeError, UnicodeError) as exc:
            raise MergeError(str(exc)) from exc
    return merged
