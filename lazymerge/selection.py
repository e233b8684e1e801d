"""Selection-set bookkeeping shared by the filters and files panels.

The controller owns two sets: selected extensions and selected file paths.
An extension counts as selected while at least one loaded file with that
extension is selected; file paths may only name currently loaded files.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from .sources import SourceFile


def reconcile_selected_files(
    loaded_files: Iterable[SourceFile],
    previous_loaded: Set[str],
    previous_selected: Set[str],
) -> set[str]:
    """Return the selection for a freshly loaded file list.

    Paths that disappeared are dropped, paths that were loaded before keep
    their selection state, and newly appearing paths start selected.
    """
    selected: set[str] = set()
    for source_file in loaded_files:
        path = source_file.path
        if path not in previous_loaded or path in previous_selected:
            selected.add(path)
    return selected


def derive_selected_extensions(
    loaded_files: Iterable[SourceFile],
    selected_files: Set[str],
) -> set[str]:
    """Return extensions with at least one selected loaded file."""
    return {source_file.extension for source_file in loaded_files if source_file.path in selected_files}


def loaded_extensions(loaded_files: Iterable[SourceFile]) -> list[str]:
    """Return distinct extensions in display order (``""`` last)."""
    extensions = {source_file.extension for source_file in loaded_files}
    return sorted(extensions, key=lambda ext: (ext == "", ext))


def toggle_extension(
    extension: str,
    selected_extensions: set[str],
    selected_files: set[str],
    loaded_files: Iterable[SourceFile],
) -> bool:
    """Select or deselect every loaded file with ``extension``.

    Returns the new selection state of the extension.
    """
    paths = [source_file.path for source_file in loaded_files if source_file.extension == extension]
    if not paths:
        selected_extensions.discard(extension)
        return False
    if extension in selected_extensions:
        selected_files.difference_update(paths)
        selected_extensions.discard(extension)
        return False
    selected_files.update(paths)
    selected_extensions.add(extension)
    return True


def toggle_file(
    path: str,
    selected_extensions: set[str],
    selected_files: set[str],
    loaded_files: Iterable[SourceFile],
) -> bool:
    """Flip one file's selection and keep the extension set in sync."""
    loaded = list(loaded_files)
    target = next((source_file for source_file in loaded if source_file.path == path), None)
    if target is None:
        return False
    if path in selected_files:
        selected_files.discard(path)
        now_selected = False
    else:
        selected_files.add(path)
        now_selected = True
    siblings = (source_file.path for source_file in loaded if source_file.extension == target.extension)
    if any(sibling in selected_files for sibling in siblings):
        selected_extensions.add(target.extension)
    else:
        selected_extensions.discard(target.extension)
    return now_selected
