"""Local-directory text source backed by ``os.walk``."""

from __future__ import annotations

import os
from pathlib import Path

import pathspec

from ..errors import TextSourceError
from ..gitignore import load_gitignore_matcher
from .types import FilterConfig, SourceFile


def read_text(path: Path) -> str:
    """Decode file bytes, trying common encodings before lossy UTF-8."""
    data = path.read_bytes()
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


class LocalDirectorySource:
    """Enumerate and read files below one directory root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"LocalDirectorySource({str(self.root)!r})"

    def _exclude_spec(self, filter_config: FilterConfig) -> pathspec.PathSpec:
        try:
            return pathspec.GitIgnoreSpec.from_lines(filter_config.exclude_globs)
        except ValueError as exc:
            raise TextSourceError(f"invalid exclude pattern: {exc}") from exc

    def list_files(self, filter_config: FilterConfig) -> list[SourceFile]:
        """Walk the root and return files accepted by ``filter_config``.

        Hidden entries, gitignored paths, exclusion globs, the extension
        allow-list, and the size cap are applied in that order. Results are
        sorted case-insensitively by path.
        """
        if not self.root.is_dir():
            raise TextSourceError(f"not a directory: {self.root}")

        exclude = self._exclude_spec(filter_config)
        ignore_matcher = load_gitignore_matcher(self.root) if filter_config.respect_gitignore else None
        files: list[SourceFile] = []
        walk_errors: list[OSError] = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=walk_errors.append):
            base = Path(dirpath)
            rel_base = base.relative_to(self.root).as_posix()
            rel_prefix = "" if rel_base == "." else rel_base + "/"
            if not filter_config.include_hidden:
                dirnames[:] = [name for name in dirnames if not name.startswith(".")]
                filenames = [name for name in filenames if not name.startswith(".")]
            dirnames[:] = [
                name
                for name in dirnames
                if not exclude.match_file(rel_prefix + name + "/")
                and not (ignore_matcher is not None and ignore_matcher.is_ignored(rel_prefix + name))
            ]
            dirnames.sort(key=str.lower)
            for filename in sorted(filenames, key=str.lower):
                relative = rel_prefix + filename
                if exclude.match_file(relative):
                    continue
                if ignore_matcher is not None and ignore_matcher.is_ignored(relative):
                    continue
                source_file = SourceFile(path=relative, size=self._file_size(base / filename))
                if not filter_config.allows_extension(source_file.extension):
                    continue
                if (
                    filter_config.max_file_size is not None
                    and source_file.size is not None
                    and source_file.size > filter_config.max_file_size
                ):
                    continue
                files.append(source_file)

        if walk_errors and not files:
            raise TextSourceError(f"cannot list {self.root}: {walk_errors[0]}")
        files.sort(key=lambda source_file: source_file.path.lower())
        return files

    @staticmethod
    def _file_size(path: Path) -> int | None:
        try:
            return int(path.stat().st_size)
        except OSError:
            return None

    def fetch_content(self, source_file: SourceFile) -> str:
        """Return decoded text for ``source_file`` or raise ``TextSourceError``."""
        target = (self.root / source_file.path).resolve()
        try:
            target.relative_to(self.root.resolve())
        except ValueError as exc:
            raise TextSourceError(f"path escapes source root: {source_file.path}") from exc
        try:
            return read_text(target)
        except OSError as exc:
            raise TextSourceError(f"{source_file.path}: {exc.strerror or exc}") from exc
