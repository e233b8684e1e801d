"""Value types and capability contract for text sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..errors import TextSourceError

DEFAULT_EXCLUDE_GLOBS: tuple[str, ...] = (
    ".git/",
    ".hg/",
    ".svn/",
    "__pycache__/",
    "node_modules/",
    ".venv/",
    "venv/",
    "*.pyc",
)


@dataclass(frozen=True)
class SourceFile:
    """One file snapshot produced by a single load.

    ``path`` is relative to the source root, uses ``/`` separators, and is the
    unique key within one loaded list.
    """

    path: str
    size: int | None = None

    @property
    def extension(self) -> str:
        """Return lower-cased suffix without the dot, or ``""`` when absent."""
        name = self.path.rsplit("/", 1)[-1]
        stem, dot, suffix = name.rpartition(".")
        if not dot or not stem:
            return ""
        return suffix.lower()


@dataclass(frozen=True)
class FilterConfig:
    """Which files a text source should return."""

    extensions: frozenset[str] = frozenset()
    exclude_globs: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS
    include_hidden: bool = False
    respect_gitignore: bool = True
    max_file_size: int | None = None

    def allows_extension(self, extension: str) -> bool:
        """Return whether ``extension`` passes the allow-list (empty means all)."""
        if not self.extensions:
            return True
        return extension.lower() in self.extensions


def normalize_extensions(values: object) -> frozenset[str]:
    """Turn user-provided extension strings into a lower-case dotless set."""
    if not isinstance(values, (list, tuple, set, frozenset)):
        return frozenset()
    out: set[str] = set()
    for value in values:
        if not isinstance(value, str):
            continue
        cleaned = value.strip().lstrip(".").lower()
        if cleaned:
            out.add(cleaned)
    return frozenset(out)


def display_path(path: str) -> str:
    """Return ``path`` with undecodable filename bytes shown as U+FFFD.

    ``os.walk`` keeps such bytes as lone surrogates, which cannot be encoded
    for the terminal or the merged document.
    """
    try:
        raw = path.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        raw = path.encode("utf-8", errors="replace")
    return raw.decode("utf-8", errors="replace")


class TextSource(Protocol):
    """Capability contract every content backend implements.

    Both calls may block on I/O and raise ``TextSourceError`` on failure.
    Implementations must be safe to call from worker threads.
    """

    def list_files(self, filter_config: FilterConfig) -> list[SourceFile]:
        ...

    def fetch_content(self, source_file: SourceFile) -> str:
        ...


@dataclass
class MemoryTextSource:
    """In-memory text source keyed by relative path.

    Useful for embedding lazymerge in other tools and for tests. Entries whose
    value is an exception instance raise ``TextSourceError`` when fetched.
    """

    contents: dict[str, object] = field(default_factory=dict)

    def list_files(self, filter_config: FilterConfig) -> list[SourceFile]:
        files = [
            SourceFile(path=path, size=len(value) if isinstance(value, str) else None)
            for path, value in self.contents.items()
        ]
        files = [source_file for source_file in files if filter_config.allows_extension(source_file.extension)]
        return sorted(files, key=lambda source_file: source_file.path.lower())

    def fetch_content(self, source_file: SourceFile) -> str:
        value = self.contents.get(source_file.path)
        if value is None:
            raise TextSourceError(f"not found: {source_file.path}")
        if isinstance(value, BaseException):
            raise TextSourceError(str(value)) from value
        return str(value)
