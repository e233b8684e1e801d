"""Gitignore-aware path filtering for directory sources.

Asks git for the ignored paths under a root once per load and answers
membership queries for relative paths during the directory walk.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def _is_within(path: Path, root: Path) -> bool:
    """Return whether ``path`` is at or under ``root``."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


@dataclass(frozen=True)
class GitIgnoreMatcher:
    """Ignored-path snapshot for one source root.

    Paths are stored relative to ``root`` with ``/`` separators so the walker
    can test entries without resolving them.
    """

    root: Path
    ignored_files: frozenset[str]
    ignored_dirs: frozenset[str]

    def is_ignored(self, relative_path: str) -> bool:
        """Return whether ``relative_path`` or one of its parents is ignored."""
        if relative_path in self.ignored_files or relative_path in self.ignored_dirs:
            return True
        parts = relative_path.split("/")
        for idx in range(1, len(parts)):
            if "/".join(parts[:idx]) in self.ignored_dirs:
                return True
        return False


def load_gitignore_matcher(root: Path) -> GitIgnoreMatcher | None:
    """Build a matcher by querying git for ignored files and directories.

    Returns ``None`` when git is unavailable, ``root`` is not inside a work
    tree, or any probing command fails.
    """
    if shutil.which("git") is None:
        return None

    root = root.resolve()
    try:
        top_proc = subprocess.run(
            ["git", "-C", str(root), "rev-parse", "--show-toplevel"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None

    top_level = top_proc.stdout.strip()
    if not top_level:
        return None
    repo_root = Path(top_level).resolve()
    if not _is_within(root, repo_root):
        return None

    try:
        proc = subprocess.run(
            [
                "git",
                "-C",
                str(repo_root),
                "ls-files",
                "-z",
                "--others",
                "-i",
                "--exclude-standard",
                "--directory",
            ],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        logger.debug("git ls-files failed under %s", repo_root)
        return None

    ignored_files: set[str] = set()
    ignored_dirs: set[str] = set()
    for raw in proc.stdout.split(b"\x00"):
        if not raw:
            continue
        rel = raw.decode("utf-8", errors="replace")
        is_dir = rel.endswith("/")
        abs_path = repo_root / rel.rstrip("/")
        if not _is_within(abs_path, root) or abs_path == root:
            continue
        relative = abs_path.relative_to(root).as_posix()
        if is_dir or abs_path.is_dir():
            ignored_dirs.add(relative)
        else:
            ignored_files.add(relative)

    return GitIgnoreMatcher(
        root=root,
        ignored_files=frozenset(ignored_files),
        ignored_dirs=frozenset(ignored_dirs),
    )
