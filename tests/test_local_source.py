from __future__ import annotations

import os
import tempfile
import unittest
import warnings
from pathlib import Path
from unittest import mock

import pathspec

from lazymerge.errors import TextSourceError
from lazymerge.gitignore import GitIgnoreMatcher
from lazymerge.sources import FilterConfig, LocalDirectorySource, SourceFile, create_text_source, display_path


def _write(root: Path, relative: str, text: str = "x") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class LocalDirectorySourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        _write(self.root, "src/app.py", "print('hi')\n")
        _write(self.root, "src/util.PY")
        _write(self.root, "README.md", "# readme\n")
        _write(self.root, ".env", "SECRET=1")
        _write(self.root, ".hidden/inside.txt")
        _write(self.root, "node_modules/pkg/index.js")
        _write(self.root, "build/out.log", "x" * 5000)
        self.source = LocalDirectorySource(self.root)

    def _paths(self, filter_config: FilterConfig) -> list[str]:
        return [source_file.path for source_file in self.source.list_files(filter_config)]

    def test_default_listing_skips_hidden_and_excluded_entries(self) -> None:
        paths = self._paths(FilterConfig(respect_gitignore=False))
        self.assertEqual(paths, ["build/out.log", "README.md", "src/app.py", "src/util.PY"])

    def test_hidden_entries_can_be_included(self) -> None:
        paths = self._paths(FilterConfig(include_hidden=True, respect_gitignore=False))
        self.assertIn(".env", paths)
        self.assertIn(".hidden/inside.txt", paths)

    def test_extension_allow_list_is_case_insensitive(self) -> None:
        paths = self._paths(FilterConfig(extensions=frozenset({"py"}), respect_gitignore=False))
        self.assertEqual(paths, ["src/app.py", "src/util.PY"])

    def test_custom_excludes_and_size_cap(self) -> None:
        paths = self._paths(FilterConfig(exclude_globs=("src/",), max_file_size=100, respect_gitignore=False))
        self.assertEqual(paths, ["node_modules/pkg/index.js", "README.md"])

    def test_gitignored_paths_are_skipped(self) -> None:
        matcher = GitIgnoreMatcher(root=self.root, ignored_files=frozenset({"README.md"}), ignored_dirs=frozenset({"build"}))
        with mock.patch("lazymerge.sources.local.load_gitignore_matcher", return_value=matcher):
            paths = self._paths(FilterConfig())
        self.assertEqual(paths, ["src/app.py", "src/util.PY"])

    def test_sizes_are_recorded(self) -> None:
        files = {source_file.path: source_file for source_file in self.source.list_files(FilterConfig(respect_gitignore=False))}
        self.assertEqual(files["build/out.log"].size, 5000)

    def test_fetch_content_reads_text(self) -> None:
        self.assertEqual(self.source.fetch_content(SourceFile("src/app.py")), "print('hi')\n")

    def test_fetch_content_falls_back_for_invalid_utf8(self) -> None:
        (self.root / "bin.dat").write_bytes(b"ok\xff")
        self.assertEqual(self.source.fetch_content(SourceFile("bin.dat")), "ok�")

    def test_undecodable_file_name_is_listed_and_readable(self) -> None:
        raw_name = b"bad\xff.txt"
        try:
            with open(os.path.join(os.fsencode(self.root), raw_name), "wb") as handle:
                handle.write(b"payload")
        except OSError:
            self.skipTest("filesystem rejects non-UTF-8 names")
        name = os.fsdecode(raw_name)

        self.assertIn(name, self._paths(FilterConfig(respect_gitignore=False)))
        self.assertEqual(self.source.fetch_content(SourceFile(name)), "payload")
        self.assertEqual(display_path(name), "bad\ufffd.txt")

    def test_rejected_exclude_pattern_raises_text_source_error(self) -> None:
        with mock.patch.object(pathspec.GitIgnoreSpec, "from_lines", side_effect=ValueError("Invalid git pattern")):
            with self.assertRaises(TextSourceError):
                self._paths(FilterConfig(exclude_globs=("!",), respect_gitignore=False))

    def test_listing_uses_non_deprecated_pattern_factory(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            paths = self._paths(FilterConfig(exclude_globs=("src/", "*.log"), respect_gitignore=False))
        self.assertEqual(paths, ["node_modules/pkg/index.js", "README.md"])

    def test_fetch_missing_or_escaping_path_raises(self) -> None:
        with self.assertRaises(TextSourceError):
            self.source.fetch_content(SourceFile("missing.txt"))
        with self.assertRaises(TextSourceError):
            self.source.fetch_content(SourceFile("../outside.txt"))


class CreateTextSourceTests(unittest.TestCase):
    def test_directory_yields_local_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = create_text_source(tmp)
            self.assertIsInstance(source, LocalDirectorySource)

    def test_invalid_locations_raise(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            file_path = os.path.join(tmp, "f.txt")
            Path(file_path).write_text("x", encoding="utf-8")
            for location in ("", "   ", file_path, os.path.join(tmp, "missing")):
                with self.assertRaises(TextSourceError):
                    create_text_source(location)


class GitIgnoreMatcherTests(unittest.TestCase):
    def test_children_of_ignored_directories_are_ignored(self) -> None:
        matcher = GitIgnoreMatcher(root=Path("/r"), ignored_files=frozenset({"a.txt"}), ignored_dirs=frozenset({"out"}))
        self.assertTrue(matcher.is_ignored("a.txt"))
        self.assertTrue(matcher.is_ignored("out/deep/x.py"))
        self.assertFalse(matcher.is_ignored("outer/x.py"))


if __name__ == "__main__":
    unittest.main()
