from __future__ import annotations

import unittest

from lazymerge.ansi import display_width
from lazymerge.render import box_lines, centered_line, compose_frame, join_columns, overlay_box
from lazymerge.ui_theme import DEFAULT_THEME, PLAIN_THEME


class BoxRenderingTests(unittest.TestCase):
    def test_box_has_exact_size_and_title(self) -> None:
        lines = box_lines("Files", ["one", "two", "three"], 12, 4, False, DEFAULT_THEME)

        self.assertEqual(len(lines), 4)
        self.assertTrue(all(display_width(line) == 12 for line in lines))
        self.assertIn("Files", lines[0])
        self.assertIn("two", lines[2])

    def test_long_body_rows_are_clipped(self) -> None:
        lines = box_lines("", ["x" * 50], 10, 3, True, PLAIN_THEME)
        self.assertEqual(display_width(lines[1]), 10)

    def test_degenerate_sizes(self) -> None:
        self.assertEqual(box_lines("t", [], 0, 3, False, PLAIN_THEME), [])
        self.assertEqual(box_lines("t", [], 1, 3, False, PLAIN_THEME), [" ", " ", " "])

    def test_join_columns_and_centering(self) -> None:
        self.assertEqual(join_columns(["ab", "cd"], ["12", "34"]), ["ab12", "cd34"])
        self.assertEqual(centered_line("hi", 6, "", ""), "  hi  ")

    def test_overlay_keeps_row_width(self) -> None:
        lines = ["." * 40 for _ in range(10)]
        covered = overlay_box(lines, "Processing...", 40, PLAIN_THEME)

        self.assertTrue(any("Processing..." in line for line in covered))
        self.assertTrue(all(display_width(line) == 40 for line in covered))
        self.assertEqual(covered[0], lines[0])

    def test_compose_frame_homes_cursor(self) -> None:
        frame = compose_frame(["a", "b"], PLAIN_THEME)
        self.assertTrue(frame.startswith("\033[H\033[J"))
        self.assertIn("\r\n", frame)


if __name__ == "__main__":
    unittest.main()
