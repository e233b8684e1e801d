"""Regression tests for raw-key decoding.

Covers ESC timing, arrow and function-key sequences, and control-key token
mapping used by the controller.
"""

import os
import time
import unittest

from lazymerge import input as input_mod


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _decode(self, payload: bytes, count: int = 1) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._decode(b"\x1b")
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._decode(b"\x1ba", count=2), ["ESC", "a"])

    def test_function_keys_in_both_encodings(self) -> None:
        self.assertEqual(self._decode(b"\x1bOP"), ["F1"])
        self.assertEqual(self._decode(b"\x1bOQ"), ["F2"])
        self.assertEqual(self._decode(b"\x1bOR"), ["F3"])
        self.assertEqual(self._decode(b"\x1b[11~"), ["F1"])
        self.assertEqual(self._decode(b"\x1b[12~"), ["F2"])
        self.assertEqual(self._decode(b"\x1b[13~"), ["F3"])
        self.assertEqual(self._decode(b"\x1b[21~"), ["F10"])
        self.assertEqual(self._decode(b"\x1b[[A"), ["F1"])

    def test_navigation_and_editing_sequences(self) -> None:
        self.assertEqual(self._decode(b"\x1b[A"), ["UP"])
        self.assertEqual(self._decode(b"\x1b[D"), ["LEFT"])
        self.assertEqual(self._decode(b"\x1b[H"), ["HOME"])
        self.assertEqual(self._decode(b"\x1b[4~"), ["END"])
        self.assertEqual(self._decode(b"\x1b[3~"), ["DELETE"])
        self.assertEqual(self._decode(b"\x1b[5~"), ["PAGE_UP"])
        self.assertEqual(self._decode(b"\x1b[1;5C"), ["RIGHT"])

    def test_control_keys(self) -> None:
        self.assertEqual(self._decode(b"\r"), ["ENTER"])
        self.assertEqual(self._decode(b"\n"), ["ENTER"])
        self.assertEqual(self._decode(b"\x7f"), ["BACKSPACE"])
        self.assertEqual(self._decode(b"\t"), ["TAB"])
        self.assertEqual(self._decode(b" "), [" "])

    def test_multibyte_character_is_decoded_whole(self) -> None:
        self.assertEqual(self._decode("é".encode("utf-8")), ["é"])

    def test_timeout_without_input_returns_empty(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertEqual(input_mod.read_key(read_fd, timeout_ms=5), "")
        finally:
            os.close(read_fd)
            os.close(write_fd)


if __name__ == "__main__":
    unittest.main()
