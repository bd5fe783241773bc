"""Regression tests for raw-key decoding.

Covers ESC timing, arrow/paging sequences, and control-key token mapping.
"""

import os
import time
import unittest

from ccfg import input as input_mod


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()
        os.close(self.read_fd)
        os.close(self.write_fd)

    def feed(self, data: bytes) -> None:
        os.write(self.write_fd, data)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        self.feed(b"\x1b")
        started = time.monotonic()
        key = input_mod.read_key(self.read_fd, timeout_ms=20)
        elapsed = time.monotonic() - started

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_paging_sequences(self) -> None:
        self.feed(b"\x1b[A\x1b[B\x1bOC\x1b[5~\x1b[6~")
        keys = [input_mod.read_key(self.read_fd, timeout_ms=20) for _ in range(5)]
        self.assertEqual(keys, ["UP", "DOWN", "RIGHT", "PAGE_UP", "PAGE_DOWN"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.feed(b"\x1bq")
        first = input_mod.read_key(self.read_fd, timeout_ms=20)
        self.assertTrue(input_mod.has_pending_input())
        second = input_mod.read_key(self.read_fd, timeout_ms=20)

        self.assertEqual(first, "ESC")
        self.assertEqual(second, "q")
        self.assertFalse(input_mod.has_pending_input())

    def test_control_keys(self) -> None:
        self.feed(b"\x03\r\x7f\x15\t")
        keys = [input_mod.read_key(self.read_fd, timeout_ms=20) for _ in range(5)]
        self.assertEqual(keys, ["CTRL_C", "ENTER", "BACKSPACE", "CTRL_U", "TAB"])

    def test_multibyte_utf8_character(self) -> None:
        self.feed("é".encode("utf-8"))
        self.assertEqual(input_mod.read_key(self.read_fd, timeout_ms=20), "é")

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(input_mod.read_key(self.read_fd, timeout_ms=10), "")


if __name__ == "__main__":
    unittest.main()
