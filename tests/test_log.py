from __future__ import annotations

import io
import logging
import unittest

from buildshell.log import LogWriter, create_logger, parse_level


class ParseLevelTests(unittest.TestCase):
    def test_names_and_numbers(self) -> None:
        self.assertEqual(parse_level("info"), logging.INFO)
        self.assertEqual(parse_level(" WARNING "), logging.WARNING)
        self.assertEqual(parse_level(5), 5)

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            parse_level("chatty")
        with self.assertRaises(TypeError):
            parse_level(None)  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            parse_level(True)


class CreateLoggerTests(unittest.TestCase):
    def test_default_handler_and_isolation(self) -> None:
        first = create_logger("buildshell.demo", logging.INFO)
        second = create_logger("buildshell.demo", logging.INFO)
        self.assertIsNot(first, second)
        self.assertEqual(len(first.handlers), 1)
        self.assertIsInstance(first.handlers[0], logging.StreamHandler)
        self.assertIsNot(logging.getLogger("buildshell.demo"), first)

    def test_custom_handler_and_level(self) -> None:
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        logger = create_logger("buildshell.custom", logging.WARNING, handler)
        logger.info("hidden")
        logger.warning("shown")
        self.assertEqual(stream.getvalue(), "shown\n")


class LogWriterTests(unittest.TestCase):
    def test_logs_complete_lines_and_flushes_remainder(self) -> None:
        stream = io.StringIO()
        logger = create_logger("buildshell.writer", logging.DEBUG, logging.StreamHandler(stream))
        writer = LogWriter(logger, logging.INFO)
        writer.write("one\ntw")
        self.assertEqual(stream.getvalue(), "one\n")
        writer.write("o\r\nthree")
        writer.flush()
        self.assertEqual(stream.getvalue(), "one\ntwo\nthree\n")
        print("printed", file=writer)
        self.assertTrue(stream.getvalue().endswith("printed\n"))


if __name__ == "__main__":
    unittest.main()
