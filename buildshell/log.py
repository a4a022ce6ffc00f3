"""Logger construction and a text stream that writes into a logger."""
from __future__ import annotations

import io
import logging

DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"


def parse_level(value: int | str) -> int:
    """Return the numeric logging level for ``value`` (a number or a level name)."""

    if isinstance(value, bool):
        raise TypeError("Logging level must be an int or a level name")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
        raise ValueError(f"Unknown logging level: {value!r}")
    raise TypeError("Logging level must be an int or a level name")


def create_logger(name: str, level: int, handler: logging.Handler | None = None) -> logging.Logger:
    """Create a logger outside the global hierarchy.

    Without ``handler`` records go to standard error.
    """

    result = logging.Logger(name, level)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    result.addHandler(handler)
    return result


class LogWriter(io.TextIOBase):
    """Writable text stream that logs each complete line at ``level``."""

    def __init__(self, logger: logging.Logger, level: int) -> None:
        super().__init__()
        self._logger = logger
        self._level = level
        self._buffer = ""

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            self._logger.log(self._level, line.rstrip("\r"))
        return len(text)

    def flush(self) -> None:
        if self._buffer:
            self._logger.log(self._level, self._buffer)
            self._buffer = ""
