"""Immutable build configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, TypeVar
import logging

from .folders import Folder
from .tools import Tool

K = TypeVar("K")
V = TypeVar("V")


class ReadOnlyMapping(Mapping[K, V]):
    """Mapping view over a private copy of its source; every mutator raises ``TypeError``."""

    __slots__ = ("_data",)

    def __init__(self, source: Mapping[K, V] | None = None) -> None:
        self._data: Dict[K, V] = dict(source or {})

    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ReadOnlyMapping({self._data!r})"

    def _unsupported(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(f"{type(self).__name__} does not support modification")

    __setitem__ = _unsupported
    __delitem__ = _unsupported
    clear = _unsupported
    pop = _unsupported
    popitem = _unsupported
    setdefault = _unsupported
    update = _unsupported


@dataclass(frozen=True, slots=True)
class Configuration:
    name: str
    version: str
    folders: ReadOnlyMapping[Folder, Path]
    tools: ReadOnlyMapping[str, Tool]
    environment: ReadOnlyMapping[str, str]
    directory: Path
    level: int = logging.INFO
    handler: logging.Handler | None = None
