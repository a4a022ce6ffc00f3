"""Catalog of the named project folders and their default locations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Mapping
import os


class Folder(Enum):
    """Logical project directories.

    Each member carries its default location: a path relative to the working
    directory, or a path below another member (named by its first element).
    """

    AUXILIARY = (None, ".buildshell")
    DEPENDENCIES = ("AUXILIARY", "dependencies")
    TOOLS = ("AUXILIARY", "tools")
    SOURCE = (None, "src")
    TESTS = (None, "tests")
    OUTPUT = (None, "build")
    OUTPUT_COMPILED = ("OUTPUT", "compiled")
    OUTPUT_PACKAGES = ("OUTPUT", "packages")
    OUTPUT_DOCS = ("OUTPUT", "docs")
    OUTPUT_TESTS = ("OUTPUT", "tests")

    def __init__(self, parent: str | None, *parts: str) -> None:
        self._parent_name = parent
        self._parts = parts

    @property
    def parent(self) -> "Folder | None":
        return Folder[self._parent_name] if self._parent_name else None

    @property
    def default_location(self) -> "Location":
        parent = self.parent
        if parent is None:
            return Location.of(Path(*self._parts))
        return Location.relative(parent, *self._parts)


@dataclass(frozen=True, slots=True)
class Location:
    """A folder location: a concrete path, or a path below another folder."""

    path: Path
    parent: Folder | None = None

    @classmethod
    def of(cls, path: str | os.PathLike[str]) -> "Location":
        return cls(path=Path(path))

    @classmethod
    def relative(cls, parent: Folder, *parts: str) -> "Location":
        return cls(path=Path(*parts), parent=parent)

    def resolve(self, lookup: Callable[[Folder], Path]) -> Path:
        if self.parent is None:
            return self.path
        return lookup(self.parent) / self.path


def default_path(folder: Folder) -> Path:
    """Return the default path of ``folder`` with parents at their defaults."""

    return folder.default_location.resolve(default_path)


def resolve_folders(overrides: Mapping[Folder, Location] | None = None) -> Dict[Folder, Path]:
    """Resolve every folder, preferring ``overrides`` over catalog defaults."""

    overrides = overrides or {}
    resolved: Dict[Folder, Path] = {}
    visiting: List[Folder] = []

    def visit(folder: Folder) -> Path:
        if folder in resolved:
            return resolved[folder]
        if folder in visiting:
            cycle = " -> ".join(item.name for item in [*visiting, folder])
            raise ValueError(f"Folder location cycle detected: {cycle}")
        visiting.append(folder)
        location = overrides.get(folder) or folder.default_location
        path = location.resolve(visit)
        visiting.pop()
        resolved[folder] = path
        return path

    for folder in Folder:
        visit(folder)
    return resolved


__all__ = ["Folder", "Location", "default_path", "resolve_folders"]
