"""Loading builder settings from TOML, JSON or YAML files."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping
import json
import tomllib

import yaml

from .folders import Folder, Location
from .tools import ModuleTool

if TYPE_CHECKING:
    from .shell import Builder


ConfigLoader = Callable[[Any], Mapping[str, Any]]


FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": lambda stream: tomllib.load(stream),
    ".json": lambda stream: json.load(stream),
    ".yaml": lambda stream: yaml.safe_load(stream),
    ".yml": lambda stream: yaml.safe_load(stream),
}
"""Mapping of file suffixes to loader callables."""


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Load and decode a configuration mapping from ``path``."""

    suffix = path.suffix.lower()
    loader = FILE_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(FILE_LOADERS))
        raise ValueError(
            f"Unsupported configuration file extension: {suffix}. Supported: {supported}"
        )

    mode = "rb" if suffix == ".toml" else "r"
    kwargs: Dict[str, Any] = {}
    if mode == "r":
        kwargs["encoding"] = "utf-8"

    with path.open(mode, **kwargs) as handle:
        data = loader(handle)

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")

    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"[{name}] must be a table")
    return value


def _folder(key: Any) -> Folder:
    try:
        return Folder[str(key).strip().upper()]
    except KeyError:
        available = ", ".join(folder.name for folder in Folder)
        raise ValueError(f"Unknown folder '{key}'. Available folders: {available}") from None


def _location(key: Any, value: Any) -> Location:
    if isinstance(value, str):
        return Location.of(value)
    if isinstance(value, Mapping):
        path = value.get("path")
        if not isinstance(path, str) or not path.strip():
            raise ValueError(f"folders.{key}.path is required")
        parent = value.get("parent")
        if parent:
            return Location.relative(_folder(parent), *Path(path).parts)
        return Location.of(path)
    raise TypeError(f"folders.{key} must be a path string or a table with 'path' and optional 'parent'")


def _tool(name: str, value: Any) -> ModuleTool:
    if isinstance(value, str):
        module = value
    elif isinstance(value, Mapping):
        module = value.get("module")
    else:
        raise TypeError(f"tools.{name} must be a module name or a table with 'module'")
    if not isinstance(module, str) or not module.strip():
        raise ValueError(f"tools.{name}.module is required")
    return ModuleTool(name, module.strip())


def apply_config(builder: "Builder", data: Mapping[str, Any]) -> "Builder":
    """Apply the ``project``, ``folders``, ``logging``, ``environment`` and ``tools`` tables."""

    project = _section(data, "project")
    if "name" in project:
        builder.name(str(project["name"]))
    if "version" in project:
        builder.version(str(project["version"]))
    if "directory" in project:
        builder.directory(str(project["directory"]))

    for key, value in _section(data, "folders").items():
        builder.folder(_folder(key), _location(key, value))

    logging_section = _section(data, "logging")
    if "level" in logging_section:
        builder.level(logging_section["level"])

    for key, value in _section(data, "environment").items():
        builder.env(str(key), str(value))

    for key, value in _section(data, "tools").items():
        builder.tool(_tool(str(key), value))

    return builder


__all__ = ["FILE_LOADERS", "apply_config", "load_config_file"]
