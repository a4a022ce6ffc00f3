"""Builder for the immutable configuration and the façade bound to it."""
from __future__ import annotations

from pathlib import Path
from typing import Dict
import logging
import os

from .command_runner import CommandRunner, SubprocessCommandRunner
from .config_loader import apply_config, load_config_file
from .configuration import Configuration, ReadOnlyMapping
from .folders import Folder, Location, resolve_folders
from .invocation import Invoker
from .log import create_logger, parse_level
from .tools import Tool, ToolRegistry

DEFAULT_VERSION = "1.0.0-SNAPSHOT"
DEFAULT_LEVEL = logging.INFO


class Builder:
    """Mutable staging area for a :class:`Configuration`.

    Every setter returns the builder itself. ``build()`` may be called any
    number of times; each call snapshots the current state.
    """

    def __init__(self) -> None:
        cwd = Path.cwd()
        self._name = cwd.name
        self._version = DEFAULT_VERSION
        self._level = DEFAULT_LEVEL
        self._handler: logging.Handler | None = None
        self._folders: Dict[Folder, Location] = {}
        self._tools = ToolRegistry.with_builtins()
        self._directory = cwd
        self._environment: Dict[str, str] = {}
        self._runner: CommandRunner = SubprocessCommandRunner()

    def name(self, value: str) -> "Builder":
        self._name = value
        return self

    def version(self, value: str) -> "Builder":
        self._version = value
        return self

    def level(self, level: int | str) -> "Builder":
        self._level = parse_level(level)
        return self

    def handler(self, handler: logging.Handler | None) -> "Builder":
        self._handler = handler
        return self

    def folder(self, folder: Folder, location: Location | str | os.PathLike[str]) -> "Builder":
        if not isinstance(location, Location):
            location = Location.of(location)
        self._folders[folder] = location
        return self

    def tool(self, tool: Tool) -> "Builder":
        self._tools.register(tool)
        return self

    def directory(self, path: str | os.PathLike[str]) -> "Builder":
        self._directory = Path(path)
        return self

    def env(self, key: str, value: str) -> "Builder":
        self._environment[str(key)] = str(value)
        return self

    def runner(self, runner: CommandRunner) -> "Builder":
        self._runner = runner
        return self

    def load(self, path: str | os.PathLike[str]) -> "Builder":
        apply_config(self, load_config_file(Path(path)))
        return self

    def configuration(self) -> Configuration:
        return Configuration(
            name=self._name,
            version=self._version,
            folders=ReadOnlyMapping(resolve_folders(self._folders)),
            tools=ReadOnlyMapping(self._tools.snapshot()),
            environment=ReadOnlyMapping(self._environment),
            directory=self._directory,
            level=self._level,
            handler=self._handler,
        )

    def build(self) -> "BuildShell":
        return BuildShell(self.configuration(), runner=self._runner)

    def __repr__(self) -> str:
        folders = {folder.name: str(location.path) for folder, location in self._folders.items()}
        return (
            f"Builder(name={self._name!r}, version={self._version!r}, "
            f"level={logging.getLevelName(self._level)!r}, handler={self._handler!r}, "
            f"folders={folders!r}, tools={sorted(self._tools.names())!r})"
        )


class BuildShell:
    """Root façade bound to one :class:`Configuration`."""

    def __init__(self, configuration: Configuration, *, runner: CommandRunner | None = None) -> None:
        self._configuration = configuration
        self._logger = create_logger(
            f"buildshell.{configuration.name or 'project'}",
            configuration.level,
            configuration.handler,
        )
        self._invoker = Invoker(configuration, runner or SubprocessCommandRunner(), self._logger)

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def path(self, folder: Folder) -> Path:
        return self._configuration.folders[folder]

    def call(self, name: str, *args: object) -> int:
        """Run tool ``name`` (or the external program ``name``) with ``args``.

        Returns 0; raises :class:`~buildshell.command_runner.CommandError` otherwise.
        External programs run in ``configuration.directory``; registered
        tools run in process and see the process working directory.
        """

        return self._invoker.call(name, *args)

    def __repr__(self) -> str:
        configuration = self._configuration
        return (
            f"BuildShell(name={configuration.name!r}, version={configuration.version!r}, "
            f"directory={str(configuration.directory)!r}, tools={sorted(configuration.tools)!r})"
        )
