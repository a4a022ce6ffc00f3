"""Build configuration and tool invocation core."""
from __future__ import annotations

from .command_runner import CommandError, CommandResult, RecordingCommandRunner, SubprocessCommandRunner
from .configuration import Configuration, ReadOnlyMapping
from .folders import Folder, Location, default_path
from .shell import DEFAULT_VERSION, BuildShell, Builder
from .tools import ModuleTool, PythonTool, Tool, ToolRegistry

__all__ = [
    "BuildShell",
    "Builder",
    "CommandError",
    "CommandResult",
    "Configuration",
    "DEFAULT_VERSION",
    "Folder",
    "Location",
    "ModuleTool",
    "PythonTool",
    "ReadOnlyMapping",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "Tool",
    "ToolRegistry",
    "default_path",
]
