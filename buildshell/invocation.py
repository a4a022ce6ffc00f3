"""Resolution and execution of tools and external programs."""
from __future__ import annotations

from pathlib import Path
from typing import Mapping, TextIO
import logging
import os
import sys

from .command_runner import CommandError, CommandResult, CommandRunner, format_command
from .configuration import Configuration
from .log import LogWriter
from .tools import Tool


class ExternalTool:
    """Adapts an executable on the search path (or a path to one) to :class:`Tool`."""

    def __init__(
        self,
        name: str,
        runner: CommandRunner,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        stream: bool = True,
    ) -> None:
        self.name = name
        self._runner = runner
        self._cwd = cwd
        self._env = env
        self._stream = stream

    def run(self, out: TextIO, err: TextIO, *args: str) -> int:
        result = self._runner.run(
            [self.name, *args],
            cwd=self._cwd,
            env=self._env,
            stream=self._stream,
        )
        if not result.streamed:
            if result.stdout:
                out.write(result.stdout)
            if result.stderr:
                err.write(result.stderr)
        return result.returncode if result.returncode is not None else 1

    def __repr__(self) -> str:
        return f"ExternalTool(name={self.name!r})"


def _argument(value: object) -> str:
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    return str(value)


class Invoker:
    """Runs a named tool, or an external program when no tool has that name.

    Exit code 0 is the only success. Any other exit code, a tool that returns
    something other than an integer, and a program that cannot be started
    raise :class:`CommandError`.

    External programs run in ``configuration.directory``. In-process tools
    run in the current process, so relative paths they receive (the script
    given to ``python``, for instance) resolve against the process working
    directory.
    """

    def __init__(self, configuration: Configuration, runner: CommandRunner, logger: logging.Logger) -> None:
        self._configuration = configuration
        self._runner = runner
        self._logger = logger

    @property
    def _captured(self) -> bool:
        return self._configuration.handler is not None

    def resolve(self, name: str) -> Tool:
        tool = self._configuration.tools.get(name)
        if tool is not None:
            return tool
        return ExternalTool(
            name,
            self._runner,
            cwd=self._configuration.directory,
            env=self._configuration.environment,
            stream=not self._captured,
        )

    def call(self, name: str, *args: object) -> int:
        arguments = [_argument(arg) for arg in args]
        command = [name, *arguments]
        tool = self.resolve(name)
        self._logger.debug("Running %r: %s", tool, format_command(command))

        if self._captured:
            out: TextIO = LogWriter(self._logger, logging.INFO)
            err: TextIO = LogWriter(self._logger, logging.WARNING)
        else:
            out, err = sys.stdout, sys.stderr
        try:
            returncode = tool.run(out, err, *arguments)
        except CommandError as exc:
            self._logger.error("%s", exc)
            raise
        finally:
            out.flush()
            err.flush()

        if isinstance(returncode, bool) or not isinstance(returncode, int):
            error = CommandError(
                CommandResult(command=command, returncode=None, streamed=True),
                f"{tool!r} returned {returncode!r}",
            )
            self._logger.error("%s", error)
            raise error
        if returncode != 0:
            error = CommandError(CommandResult(command=command, returncode=returncode, streamed=True))
            self._logger.error("%s", error)
            raise error
        return returncode
