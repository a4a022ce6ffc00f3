"""Utilities for executing external commands."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence
import os
import shlex
import subprocess


@dataclass
class CommandResult:
    """Represents the outcome of an executed command.

    ``returncode`` is ``None`` when the command could not be started or did
    not report an exit code.
    """

    command: Sequence[str]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    streamed: bool = False
    started: bool = True


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in command)


class CommandError(RuntimeError):
    """Raised when a tool or command does not finish with exit code 0."""

    def __init__(self, result: CommandResult, reason: str | None = None):
        command = format_command(result.command)
        if not result.started:
            message = f"Command could not be started: {command}"
        elif result.returncode is None:
            message = f"Command did not return an exit code: {command}"
        else:
            message = f"Command failed with exit code {result.returncode}: {command}"
            if not result.streamed and (result.stdout or result.stderr):
                message = (
                    f"{message}\n"
                    f"stdout: {result.stdout}\n"
                    f"stderr: {result.stderr}"
                )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.result = result

    @property
    def returncode(self) -> int | None:
        return self.result.returncode


class CommandRunner:
    """Abstract command runner interface.

    ``run`` reports the exit code in the result and raises
    :class:`CommandError` only when the command cannot be started.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> CommandResult:
        raise NotImplementedError


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _merge_environment(env: Mapping[str, str] | None) -> Dict[str, str] | None:
        if not env:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> CommandResult:
        command = list(command)
        merged_env = self._merge_environment(env)
        try:
            process = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                capture_output=not stream,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise CommandError(
                CommandResult(command=command, returncode=None, started=False), str(exc)
            ) from exc

        return CommandResult(
            command=command,
            returncode=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
            streamed=stream,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str]
    stream: bool


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self, returncode: int = 0) -> None:
        self.commands: List[RecordedCommand] = []
        self.returncode = returncode

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else {},
                stream=stream,
            )
        )
        return CommandResult(command=list(command), returncode=self.returncode, streamed=stream)
