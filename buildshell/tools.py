"""Tool capability protocol, registry and the built-in in-process tools."""
from __future__ import annotations

from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Protocol, Sequence, TextIO, runtime_checkable
import logging
import platform
import runpy
import sys
import tempfile
import threading
import traceback

logger = logging.getLogger(__name__)


@runtime_checkable
class Tool(Protocol):
    """A named capability that runs with two output sinks and returns an exit code."""

    name: str

    def run(self, out: TextIO, err: TextIO, *args: str) -> int:
        ...


# sys.stdout, sys.stderr and sys.argv are process-wide.
_IN_PROCESS_LOCK = threading.RLock()


def _exit_code(code: object, err: TextIO) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    print(code, file=err)
    return 1


def run_in_process(
    target: Callable[[], object],
    *,
    argv: Sequence[str],
    out: TextIO,
    err: TextIO,
) -> int:
    """Run ``target`` as if it were a program's main entry point.

    Standard streams are redirected to ``out``/``err`` and ``sys.argv`` is
    replaced by ``argv`` while ``target`` runs.
    """

    with _IN_PROCESS_LOCK:
        saved_argv = sys.argv
        sys.argv = list(argv)
        try:
            with redirect_stdout(out), redirect_stderr(err):
                try:
                    target()
                except SystemExit as exc:
                    return _exit_code(exc.code, err)
                except Exception:
                    traceback.print_exc(file=err)
                    return 1
                return 0
        finally:
            sys.argv = saved_argv
            out.flush()
            err.flush()


class ModuleTool:
    """Runs a module's ``__main__`` block in process, like ``python -m``."""

    def __init__(self, name: str, module: str) -> None:
        self.name = name
        self.module = module

    def run(self, out: TextIO, err: TextIO, *args: str) -> int:
        return run_in_process(
            lambda: runpy.run_module(self.module, run_name="__main__", alter_sys=True),
            argv=[self.module, *args],
            out=out,
            err=err,
        )

    def __repr__(self) -> str:
        return f"ModuleTool(name={self.name!r}, module={self.module!r})"


class PythonTool:
    """In-process counterpart of the ``python`` launcher."""

    name = "python"

    USAGE = "usage: python [option] ... [-c cmd | -m mod | file | -] [arg] ..."
    IGNORED_FLAGS = frozenset({"-B", "-E", "-I", "-q", "-s", "-S", "-u"})

    def run(self, out: TextIO, err: TextIO, *args: str) -> int:
        remaining = list(args)
        while remaining:
            option = remaining.pop(0)
            if option in self.IGNORED_FLAGS:
                continue
            if option in {"-V", "--version"}:
                print(f"Python {platform.python_version()}", file=out)
                return 0
            if option in {"-h", "--help"}:
                print(self.USAGE, file=out)
                return 0
            if option in {"-c", "-m"}:
                if not remaining:
                    print(f"Argument expected for the {option} option", file=err)
                    print(self.USAGE, file=err)
                    return 2
                value = remaining.pop(0)
                if option == "-c":
                    return self._run_code(value, remaining, out, err)
                return ModuleTool(self.name, value).run(out, err, *remaining)
            if option == "-":
                print("Reading a program from standard input is not supported", file=err)
                return 2
            if option.startswith("-"):
                print(f"unknown option {option}", file=err)
                print(self.USAGE, file=err)
                return 2
            return run_in_process(
                lambda: runpy.run_path(option, run_name="__main__"),
                argv=[option, *remaining],
                out=out,
                err=err,
            )
        print("Interactive mode is not supported", file=err)
        return 2

    @staticmethod
    def _run_code(code: str, args: Sequence[str], out: TextIO, err: TextIO) -> int:
        with tempfile.TemporaryDirectory() as temp_dir:
            script = Path(temp_dir) / "command.py"
            script.write_text(code, encoding="utf-8")
            return run_in_process(
                lambda: runpy.run_path(str(script), run_name="__main__"),
                argv=["-c", *args],
                out=out,
                err=err,
            )

    def __repr__(self) -> str:
        return "PythonTool()"


def builtin_tools() -> list[Tool]:
    return [PythonTool(), ModuleTool("compileall", "compileall")]


class ToolRegistry:
    """Name-keyed tool collection.

    Registering a tool under a name that is already present replaces the
    earlier tool.
    """

    def __init__(self, tools: Iterable[Tool] | Mapping[str, Tool] | None = None) -> None:
        self._tools: Dict[str, Tool] = {}
        if isinstance(tools, Mapping):
            self._tools.update(tools)
        elif tools:
            for tool in tools:
                self.register(tool)

    @classmethod
    def with_builtins(cls) -> "ToolRegistry":
        return cls(builtin_tools())

    def register(self, tool: Tool) -> None:
        previous = self._tools.get(tool.name)
        if previous is not None and previous is not tool:
            logger.debug("Replacing tool %r: %r -> %r", tool.name, previous, tool)
        self._tools[tool.name] = tool

    def resolve(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> Iterable[str]:
        return self._tools.keys()

    def snapshot(self) -> Dict[str, Tool]:
        return dict(self._tools)

    def copy(self) -> "ToolRegistry":
        return ToolRegistry(self.snapshot())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry({sorted(self._tools)!r})"


__all__ = [
    "Tool",
    "ToolRegistry",
    "PythonTool",
    "ModuleTool",
    "builtin_tools",
    "run_in_process",
]
