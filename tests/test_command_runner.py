from __future__ import annotations

from pathlib import Path
import sys
import tempfile
import unittest
from unittest.mock import patch

from buildshell.command_runner import (
    CommandError,
    CommandResult,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)


class SubprocessCommandRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = SubprocessCommandRunner()

    def test_captures_output(self) -> None:
        result = self.runner.run([sys.executable, "-c", "print('hello')"])
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), "hello")
        self.assertFalse(result.streamed)

    def test_nonzero_exit_is_reported(self) -> None:
        command = [sys.executable, "-c", "import sys; print('bad', file=sys.stderr); sys.exit(3)"]
        result = self.runner.run(command)
        self.assertEqual(result.returncode, 3)
        self.assertEqual(result.stderr.strip(), "bad")
        self.assertIn("bad", str(CommandError(result)))

    def test_undecodable_output_is_replaced(self) -> None:
        command = [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad\\n')"]
        result = self.runner.run(command)
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout, "\ufffd\ufffd bad\n")

    def test_missing_executable_raises(self) -> None:
        with self.assertRaises(CommandError) as ctx:
            self.runner.run(["executable, that does not exist", "1"])
        self.assertIsNone(ctx.exception.returncode)
        self.assertFalse(ctx.exception.result.started)
        self.assertIsInstance(ctx.exception.__cause__, OSError)
        self.assertIn("could not be started", str(ctx.exception))

    def test_arguments_are_not_shell_expanded(self) -> None:
        result = self.runner.run([sys.executable, "-c", "import sys; print(sys.argv[1])", "*; echo $HOME"])
        self.assertEqual(result.stdout.strip(), "*; echo $HOME")

    def test_environment_is_merged_and_cwd_applied(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            code = "import os; print(os.environ['BUILDSHELL_TEST'], 'PATH' in os.environ, os.getcwd())"
            result = self.runner.run(
                [sys.executable, "-c", code],
                cwd=Path(temp_dir),
                env={"BUILDSHELL_TEST": "yes"},
            )
            value, has_path, cwd = result.stdout.split()
            self.assertEqual(value, "yes")
            self.assertEqual(has_path, "True")
            self.assertEqual(Path(cwd).resolve(), Path(temp_dir).resolve())

    def test_stream_mode_does_not_capture(self) -> None:
        with patch("buildshell.command_runner.subprocess.run") as run:
            run.return_value.returncode = 0
            run.return_value.stdout = None
            run.return_value.stderr = None
            result = self.runner.run(["tool"], stream=True)
        self.assertTrue(result.streamed)
        self.assertEqual(result.stdout, "")
        self.assertFalse(run.call_args.kwargs["capture_output"])


class RecordingCommandRunnerTests(unittest.TestCase):
    def test_records_commands(self) -> None:
        runner = RecordingCommandRunner()
        result = runner.run(["cc", "-o", "out file"], cwd=Path("/work"), env={"A": "1"})
        self.assertEqual(result.returncode, 0)
        self.assertEqual(runner.commands[0].command, ["cc", "-o", "out file"])
        self.assertEqual(runner.commands[0].cwd, str(Path("/work")))
        self.assertEqual(runner.commands[0].env, {"A": "1"})
        self.assertFalse(runner.commands[0].stream)

    def test_configured_exit_code(self) -> None:
        runner = RecordingCommandRunner(returncode=5)
        self.assertEqual(runner.run(["x"]).returncode, 5)


class CommandErrorTests(unittest.TestCase):
    def test_streamed_result_omits_output(self) -> None:
        error = CommandError(CommandResult(command=["python", "--bad"], returncode=2, streamed=True))
        self.assertEqual(str(error), "Command failed with exit code 2: python --bad")
        self.assertIsInstance(error, RuntimeError)

    def test_missing_exit_code_is_not_a_start_failure(self) -> None:
        error = CommandError(CommandResult(command=["custom"], returncode=None), "returned None")
        self.assertEqual(str(error), "Command did not return an exit code: custom (returned None)")


if __name__ == "__main__":
    unittest.main()
