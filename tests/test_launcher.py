"""Tests for external process launching and its exit-code policy."""

from __future__ import annotations

from pathlib import Path
import subprocess
import unittest
from unittest import mock

from mimicfm.errors import LaunchError
from mimicfm.launcher import default_handler_command, open_with_default_handler, open_with_editor


def _process(wait_result=0, wait_error: Exception | None = None) -> mock.Mock:
    process = mock.Mock()
    if wait_error is not None:
        process.wait.side_effect = wait_error
    else:
        process.wait.return_value = wait_result
    return process


class DefaultHandlerTests(unittest.TestCase):
    def test_command_per_platform(self) -> None:
        target = Path("/tmp/a.pdf")
        self.assertEqual(default_handler_command(target, "linux"), ["xdg-open", "/tmp/a.pdf"])
        self.assertEqual(default_handler_command(target, "darwin"), ["open", "/tmp/a.pdf"])
        self.assertEqual(default_handler_command(target, "win32")[:3], ["cmd", "/c", "start"])

    def test_zero_exit_is_success(self) -> None:
        target = Path("/tmp/a.pdf")
        with mock.patch("mimicfm.launcher.subprocess.Popen", return_value=_process(0)) as popen_mock:
            open_with_default_handler(target)
        args, kwargs = popen_mock.call_args
        self.assertEqual(args[0], default_handler_command(target))
        self.assertTrue(kwargs["start_new_session"])
        self.assertIs(kwargs["stdout"], subprocess.DEVNULL)

    def test_nonzero_exit_raises(self) -> None:
        with mock.patch("mimicfm.launcher.subprocess.Popen", return_value=_process(4)):
            with self.assertRaises(LaunchError) as caught:
                open_with_default_handler(Path("/tmp/a.pdf"))
        self.assertIn("exit code 4", str(caught.exception))

    def test_spawn_failure_raises(self) -> None:
        with mock.patch("mimicfm.launcher.subprocess.Popen", side_effect=FileNotFoundError(2, "No such file")):
            with self.assertRaises(LaunchError):
                open_with_default_handler(Path("/tmp/a.pdf"))


class EditorTests(unittest.TestCase):
    def test_editor_still_running_counts_as_success(self) -> None:
        process = _process(wait_error=subprocess.TimeoutExpired(cmd="code", timeout=1.0))
        with mock.patch("mimicfm.launcher.subprocess.Popen", return_value=process) as popen_mock:
            open_with_editor(Path("/tmp/dir"))
        self.assertEqual(popen_mock.call_args.args[0], ["code", "/tmp/dir"])

    def test_editor_command_is_split_like_a_shell(self) -> None:
        with mock.patch("mimicfm.launcher.subprocess.Popen", return_value=_process(0)) as popen_mock:
            open_with_editor(Path("/tmp/x.py"), editor="code --reuse-window")
        self.assertEqual(popen_mock.call_args.args[0], ["code", "--reuse-window", "/tmp/x.py"])

    def test_editor_failure_exit_raises(self) -> None:
        with mock.patch("mimicfm.launcher.subprocess.Popen", return_value=_process(1)):
            with self.assertRaises(LaunchError):
                open_with_editor(Path("/tmp/x.py"), editor="vim")

    def test_blank_editor_raises_without_spawning(self) -> None:
        with mock.patch("mimicfm.launcher.subprocess.Popen") as popen_mock:
            with self.assertRaises(LaunchError):
                open_with_editor(Path("/tmp/x.py"), editor="  ")
        popen_mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
