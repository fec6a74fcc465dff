"""Tests for SubprocessRunner and executable discovery."""

import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from launchkit.command_runner import LAUNCH_FAILED, CommandResult, SubprocessRunner
from launchkit.errors import MissingToolError
from launchkit.protocols import CommandRunner
from launchkit.tools import find_executable, is_available, require_executable


class TestSubprocessRunner:
    """Tests for SubprocessRunner."""

    def test_satisfies_protocol(self):
        assert isinstance(SubprocessRunner(), CommandRunner)

    def test_passes_arguments_and_cwd(self, tmp_path: Path):
        completed = subprocess.CompletedProcess(["gh"], 0, stdout="ok\n", stderr="")
        with patch("launchkit.command_runner.find_executable", return_value="/usr/bin/gh"), \
             patch("launchkit.command_runner.subprocess.run", return_value=completed) as run:
            result = SubprocessRunner().run("gh", ["repo", "view", "blog"], cwd=tmp_path)

        assert result == CommandResult(returncode=0, stdout="ok\n", stderr="")
        args, kwargs = run.call_args
        assert args[0] == ["/usr/bin/gh", "repo", "view", "blog"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"

    def test_uncaptured_output_is_empty(self):
        completed = subprocess.CompletedProcess(["git"], 1, stdout=None, stderr=None)
        with patch("launchkit.command_runner.subprocess.run", return_value=completed) as run:
            result = SubprocessRunner().run("git", ["init"], capture=False)

        assert run.call_args.kwargs["capture_output"] is False
        assert result.returncode == 1
        assert result.stdout == ""
        assert not result.succeeded

    def test_launch_error_becomes_result(self):
        with patch("launchkit.command_runner.find_executable", return_value=None), \
             patch("launchkit.command_runner.subprocess.run",
                   side_effect=FileNotFoundError("No such file or directory: 'vercel'")):
            result = SubprocessRunner().run("vercel", ["ls"])

        assert result.returncode == LAUNCH_FAILED
        assert "vercel" in result.stderr

    def test_undecodable_output_is_replaced(self):
        """Bytes that are not valid UTF-8 never raise out of run()."""
        script = "import sys; sys.stdout.buffer.write(b'my-app \\xff\\xfe ready\\n')"
        result = SubprocessRunner().run(sys.executable, ["-c", script])

        assert result.succeeded
        assert result.stdout == "my-app \ufffd\ufffd ready\n"

    def test_exists(self):
        with patch("launchkit.command_runner.find_executable", side_effect=lambda n: "/bin/git" if n == "git" else None):
            runner = SubprocessRunner()
            assert runner.exists("git") is True
            assert runner.exists("vercel") is False


class TestTools:
    """Tests for executable discovery."""

    def test_find_on_path(self):
        with patch("launchkit.tools.shutil.which", return_value="/usr/local/bin/gh"):
            assert find_executable("gh") == "/usr/local/bin/gh"
            assert is_available("gh") is True

    def test_not_found(self):
        with patch("launchkit.tools.shutil.which", return_value=None), \
             patch("launchkit.tools.sys.platform", "linux"):
            assert find_executable("vercel") is None
            assert is_available("vercel") is False

    def test_windows_cmd_shim(self):
        def which(name):
            return "C:\\npm\\vercel.cmd" if name == "vercel.cmd" else None

        with patch("launchkit.tools.shutil.which", side_effect=which), \
             patch("launchkit.tools.sys.platform", "win32"):
            assert find_executable("vercel") == "C:\\npm\\vercel.cmd"

    def test_require_executable_missing(self):
        with patch("launchkit.tools.find_executable", return_value=None):
            with pytest.raises(MissingToolError) as exc_info:
                require_executable("gh")

        error = exc_info.value
        assert error.tool == "gh"
        assert "GitHub CLI (gh) not found" in str(error)
        assert "brew install gh" in error.install_hint

    def test_require_executable_found(self):
        with patch("launchkit.tools.find_executable", return_value="/usr/bin/gh"):
            assert require_executable("gh") == "/usr/bin/gh"
