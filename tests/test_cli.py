"""Tests for the launchkit command line."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from launchkit.cli import main
from launchkit.errors import MissingToolError
from launchkit.run_log import read_run_log

from fakes import FakeRunner


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def fake_runner(runner: FakeRunner):
    """Patch the CLI to use the fake runner and pretend gh is installed."""
    with patch("launchkit.cli.SubprocessRunner", return_value=runner), \
         patch("launchkit.cli.require_executable", return_value="/usr/bin/gh"):
        yield runner


def invoke(home: Path, args, input=None):
    return CliRunner().invoke(main, args, input=input, env={"HOME": str(home)})


class TestStartup:
    """Tests for fatal startup conditions."""

    def test_missing_github_cli(self, home):
        error = MissingToolError("gh", "GitHub CLI", "macOS: brew install gh\nUbuntu: sudo apt install gh")
        with patch("launchkit.cli.require_executable", side_effect=error):
            result = invoke(home, ["my-app"])

        assert result.exit_code == 1
        assert "GitHub CLI (gh) not found" in result.output
        assert "brew install gh" in result.output
        assert "sudo apt install gh" in result.output

    def test_missing_home(self, fake_runner):
        result = CliRunner().invoke(main, ["my-app"], env={"HOME": None})

        assert result.exit_code == 1
        assert "HOME environment variable not set" in result.output

    def test_empty_project_name(self, home, fake_runner):
        result = invoke(home, [""])

        assert result.exit_code == 1
        assert "Project name cannot be empty." in result.output
        assert fake_runner.calls == []

    def test_invalid_config(self, home, fake_runner):
        settings = home / ".launchkit"
        settings.mkdir()
        (settings / "config.json").write_text('{"namespace": ')

        result = invoke(home, ["my-app"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_creates_workspace_root(self, home, fake_runner):
        invoke(home, [], input="shop\n6\n")
        assert (home / "dev" / "nextjs").is_dir()

    def test_workspace_root_cannot_be_created(self, home, tmp_path, fake_runner):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        result = invoke(home, ["my-app", "--base-dir", str(blocker / "sites")])

        assert result.exit_code == 1
        assert "Failed to create directory" in result.output

    def test_prompts_use_configured_settings(self, home, fake_runner, monkeypatch):
        settings = home / ".launchkit"
        settings.mkdir()
        (settings / "config.json").write_text(
            json.dumps({"framework_name": "Astro", "max_prompt_attempts": 2})
        )
        project = home / "dev" / "nextjs" / "blog"
        project.mkdir(parents=True)
        monkeypatch.chdir(project)

        result = invoke(home, [], input="9\n9\n9\n")

        assert result.exit_code == 1
        assert "Astro Project:" in result.output
        assert "No valid choice after 2 attempts" in result.output


class TestAutomaticMode:
    """Tests for `launchkit <project-name>`."""

    def test_remote_repo_failure_exits_zero(self, home, fake_runner):
        fake_runner.set("gh", "repo", "create", returncode=1)

        result = invoke(home, ["my-app"], input="y\nn\n")

        assert result.exit_code == 0, result.output
        assert (home / "dev" / "nextjs" / "my-app").is_dir()
        assert "Continuing without GitHub repository..." in result.output
        assert "Skipping Vercel deployment." in result.output
        assert "Project 'my-app' setup complete!" in result.output

    def test_scaffold_failure_exits_one(self, home, fake_runner):
        fake_runner.set("npx", returncode=1)

        result = invoke(home, ["my-app"])

        assert result.exit_code == 1
        assert "Failed to create Next.js project." in result.output

    def test_writes_run_log(self, home, fake_runner):
        invoke(home, ["my-app"], input="y\nn\n")

        entries = read_run_log(home / ".launchkit" / "logs" / "runs.jsonl")
        assert entries[0]["type"] == "run_start"
        assert entries[0]["mode"] == "automatic"
        assert entries[-1]["type"] == "run_end"
        assert entries[-1]["exit_code"] == 0

    def test_run_log_can_be_disabled(self, home, fake_runner):
        settings = home / ".launchkit"
        settings.mkdir()
        (settings / "config.json").write_text(json.dumps({"run_log_enabled": False}))

        invoke(home, ["my-app"], input="y\nn\n")

        assert not (settings / "logs" / "runs.jsonl").exists()

    def test_base_dir_option(self, home, tmp_path, fake_runner):
        result = invoke(home, ["my-app", "--base-dir", str(tmp_path / "sites")], input="y\nn\n")

        assert result.exit_code == 0
        assert (tmp_path / "sites" / "my-app").is_dir()

    def test_closed_input_exits_one(self, home, fake_runner):
        result = invoke(home, ["my-app"], input="")

        assert result.exit_code == 1
        assert "Input closed" in result.output


class TestMenuMode:
    """Tests for `launchkit` without a project name."""

    def test_detects_current_project(self, home, fake_runner, monkeypatch):
        project = home / "dev" / "nextjs" / "blog"
        (project / "src").mkdir(parents=True)
        monkeypatch.chdir(project / "src")

        result = invoke(home, [], input="6\n")

        assert result.exit_code == 0
        assert "Detected current project: blog" in result.output
        assert "Current Status: blog" in result.output
        assert "Goodbye!" in result.output

    def test_asks_for_project_name(self, home, tmp_path, fake_runner, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = invoke(home, [], input="shop\n6\n")

        assert result.exit_code == 0
        assert "Enter project name:" in result.output
        assert "Creating new project directory..." in result.output
        assert (home / "dev" / "nextjs" / "shop").is_dir()

    def test_existing_project_directory(self, home, tmp_path, fake_runner, monkeypatch):
        (home / "dev" / "nextjs" / "shop").mkdir(parents=True)
        monkeypatch.chdir(tmp_path)

        result = invoke(home, [], input="shop\n6\n")

        assert result.exit_code == 0
        assert "Project directory already exists" in result.output

    def test_empty_name_exits_one(self, home, tmp_path, fake_runner, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = invoke(home, [], input="\n")

        assert result.exit_code == 1
        assert "Project name cannot be empty." in result.output

    def test_single_stage_then_exit(self, home, fake_runner, monkeypatch):
        project = home / "dev" / "nextjs" / "blog"
        project.mkdir(parents=True)
        monkeypatch.chdir(project)

        result = invoke(home, [], input="9\n3\n")

        assert result.exit_code == 0
        assert "Invalid choice. Please enter a number between 1 and 6." in result.output
        assert "Git initialized successfully!" in result.output
        assert fake_runner.was_called("git", "init")

    def test_bracketed_project_name(self, home, fake_runner, monkeypatch):
        project = home / "dev" / "nextjs" / "[bold]x"
        project.mkdir(parents=True)
        monkeypatch.chdir(project)

        result = invoke(home, [], input="6\n")

        assert result.exit_code == 0
        assert "Detected current project: [bold]x" in result.output
        assert "Current Status: [bold]x" in result.output
