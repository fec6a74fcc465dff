"""Execution of individual setup stages.

Each operation invokes one external collaborator (or a short fixed
sequence of them) and turns the exit status into a StepOutcome. Progress
and results are printed; nothing is raised.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .command_runner import SubprocessRunner
from .interaction import MARK_FAIL, MARK_OK
from .models import LaunchConfig, ProjectIdentity, SetupStage, StepOutcome, Visibility
from .protocols import CommandRunner
from .tools import GH, GIT, VERCEL


def extract_deploy_url(output: str, domain_suffix: str = ".vercel.app") -> Optional[str]:
    """Find the deployment URL in deploy output.

    Takes the first line containing both "https://" and the hosted domain
    suffix, and returns the text from "https://" up to the next whitespace.

    Returns:
        The URL, or None when no line matches.
    """
    for line in output.splitlines():
        if "https://" in line and domain_suffix in line:
            start = line.index("https://")
            return line[start:].split()[0]
    return None


class StepRunner:
    """Runs one setup stage at a time for a project."""

    def __init__(
        self,
        identity: ProjectIdentity,
        runner: Optional[CommandRunner] = None,
        config: Optional[LaunchConfig] = None,
        console: Optional[Console] = None
    ):
        self.identity = identity
        self.runner = runner or SubprocessRunner()
        self.config = config or LaunchConfig()
        self.console = console or Console()

    @property
    def project_path(self) -> Path:
        return self.identity.root_path

    def _ok(self, message: str) -> None:
        self.console.print(f"[green]{MARK_OK}[/green] {message}")

    def _fail(self, message: str) -> None:
        self.console.print(f"[red]{MARK_FAIL}[/red] {message}")

    def scaffold(self) -> StepOutcome:
        """Create the framework project inside the project directory.

        Sub-steps: make sure the directory exists, then run the scaffold
        command there. The scaffold tool shares the terminal since it asks
        its own questions.
        """
        stage = SetupStage.SCAFFOLD
        framework = self.config.framework_name
        self.console.print(f"\n[bold blue]Creating {framework} project:[/bold blue] {escape(self.identity.name)}")

        try:
            self.project_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._fail(f"Failed to create project directory: {escape(str(e))}")
            return StepOutcome.failed(stage, f"could not create {self.project_path}: {e}")

        program, *args = self.config.scaffold_command
        result = self.runner.run(program, args, cwd=self.project_path, capture=False)
        if not result.succeeded:
            self._fail(f"Failed to create {framework} project.")
            return StepOutcome.failed(stage, f"{program} exited with code {result.returncode}")

        self._ok(f"{framework} project created successfully!")
        return StepOutcome.success(stage)

    def init_version_control(self) -> StepOutcome:
        """Initialize git, stage everything and make the first commit.

        Stops at the first command that fails.
        """
        stage = SetupStage.VERSION_CONTROL
        self.console.print("\n[bold blue]Initializing Git repository...[/bold blue]")

        commands = [
            ["init"],
            ["add", "."],
            ["commit", "-m", self.config.initial_commit_message],
        ]
        for args in commands:
            result = self.runner.run(GIT, args, cwd=self.project_path, capture=False)
            if not result.succeeded:
                self._fail("Failed to initialize Git.")
                return StepOutcome.failed(
                    stage, f"git {args[0]} exited with code {result.returncode}"
                )

        self._ok("Git initialized successfully!")
        return StepOutcome.success(stage)

    def create_remote_repo(self, visibility: Visibility) -> StepOutcome:
        """Create the GitHub repository from the local one and push to it."""
        stage = SetupStage.REMOTE_REPO
        self.console.print("\n[bold blue]Creating GitHub repository...[/bold blue]")

        result = self.runner.run(
            GH,
            [
                "repo", "create", self.identity.name, visibility.flag,
                "--source=.", "--remote=origin", "--push",
            ],
            cwd=self.project_path,
            capture=False
        )
        if not result.succeeded:
            self._fail("Failed to create GitHub repository.")
            return StepOutcome.failed(stage, f"gh repo create exited with code {result.returncode}")

        self._ok("GitHub repository created and pushed successfully!")
        return StepOutcome.success(stage)

    def deploy(self) -> StepOutcome:
        """Deploy to production with Vercel and report the URL if one is printed.

        A missing URL only degrades the success message.
        """
        stage = SetupStage.DEPLOY
        self.console.print("\n[bold blue]Deploying to Vercel...[/bold blue]")

        result = self.runner.run(VERCEL, self.config.deploy_args, cwd=self.project_path)
        if result.stdout:
            self.console.out(result.stdout, end="" if result.stdout.endswith("\n") else "\n")

        if not result.succeeded:
            if result.stderr.strip():
                self.console.out(result.stderr.strip())
            self._fail("Failed to deploy to Vercel.")
            return StepOutcome.failed(stage, f"vercel exited with code {result.returncode}")

        url = extract_deploy_url(result.stdout, self.config.hosted_domain_suffix)
        if url:
            self._ok("Successfully deployed to Vercel!")
            self.console.print(f"URL: {url}", markup=False)
        else:
            self._ok("Deployment completed!")
        return StepOutcome.success(stage, url=url)
