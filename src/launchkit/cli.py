"""CLI interface for launchkit."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .command_runner import SubprocessRunner
from .errors import LaunchError, MissingToolError, ProjectDirectoryError
from .interaction import InteractionController, MARK_FAIL
from .models import ProjectIdentity
from .orchestrator import WorkflowOrchestrator
from .protocols import CommandRunner
from .run_log import RunLogger
from .status import StatusProbe
from .steps import StepRunner
from .tools import GH, require_executable
from .workspace import Workspace


def build_orchestrator(
    identity: ProjectIdentity,
    workspace: Workspace,
    prompts: InteractionController,
    runner: CommandRunner
) -> WorkflowOrchestrator:
    """Wire the components for one project."""
    config = workspace.config
    run_log = RunLogger(workspace.run_log_file, identity.name) if config.run_log_enabled else None
    return WorkflowOrchestrator(
        identity=identity,
        probe=StatusProbe(identity, runner, config),
        steps=StepRunner(identity, runner, config, prompts.console),
        prompts=prompts,
        runner=runner,
        run_log=run_log,
        framework_name=config.framework_name,
    )


def resolve_interactive_project(workspace: Workspace, prompts: InteractionController) -> ProjectIdentity:
    """Find the project for menu mode: the current directory, or ask for a name."""
    identity = workspace.detect_current_project()
    if identity is not None:
        prompts.info(f"Detected current project: [bold]{escape(identity.name)}[/bold]")
        return identity

    prompts.info(
        f"No project name provided and not in a {workspace.config.framework_name} "
        "project directory.\n"
    )
    identity = workspace.project(prompts.ask_text("Enter project name"))

    if identity.root_path.exists():
        prompts.info(f"Project directory already exists: {escape(str(identity.root_path))}")
    else:
        prompts.info("Creating new project directory...")
        try:
            identity.root_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProjectDirectoryError(identity.root_path, e.strerror or str(e)) from e
    return identity


@click.command()
@click.argument("project_name", required=False)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Workspace root (default: $HOME/dev/<namespace>)"
)
@click.version_option(package_name="launchkit")
def main(project_name: Optional[str], base_dir: Optional[Path]):
    """Set up a web project: scaffold, Git, GitHub and Vercel.

    Only the missing steps are performed.

    \b
    Examples:
        launchkit my-app     # run every missing step for my-app
        launchkit            # interactive menu for the current project
    """
    console = Console()

    try:
        workspace = Workspace.from_environment(base_dir=base_dir)
        prompts = InteractionController(
            console=console,
            max_attempts=workspace.config.max_prompt_attempts,
            framework_name=workspace.config.framework_name,
        )
        workspace.ensure_base_dir()
        require_executable(GH)

        runner = SubprocessRunner()
        if project_name is None:
            identity = resolve_interactive_project(workspace, prompts)
            result = build_orchestrator(identity, workspace, prompts, runner).run_menu()
        else:
            identity = workspace.project(project_name)
            result = build_orchestrator(identity, workspace, prompts, runner).run_automatic()
    except MissingToolError as e:
        console.print(f"[red]{MARK_FAIL} {escape(str(e))}[/red]")
        if e.install_hint:
            for line in e.install_hint.splitlines():
                console.print(f"   {line}")
        sys.exit(1)
    except LaunchError as e:
        console.print(f"[red]{MARK_FAIL} {escape(str(e))}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)

    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
