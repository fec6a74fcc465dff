"""Workflow orchestration for project setup.

Decides which stages to run, runs them in dependency order and applies the
per-stage failure policy:
- Scaffold and version control failures abort the workflow
- Remote repository failures are reported and the workflow continues
- Deployment is always behind an operator confirmation

Two entry points: the automatic protocol (project name given up front) and
a single menu cycle (interactive).
"""

from typing import Optional

from rich.markup import escape

from .errors import ProjectDirectoryError
from .interaction import InteractionController, MARK_OK
from .models import (
    FailurePolicy, MenuChoice, MenuState, ProjectIdentity, SetupStage,
    StageStatus, StepOutcome, Visibility, WorkflowResult,
)
from .protocols import CommandRunner, StageProbe
from .run_log import RunLogger
from .steps import StepRunner
from .tools import INSTALL_HINTS, VERCEL


FAILURE_POLICY = {
    SetupStage.SCAFFOLD: FailurePolicy.ABORT,
    SetupStage.VERSION_CONTROL: FailurePolicy.ABORT,
    SetupStage.REMOTE_REPO: FailurePolicy.CONTINUE,
    SetupStage.DEPLOY: FailurePolicy.CONTINUE,
}

# Stages run by the skip-if-done sequence; deploy has its own gate
SEQUENCED_STAGES = (
    SetupStage.SCAFFOLD,
    SetupStage.VERSION_CONTROL,
    SetupStage.REMOTE_REPO,
)


class WorkflowOrchestrator:
    """Drives the setup stages for one project.

    Dependencies are injected for testability:
    - StageProbe: observes which stages are complete
    - StepRunner: executes a stage
    - InteractionController: confirmations, menu and messages
    - CommandRunner: availability of optional tools
    - RunLogger: optional JSONL trail of the run
    """

    def __init__(
        self,
        identity: ProjectIdentity,
        probe: StageProbe,
        steps: StepRunner,
        prompts: InteractionController,
        runner: CommandRunner,
        run_log: Optional[RunLogger] = None,
        framework_name: str = "Next.js"
    ):
        self.identity = identity
        self.probe = probe
        self.steps = steps
        self.prompts = prompts
        self.runner = runner
        self.run_log = run_log
        self.framework_name = framework_name
        self.state = MenuState.IDLE

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run_automatic(self) -> WorkflowResult:
        """Run every missing stage for a named project.

        Returns:
            WorkflowResult with exit code 1 if scaffold or version control
            failed, else 0.
        """
        self._log_run_start("automatic")
        try:
            self.prompts.info(f"\n[bold]Initializing project:[/bold] {escape(self.identity.name)}")
            self.prompts.info(f"Location: {escape(str(self.identity.root_path))}\n")
            self.ensure_project_directory()

            result = self._run_sequence(
                deploy_question="\nWould you like to deploy this project to Vercel now?",
                check_deployed=True,
                abort_exit_code=1
            )
            if not result.aborted:
                self.prompts.info(
                    f"\n[green]{MARK_OK}[/green] Project '{escape(self.identity.name)}' setup complete!\n"
                )
            self._log_run_end(result)
            return result
        finally:
            self._close_log()

    def run_menu(self) -> WorkflowResult:
        """Run one menu cycle: show status, read a choice, execute it."""
        self._log_run_start("menu")
        try:
            self.prompts.info("\n[bold]Interactive Mode[/bold]")
            self.prompts.info(f"Current location: {escape(str(self.identity.root_path))}")

            self.state = MenuState.SHOWING_STATUS
            status = self.probe.snapshot()
            if self.run_log:
                self.run_log.log_status(status)
            self.prompts.render_status(self.identity, status)

            self.state = MenuState.AWAITING_CHOICE
            self.prompts.render_menu()
            choice = self.prompts.read_menu_choice()

            self.state = MenuState.EXECUTING_STAGE
            result = self.dispatch(choice, status)

            self.state = MenuState.DONE
            self._log_run_end(result)
            return result
        finally:
            self._close_log()

    def dispatch(self, choice: MenuChoice, status: StageStatus) -> WorkflowResult:
        """Execute a menu choice against the snapshot the menu was built from.

        Single-stage choices refuse to repeat a completed stage, with two
        exceptions: the remote repository choice initializes git first when
        needed, and the deploy choice asks before deploying again.
        """
        if choice == MenuChoice.FULL_SETUP:
            return self._run_sequence(
                deploy_question="\nDeploy to Vercel?",
                check_deployed=False,
                abort_exit_code=0
            )
        if choice == MenuChoice.SCAFFOLD_ONLY:
            return self._run_single(
                SetupStage.SCAFFOLD, status,
                f"{self.framework_name} project already exists!"
            )
        if choice == MenuChoice.VERSION_CONTROL_ONLY:
            return self._run_single(
                SetupStage.VERSION_CONTROL, status, "Git is already initialized!"
            )
        if choice == MenuChoice.REMOTE_REPO_ONLY:
            return self._run_remote_repo_only(status)
        if choice == MenuChoice.DEPLOY_ONLY:
            return self._run_deploy_only(status)

        self.prompts.info("Goodbye!")
        return WorkflowResult()

    def ensure_project_directory(self) -> bool:
        """Create the project directory if needed.

        Returns:
            True if the directory was created.

        Raises:
            ProjectDirectoryError: If the directory cannot be created.
        """
        path = self.identity.root_path
        if path.exists():
            self.prompts.info("Project directory already exists.")
            return False
        self.prompts.info("Creating project directory...")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProjectDirectoryError(path, e.strerror or str(e)) from e
        return True

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def _run_sequence(
        self,
        deploy_question: str,
        check_deployed: bool,
        abort_exit_code: int
    ) -> WorkflowResult:
        """Run the missing stages in dependency order, then the deploy gate.

        Each stage is re-checked right before its decision, since the stage
        before it may have completed it as a side effect (the scaffold tool
        can initialize git, for example).
        """
        result = WorkflowResult()

        for stage in SEQUENCED_STAGES:
            if self.probe.check(stage):
                self.prompts.warn(self._skip_message(stage))
                result.outcomes.append(self._record_skip(stage, "already complete"))
                continue

            outcome = self._execute(stage)
            result.outcomes.append(outcome)
            if not outcome.is_failure:
                continue

            if FAILURE_POLICY[stage] == FailurePolicy.ABORT:
                self.prompts.warn(f"Setup stopped: {self._stage_label(stage)} failed.")
                result.aborted = True
                result.exit_code = abort_exit_code
                return result
            self.prompts.warn("Continuing without GitHub repository...")

        result.outcomes.append(self._deploy_gate(deploy_question, check_deployed))
        return result

    def _run_single(self, stage: SetupStage, status: StageStatus, done_message: str) -> WorkflowResult:
        if status.is_complete(stage):
            self.prompts.warn(done_message)
            return WorkflowResult(outcomes=[self._record_skip(stage, "already complete")])
        return WorkflowResult(outcomes=[self._execute(stage)])

    def _run_remote_repo_only(self, status: StageStatus) -> WorkflowResult:
        stage = SetupStage.REMOTE_REPO
        if status.remote_repo_exists:
            self.prompts.warn("GitHub repository already exists!")
            return WorkflowResult(outcomes=[self._record_skip(stage, "already complete")])

        result = WorkflowResult()
        if not status.version_controlled:
            self.prompts.warn("Git not initialized. Initializing first...")
            repair = self._execute(SetupStage.VERSION_CONTROL)
            result.outcomes.append(repair)
            if repair.is_failure:
                self.prompts.warn("Cannot create a GitHub repository without a Git repository.")
                result.outcomes.append(self._record_skip(stage, "git initialization failed"))
                result.aborted = True
                return result

        result.outcomes.append(self._execute(stage))
        return result

    def _run_deploy_only(self, status: StageStatus) -> WorkflowResult:
        stage = SetupStage.DEPLOY
        if not self.runner.exists(VERCEL):
            self.prompts.warn(f"Vercel CLI not found. Install it with: {INSTALL_HINTS[VERCEL]}")
            return WorkflowResult(outcomes=[self._record_skip(stage, "Vercel CLI not installed")])

        if status.deployed and not self.prompts.confirm(
            "Project might already be deployed. Deploy again?"
        ):
            return WorkflowResult(outcomes=[self._record_skip(stage, "declined")])
        return WorkflowResult(outcomes=[self._execute(stage)])

    def _deploy_gate(self, question: str, check_deployed: bool) -> StepOutcome:
        """Offer deployment if the Vercel CLI is installed."""
        stage = SetupStage.DEPLOY
        if not self.runner.exists(VERCEL):
            self.prompts.warn("Vercel CLI not found. Skipping deployment.")
            self.prompts.info(f"   Install with: {INSTALL_HINTS[VERCEL]}\n")
            return self._record_skip(stage, "Vercel CLI not installed")

        if check_deployed and self.probe.check(stage):
            question = "\nProject might already be deployed. Deploy again?"

        if not self.prompts.confirm(question):
            self.prompts.info("\nSkipping Vercel deployment.\n")
            return self._record_skip(stage, "declined")
        return self._execute(stage)

    # ------------------------------------------------------------------
    # Execution and logging
    # ------------------------------------------------------------------

    def _execute(self, stage: SetupStage) -> StepOutcome:
        """Run one stage through the step runner."""
        if self.run_log:
            self.run_log.log_step_start(stage)

        if stage == SetupStage.SCAFFOLD:
            outcome = self.steps.scaffold()
        elif stage == SetupStage.VERSION_CONTROL:
            outcome = self.steps.init_version_control()
        elif stage == SetupStage.REMOTE_REPO:
            public = self.prompts.confirm("Should the GitHub repository be public?")
            outcome = self.steps.create_remote_repo(
                Visibility.PUBLIC if public else Visibility.PRIVATE
            )
        else:
            outcome = self.steps.deploy()

        if self.run_log:
            self.run_log.log_step_end(outcome)
        return outcome

    def _record_skip(self, stage: SetupStage, reason: str) -> StepOutcome:
        outcome = StepOutcome.skipped(stage, reason)
        if self.run_log:
            self.run_log.log_step_end(outcome)
        return outcome

    def _stage_label(self, stage: SetupStage) -> str:
        return {
            SetupStage.SCAFFOLD: f"{self.framework_name} project creation",
            SetupStage.VERSION_CONTROL: "Git initialization",
            SetupStage.REMOTE_REPO: "GitHub repository creation",
            SetupStage.DEPLOY: "Vercel deployment",
        }[stage]

    def _skip_message(self, stage: SetupStage) -> str:
        return {
            SetupStage.SCAFFOLD: f"{self.framework_name} project already exists, skipping creation.",
            SetupStage.VERSION_CONTROL: "Git already initialized, skipping.",
            SetupStage.REMOTE_REPO: "GitHub repository already exists, skipping creation.",
        }[stage]

    def _log_run_start(self, mode: str) -> None:
        if self.run_log:
            self.run_log.log_run_start(mode, self.identity.root_path)

    def _log_run_end(self, result: WorkflowResult) -> None:
        if self.run_log:
            self.run_log.log_run_end(result.exit_code, result.aborted)

    def _close_log(self) -> None:
        if self.run_log:
            self.run_log.close()
