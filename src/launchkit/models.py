"""Data models for launchkit.

Uses Pydantic for validation. Status snapshots and project identities are
frozen so a snapshot can never drift from what was observed on disk.
"""

from enum import Enum, IntEnum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SetupStage(str, Enum):
    """One of the four setup steps, declared in dependency order."""
    SCAFFOLD = "scaffold"
    VERSION_CONTROL = "version_control"
    REMOTE_REPO = "remote_repo"
    DEPLOY = "deploy"


STAGE_ORDER: tuple[SetupStage, ...] = (
    SetupStage.SCAFFOLD,
    SetupStage.VERSION_CONTROL,
    SetupStage.REMOTE_REPO,
    SetupStage.DEPLOY,
)


class StepStatus(str, Enum):
    """How a single step ended."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailurePolicy(str, Enum):
    """What the orchestrator does when a stage fails."""
    ABORT = "abort"          # Later stages need this one
    CONTINUE = "continue"    # Warn and keep going


class Visibility(str, Enum):
    """Visibility of the remote repository."""
    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


class MenuChoice(IntEnum):
    """Entries of the interactive menu."""
    FULL_SETUP = 1
    SCAFFOLD_ONLY = 2
    VERSION_CONTROL_ONLY = 3
    REMOTE_REPO_ONLY = 4
    DEPLOY_ONLY = 5
    EXIT = 6


class MenuState(str, Enum):
    """States of a single menu cycle."""
    IDLE = "idle"
    SHOWING_STATUS = "showing_status"
    AWAITING_CHOICE = "awaiting_choice"
    EXECUTING_STAGE = "executing_stage"
    DONE = "done"


class RunLogEntryType(str, Enum):
    """Types of entries written to the JSONL run log."""
    RUN_START = "run_start"
    STATUS = "status"
    STEP_START = "step_start"
    STEP_END = "step_end"
    RUN_END = "run_end"


class ProjectIdentity(BaseModel):
    """Name and location of the project being set up."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, also the remote repository name")
    root_path: Path = Field(..., description="Project directory")


class StageStatus(BaseModel):
    """Snapshot of which stages are complete.

    Four independent flags rather than a single stage marker: any stage
    can be completed by hand, in any order, between invocations.
    """
    model_config = ConfigDict(frozen=True)

    scaffolded: bool = False
    version_controlled: bool = False
    remote_repo_exists: bool = False
    deployed: bool = False

    def is_complete(self, stage: SetupStage) -> bool:
        """Return the flag for a stage."""
        return {
            SetupStage.SCAFFOLD: self.scaffolded,
            SetupStage.VERSION_CONTROL: self.version_controlled,
            SetupStage.REMOTE_REPO: self.remote_repo_exists,
            SetupStage.DEPLOY: self.deployed,
        }[stage]


class StepOutcome(BaseModel):
    """Result of running (or not running) one stage."""
    stage: SetupStage
    status: StepStatus
    reason: Optional[str] = None
    url: Optional[str] = Field(
        default=None,
        description="Deployment URL, when one was found in the deploy output"
    )

    @classmethod
    def success(cls, stage: SetupStage, url: Optional[str] = None) -> "StepOutcome":
        return cls(stage=stage, status=StepStatus.SUCCESS, url=url)

    @classmethod
    def skipped(cls, stage: SetupStage, reason: str) -> "StepOutcome":
        return cls(stage=stage, status=StepStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, stage: SetupStage, reason: str) -> "StepOutcome":
        return cls(stage=stage, status=StepStatus.FAILED, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == StepStatus.FAILED


class WorkflowResult(BaseModel):
    """Outcome of a whole orchestration run."""
    outcomes: list[StepOutcome] = Field(default_factory=list)
    aborted: bool = False
    exit_code: int = 0

    def outcome_for(self, stage: SetupStage) -> Optional[StepOutcome]:
        """Return the last outcome recorded for a stage, if any."""
        for outcome in reversed(self.outcomes):
            if outcome.stage == stage:
                return outcome
        return None


class LaunchConfig(BaseModel):
    """User configuration, loaded from ~/.launchkit/config.json when present."""
    model_config = ConfigDict(extra="forbid")

    # Workspace
    namespace: str = Field(
        default="nextjs",
        description="Projects live under <home>/dev/<namespace>"
    )

    # Scaffold
    framework_name: str = Field(default="Next.js")
    scaffold_command: list[str] = Field(
        default_factory=lambda: ["npx", "create-next-app@latest", "./"],
        min_length=1,
        description="Program and arguments, run inside the project directory"
    )
    manifest_file: str = Field(default="package.json")
    framework_config_files: list[str] = Field(
        default_factory=lambda: ["next.config.js", "next.config.mjs", "next.config.ts"]
    )
    framework_dependency: str = Field(
        default="next",
        description="Package name that marks the manifest as a framework project"
    )

    # Version control
    initial_commit_message: str = Field(default="Initial Next.js setup")

    # Deploy
    deploy_args: list[str] = Field(
        default_factory=lambda: ["--yes", "--prod", "--confirm"]
    )
    hosted_domain_suffix: str = Field(default=".vercel.app")

    # Interaction
    max_prompt_attempts: int = Field(
        default=1000,
        ge=1,
        description="Invalid answers tolerated before giving up on a prompt"
    )

    # Observability
    run_log_enabled: bool = Field(default=True, description="Append events to the JSONL run log")
