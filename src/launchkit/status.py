"""Detection of completed setup stages.

Every check inspects ground truth directly (files on disk, the hosting
registry, the deployment registry). Nothing is inferred from which steps
ran earlier, because steps can fail halfway or be done by hand.
"""

import json
from pathlib import Path
from typing import Optional

from .command_runner import SubprocessRunner
from .models import LaunchConfig, ProjectIdentity, SetupStage, StageStatus
from .protocols import CommandRunner
from .tools import GH, VERCEL


class StatusProbe:
    """Reports which of the four setup stages are complete for a project.

    All checks are read-only. Failed registry queries (network, auth,
    missing CLI) count as "absent" and are never reported as errors.
    """

    def __init__(
        self,
        identity: ProjectIdentity,
        runner: Optional[CommandRunner] = None,
        config: Optional[LaunchConfig] = None
    ):
        self.identity = identity
        self.runner = runner or SubprocessRunner()
        self.config = config or LaunchConfig()

    @property
    def project_path(self) -> Path:
        return self.identity.root_path

    def has_scaffold(self) -> bool:
        """Check for a framework project.

        Requires the manifest file, plus either a framework config file or
        the framework package in the manifest's dependencies. Some
        templates ship without a config file, hence the second tier.
        """
        manifest = self.project_path / self.config.manifest_file
        if not manifest.is_file():
            return False

        for name in self.config.framework_config_files:
            if (self.project_path / name).exists():
                return True

        try:
            contents = manifest.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        return self._manifest_names_framework(contents)

    def _manifest_names_framework(self, contents: str) -> bool:
        """Look for the framework package in the manifest's dependency lists."""
        dependency = self.config.framework_dependency
        try:
            data = json.loads(contents)
        except json.JSONDecodeError:
            # Unparseable manifest: fall back to a quoted-name search
            return f'"{dependency}"' in contents

        if not isinstance(data, dict):
            return False

        for key in ("dependencies", "devDependencies", "peerDependencies"):
            section = data.get(key)
            if isinstance(section, dict) and dependency in section:
                return True
        return False

    def has_version_control(self) -> bool:
        """Check for repository metadata at the project root.

        Only the directory is checked; commit history is not validated.
        """
        return (self.project_path / ".git").exists()

    def has_remote_repo(self) -> bool:
        """Check whether the hosting registry knows a repo with the project name."""
        result = self.runner.run(GH, ["repo", "view", self.identity.name])
        return result.succeeded

    def has_deployment(self) -> bool:
        """Check whether the deployment listing mentions the project.

        This is a substring match of the directory name against `vercel ls`
        output, run inside the project directory. It is a heuristic: a
        different project whose name contains this one also matches.
        """
        if not self.project_path.is_dir():
            return False
        result = self.runner.run(VERCEL, ["ls"], cwd=self.project_path)
        token = self.project_path.name
        return bool(token) and token in result.stdout

    def check(self, stage: SetupStage) -> bool:
        """Run the check for a single stage."""
        checks = {
            SetupStage.SCAFFOLD: self.has_scaffold,
            SetupStage.VERSION_CONTROL: self.has_version_control,
            SetupStage.REMOTE_REPO: self.has_remote_repo,
            SetupStage.DEPLOY: self.has_deployment,
        }
        return checks[stage]()

    def snapshot(self) -> StageStatus:
        """Run all four checks and return a fresh snapshot."""
        return StageStatus(
            scaffolded=self.has_scaffold(),
            version_controlled=self.has_version_control(),
            remote_repo_exists=self.has_remote_repo(),
            deployed=self.has_deployment(),
        )
