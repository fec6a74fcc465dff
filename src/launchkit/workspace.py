"""Workspace discovery.

Resolves the directories launchkit works in:
- Workspace root: <home>/dev/<namespace>, one sub-directory per project
- Settings directory: <home>/.launchkit (config.json, logs/runs.jsonl)
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from .errors import ConfigError, InvalidProjectNameError, MissingHomeError, ProjectDirectoryError
from .models import LaunchConfig, ProjectIdentity


SETTINGS_DIRNAME = ".launchkit"


def load_config(config_file: Path) -> LaunchConfig:
    """Load the user configuration, falling back to defaults when absent.

    Raises:
        ConfigError: If the file exists but is not a valid configuration.
    """
    if not config_file.exists():
        return LaunchConfig()
    try:
        return LaunchConfig.model_validate_json(config_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ConfigError(config_file, str(e)) from e


def validate_project_name(name: str) -> str:
    """Return the stripped project name.

    Raises:
        InvalidProjectNameError: If the name is empty or is not a single
            directory name.
    """
    name = name.strip()
    if not name:
        raise InvalidProjectNameError("Project name cannot be empty.")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidProjectNameError(
            f"Project name must be a plain directory name, got '{name}'."
        )
    return name


class Workspace:
    """Directories and configuration for one invocation."""

    def __init__(
        self,
        home: Path,
        config: Optional[LaunchConfig] = None,
        base_dir: Optional[Path] = None
    ):
        """Initialize workspace.

        Args:
            home: Home directory
            config: Loaded configuration (defaults when None)
            base_dir: Override for the workspace root
        """
        self.home = Path(home)
        self.config = config or LaunchConfig()
        self.settings_dir = self.home / SETTINGS_DIRNAME
        self.config_file = self.settings_dir / "config.json"
        self.run_log_file = self.settings_dir / "logs" / "runs.jsonl"
        self.base_dir = Path(base_dir) if base_dir else self.home / "dev" / self.config.namespace

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base_dir: Optional[Path] = None
    ) -> "Workspace":
        """Build the workspace from HOME and the user's config file.

        Raises:
            MissingHomeError: If HOME is not set.
            ConfigError: If the config file is invalid.
        """
        environ = os.environ if environ is None else environ
        home = environ.get("HOME")
        if not home:
            raise MissingHomeError("HOME")

        home_path = Path(home)
        config = load_config(home_path / SETTINGS_DIRNAME / "config.json")
        return cls(home_path, config=config, base_dir=base_dir)

    def ensure_base_dir(self) -> None:
        """Create the workspace root if it doesn't exist.

        Raises:
            ProjectDirectoryError: If the directory cannot be created.
        """
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProjectDirectoryError(self.base_dir, e.strerror or str(e)) from e

    def project(self, name: str) -> ProjectIdentity:
        """Identity of the named project under the workspace root."""
        name = validate_project_name(name)
        return ProjectIdentity(name=name, root_path=self.base_dir / name)

    def detect_current_project(self, cwd: Optional[Path] = None) -> Optional[ProjectIdentity]:
        """Identify the project containing the working directory.

        The project is the first path component below the workspace root,
        so running from a nested directory still finds it.

        Returns:
            The project identity, or None if cwd is not inside a project.
        """
        cwd = Path(cwd or Path.cwd()).resolve()
        try:
            relative = cwd.relative_to(self.base_dir.resolve())
        except ValueError:
            return None

        if not relative.parts:
            return None
        return self.project(relative.parts[0])
