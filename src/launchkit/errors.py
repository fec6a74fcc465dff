"""Exceptions for unrecoverable startup and input conditions.

Stage failures are never raised; they are reported as StepOutcome values.
"""

from pathlib import Path
from typing import Optional


class LaunchError(Exception):
    """Base class for errors that end the process with exit code 1."""


class MissingHomeError(LaunchError):
    """The home directory variable is not set."""

    def __init__(self, variable: str = "HOME"):
        self.variable = variable
        super().__init__(f"{variable} environment variable not set")


class MissingToolError(LaunchError):
    """A required command-line tool is not installed."""

    def __init__(self, tool: str, display_name: str, install_hint: Optional[str] = None):
        self.tool = tool
        self.display_name = display_name
        self.install_hint = install_hint
        super().__init__(f"{display_name} ({tool}) not found. Install it first!")


class InvalidProjectNameError(LaunchError):
    """The project name is empty or would escape the workspace root."""


class InputClosedError(LaunchError):
    """No valid answer could be read from the operator."""


class ConfigError(LaunchError):
    """The configuration file could not be loaded."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(f"Invalid configuration in {path}: {detail}")


class ProjectDirectoryError(LaunchError):
    """A project or workspace directory could not be created."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(f"Failed to create directory {path}: {detail}")
