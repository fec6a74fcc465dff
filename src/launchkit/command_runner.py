"""Process execution for external collaborators.

Every call blocks until the tool exits; there are no timeouts.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .tools import find_executable

# Exit code reported when the program could not be started at all
LAUNCH_FAILED = 127


@dataclass
class CommandResult:
    """Exit status and captured output of one invocation."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class SubprocessRunner:
    """Runs external tools with subprocess."""

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        cwd: Optional[Path] = None,
        capture: bool = True
    ) -> CommandResult:
        """Run a program and wait for it.

        Args:
            program: Executable name, resolved through find_executable
            args: Arguments passed after the program
            cwd: Working directory
            capture: Capture stdout/stderr; when False the tool shares
                the terminal so it can prompt the operator

        Returns:
            CommandResult. Output is decoded as UTF-8 with undecodable bytes
            replaced. Launch errors are reported with exit code 127 and the
            error text in stderr.
        """
        executable = find_executable(program) or program
        try:
            result = subprocess.run(
                [executable, *args],
                cwd=cwd,
                capture_output=capture,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False
            )
        except OSError as e:
            return CommandResult(returncode=LAUNCH_FAILED, stderr=str(e))

        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or ""
        )

    def exists(self, program: str) -> bool:
        """Check if a program is available on PATH."""
        return find_executable(program) is not None
