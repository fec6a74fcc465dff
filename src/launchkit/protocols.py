"""Protocol definitions for dependency injection.

These protocols define the seams between the orchestration logic and the
outside world, so tests can substitute fakes for real processes and
network queries.
"""

from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from .command_runner import CommandResult
from .models import SetupStage, StageStatus


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for executing external programs.

    Inputs are a program name, an argument list and a working directory;
    outputs are the exit code and captured stdout/stderr.
    """

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        cwd: Optional[Path] = None,
        capture: bool = True
    ) -> CommandResult:
        """Run a program to completion and return its result."""
        ...

    def exists(self, program: str) -> bool:
        """Check if a program is available."""
        ...


@runtime_checkable
class StageProbe(Protocol):
    """Protocol for observing which stages are complete."""

    def check(self, stage: SetupStage) -> bool:
        """Run the check for a single stage."""
        ...

    def snapshot(self) -> StageStatus:
        """Run all four checks."""
        ...
