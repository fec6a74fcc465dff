"""Operator interaction: status checklist, menu and validated prompts."""

import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape

from .errors import InputClosedError
from .models import MenuChoice, ProjectIdentity, StageStatus

# Windows-compatible symbols (cp1252 doesn't support Unicode checkmarks)
if sys.platform == "win32":
    SYM_OK = "[OK]"
    SYM_FAIL = "[X]"
    SYM_WARN = "[!]"
else:
    SYM_OK = "✓"
    SYM_FAIL = "✗"
    SYM_WARN = "⚠"

# Markup-safe forms for use inside rich markup strings
MARK_OK = escape(SYM_OK)
MARK_FAIL = escape(SYM_FAIL)
MARK_WARN = escape(SYM_WARN)

YES_TOKENS = frozenset({"y", "yes"})
NO_TOKENS = frozenset({"n", "no"})

MENU_LABELS = {
    MenuChoice.FULL_SETUP: "Full setup ({framework} + Git + GitHub + Vercel)",
    MenuChoice.SCAFFOLD_ONLY: "{framework} project bootstrapping only",
    MenuChoice.VERSION_CONTROL_ONLY: "Git initialization only",
    MenuChoice.REMOTE_REPO_ONLY: "GitHub repository creation only",
    MenuChoice.DEPLOY_ONLY: "Vercel deployment only",
    MenuChoice.EXIT: "Exit",
}


class InteractionController:
    """Renders status and the menu, and reads validated answers.

    Input comes from an injected line stream (stdin when none is given), so
    prompts can be driven from tests. Invalid answers are rejected with a
    message and asked again; the retry loop is bounded only to stop a
    closed or runaway input source from spinning forever.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        max_attempts: int = 1000,
        framework_name: str = "Next.js"
    ):
        self.console = console or Console()
        self.stream = stream
        self.max_attempts = max_attempts
        self.framework_name = framework_name

    def _read_line(self, prompt: str) -> str:
        """Read one raw line, raising InputClosedError at end of input."""
        try:
            line = self.console.input(prompt, markup=False, stream=self.stream)
        except EOFError:
            raise InputClosedError("Input closed before an answer was given") from None
        # A stream returns "" only at end of input; blank lines keep their newline
        if self.stream is not None and line == "":
            raise InputClosedError("Input closed before an answer was given")
        return line.strip()

    def render_status(self, identity: ProjectIdentity, status: StageStatus) -> None:
        """Print the fixed-order status checklist."""
        def mark(done: bool) -> str:
            return f"[green]{MARK_OK}[/green]" if done else f"[red]{MARK_FAIL}[/red]"

        self.console.print(f"\n[bold]Current Status:[/bold] {escape(identity.name)}")
        self.console.print(f"  {self.framework_name} Project: {mark(status.scaffolded)}")
        self.console.print(f"  Git Initialized: {mark(status.version_controlled)}")
        self.console.print(f"  GitHub Repo: {mark(status.remote_repo_exists)}")
        self.console.print(f"  Vercel Deployed: {mark(status.deployed)}")

    def render_menu(self) -> None:
        """Print the six menu entries."""
        self.console.print("\n[bold]What would you like to do?[/bold]")
        for choice in MenuChoice:
            label = MENU_LABELS[choice].format(framework=self.framework_name)
            self.console.print(f"{choice.value}. {label}")

    def read_choice(self, minimum: int, maximum: int) -> int:
        """Read an integer within [minimum, maximum], asking again until valid."""
        for _ in range(self.max_attempts):
            answer = self._read_line(f"\nEnter your choice ({minimum}-{maximum}): ")
            try:
                choice = int(answer)
            except ValueError:
                choice = None

            if choice is not None and minimum <= choice <= maximum:
                return choice
            self.console.print(
                f"[red]{MARK_FAIL}[/red] Invalid choice. "
                f"Please enter a number between {minimum} and {maximum}."
            )

        raise InputClosedError(f"No valid choice after {self.max_attempts} attempts")

    def read_menu_choice(self) -> MenuChoice:
        """Read a menu entry."""
        return MenuChoice(self.read_choice(min(MenuChoice), max(MenuChoice)))

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question. There is no default answer."""
        for _ in range(self.max_attempts):
            answer = self._read_line(f"{question} (y/n): ").lower()
            if answer in YES_TOKENS:
                return True
            if answer in NO_TOKENS:
                return False
            self.console.print(f"[red]{MARK_FAIL}[/red] Invalid input. Please enter 'y' or 'n'.")

        raise InputClosedError(f"No yes/no answer after {self.max_attempts} attempts")

    def ask_text(self, prompt: str) -> str:
        """Ask for a line of free text (may be empty)."""
        return self._read_line(f"{prompt}: ")

    def info(self, message: str) -> None:
        self.console.print(message)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{MARK_WARN}  {message}[/yellow]")
