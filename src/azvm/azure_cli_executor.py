"""Azure CLI command execution with visibility.

Runs Azure CLI command lines as opaque, blocking subprocesses and captures
their output:
- The sanitized command is displayed before execution
- A spinner is shown for long-running commands on interactive terminals
- Plain text output in CI, pipes and dumb terminals

Commands are executed through the system shell because the provisioning
command embeds a double-quoted, backslash-escaped password argument.

Security:
- Displayed and logged commands pass through AzureCommandSanitizer
- Callers holding a secret pass a pre-redacted display_command
- Captured output is never logged at INFO level or above

Usage:
    >>> executor = AzureCLIExecutor()
    >>> result = executor.execute("az group create --name rg --location uksouth")
    ➤ az group create --name rg --location uksouth
    >>> result.success
    True
"""

import json
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Any

import click
from rich.console import Console
from rich.text import Text

from azvm.security import AzureCommandSanitizer

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "➤"


@dataclass
class AzCommandResult:
    """Outcome of one Azure CLI invocation."""

    command: str  # sanitized form, safe to display
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def error_message(self) -> str:
        """Best available diagnostic text for a failed command."""
        return self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"

    def json(self) -> Any:
        """Parse stdout as JSON.

        Raises:
            json.JSONDecodeError: If stdout is not valid JSON
        """
        return json.loads(self.stdout)


# ============================================================================
# TTY Detection
# ============================================================================


class TTYDetector:
    """Detect TTY vs non-TTY environments.

    Decides between rich output (colors, spinners) and plain text lines.
    """

    CI_ENV_VARS = ("CI", "GITHUB_ACTIONS", "TRAVIS", "CIRCLECI", "GITLAB_CI")

    @staticmethod
    def is_tty() -> bool:
        """Check if stdout is an interactive terminal (and not a CI job)."""
        if any(os.getenv(var) for var in TTYDetector.CI_ENV_VARS):
            return False

        try:
            return sys.stdout.isatty()
        except AttributeError:
            return False

    @staticmethod
    def supports_color() -> bool:
        """Check if colored output should be used (honors NO_COLOR)."""
        if os.getenv("NO_COLOR"):
            return False
        return TTYDetector.is_tty()

    @staticmethod
    def supports_interactive_features() -> bool:
        """Check if spinners and live updates should be used."""
        if os.getenv("TERM") == "dumb":
            return False
        return TTYDetector.is_tty()


# ============================================================================
# Command Display
# ============================================================================


class CommandDisplayFormatter:
    """Echo commands to the terminal before they run."""

    def __init__(self, use_color: bool | None = None, console: Console | None = None):
        self.use_color = use_color if use_color is not None else TTYDetector.supports_color()
        self.console = console or (Console() if self.use_color else None)

    def format(self, command: str) -> str:
        """Plain-text form of the command line.

        Examples:
            >>> CommandDisplayFormatter(use_color=False).format("az vm list")
            '➤ az vm list'
        """
        return f"{COMMAND_PREFIX} {command}"

    def display(self, command: str) -> None:
        if self.use_color and self.console:
            text = Text(f"{COMMAND_PREFIX} ", style="bold blue")
            text.append(command, style="cyan")
            self.console.print(text)
        else:
            click.echo(self.format(command))


# ============================================================================
# Azure CLI Executor
# ============================================================================


class AzureCLIExecutor:
    """Execute Azure CLI command lines with visibility.

    Examples:
        >>> executor = AzureCLIExecutor(show_command=False)
        >>> result = executor.execute("az --version")
        >>> result.returncode
        0
    """

    DEFAULT_STATUS_MESSAGE = "Waiting for Azure CLI..."

    def __init__(
        self,
        show_command: bool = True,
        show_spinner: bool = False,
        formatter: CommandDisplayFormatter | None = None,
    ):
        """Initialize Azure CLI executor.

        Args:
            show_command: Echo the sanitized command before running it
            show_spinner: Show a spinner while the command runs (TTY only)
            formatter: Command display formatter (auto-configured if None)
        """
        self.show_command = show_command
        self.show_spinner = show_spinner
        self.formatter = formatter or CommandDisplayFormatter()

    def execute(
        self,
        command: str,
        status_message: str | None = None,
        display_command: str | None = None,
    ) -> AzCommandResult:
        """Run an Azure CLI command line and capture its output.

        Blocks until the subprocess exits. A command that cannot be started is
        reported as a failed result with exit code 127.

        Args:
            command: Full command line, e.g. "az group create --name rg ..."
            status_message: Spinner text while the command runs
            display_command: Form of the command to show and log, for callers
                that can build it without secrets (sanitized either way)

        Returns:
            AzCommandResult

        Raises:
            KeyboardInterrupt: If the user cancels with Ctrl+C
        """
        if not command:
            raise ValueError("Command cannot be empty")

        display_command = AzureCommandSanitizer.sanitize(display_command or command)
        if self.show_command:
            self.formatter.display(display_command)
        logger.debug(f"Executing: {display_command}")

        try:
            if self.show_spinner and TTYDetector.supports_interactive_features():
                console = self.formatter.console or Console()
                with console.status(status_message or self.DEFAULT_STATUS_MESSAGE):
                    completed = self._run(command)
            else:
                completed = self._run(command)
        except OSError as e:
            logger.debug(f"Failed to start command: {e}")
            return AzCommandResult(
                command=display_command,
                returncode=127,
                stdout="",
                stderr=f"Failed to start command: {e}",
            )

        logger.debug(f"Command exited with code {completed.returncode}")
        return AzCommandResult(
            command=display_command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    @staticmethod
    def _run(command: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(  # noqa: S602 - password argument relies on shell quoting
            command, shell=True, capture_output=True, text=True, check=False
        )


__all__ = [
    "AzCommandResult",
    "AzureCLIExecutor",
    "CommandDisplayFormatter",
    "TTYDetector",
]
