"""
Progress Display Module

Show status lines to the user during provisioning.

Security Requirements:
- No credential exposure in output
- Errors go to stderr, everything else to stdout
"""

import sys
import time
from enum import Enum
from typing import Optional


class ProgressStage(Enum):
    """Progress stage indicators."""

    COMPLETED = "completed"
    FAILED = "failed"
    WARNING = "warning"


class ProgressDisplay:
    """
    Status line display for a provisioning run.

    Features:
    - Stage-based updates with status glyphs
    - Section headers with an icon
    - Elapsed time for long operations
    """

    SYMBOLS = {
        ProgressStage.COMPLETED: "✓",
        ProgressStage.FAILED: "❌",
        ProgressStage.WARNING: "⚠",
    }

    ASCII_SYMBOLS = {
        ProgressStage.COMPLETED: "OK",
        ProgressStage.FAILED: "FAIL",
        ProgressStage.WARNING: "WARN",
    }

    def __init__(self, use_unicode: bool = True, output_file=None, error_file=None):
        """
        Initialize progress display.

        Args:
            use_unicode: Use Unicode symbols (True) or ASCII (False)
            output_file: Output file object (default: sys.stdout)
            error_file: Error file object (default: sys.stderr)
        """
        self.use_unicode = use_unicode
        self.output_file = output_file or sys.stdout
        self.error_file = error_file or sys.stderr
        self.current_operation: Optional[str] = None
        self.start_time: Optional[float] = None

    def header(self, title: str) -> None:
        """Print a title underlined to its own width."""
        self._print(title)
        self._print("=" * len(title))

    def section(self, message: str, icon: str = "") -> None:
        """Print a blank line followed by a section heading."""
        prefix = f"{icon} " if icon and self.use_unicode else ""
        self._print(f"\n{prefix}{message}")

    def start_operation(self, name: str, estimated: Optional[str] = None, icon: str = "") -> None:
        """
        Begin a timed operation.

        Example:
            >>> progress = ProgressDisplay()
            >>> progress.start_operation("Creating Windows VM", estimated="2-3 minutes")
        """
        self.current_operation = name
        self.start_time = time.time()

        message = name
        if estimated:
            message += f" (this may take {estimated})"
        self.section(f"{message}...", icon)

    def complete(self, success: bool = True, message: Optional[str] = None) -> None:
        """
        Mark the current operation complete.

        Example:
            >>> progress.complete(success=True, message="VM created successfully!")
        """
        if success:
            stage = ProgressStage.COMPLETED
            default_message = f"{self.current_operation} completed"
        else:
            stage = ProgressStage.FAILED
            default_message = f"{self.current_operation} failed"

        final_message = message or default_message
        if self.start_time:
            elapsed = time.time() - self.start_time
            final_message += f" ({self._format_duration(elapsed)})"

        self.update(final_message, stage)

        self.current_operation = None
        self.start_time = None

    def update(self, message: str, stage: ProgressStage = ProgressStage.COMPLETED) -> None:
        """
        Print a status line; FAILED lines go to stderr.

        Example:
            >>> progress.update("Resource group created", ProgressStage.COMPLETED)
        """
        formatted = self._format_update(stage, message)
        if stage is ProgressStage.FAILED:
            self._print(formatted, file=self.error_file)
        else:
            self._print(formatted)

    def success(self, message: str) -> None:
        self.update(message, ProgressStage.COMPLETED)

    def warning(self, message: str) -> None:
        self.update(message, ProgressStage.WARNING)

    def error(self, message: str) -> None:
        self.update(message, ProgressStage.FAILED)

    def info(self, message: str = "") -> None:
        """Print a plain line without a glyph."""
        self._print(message)

    def _format_update(self, stage: ProgressStage, message: str) -> str:
        symbols = self.SYMBOLS if self.use_unicode else self.ASCII_SYMBOLS
        return f"{symbols.get(stage, '')} {message}"

    def _format_duration(self, seconds: float) -> str:
        """
        Format duration in human-readable format.

        Returns:
            str: Formatted duration (e.g., "2m 30s")
        """
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            return f"{hours}h {minutes}m"

    def _print(self, message: str, file=None) -> None:
        print(message, file=file or self.output_file, flush=True)
