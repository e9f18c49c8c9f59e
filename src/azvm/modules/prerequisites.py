"""
Prerequisites Checker Module

Verifies the Azure CLI is installed before any Azure operation.

Security Requirements:
- No credential storage
- Read-only system checks
- No subprocess calls (PATH lookup only)
"""

import logging
import platform
import shutil
from dataclasses import dataclass
from typing import ClassVar

logger = logging.getLogger(__name__)

AZURE_CLI_DOCS_URL = "https://docs.microsoft.com/en-us/cli/azure/install-azure-cli"


@dataclass
class PrerequisiteResult:
    """Result of prerequisite checks."""

    all_available: bool
    missing: list[str]
    platform_name: str


class PrerequisiteError(Exception):
    """Raised when prerequisites are missing."""

    pass


class PrerequisiteChecker:
    """
    Check required external tools are installed.

    Required tools:
    - az (Azure CLI)
    """

    REQUIRED_TOOLS: ClassVar[list[str]] = ["az"]

    @classmethod
    def check_tool(cls, tool_name: str) -> bool:
        """
        Check if a single tool is available in PATH.

        Security: Uses shutil.which (safe, no subprocess)
        """
        result = shutil.which(tool_name)
        if result:
            logger.debug(f"Found {tool_name} at {result}")
            return True
        logger.debug(f"Tool not found: {tool_name}")
        return False

    @classmethod
    def check_all(cls) -> PrerequisiteResult:
        """
        Check all prerequisites and return comprehensive result.

        Example:
            >>> result = PrerequisiteChecker.check_all()
            >>> if not result.all_available:
            ...     print(f"Missing: {result.missing}")
        """
        missing = [tool for tool in cls.REQUIRED_TOOLS if not cls.check_tool(tool)]

        result = PrerequisiteResult(
            all_available=(len(missing) == 0),
            missing=missing,
            platform_name=cls.detect_platform(),
        )

        if not result.all_available:
            logger.debug(f"Missing prerequisites: {', '.join(missing)}")

        return result

    @classmethod
    def detect_platform(cls) -> str:
        """
        Detect the operating system platform.

        Returns:
            str: Platform name (macos, linux, windows, unknown)
        """
        system = platform.system().lower()

        if system == "darwin":
            return "macos"
        if system == "linux":
            return "linux"
        if system == "windows":
            return "windows"
        return "unknown"

    @classmethod
    def format_missing_message(cls, missing: list[str], platform_name: str) -> str:
        """
        Format user-friendly installation instructions for missing tools.

        Args:
            missing: List of missing tool names
            platform_name: Platform name from detect_platform()

        Returns:
            str: Formatted installation instructions
        """
        if not missing:
            return "All prerequisites are installed."

        lines: list[str] = [f"Missing required tools: {', '.join(missing)}", ""]
        lines.append(f"Platform: {platform_name}")
        lines.append("")
        lines.append("Install Azure CLI:")

        if platform_name == "macos":
            lines.append("  brew install azure-cli")
        elif platform_name == "linux":
            lines.append("  curl -sL https://aka.ms/InstallAzureCLIDeb | sudo bash")
        elif platform_name == "windows":
            lines.append("  winget install -e --id Microsoft.AzureCLI")
        lines.append(f"  See: {AZURE_CLI_DOCS_URL}")

        lines.append("")
        lines.append("After installing, run 'az login' and then 'azvm' again.")
        return "\n".join(lines)


def check_prerequisites() -> PrerequisiteResult:
    """
    Check all prerequisites (convenience function).

    Example:
        >>> from azvm.modules.prerequisites import check_prerequisites
        >>> result = check_prerequisites()
    """
    return PrerequisiteChecker.check_all()
