"""Azure CLI command sanitization for secure display.

This module redacts credential values from Azure CLI command lines before they
are echoed to the terminal or written to a log record.

Security Controls:
- Parameter-based redaction (--admin-password, --password, etc.)
- Quoted values with backslash escapes are redacted as a whole
- Terminal escape sequences are stripped before display

Usage:
    >>> from azvm.security import AzureCommandSanitizer
    >>> AzureCommandSanitizer.sanitize('az vm create --admin-password "Secret\\$1"')
    'az vm create --admin-password "[REDACTED]"'
"""

import re
from re import Pattern
from typing import ClassVar


class AzureCommandSanitizer:
    """Sanitize Azure CLI commands for safe display and logging.

    All methods are class methods; no instance is needed.

    Examples:
        >>> AzureCommandSanitizer.sanitize("az vm create --admin-password MyPass")
        'az vm create --admin-password [REDACTED]'
    """

    REDACTED = "[REDACTED]"

    # Matched case-insensitively (lowercase only in set)
    SENSITIVE_PARAMS: ClassVar[set[str]] = {
        "--password",
        "--admin-password",
        "--client-secret",
        "--ssh-key-value",
        "--ssh-key-values",
        "--custom-data",
        "--user-data",
        "--secret",
        "--token",
        "--access-token",
    }

    # --param "value with \" escapes"  |  --param="value"  |  --param 'value'
    PARAM_VALUE_QUOTED_PATTERN: ClassVar[Pattern] = re.compile(
        r"""(--[\w-]+)(\s+|=)(?:"((?:\\.|[^"\\])*)"|'([^']*)')""",
    )
    # --param value  |  --param=value
    PARAM_VALUE_UNQUOTED_PATTERN: ClassVar[Pattern] = re.compile(
        r"""(--[\w-]+)(\s+|=)([^\s"'-][^\s]*)""",
    )

    ANSI_ESCAPE_PATTERN: ClassVar[Pattern] = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")

    @classmethod
    def sanitize(cls, command: str) -> str:
        """Sanitize Azure CLI command for safe display.

        Args:
            command: Azure CLI command string

        Returns:
            Command with sensitive parameter values replaced by [REDACTED]
        """
        if not isinstance(command, str):
            command = str(command)

        result = cls._sanitize_terminal_escapes(command)
        return cls._sanitize_sensitive_parameters(result)

    @classmethod
    def is_sensitive_param(cls, param: str) -> bool:
        """Check whether a parameter name carries a secret value."""
        return param.lower() in cls.SENSITIVE_PARAMS

    @classmethod
    def _sanitize_sensitive_parameters(cls, command: str) -> str:
        def replace_quoted(match: re.Match) -> str:
            param, separator = match.group(1), match.group(2)
            if not cls.is_sensitive_param(param):
                return match.group(0)
            quote = '"' if match.group(3) is not None else "'"
            return f"{param}{separator}{quote}{cls.REDACTED}{quote}"

        def replace_unquoted(match: re.Match) -> str:
            param, separator = match.group(1), match.group(2)
            if not cls.is_sensitive_param(param):
                return match.group(0)
            return f"{param}{separator}{cls.REDACTED}"

        # Quoted values first so escaped quotes inside them are consumed whole
        result = cls.PARAM_VALUE_QUOTED_PATTERN.sub(replace_quoted, command)
        return cls.PARAM_VALUE_UNQUOTED_PATTERN.sub(replace_unquoted, result)

    @classmethod
    def _sanitize_terminal_escapes(cls, text: str) -> str:
        """Remove ANSI escape sequences and control characters."""
        text = cls.ANSI_ESCAPE_PATTERN.sub("", text)
        return "".join(char for char in text if char in "\n\t" or ord(char) >= 32)


def sanitize_azure_command(command: str) -> str:
    """Convenience function for AzureCommandSanitizer.sanitize."""
    return AzureCommandSanitizer.sanitize(command)


__all__ = ["AzureCommandSanitizer", "sanitize_azure_command"]
