"""Security module for azvm.

- AzureCommandSanitizer: Redact credentials from Azure CLI commands before display/logging

Example:
    >>> from azvm.security import AzureCommandSanitizer
    >>> AzureCommandSanitizer.sanitize("az vm create --admin-password Secret")
    'az vm create --admin-password [REDACTED]'
"""

from azvm.security.azure_command_sanitizer import (
    AzureCommandSanitizer,
    sanitize_azure_command,
)

__all__ = [
    "AzureCommandSanitizer",
    "sanitize_azure_command",
]
