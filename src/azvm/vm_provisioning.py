"""VM provisioning module.

This module issues the Azure CLI commands that create the resource group and
the VM, and the best-effort cleanup that deletes the group when VM creation
fails.

Security:
- The admin password is escaped for its double-quoted shell argument
- The displayed VM command is built with [REDACTED] in place of the password
- No retries: every command runs at most once
"""

import json
import logging
from dataclasses import dataclass

from azvm.azure_cli_executor import AzCommandResult, AzureCLIExecutor
from azvm.security import AzureCommandSanitizer
from azvm.vm_config import VMConfig

logger = logging.getLogger(__name__)

PUBLIC_IP_SKU = "Standard"
REDACTED = AzureCommandSanitizer.REDACTED


class ProvisioningError(Exception):
    """Raised when VM provisioning fails."""

    pass


class ResourceGroupError(ProvisioningError):
    """Raised when resource group creation fails."""

    pass


class VMCreationError(ProvisioningError):
    """Raised when VM creation fails."""

    pass


@dataclass
class VMDetails:
    """VM provisioning result details."""

    name: str
    resource_group: str
    location: str
    size: str
    public_ip: str | None = None
    private_ip: str | None = None
    power_state: str | None = None
    id: str | None = None


def escape_password(password: str) -> str:
    """Escape a password for use inside a double-quoted shell argument.

    Literal double quotes and dollar signs are backslash-escaped.

    Example:
        >>> escape_password('a"b$c')
        'a\\\\"b\\\\$c'
    """
    return password.replace('"', '\\"').replace("$", "\\$")


class VMProvisioner:
    """Provision a single Azure VM via the Azure CLI.

    Issues at most three commands per run:
    1. az group create
    2. az vm create
    3. az group delete --no-wait (only after a failed VM creation)
    """

    def __init__(self, executor: AzureCLIExecutor | None = None):
        """Initialize VM provisioner.

        Args:
            executor: Azure CLI executor (a visible, spinner-enabled one if None)
        """
        self._executor = executor or AzureCLIExecutor(show_command=True, show_spinner=True)

    def build_resource_group_command(self, resource_group: str, location: str) -> str:
        return f"az group create --name {resource_group} --location {location} --output json"

    def build_vm_create_command(self, config: VMConfig, redact: bool = False) -> str:
        """Build the 'az vm create' command line for a configuration.

        The inbound network rule follows the OS family (RDP or SSH).

        Args:
            config: Resolved VM configuration
            redact: Put [REDACTED] in place of the password (display form)
        """
        password = REDACTED if redact else escape_password(config.password)
        return (
            "az vm create"
            f" --resource-group {config.resource_group}"
            f" --name {config.name}"
            f" --image {config.image}"
            f" --admin-username {config.username}"
            f' --admin-password "{password}"'
            f" --size {config.size}"
            f" --public-ip-sku {PUBLIC_IP_SKU}"
            f" --nsg-rule {config.nsg_rule}"
            " --output json"
        )

    def build_delete_resource_group_command(self, resource_group: str, no_wait: bool = True) -> str:
        command = f"az group delete --name {resource_group} --yes"
        if no_wait:
            command += " --no-wait"
        return command

    def create_resource_group(self, resource_group: str, location: str) -> AzCommandResult:
        """Create an Azure resource group.

        Raises:
            ResourceGroupError: If creation fails
        """
        logger.debug(f"Creating resource group {resource_group} in {location}")
        result = self._executor.execute(
            self.build_resource_group_command(resource_group, location),
            status_message="Creating resource group...",
        )
        if not result.success:
            raise ResourceGroupError(f"Failed to create resource group: {result.error_message}")
        return result

    def create_vm(self, config: VMConfig) -> VMDetails:
        """Create the VM described by config.

        Returns:
            VMDetails parsed from the az CLI JSON output

        Raises:
            VMCreationError: If creation fails or the output cannot be parsed
        """
        logger.debug(f"Creating {config.os_type.value} VM {config.name} in {config.resource_group}")
        result = self._executor.execute(
            self.build_vm_create_command(config),
            status_message=f"Creating VM {config.name}...",
            display_command=self.build_vm_create_command(config, redact=True),
        )
        if not result.success:
            raise VMCreationError(f"Failed to create VM: {result.error_message}")

        try:
            vm_data = result.json()
        except json.JSONDecodeError as e:
            raise VMCreationError("Failed to parse VM creation response") from e
        if not isinstance(vm_data, dict):
            raise VMCreationError("Failed to parse VM creation response")

        return VMDetails(
            name=config.name,
            resource_group=config.resource_group,
            location=vm_data.get("location") or config.location,
            size=config.size,
            public_ip=vm_data.get("publicIpAddress"),
            private_ip=vm_data.get("privateIpAddress"),
            power_state=vm_data.get("powerState"),
            id=vm_data.get("id"),
        )

    def delete_resource_group(self, resource_group: str, no_wait: bool = True) -> bool:
        """Delete a resource group (best effort).

        Failures are logged and reported through the return value only; they
        are never retried or raised.

        Returns:
            True if the delete command was accepted
        """
        result = self._executor.execute(
            self.build_delete_resource_group_command(resource_group, no_wait=no_wait),
            status_message="Deleting resource group...",
        )
        if not result.success:
            logger.warning(
                f"Cleanup of resource group {resource_group} failed: {result.error_message}"
            )
            return False
        return True


__all__ = [
    "ProvisioningError",
    "ResourceGroupError",
    "VMCreationError",
    "VMDetails",
    "VMProvisioner",
    "escape_password",
]
