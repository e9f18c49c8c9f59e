"""Human-readable output for a provisioned VM.

Formats the resolved configuration before provisioning and the connection
details after it. Formatting functions return lines; the display_* functions
echo them.

The admin password appears exactly once, in the connection instructions.
"""

import click

from azvm.image_mapper import OSType
from azvm.vm_config import VMConfig
from azvm.vm_provisioning import VMDetails

SEPARATOR_WIDTH = 50
UNKNOWN_IP = "(not assigned)"


def format_configuration(config: VMConfig) -> list[str]:
    """Lines summarizing the configuration that is about to be provisioned."""
    return [
        "\n📝 Configuration:",
        f"   Location: {config.location}",
        f"   VM Name: {config.name}",
        f"   VM Size: {config.size}",
        f"   OS Type: {config.os_type.value}",
        f"   Image: {config.image}",
        f"   Resource Group: {config.resource_group}",
        f"   Username: {config.username}",
    ]


def format_windows_connection(config: VMConfig, ip_address: str) -> list[str]:
    return [
        "\n🔌 To Connect (RDP):",
        "   1. Open Remote Desktop Connection",
        f"   2. Enter IP: {ip_address}",
        f"   3. Username: .\\{config.username}",
        f"   4. Password: {config.password}",
        "\n💡 Tips:",
        "   - First RDP connection may take 5-10 minutes while Windows initializes",
        f'   - Use ".\\{config.username}" as username if "{config.username}" alone doesn\'t work',
    ]


def format_linux_connection(config: VMConfig, ip_address: str) -> list[str]:
    return [
        "\n🔌 To Connect (SSH):",
        f"   ssh {config.username}@{ip_address}",
        f"   Password: {config.password}",
        "\n💡 Tips:",
        "   - You can also use SSH key authentication for better security",
        "   - To enable GUI access, install a desktop environment and xrdp:",
        "     sudo apt update && sudo apt install ubuntu-desktop xrdp -y",
    ]


def format_management_commands(config: VMConfig) -> list[str]:
    rg, name = config.resource_group, config.name
    return [
        "\n⚡ Management Commands:",
        f"   Stop VM:    az vm stop --resource-group {rg} --name {name}",
        f"   Start VM:   az vm start --resource-group {rg} --name {name}",
        f"   Delete all: az group delete --name {rg} --yes",
        "   - Stop the VM when not in use to save costs",
    ]


def format_connection_details(config: VMConfig, details: VMDetails) -> list[str]:
    """Lines describing the created VM and how to connect to it."""
    os_display = config.os_type.display_name
    ip_address = details.public_ip or UNKNOWN_IP
    separator = "=" * SEPARATOR_WIDTH

    lines = [
        "\n" + separator,
        f"🎉 {os_display} VM Created Successfully!",
        separator,
        "\n📋 VM Details:",
        f"   IP Address: {ip_address}",
        f"   Username: {config.username}",
        f"   Location: {details.location}",
        f"   VM Name: {details.name}",
        f"   VM Size: {details.size}",
        f"   OS Type: {os_display}",
    ]

    if config.os_type is OSType.WINDOWS:
        lines.extend(format_windows_connection(config, ip_address))
    else:
        lines.extend(format_linux_connection(config, ip_address))

    lines.extend(format_management_commands(config))
    lines.append("\n" + separator)
    return lines


def display_configuration(config: VMConfig) -> None:
    for line in format_configuration(config):
        click.echo(line)


def display_connection_details(config: VMConfig, details: VMDetails) -> None:
    for line in format_connection_details(config, details):
        click.echo(line)


__all__ = [
    "display_configuration",
    "display_connection_details",
    "format_configuration",
    "format_connection_details",
    "format_management_commands",
]
