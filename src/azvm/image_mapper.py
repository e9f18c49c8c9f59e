"""OS image presets for Azure VM provisioning.

This module maps short preset names to Azure VM image URNs and classifies a
resolved image as Windows or Linux.

Philosophy:
- Ruthless simplicity: Dict-based O(1) lookup
- Standard library only: No external dependencies
- Lenient: unknown identifiers pass through as literal image URNs

Public API:
    resolve_image: Map preset name to Azure URN (passthrough otherwise)
    detect_os_type: Classify an image string as Windows or Linux
    get_default_image: Return the default preset name
    list_supported_images: List all preset mappings
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "DEFAULT_IMAGE_PRESET",
    "IMAGE_PRESETS",
    "OSType",
    "detect_os_type",
    "get_default_image",
    "list_supported_images",
    "resolve_image",
]


class OSType(str, Enum):
    """OS family of a VM image."""

    WINDOWS = "windows"
    LINUX = "linux"

    @property
    def display_name(self) -> str:
        """Capitalized name for human-readable output."""
        return "Windows" if self is OSType.WINDOWS else "Linux"

    @property
    def nsg_rule(self) -> str:
        """Inbound network rule opened for this OS family."""
        return "RDP" if self is OSType.WINDOWS else "SSH"


# Preset name -> Azure URN (publisher:offer:sku:version)
IMAGE_PRESETS: dict[str, str] = {
    "windows-11": "MicrosoftWindowsDesktop:Windows-11:win11-23h2-pro:latest",
    "windows-10": "MicrosoftWindowsDesktop:Windows-10:win10-22h2-pro:latest",
    "windows-server-2022": "MicrosoftWindowsServer:WindowsServer:2022-datacenter:latest",
    "windows-server-2019": "MicrosoftWindowsServer:WindowsServer:2019-datacenter:latest",
    "ubuntu": "Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest",
    "ubuntu-20": "Canonical:0001-com-ubuntu-server-focal:20_04-lts:latest",
    "debian": "Debian:debian-11:11:latest",
    "centos": "OpenLogic:CentOS:7_9:latest",
    "rhel": "RedHat:RHEL:8-lvm:latest",
    "suse": "SUSE:sles-15-sp3:gen2:latest",
}

# Human-readable descriptions shown in --help
PRESET_DESCRIPTIONS: dict[str, str] = {
    "windows-11": "Windows 11 Pro (default)",
    "windows-10": "Windows 10 Pro",
    "windows-server-2022": "Windows Server 2022 Datacenter",
    "windows-server-2019": "Windows Server 2019 Datacenter",
    "ubuntu": "Ubuntu 22.04 LTS",
    "ubuntu-20": "Ubuntu 20.04 LTS",
    "debian": "Debian 11",
    "centos": "CentOS 7.9",
    "rhel": "Red Hat Enterprise Linux 8",
    "suse": "SUSE Linux Enterprise Server 15",
}

DEFAULT_IMAGE_PRESET = "windows-11"

_WINDOWS_MARKERS = ("windows", "win")


def get_default_image() -> str:
    """Return the default image preset name.

    Example:
        >>> get_default_image()
        'windows-11'
    """
    return DEFAULT_IMAGE_PRESET


def resolve_image(image: str) -> str:
    """Resolve an image preset name to its Azure URN.

    Lookup is exact (case-sensitive). Anything that is not a preset key is
    returned unchanged, so full URNs such as
    ``Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest`` and image
    aliases understood by ``az vm create`` pass straight through.

    Args:
        image: Preset name or raw Azure image identifier

    Returns:
        Azure image identifier

    Examples:
        >>> resolve_image("ubuntu")
        'Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest'

        >>> resolve_image("Debian:debian-12:12:latest")
        'Debian:debian-12:12:latest'
    """
    return IMAGE_PRESETS.get(image, image)


def detect_os_type(image: str) -> OSType:
    """Classify an image identifier as Windows or Linux.

    Any identifier containing "windows" or "win" (case-insensitive) is treated
    as Windows; everything else is Linux.

    Examples:
        >>> detect_os_type("MicrosoftWindowsDesktop:Windows-11:win11-23h2-pro:latest")
        <OSType.WINDOWS: 'windows'>

        >>> detect_os_type("Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest")
        <OSType.LINUX: 'linux'>
    """
    image_lower = image.lower()
    if any(marker in image_lower for marker in _WINDOWS_MARKERS):
        return OSType.WINDOWS
    return OSType.LINUX


def list_supported_images() -> dict[str, str]:
    """List all image presets and their URNs.

    Returns:
        Copy of the preset mapping
    """
    return IMAGE_PRESETS.copy()
