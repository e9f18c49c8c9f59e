"""VM configuration resolution.

Turns flat ``--key=value`` command-line tokens into an immutable VMConfig.

Resolution is a fixed pipeline of pure steps:
1. parse_tokens          - tokens -> overrides (lenient, unknown keys ignored)
2. apply_defaults        - defaults + overrides
3. resolve_image         - preset name -> Azure URN
4. detect_os_type        - Windows/Linux from the final image string
5. default_vm_name       - generated name when none was supplied
6. default_resource_group
7. generate_secure_password - generated password when none was supplied

No subprocess or network calls happen here; resolution never fails.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from azvm.config_manager import AzvmConfig
from azvm.image_mapper import OSType, detect_os_type, resolve_image
from azvm.password_generator import generate_secure_password

logger = logging.getLogger(__name__)

# Command-line key -> VMConfig field
RECOGNIZED_KEYS: dict[str, str] = {
    "location": "location",
    "name": "name",
    "size": "size",
    "image": "image",
    "resourceGroup": "resource_group",
    "username": "username",
    "password": "password",
}

# Azure rejects Windows computer names longer than 15 characters
WINDOWS_MAX_NAME_LENGTH = 15
WINDOWS_NAME_PREFIX = "win-"
WINDOWS_NAME_DIGITS = 8
LINUX_NAME_PREFIX = "linux-vm-"
RESOURCE_GROUP_PREFIX = "vm-rg-"


@dataclass(frozen=True)
class VMConfig:
    """Fully resolved VM configuration."""

    location: str
    name: str
    size: str
    image: str
    resource_group: str
    username: str
    password: str = field(repr=False)
    os_type: OSType
    name_generated: bool = False
    password_generated: bool = False

    @property
    def nsg_rule(self) -> str:
        """Inbound rule to open (RDP for Windows, SSH for Linux)."""
        return self.os_type.nsg_rule

    @property
    def is_windows(self) -> bool:
        return self.os_type is OSType.WINDOWS


def current_timestamp_ms() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def parse_tokens(tokens: Iterable[str]) -> dict[str, str]:
    """Parse ``--key=value`` tokens into overrides keyed by VMConfig field.

    Tokens that do not start with ``--``, have no ``=``, have an empty value,
    or name an unrecognized key are ignored. The value is everything after the
    first ``=``. A later token for the same key wins.

    Examples:
        >>> parse_tokens(["--location=uksouth", "--resourceGroup=my-rg"])
        {'location': 'uksouth', 'resource_group': 'my-rg'}

        >>> parse_tokens(["--colour=blue", "--name", "stray"])
        {}
    """
    overrides: dict[str, str] = {}
    for token in tokens:
        if not token.startswith("--"):
            logger.debug("Ignoring token without '--' prefix")
            continue

        key, sep, value = token[2:].partition("=")
        if key not in RECOGNIZED_KEYS:
            logger.debug(f"Ignoring unrecognized option: --{key}")
            continue
        if not sep or not value:
            logger.debug(f"Ignoring option without a value: --{key}")
            continue

        overrides[RECOGNIZED_KEYS[key]] = value

    return overrides


def apply_defaults(overrides: dict[str, str], defaults: AzvmConfig) -> dict[str, str]:
    """Merge overrides on top of the configured defaults."""
    merged = {
        "location": defaults.default_location,
        "size": defaults.default_size,
        "image": defaults.default_image,
        "username": defaults.default_username,
    }
    merged.update(overrides)
    return merged


def default_vm_name(os_type: OSType, timestamp_ms: int) -> str:
    """Generate a VM name from a millisecond timestamp.

    Windows names use the last 8 digits of the timestamp to stay within the
    15-character computer name limit; Linux names carry the full timestamp.

    Examples:
        >>> default_vm_name(OSType.WINDOWS, 1718000000123)
        'win-00000123'
        >>> default_vm_name(OSType.LINUX, 1718000000123)
        'linux-vm-1718000000123'
    """
    if os_type is OSType.WINDOWS:
        digits = str(timestamp_ms)[-WINDOWS_NAME_DIGITS:].zfill(WINDOWS_NAME_DIGITS)
        return f"{WINDOWS_NAME_PREFIX}{digits}"
    return f"{LINUX_NAME_PREFIX}{timestamp_ms}"


def default_resource_group(timestamp_ms: int) -> str:
    """Generate a unique resource group name."""
    return f"{RESOURCE_GROUP_PREFIX}{timestamp_ms}"


def resolve_config(
    tokens: Iterable[str],
    defaults: AzvmConfig | None = None,
    clock: Callable[[], int] = current_timestamp_ms,
    password_factory: Callable[[], str] = generate_secure_password,
) -> VMConfig:
    """Resolve command-line tokens into a VMConfig.

    Args:
        tokens: Raw ``--key=value`` tokens
        defaults: Defaults to start from (built-in defaults if None)
        clock: Source of the millisecond timestamp used in generated names
        password_factory: Source of generated passwords

    Returns:
        Immutable VMConfig
    """
    settings = apply_defaults(parse_tokens(tokens), defaults or AzvmConfig())

    image = resolve_image(settings["image"])
    os_type = detect_os_type(image)

    timestamp_ms = clock()

    name = settings.get("name")
    name_generated = name is None
    if name is None:
        name = default_vm_name(os_type, timestamp_ms)

    resource_group = settings.get("resource_group") or default_resource_group(timestamp_ms)

    password = settings.get("password")
    password_generated = password is None
    if password is None:
        password = password_factory()

    config = VMConfig(
        location=settings["location"],
        name=name,
        size=settings["size"],
        image=image,
        resource_group=resource_group,
        username=settings["username"],
        password=password,
        os_type=os_type,
        name_generated=name_generated,
        password_generated=password_generated,
    )
    logger.debug(f"Resolved configuration: {config}")
    return config


__all__ = [
    "RECOGNIZED_KEYS",
    "WINDOWS_MAX_NAME_LENGTH",
    "VMConfig",
    "apply_defaults",
    "default_resource_group",
    "default_vm_name",
    "parse_tokens",
    "resolve_config",
]
