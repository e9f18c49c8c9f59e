"""Configuration management module.

This module loads optional user defaults from a TOML file. The defaults
replace the built-in location, size, image and username that the argument
resolver starts from; command-line tokens always take precedence.

Security:
- Config file permissions: 0600 (owner read/write only)
- Never stores credentials (passwords are not a config key)
"""

import logging
import os
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from azvm.image_mapper import DEFAULT_IMAGE_PRESET

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "northeurope"
DEFAULT_SIZE = "Standard_D2s_v3"
DEFAULT_IMAGE = DEFAULT_IMAGE_PRESET
DEFAULT_USERNAME = "azureuser"

CONFIG_ENV_VAR = "AZVM_CONFIG"


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


@dataclass(frozen=True)
class AzvmConfig:
    """Defaults applied before command-line overrides."""

    default_location: str = DEFAULT_LOCATION
    default_size: str = DEFAULT_SIZE
    default_image: str = DEFAULT_IMAGE
    default_username: str = DEFAULT_USERNAME

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AzvmConfig":
        """Create from dictionary, ignoring unknown keys.

        Raises:
            ConfigError: If a known key holds a non-string or empty value
        """
        values: dict[str, str] = {}
        for key in cls.__dataclass_fields__:
            if key not in data:
                continue
            value = data[key]
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Config key '{key}' must be a non-empty string")
            values[key] = value.strip()

        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {', '.join(unknown)}")

        return cls(**values)


class ConfigManager:
    """Load azvm configuration file.

    Configuration is read from ~/.azvm/config.toml, or from the path named by
    the AZVM_CONFIG environment variable.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".azvm"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Priority order:
        1. custom_path argument
        2. AZVM_CONFIG environment variable
        3. ~/.azvm/config.toml

        Raises:
            ConfigError: If an explicitly requested file does not exist
        """
        explicit = custom_path or os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            path = Path(explicit).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> AzvmConfig:
        """Load configuration from file.

        Returns:
            AzvmConfig object (built-in defaults when no file exists)

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return AzvmConfig()

        try:
            mode = config_path.stat().st_mode & 0o777
            if mode & 0o077:
                logger.warning(
                    f"Config file has insecure permissions: {oct(mode)}. Fixing to 0600..."
                )
                os.chmod(config_path, 0o600)

            with open(config_path, "rb") as f:
                data = tomllib.load(f)

        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return AzvmConfig.from_dict(data)


__all__ = [
    "DEFAULT_IMAGE",
    "DEFAULT_LOCATION",
    "DEFAULT_SIZE",
    "DEFAULT_USERNAME",
    "AzvmConfig",
    "ConfigError",
    "ConfigManager",
]
