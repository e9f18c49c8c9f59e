"""
Shared test fixtures and configuration for azvm tests.

This module provides common fixtures used across all test types:
- Isolated config file location (never reads ~/.azvm/config.toml)
- A fake Azure CLI that records every subprocess call
- Sample az CLI JSON responses
- Sample resolved VM configurations
"""

import json
import subprocess
from typing import Any
from unittest.mock import Mock, patch

import pytest

from azvm.config_manager import ConfigManager
from azvm.image_mapper import OSType
from azvm.vm_config import VMConfig

FIXED_TIMESTAMP_MS = 1718000000123
SAMPLE_PASSWORD = "Abcdef12!xyzQRST"  # noqa: S105 - test fixture, not a real credential

# ============================================================================
# AZ CLI RESPONSES
# ============================================================================

ACCOUNT_SHOW_RESPONSE: dict[str, Any] = {
    "environmentName": "AzureCloud",
    "id": "12345678-1234-1234-1234-123456789012",
    "isDefault": True,
    "name": "Pay-As-You-Go",
    "state": "Enabled",
    "tenantId": "87654321-4321-4321-4321-210987654321",
    "user": {"name": "dev@example.com", "type": "user"},
}

GROUP_CREATE_RESPONSE: dict[str, Any] = {
    "id": "/subscriptions/12345678-1234-1234-1234-123456789012/resourceGroups/vm-rg-1718000000123",
    "location": "northeurope",
    "name": "vm-rg-1718000000123",
    "properties": {"provisioningState": "Succeeded"},
}

VM_CREATE_RESPONSE: dict[str, Any] = {
    "fqdns": "",
    "id": "/subscriptions/12345678-1234-1234-1234-123456789012/resourceGroups/vm-rg-1718000000123/providers/Microsoft.Compute/virtualMachines/win-00000123",
    "location": "northeurope",
    "macAddress": "00-0D-3A-12-34-56",
    "powerState": "VM running",
    "privateIpAddress": "10.0.0.4",
    "publicIpAddress": "20.123.45.67",
    "resourceGroup": "vm-rg-1718000000123",
}


# ============================================================================
# FAKE AZURE CLI
# ============================================================================


class FakeAzureCLI:
    """Record subprocess calls and answer them like the Azure CLI would.

    Responses are matched by substring against the command line, most
    recently registered first. Unmatched commands succeed with empty output.
    """

    def __init__(self):
        self.calls: list[dict[str, Any]] = []
        self._responses: list[tuple[str, Any]] = []

    def configure_response(
        self, command_pattern: str, returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> None:
        self._responses.insert(
            0, (command_pattern, Mock(returncode=returncode, stdout=stdout, stderr=stderr))
        )

    def configure_error(self, command_pattern: str, error: Exception) -> None:
        self._responses.insert(0, (command_pattern, error))

    def run(self, cmd, **kwargs) -> Mock:
        self.calls.append({"cmd": cmd, "kwargs": kwargs})
        cmd_str = self._as_string(cmd)
        for pattern, response in self._responses:
            if pattern in cmd_str:
                if isinstance(response, Exception):
                    raise response
                return response
        return Mock(returncode=0, stdout="", stderr="")

    def commands(self) -> list[str]:
        return [self._as_string(call["cmd"]) for call in self.calls]

    def get_calls_matching(self, pattern: str) -> list[str]:
        return [cmd for cmd in self.commands() if pattern in cmd]

    @staticmethod
    def _as_string(cmd) -> str:
        return " ".join(cmd) if isinstance(cmd, list) else cmd


@pytest.fixture
def fake_az():
    """Fake Azure CLI with a logged-in account and successful provisioning.

    Patches subprocess.run and shutil.which for the duration of the test.
    """
    fake = FakeAzureCLI()
    fake.configure_response("az --version", stdout="azure-cli 2.61.0")
    fake.configure_response("az account show", stdout=json.dumps(ACCOUNT_SHOW_RESPONSE))
    fake.configure_response("az group create", stdout=json.dumps(GROUP_CREATE_RESPONSE))
    fake.configure_response("az vm create", stdout=json.dumps(VM_CREATE_RESPONSE))
    fake.configure_response("az group delete", stdout="")

    with (
        patch("subprocess.run", side_effect=fake.run),
        patch("shutil.which", return_value="/usr/bin/az"),
    ):
        yield fake


# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at an empty temporary directory.

    Tests must never read the operator's ~/.azvm/config.toml.
    """
    config_file = tmp_path / ".azvm" / "config.toml"
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_file)
    monkeypatch.delenv("AZVM_CONFIG", raising=False)
    return config_file


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed millisecond timestamp."""
    return lambda: FIXED_TIMESTAMP_MS


# ============================================================================
# VM CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def windows_config() -> VMConfig:
    return VMConfig(
        location="northeurope",
        name="win-00000123",
        size="Standard_D2s_v3",
        image="MicrosoftWindowsDesktop:Windows-11:win11-23h2-pro:latest",
        resource_group="vm-rg-1718000000123",
        username="azureuser",
        password=SAMPLE_PASSWORD,
        os_type=OSType.WINDOWS,
        name_generated=True,
        password_generated=True,
    )


@pytest.fixture
def linux_config() -> VMConfig:
    return VMConfig(
        location="uksouth",
        name="linux-vm-1718000000123",
        size="Standard_B2s",
        image="Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest",
        resource_group="vm-rg-1718000000123",
        username="azureuser",
        password=SAMPLE_PASSWORD,
        os_type=OSType.LINUX,
        name_generated=True,
        password_generated=True,
    )


@pytest.fixture
def completed_process():
    """Factory for subprocess.CompletedProcess results."""

    def _make(returncode: int = 0, stdout: str = "", stderr: str = ""):
        return subprocess.CompletedProcess(
            args="az", returncode=returncode, stdout=stdout, stderr=stderr
        )

    return _make
