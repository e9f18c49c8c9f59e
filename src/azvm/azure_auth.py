"""Azure authentication checks.

This module confirms that the Azure CLI is installed and that the operator
has an active session. It NEVER stores credentials - the session and its
tokens are owned by the Azure CLI (~/.azure/).

Security:
- No credential storage
- Delegates to az CLI
- Only the signed-in user name and subscription metadata are read
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the operator is not logged in to Azure."""

    pass


class AccountInfoError(AuthenticationError):
    """Raised when 'az account show' succeeds but lacks the signed-in user name."""

    pass


@dataclass
class AzureAccount:
    """Active Azure CLI account."""

    user_name: str
    subscription_id: Optional[str] = None
    subscription_name: Optional[str] = None
    tenant_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: object) -> "AzureAccount":
        """Build from 'az account show' JSON.

        Raises:
            AccountInfoError: If user.name is missing or empty
        """
        if not isinstance(data, dict):
            raise AccountInfoError("Azure account information is not a JSON object")

        user = data.get("user")
        user_name = user.get("name") if isinstance(user, dict) else None
        if not isinstance(user_name, str) or not user_name:
            raise AccountInfoError(
                "Azure account information does not include the signed-in user name"
            )

        return cls(
            user_name=user_name,
            subscription_id=data.get("id"),
            subscription_name=data.get("name"),
            tenant_id=data.get("tenantId"),
        )


class AzureAuthenticator:
    """Check Azure CLI availability and login state.

    Both checks shell out to the az CLI; the results are not cached because
    each runs once per invocation.
    """

    def check_az_cli_available(self) -> bool:
        """Check if Azure CLI is available.

        Returns:
            True if 'az --version' runs and exits 0
        """
        try:
            result = subprocess.run(["az", "--version"], capture_output=True, text=True)
        except (FileNotFoundError, PermissionError) as e:
            logger.debug(f"az CLI not available: {e}")
            return False

        if result.returncode != 0:
            logger.debug(f"'az --version' exited with code {result.returncode}")
            return False
        return True

    def get_account(self) -> AzureAccount:
        """Get the active Azure CLI account.

        Returns:
            AzureAccount for the signed-in user

        Raises:
            AuthenticationError: If not logged in (command failed or output is not JSON)
            AccountInfoError: If the account JSON has no user name
        """
        try:
            result = subprocess.run(
                ["az", "account", "show", "--output", "json"], capture_output=True, text=True
            )
        except OSError as e:
            raise AuthenticationError(f"Failed to run 'az account show': {e}") from e

        if result.returncode != 0:
            logger.debug(f"'az account show' failed: {result.stderr.strip()}")
            raise AuthenticationError("Not logged in to Azure. Please run: az login")

        try:
            account_data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise AuthenticationError(
                "Could not read Azure account information. Please run: az login"
            ) from e

        account = AzureAccount.from_json(account_data)
        logger.debug(f"Active subscription: {account.subscription_name} ({account.subscription_id})")
        return account


__all__ = ["AccountInfoError", "AuthenticationError", "AzureAccount", "AzureAuthenticator"]
