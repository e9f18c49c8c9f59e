"""CLI entry point for azvm.

Creates one Azure VM with sensible defaults:
- Resolves ``--key=value`` options into a VM configuration
- Checks the Azure CLI is installed and logged in
- Creates a resource group, then the VM
- Deletes the resource group again if VM creation fails
- Prints connection instructions

Usage:
    azvm                         # Windows 11 VM in northeurope
    azvm --image=ubuntu          # Ubuntu 22.04 VM
    azvm --help                  # Show help
"""

import logging
import sys

import click

from azvm import __version__
from azvm.azure_auth import AccountInfoError, AuthenticationError, AzureAuthenticator
from azvm.config_manager import AzvmConfig, ConfigError, ConfigManager
from azvm.connection_display import display_configuration, display_connection_details
from azvm.modules.prerequisites import (
    PrerequisiteChecker,
    PrerequisiteError,
    check_prerequisites,
)
from azvm.modules.progress import ProgressDisplay
from azvm.password_generator import check_password_complexity
from azvm.vm_config import VMConfig, resolve_config
from azvm.vm_provisioning import ResourceGroupError, VMCreationError, VMProvisioner

logger = logging.getLogger(__name__)

VM_CREATION_ESTIMATE = "2-3 minutes"


class AzvmCommand(click.Command):
    """Command that hands malformed flag tokens to the resolver untouched.

    Click would reject ``--help=yes`` or ``--verbose=1`` with a usage error and
    would expand an unknown short cluster such as ``-xh`` into ``-h``. Such tokens
    are moved behind a ``--`` delimiter so they arrive as ordinary tokens, which
    the resolver then ignores.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        own_options = {
            opt for param in self.get_params(ctx) for opt in (*param.opts, *param.secondary_opts)
        }
        kept: list[str] = []
        passthrough: list[str] = []
        for arg in args:
            if self._is_malformed_flag(arg, own_options):
                passthrough.append(arg)
            else:
                kept.append(arg)

        if passthrough:
            kept = [*kept, "--", *passthrough]
        return super().parse_args(ctx, kept)

    @staticmethod
    def _is_malformed_flag(arg: str, own_options: set[str]) -> bool:
        if arg.startswith("--"):
            name, sep, _ = arg.partition("=")
            return bool(sep) and name in own_options
        return arg.startswith("-") and len(arg) > 1 and arg not in own_options


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _load_defaults(progress: ProgressDisplay) -> AzvmConfig:
    """Load configured defaults, falling back to built-in defaults on error."""
    try:
        return ConfigManager.load_config()
    except ConfigError as e:
        progress.warning(f"{e}. Using built-in defaults.")
        return AzvmConfig()


def _check_prerequisites(authenticator: AzureAuthenticator) -> None:
    """Ensure the Azure CLI is on PATH and runs.

    Raises:
        PrerequisiteError: With installation instructions if az is unavailable
    """
    result = check_prerequisites()
    if result.all_available and authenticator.check_az_cli_available():
        return

    missing = result.missing or ["az"]
    raise PrerequisiteError(
        PrerequisiteChecker.format_missing_message(missing, result.platform_name)
    )


def _warn_on_weak_password(config: VMConfig, progress: ProgressDisplay) -> None:
    if config.password_generated or check_password_complexity(config.password):
        return
    progress.warning(
        "The supplied password may be rejected by Azure "
        "(12-72 characters with 3 of: lowercase, uppercase, digit, special character)"
    )


def _cleanup_resource_group(
    provisioner: VMProvisioner, resource_group: str, progress: ProgressDisplay
) -> None:
    """Best-effort, non-blocking deletion of a resource group."""
    progress.section("Cleaning up resources...", "🧹")
    if provisioner.delete_resource_group(resource_group, no_wait=True):
        progress.success(f"Deletion of resource group '{resource_group}' started")
    else:
        progress.warning(
            f"Could not delete resource group '{resource_group}'. "
            f"Delete it manually: az group delete --name {resource_group} --yes"
        )


def provision(
    tokens: tuple[str, ...] | list[str],
    progress: ProgressDisplay,
    authenticator: AzureAuthenticator,
    provisioner: VMProvisioner,
) -> int:
    """Run one provisioning attempt.

    Args:
        tokens: Raw ``--key=value`` tokens
        progress: Output sink for status lines
        authenticator: Azure CLI availability and login checks
        provisioner: Azure CLI provisioning commands

    Returns:
        Process exit code (0 on success, 1 on any failure)
    """
    progress.header("🚀 Azure VM Creator")

    config = resolve_config(tokens, _load_defaults(progress))

    try:
        _check_prerequisites(authenticator)
    except PrerequisiteError as e:
        progress.error("Azure CLI is not installed.")
        progress.info(str(e))
        return 1

    try:
        account = authenticator.get_account()
    except AccountInfoError as e:
        progress.error(str(e))
        progress.info("Please run: az login")
        return 1
    except AuthenticationError as e:
        progress.error(str(e))
        return 1
    progress.success(f"Logged in as: {account.user_name}")

    _warn_on_weak_password(config, progress)
    display_configuration(config)

    progress.section("Creating resource group...", "📦")
    try:
        provisioner.create_resource_group(config.resource_group, config.location)
    except ResourceGroupError as e:
        progress.error(str(e))
        return 1
    progress.success(f"Resource group '{config.resource_group}' created in {config.location}")

    progress.start_operation(
        f"Creating {config.os_type.display_name} VM", estimated=VM_CREATION_ESTIMATE, icon="🖥️ "
    )
    try:
        details = provisioner.create_vm(config)
    except VMCreationError as e:
        progress.complete(success=False, message=str(e))
        _cleanup_resource_group(provisioner, config.resource_group, progress)
        return 1
    progress.complete(success=True, message="VM created successfully!")

    display_connection_details(config, details)
    return 0


@click.command(
    cls=AzvmCommand,
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": ["--help", "-h"],
    },
)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@click.option("--verbose", is_flag=True, help="Show debug logging on stderr")
@click.version_option(version=__version__, prog_name="azvm")
@click.pass_context
def main(ctx: click.Context, tokens: tuple[str, ...], verbose: bool) -> None:
    """azvm - Create an Azure VM with sensible defaults.

    Provisions a Windows or Linux VM through the Azure CLI and prints how to
    connect to it. Options use the --key=value form; unrecognized options are
    ignored.

    \b
    OPTIONS:
        --location=<location>    Azure region (default: northeurope)
        --name=<name>            VM name (default: auto-generated)
        --size=<size>            VM size (default: Standard_D2s_v3)
        --image=<image>          OS image preset or full image URN (default: windows-11)
        --resourceGroup=<name>   Resource group name (default: auto-generated)
        --username=<username>    Admin username (default: azureuser)
        --password=<password>    Admin password (default: auto-generated)

    \b
    EXAMPLES:
        # Create Windows 11 VM (default)
        $ azvm

    \b
        # Create Ubuntu VM
        $ azvm --image=ubuntu

    \b
        # Create Windows 10 VM in UK South
        $ azvm --image=windows-10 --location=uksouth

    \b
        # Create VM from a specific image URN
        $ azvm --image=Canonical:0001-com-ubuntu-server-jammy:22_04-lts:latest

    \b
    IMAGE PRESETS:
        windows-11           Windows 11 Pro (default)
        windows-10           Windows 10 Pro
        windows-server-2022  Windows Server 2022 Datacenter
        windows-server-2019  Windows Server 2019 Datacenter
        ubuntu               Ubuntu 22.04 LTS
        ubuntu-20            Ubuntu 20.04 LTS
        debian               Debian 11
        centos               CentOS 7.9
        rhel                 Red Hat Enterprise Linux 8
        suse                 SUSE Linux Enterprise Server 15

    \b
    VM SIZES:
        Standard_D2s_v3      2 vCPUs, 8 GB RAM (default)
        Standard_D4s_v3      4 vCPUs, 16 GB RAM
        Standard_D8s_v3      8 vCPUs, 32 GB RAM
        Standard_B2s         2 vCPUs, 4 GB RAM (burstable, cost-effective)
        Standard_B2ms        2 vCPUs, 8 GB RAM (burstable)

    \b
    COMMON LOCATIONS:
        northeurope          Ireland (default)
        uksouth              UK South
        ukwest               UK West
        westeurope           Netherlands
        eastus               Virginia
        eastus2              Virginia
        westus               California
        centralus            Iowa

    \b
    CONFIGURATION:
        Config file: ~/.azvm/config.toml (or $AZVM_CONFIG)
        Set defaults: default_location, default_size, default_image, default_username
    """
    _configure_logging(verbose)
    progress = ProgressDisplay()

    try:
        exit_code = provision(tokens, progress, AzureAuthenticator(), VMProvisioner())
    except Exception as e:
        logger.debug("Unexpected error during provisioning", exc_info=True)
        progress.error(f"Unexpected error: {e}")
        exit_code = 1

    ctx.exit(exit_code)


if __name__ == "__main__":
    main()
