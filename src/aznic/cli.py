"""Command-line interface for aznic.

Commands:
    run        Provision the sample topology, walk through the NIC changes, tear down
    list-nics  List the NICs in the sample resource group
    cleanup    Delete the sample resource group
"""

import logging
import sys

import click

from aznic import __version__
from aznic.config import AzureEnvironment, ConfigManager, SampleConfig
from aznic.context import SampleContext
from aznic.credentials import CredentialFactory, build_clients
from aznic.exceptions import ConfigError, ProvisioningError
from aznic.modules.interaction_handler import CLIInteractionHandler, NonInteractiveHandler
from aznic.modules.progress import ProgressDisplay
from aznic.network import list_interfaces
from aznic.resource_group import delete_resource_group
from aznic.workflow import SampleWorkflow

logger = logging.getLogger(__name__)


def common_options(func):
    """Options shared by every command."""
    func = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")(func)
    func = click.option("--resource-group", "--rg", help="Azure resource group", type=str)(func)
    func = click.option("--location", "--region", help="Azure region", type=str)(func)
    func = click.option("--config", help="Config file path", type=click.Path())(func)
    return func


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    if not verbose:
        # The SDK logs every HTTP request at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)


def _load_config(config: str | None, location: str | None, resource_group: str | None) -> SampleConfig:
    try:
        sample_config = ConfigManager.load_config(config)
        return sample_config.with_overrides(location=location, resource_group=resource_group)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _connect(sample_config: SampleConfig) -> SampleContext:
    """Read the environment, authenticate and build the run context.

    Exits with status 1 before any resource call if anything is missing.
    """
    try:
        env = AzureEnvironment.from_env()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        credential = CredentialFactory.authenticate(env)
    except ProvisioningError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    return SampleContext(
        config=sample_config,
        clients=build_clients(env, credential),
        progress=ProgressDisplay(),
    )


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """aznic - provision and tear down an Azure NIC sample topology.

    \b
    The sample creates a resource group, a virtual network with three
    subnets, two public IPs, three NICs, a storage account and a VM,
    then updates and deletes NICs and finally removes everything.

    \b
    REQUIRED ENVIRONMENT:
        AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET,
        AZURE_SUBSCRIPTION_ID

    \b
    CONFIGURATION:
        Config file: ~/.aznic/config.toml ([sample] table)
    """


@main.command(name="run")
@common_options
@click.option("--yes", "-y", is_flag=True, help="Do not pause before deleting resources")
@click.option(
    "--no-cleanup-on-failure",
    is_flag=True,
    help="Leave resources in place if a step fails",
)
def run_command(
    config: str | None,
    location: str | None,
    resource_group: str | None,
    verbose: bool,
    yes: bool,
    no_cleanup_on_failure: bool,
) -> None:
    """Run the full sample: provision, update NICs, tear down.

    \b
    Examples:
        $ aznic run
        $ aznic run --rg my-sample --region eastus --yes
    """
    _configure_logging(verbose)
    sample_config = _load_config(config, location, resource_group)
    ctx = _connect(sample_config)

    interaction = NonInteractiveHandler() if yes else CLIInteractionHandler()
    cleanup = sample_config.cleanup_on_failure and not no_cleanup_on_failure
    workflow = SampleWorkflow(ctx, interaction, cleanup_on_failure=cleanup)
    sys.exit(workflow.run())


@main.command(name="list-nics")
@common_options
def list_nics_command(
    config: str | None, location: str | None, resource_group: str | None, verbose: bool
) -> None:
    """List the NICs in the sample resource group."""
    _configure_logging(verbose)
    ctx = _connect(_load_config(config, location, resource_group))
    try:
        list_interfaces(ctx)
    except ProvisioningError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command(name="cleanup")
@common_options
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def cleanup_command(
    config: str | None,
    location: str | None,
    resource_group: str | None,
    verbose: bool,
    yes: bool,
) -> None:
    """Delete the sample resource group and everything in it."""
    _configure_logging(verbose)
    sample_config = _load_config(config, location, resource_group)
    if not yes:
        click.confirm(
            f"Delete resource group '{sample_config.resource_group}' and all its resources?",
            abort=True,
        )
    ctx = _connect(sample_config)
    try:
        delete_resource_group(ctx)
    except ProvisioningError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
