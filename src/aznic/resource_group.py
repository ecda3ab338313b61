"""Resource group lifecycle: created first, deleted last."""

import logging

from azure.core.exceptions import AzureError
from azure.mgmt.resource.resources.models import ResourceGroup

from aznic.context import SampleContext, remote_call
from aznic.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


def create_resource_group(ctx: SampleContext) -> ResourceGroup:
    """Create (or update) the sample's resource group."""
    ctx.progress.step("Create resource group")
    parameters = ResourceGroup(location=ctx.config.location)
    with remote_call(f"Create resource group '{ctx.resource_group}' failed"):
        group = ctx.clients.resources.resource_groups.create_or_update(
            ctx.resource_group, parameters
        )
    logger.debug(f"Resource group ready: {group.id}")
    return group


def delete_resource_group(ctx: SampleContext) -> None:
    """Delete the resource group and everything in it, waiting for completion."""
    ctx.progress.step("Deleting resource group")
    with remote_call(f"Delete resource group '{ctx.resource_group}' failed"):
        ctx.clients.resources.resource_groups.begin_delete(ctx.resource_group).result()
    ctx.progress.complete(f"Resource group '{ctx.resource_group}' deleted")


def best_effort_delete_resource_group(ctx: SampleContext) -> bool:
    """Start deleting the resource group after a failure.

    Does not wait for the deletion to finish and never raises.

    Returns:
        True if the deletion was accepted by the service
    """
    ctx.progress.warn(f"Cleaning up: deleting resource group '{ctx.resource_group}'")
    try:
        ctx.clients.resources.resource_groups.begin_delete(ctx.resource_group)
    except AzureError as e:
        ctx.progress.warn(
            LogSanitizer.create_safe_error_message(e, "Cleanup failed, delete the group manually")
        )
        return False
    return True
