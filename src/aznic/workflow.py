"""Provisioning workflow: the ordered sequence of the sample.

Flow:
    create resource group
    -> { virtual network -> subnets -> pip1 -> NICs -> NIC references }
       while the storage account is created on a worker thread
    -> join on the storage account
    -> VM -> pip2 -> attach pip2 to the front-end NIC
    -> list NICs, pause, delete VM + mid-tier NIC, list NICs, pause
    -> delete resource group

Public API:
    SampleWorkflow: Runs the sample against a SampleContext
    ProvisionedTopology: Handles to everything provision() created
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

from azure.mgmt.compute.models import NetworkInterfaceReference, VirtualMachine
from azure.mgmt.network.models import NetworkInterface, PublicIPAddress, Subnet
from azure.mgmt.storage.models import StorageAccount

from aznic.compute import create_storage_account, create_vm
from aznic.context import SampleContext
from aznic.exceptions import ProvisioningError
from aznic.modules.interaction_handler import InteractionHandler
from aznic.network import (
    attach_public_ip,
    build_interface_references,
    create_network_interfaces,
    create_public_ip,
    create_subnets,
    create_virtual_network,
    delete_interface,
    list_interfaces,
)
from aznic.resource_group import (
    best_effort_delete_resource_group,
    create_resource_group,
    delete_resource_group,
)

logger = logging.getLogger(__name__)

FIRST_PUBLIC_IP = "pip1"
SECOND_PUBLIC_IP = "pip2"


def _raise_if_failed(task: Future) -> None:
    """Re-raise the error of a background task that has already failed."""
    if task.done():
        error = task.exception()
        if error is not None:
            raise error


@dataclass
class ProvisionedTopology:
    """Local handles to the resources created by provision()."""

    subnets: list[Subnet]
    nics: list[NetworkInterface]
    references: list[NetworkInterfaceReference]
    storage_account: StorageAccount
    vm: VirtualMachine
    public_ips: list[PublicIPAddress]


class SampleWorkflow:
    """Run the NIC sample end to end.

    Helpers raise ProvisioningError; run() is the only place that decides
    whether to clean up and which exit status to report.

    Example:
        workflow = SampleWorkflow(ctx, CLIInteractionHandler())
        sys.exit(workflow.run())
    """

    def __init__(
        self,
        ctx: SampleContext,
        interaction: InteractionHandler,
        cleanup_on_failure: bool | None = None,
    ):
        self.ctx = ctx
        self.interaction = interaction
        if cleanup_on_failure is None:
            cleanup_on_failure = ctx.config.cleanup_on_failure
        self.cleanup_on_failure = cleanup_on_failure

    def provision(self) -> ProvisionedTopology:
        """Create every resource of the sample.

        The storage account future is consumed exactly once, right before
        the VM is created. Before every networking call the future is polled
        so a failed storage account stops the run before the next remote
        call; the call already in flight is allowed to finish. If a networking
        step fails first, leaving the executor block still waits for the
        in-flight storage call.
        """
        ctx = self.ctx
        create_resource_group(ctx)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="aznic-storage") as executor:
            storage_task = executor.submit(create_storage_account, ctx)
            storage_failed = partial(_raise_if_failed, storage_task)

            storage_failed()
            create_virtual_network(ctx)
            subnets = create_subnets(ctx, checkpoint=storage_failed)
            first_ip = create_public_ip(ctx, FIRST_PUBLIC_IP, checkpoint=storage_failed)
            nics = create_network_interfaces(ctx, subnets, first_ip, checkpoint=storage_failed)
            references = build_interface_references(ctx, nics)

            storage_account = storage_task.result()

        vm = create_vm(ctx, references)
        second_ip = create_public_ip(ctx, SECOND_PUBLIC_IP)
        attach_public_ip(ctx, ctx.config.front_end_nic, nics, second_ip)

        return ProvisionedTopology(
            subnets=subnets,
            nics=nics,
            references=references,
            storage_account=storage_account,
            vm=vm,
            public_ips=[first_ip, second_ip],
        )

    def teardown(self) -> None:
        """List, delete the mid-tier NIC (and the VM), list, delete everything."""
        ctx = self.ctx
        mid_tier = ctx.config.mid_tier_nic

        list_interfaces(ctx)
        self.interaction.pause(f"Press enter to delete NIC '{mid_tier}'...")

        delete_interface(ctx, mid_tier)
        ctx.progress.step("Remaining NICs are...")
        list_interfaces(ctx)

        self.interaction.pause("Press enter to delete all the resources created in this sample...")
        delete_resource_group(ctx)

    def run(self) -> int:
        """Provision and tear down.

        Returns:
            0 on success, 1 if any step failed
        """
        try:
            self.provision()
            self.teardown()
        except ProvisioningError as e:
            self.ctx.progress.fail(str(e))
            logger.debug("Provisioning failed", exc_info=True)
            if self.cleanup_on_failure:
                best_effort_delete_resource_group(self.ctx)
            return 1

        self.ctx.progress.complete("Sample completed")
        return 0
