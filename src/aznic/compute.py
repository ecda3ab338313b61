"""Storage account and virtual machine steps.

The VM boots from an unmanaged OS disk: a VHD blob inside the sample's
storage account, so the account must exist before the VM is created.
"""

import logging

from azure.mgmt.compute.models import (
    DiskCreateOptionTypes,
    HardwareProfile,
    ImageReference,
    NetworkInterfaceReference,
    NetworkProfile,
    OSDisk,
    OSProfile,
    StorageProfile,
    VirtualHardDisk,
    VirtualMachine,
)
from azure.mgmt.storage.models import Sku, StorageAccount, StorageAccountCreateParameters

from aznic.config import SampleConfig
from aznic.context import SampleContext, remote_call

logger = logging.getLogger(__name__)

STORAGE_SKU = "Standard_LRS"
STORAGE_KIND = "StorageV2"


def vhd_uri(config: SampleConfig) -> str:
    """URI of the OS disk blob, e.g. https://acct.blob.core.windows.net/vhds/vm.vhd"""
    return (
        f"https://{config.storage_account_name}.blob.{config.storage_endpoint_suffix}/"
        f"{config.vhd_container}/{config.vm_name}.vhd"
    )


def create_storage_account(ctx: SampleContext) -> StorageAccount:
    """Create the locally-redundant storage account that holds the OS disk.

    Runs on a worker thread while the networking steps proceed.
    """
    cfg = ctx.config
    ctx.progress.step("Starting to create storage account...")
    parameters = StorageAccountCreateParameters(
        sku=Sku(name=STORAGE_SKU),
        kind=STORAGE_KIND,
        location=cfg.location,
    )
    with remote_call(f"Create storage account '{cfg.storage_account_name}' failed"):
        account = ctx.clients.storage.storage_accounts.begin_create(
            ctx.resource_group, cfg.storage_account_name, parameters
        ).result()
    ctx.progress.step("... storage account created")
    return account


def build_virtual_machine(
    config: SampleConfig, references: list[NetworkInterfaceReference]
) -> VirtualMachine:
    """Build the VM parameters: fixed size and image, VHD-backed OS disk."""
    return VirtualMachine(
        location=config.location,
        hardware_profile=HardwareProfile(vm_size=config.vm_size),
        storage_profile=StorageProfile(
            image_reference=ImageReference(
                publisher=config.image_publisher,
                offer=config.image_offer,
                sku=config.image_sku,
                version=config.image_version,
            ),
            os_disk=OSDisk(
                name="osDisk",
                vhd=VirtualHardDisk(uri=vhd_uri(config)),
                create_option=DiskCreateOptionTypes.FROM_IMAGE,
            ),
        ),
        os_profile=OSProfile(
            computer_name=config.vm_name,
            admin_username=config.admin_username,
            admin_password=config.admin_password,
        ),
        network_profile=NetworkProfile(network_interfaces=list(references)),
    )


def create_vm(
    ctx: SampleContext, references: list[NetworkInterfaceReference]
) -> VirtualMachine:
    """Create the VM with every NIC reference attached."""
    cfg = ctx.config
    ctx.progress.step("Create VM with the assigned NIC references")
    parameters = build_virtual_machine(cfg, references)
    with remote_call(f"Create VM '{cfg.vm_name}' failed"):
        vm = ctx.clients.compute.virtual_machines.begin_create_or_update(
            ctx.resource_group, cfg.vm_name, parameters
        ).result()
    logger.debug(f"VM ready: {getattr(vm, 'id', None)}")
    return vm


def delete_vm(ctx: SampleContext) -> None:
    """Delete the VM and wait for the deletion to finish."""
    cfg = ctx.config
    with remote_call(f"Delete VM '{cfg.vm_name}' failed"):
        ctx.clients.compute.virtual_machines.begin_delete(ctx.resource_group, cfg.vm_name).result()
