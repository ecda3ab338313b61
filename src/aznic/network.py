"""Networking steps: virtual network, subnets, public IPs and NICs.

Layout created by the sample (default address space 172.16.0.0/16):

    subnet index  name        prefix          NIC
    0             Front-end   172.16.1.0/24   nic1  (IP forwarding, primary, public IP)
    1             Mid-tier    172.16.2.0/24   nic2
    2             Back-end    172.16.3.0/24   nic3

Every create is followed by a get: create_or_update pollers do not always
return the server-assigned fields (ids, MAC addresses) the later steps need.
"""

import ipaddress
import itertools
import logging
from collections.abc import Callable
from enum import Enum

from azure.mgmt.compute.models import NetworkInterfaceReference
from azure.mgmt.network.models import (
    AddressSpace,
    IPAllocationMethod,
    NetworkInterface,
    NetworkInterfaceIPConfiguration,
    PublicIPAddress,
    PublicIPAddressDnsSettings,
    Subnet,
    VirtualNetwork,
)
from rich.console import Console
from rich.table import Table

from aznic.compute import delete_vm
from aznic.context import SampleContext, remote_call
from aznic.exceptions import InterfaceNotFoundError

logger = logging.getLogger(__name__)


def subnet_prefix(address_space: str, index: int, prefix_length: int = 24) -> str:
    """Return the address block for subnet ``index`` of ``address_space``.

    Block 0 of the address space is skipped, so index 0 maps to block 1:
    for 172.16.0.0/16 and /24 subnets, index i gives 172.16.(i+1).0/24.

    Raises:
        ValueError: If the address space has no such block
    """
    if index < 0:
        raise ValueError(f"Subnet index must be non-negative, got {index}")
    network = ipaddress.ip_network(address_space)
    blocks = network.subnets(new_prefix=prefix_length)
    block = next(itertools.islice(blocks, index + 1, None), None)
    if block is None:
        raise ValueError(
            f"{address_space} has no room for subnet {index} with prefix /{prefix_length}"
        )
    return str(block)


def _no_checkpoint() -> None:
    pass


def create_virtual_network(ctx: SampleContext) -> VirtualNetwork:
    """Create the virtual network with the configured address space."""
    cfg = ctx.config
    ctx.progress.step("Create virtual network")
    parameters = VirtualNetwork(
        location=cfg.location,
        address_space=AddressSpace(address_prefixes=[cfg.address_space]),
    )
    with remote_call(f"Create virtual network '{cfg.vnet_name}' failed"):
        poller = ctx.clients.network.virtual_networks.begin_create_or_update(
            ctx.resource_group, cfg.vnet_name, parameters
        )
        return poller.result()


def create_subnets(
    ctx: SampleContext, checkpoint: Callable[[], None] | None = None
) -> list[Subnet]:
    """Create the three subnets in order and return them as re-fetched.

    ``checkpoint`` runs before every remote call; raising from it stops the
    loop.
    """
    checkpoint = checkpoint or _no_checkpoint
    cfg = ctx.config
    network = ctx.clients.network
    ctx.progress.step("Create subnets")

    subnets: list[Subnet] = []
    for i, name in enumerate(cfg.subnet_names):
        ctx.progress.detail(f"Create subnet: '{name}'")
        parameters = Subnet(
            address_prefix=subnet_prefix(cfg.address_space, i, cfg.subnet_prefix_length)
        )
        checkpoint()
        with remote_call(f"Create subnet '{name}' failed"):
            network.subnets.begin_create_or_update(
                ctx.resource_group, cfg.vnet_name, name, parameters
            ).result()
        checkpoint()
        with remote_call(f"Get subnet '{name}' failed"):
            subnets.append(network.subnets.get(ctx.resource_group, cfg.vnet_name, name))
    return subnets


def create_public_ip(
    ctx: SampleContext, name: str, checkpoint: Callable[[], None] | None = None
) -> PublicIPAddress:
    """Create a public IP with DNS label ``<dns_label_prefix>-<name>``."""
    checkpoint = checkpoint or _no_checkpoint
    cfg = ctx.config
    public_ips = ctx.clients.network.public_ip_addresses
    ctx.progress.step(f"Create public IP address: '{name}'")
    parameters = PublicIPAddress(
        location=cfg.location,
        dns_settings=PublicIPAddressDnsSettings(domain_name_label=f"{cfg.dns_label_prefix}-{name}"),
    )
    checkpoint()
    with remote_call(f"Create public IP address '{name}' failed"):
        public_ips.begin_create_or_update(ctx.resource_group, name, parameters).result()

    ctx.progress.step("Get public IP address")
    checkpoint()
    with remote_call(f"Get public IP address '{name}' failed"):
        return public_ips.get(ctx.resource_group, name)


def build_interface(
    ctx: SampleContext,
    index: int,
    name: str,
    subnet: Subnet,
    public_ip: PublicIPAddress | None,
) -> NetworkInterface:
    """Build (but do not create) the NIC parameters for ``name``.

    Only the front-end NIC gets IP forwarding, the primary flag and the
    public IP; the others leave all three unset.
    """
    cfg = ctx.config
    ip_config = NetworkInterfaceIPConfiguration(
        name=f"IPconfig{index + 1}",
        private_ip_allocation_method=IPAllocationMethod.DYNAMIC,
        subnet=subnet,
    )
    nic = NetworkInterface(location=cfg.location, ip_configurations=[ip_config])
    if name == cfg.front_end_nic:
        nic.enable_ip_forwarding = True
        ip_config.primary = True
        ip_config.public_ip_address = public_ip
    return nic


def create_network_interfaces(
    ctx: SampleContext,
    subnets: list[Subnet],
    public_ip: PublicIPAddress,
    checkpoint: Callable[[], None] | None = None,
) -> list[NetworkInterface]:
    """Create one NIC per subnet, in order, and return them as re-fetched.

    ``checkpoint`` runs before every remote call, as in create_subnets().
    """
    checkpoint = checkpoint or _no_checkpoint
    cfg = ctx.config
    interfaces = ctx.clients.network.network_interfaces
    ctx.progress.step("Create network interfaces (NICs)")

    nics: list[NetworkInterface] = []
    for i, (name, subnet) in enumerate(zip(cfg.nic_names, subnets, strict=True)):
        ctx.progress.detail(f"Create NIC '{name}' using subnet '{subnet.name}'")
        parameters = build_interface(ctx, i, name, subnet, public_ip)
        checkpoint()
        with remote_call(f"Create NIC '{name}' failed"):
            interfaces.begin_create_or_update(ctx.resource_group, name, parameters).result()
        checkpoint()
        with remote_call(f"Get NIC '{name}' failed"):
            nics.append(interfaces.get(ctx.resource_group, name))
    return nics


def build_interface_references(
    ctx: SampleContext, nics: list[NetworkInterface]
) -> list[NetworkInterfaceReference]:
    """Map NICs to VM network profile references; the front-end one is primary."""
    front_end = ctx.config.front_end_nic
    ctx.progress.step("Assign NICs to network interface references")

    references: list[NetworkInterfaceReference] = []
    for i, nic in enumerate(nics):
        ctx.progress.detail(f"Assign NIC '{nic.name}' to reference {i}")
        primary = nic.name == front_end
        if primary:
            ctx.progress.detail(f"{front_end} is assigned to the primary reference")
        references.append(NetworkInterfaceReference(id=nic.id, primary=primary))
    return references


def find_interface(nics: list[NetworkInterface], name: str) -> NetworkInterface:
    """Look up a NIC by name.

    Raises:
        InterfaceNotFoundError: If no NIC has that name
    """
    by_name = {nic.name: nic for nic in nics}
    try:
        return by_name[name]
    except KeyError:
        raise InterfaceNotFoundError(name, [n.name for n in nics]) from None


def attach_public_ip(
    ctx: SampleContext,
    nic_name: str,
    nics: list[NetworkInterface],
    public_ip: PublicIPAddress,
) -> NetworkInterface:
    """Attach ``public_ip`` to the first IP configuration of ``nic_name``.

    The configuration is also marked primary, then the NIC is updated in
    place.
    """
    nic = find_interface(nics, nic_name)
    ctx.progress.step(f"Update NIC '{nic_name}' with public IP '{public_ip.name}'")
    ip_config = nic.ip_configurations[0]
    ip_config.public_ip_address = public_ip
    ip_config.primary = True
    with remote_call(f"Update NIC '{nic_name}' failed"):
        poller = ctx.clients.network.network_interfaces.begin_create_or_update(
            ctx.resource_group, nic_name, nic
        )
        return poller.result()


def _value(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def render_interfaces(nics: list[NetworkInterface], console: Console | None = None) -> None:
    """Print NIC details as a rich table."""
    console = console or Console()
    table = Table(title="Network interfaces")
    table.add_column("Name", style="cyan")
    table.add_column("Location")
    table.add_column("IP forwarding")
    table.add_column("MAC address")
    table.add_column("Private IP")
    table.add_column("Allocation")
    table.add_column("Subnet ID", overflow="fold")

    for nic in nics:
        ip_config = nic.ip_configurations[0] if nic.ip_configurations else None
        subnet = ip_config.subnet if ip_config else None
        table.add_row(
            _value(nic.name),
            _value(nic.location),
            _value(bool(nic.enable_ip_forwarding)),
            _value(nic.mac_address),
            _value(ip_config.private_ip_address if ip_config else None),
            _value(ip_config.private_ip_allocation_method if ip_config else None),
            _value(subnet.id if subnet else None),
        )
    console.print(table)


def list_interfaces(ctx: SampleContext, console: Console | None = None) -> list[NetworkInterface]:
    """Fetch and print every NIC in the resource group."""
    ctx.progress.step("Listing NICs")
    with remote_call(f"List NICs in '{ctx.resource_group}' failed"):
        nics = list(ctx.clients.network.network_interfaces.list(ctx.resource_group))

    if not nics:
        ctx.progress.step(f"There are no NICs in {ctx.resource_group} resource group")
    else:
        render_interfaces(nics, console)
    return nics


def delete_interface(ctx: SampleContext, nic_name: str) -> None:
    """Delete the VM, then the NIC.

    A NIC still attached to a VM cannot be deleted, so the VM goes first.
    """
    ctx.progress.step("Delete NIC")
    ctx.progress.detail("First, delete the VM")
    delete_vm(ctx)
    ctx.progress.detail("Second, delete the NIC")
    with remote_call(f"Delete NIC '{nic_name}' failed"):
        ctx.clients.network.network_interfaces.begin_delete(ctx.resource_group, nic_name).result()
