"""One coroutine per built-in show shape."""
import logging
from typing import TYPE_CHECKING, TypeVar

from .base import ShowCommand
from .interfaces import (
    ShowInterfaces,
    ShowInterfacesSwitchport,
    ShowLldpNeighbors,
    ShowMacAddressTable,
    ShowTrunkGroups,
)
from .monitoring import ShowPtp, ShowQueueMonitor
from .routing import ShowArp, ShowIpBgpSummary, ShowIpRoute
from .system import ShowEnvironmentPower, ShowHostname, ShowVersion

if TYPE_CHECKING:
    from ..node import Node

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=ShowCommand)


class ShowEntity:
    """Typed show commands for a node.

    Usage:
        version = await node.show.show_version()
        print(version.version, version.serial_number)
    """

    def __init__(self, node: "Node"):
        self.node = node

    async def run(self, shape: S) -> S:
        """Run one shape in its own batch and return it populated."""
        async with self.node.get_handle("json") as handle:
            await handle.enable(shape)
        return shape

    async def show_version(self) -> ShowVersion:
        return await self.run(ShowVersion())

    async def show_hostname(self) -> ShowHostname:
        return await self.run(ShowHostname())

    async def show_environment_power(self) -> ShowEnvironmentPower:
        return await self.run(ShowEnvironmentPower())

    async def show_interfaces(self) -> ShowInterfaces:
        return await self.run(ShowInterfaces())

    async def show_interfaces_switchport(self) -> ShowInterfacesSwitchport:
        return await self.run(ShowInterfacesSwitchport())

    async def show_trunk_groups(self) -> ShowTrunkGroups:
        return await self.run(ShowTrunkGroups())

    async def show_lldp_neighbors(self) -> ShowLldpNeighbors:
        return await self.run(ShowLldpNeighbors())

    async def show_mac_address_table(self) -> ShowMacAddressTable:
        return await self.run(ShowMacAddressTable())

    async def show_arp(self) -> ShowArp:
        return await self.run(ShowArp())

    async def show_ip_route(self) -> ShowIpRoute:
        return await self.run(ShowIpRoute())

    async def show_ip_bgp_summary(self) -> ShowIpBgpSummary:
        return await self.run(ShowIpBgpSummary())

    async def show_ptp(self) -> ShowPtp:
        return await self.run(ShowPtp())

    async def show_queue_monitor(self, port: str, limit_by: str = "", limit: int = 0) -> ShowQueueMonitor:
        return await self.run(ShowQueueMonitor.for_port(port, limit_by, limit))
