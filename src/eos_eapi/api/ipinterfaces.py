"""Layer 3 interfaces: IPv4 address and MTU."""
import re
from dataclasses import dataclass
from typing import Optional

from .base import EntityBase, match_group

INTERFACE_NAMES = re.compile(r"^interface (\S+)$", re.M)
NO_SWITCHPORT = re.compile(r"^\s+no switchport$", re.M)
IP_ADDRESS = re.compile(r"^\s+ip address (\S+)$", re.M)
MTU = re.compile(r"^\s+mtu (\d+)$", re.M)

MIN_MTU = 68
MAX_MTU = 65535


@dataclass
class IpInterfaceConfig:
    name: str
    address: str = ""
    mtu: Optional[int] = None


def is_switchport_capable(name: str) -> bool:
    return name.startswith(("Et", "Po"))


def parse_ipinterface(name: str, block: str) -> Optional[IpInterfaceConfig]:
    """IP settings, or None for a missing interface or a layer 2 port."""
    if not block:
        return None
    if is_switchport_capable(name) and NO_SWITCHPORT.search(block) is None:
        return None
    mtu = match_group(MTU, block)
    return IpInterfaceConfig(
        name=name,
        address=match_group(IP_ADDRESS, block),
        mtu=int(mtu) if mtu else None,
    )


class IpInterfaceEntity(EntityBase):
    """Routed interfaces."""

    def _parent(self, name: str) -> str:
        return f"interface {re.escape(name)}"

    async def get(self, name: str) -> Optional[IpInterfaceConfig]:
        return parse_ipinterface(name, await self.get_block(self._parent(name)))

    async def getall(self) -> dict[str, IpInterfaceConfig]:
        config = await self.config()
        interfaces = {}
        for name in INTERFACE_NAMES.findall(config):
            parsed = parse_ipinterface(name, await self.get_block(self._parent(name), config))
            if parsed is not None:
                interfaces[name] = parsed
        return interfaces

    async def create(self, name: str) -> bool:
        """Make ``name`` a routed interface."""
        if is_switchport_capable(name):
            return await self.configure_interface(name, "no switchport")
        return await self.configure(f"interface {name}")

    async def delete(self, name: str) -> bool:
        commands = ["no ip address"]
        if is_switchport_capable(name):
            commands.append("switchport")
        return await self.configure_interface(name, commands)

    async def set_address(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        """Set the primary address, e.g. ``"192.0.2.1/24"``."""
        cmd = self.command_builder("ip address", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_mtu(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value != "":
            try:
                if not MIN_MTU <= int(value) <= MAX_MTU:
                    return False
            except ValueError:
                return False
        cmd = self.command_builder("mtu", value, default, enable)
        return await self.configure_interface(name, cmd)
