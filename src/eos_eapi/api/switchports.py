"""Layer 2 switchport settings of Ethernet and Port-Channel interfaces."""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .base import EntityBase, match_group

logger = logging.getLogger(__name__)

SWITCHPORT_INTERFACES = re.compile(r"^interface ((?:Et|Po)\S+)$", re.M)
NO_SWITCHPORT = re.compile(r"^\s+no switchport$", re.M)
MODE = re.compile(r"^\s+switchport mode (\S+)$", re.M)
ACCESS_VLAN = re.compile(r"^\s+switchport access vlan (\d+)$", re.M)
TRUNK_NATIVE_VLAN = re.compile(r"^\s+switchport trunk native vlan (\d+)$", re.M)
TRUNK_ALLOWED_VLANS = re.compile(r"^\s+switchport trunk allowed vlan (.+)$", re.M)
TRUNK_GROUP = re.compile(r"^\s+switchport trunk group (\S+)$", re.M)


@dataclass
class SwitchportConfig:
    name: str
    mode: str = "access"
    access_vlan: str = "1"
    trunk_native_vlan: str = "1"
    trunk_allowed_vlans: str = "1-4094"
    trunk_groups: frozenset[str] = field(default_factory=frozenset)

    @property
    def trunk_groups_str(self) -> str:
        return ",".join(sorted(self.trunk_groups))


def parse_switchport(name: str, block: str) -> Optional[SwitchportConfig]:
    """Switchport settings, or None for a routed (``no switchport``) port."""
    if not block or NO_SWITCHPORT.search(block):
        return None
    return SwitchportConfig(
        name=name,
        mode=match_group(MODE, block, "access"),
        access_vlan=match_group(ACCESS_VLAN, block, "1"),
        trunk_native_vlan=match_group(TRUNK_NATIVE_VLAN, block, "1"),
        trunk_allowed_vlans=match_group(TRUNK_ALLOWED_VLANS, block, "1-4094").strip(),
        trunk_groups=frozenset(TRUNK_GROUP.findall(block)),
    )


class SwitchportEntity(EntityBase):
    """Access/trunk settings of layer 2 interfaces."""

    def _parent(self, name: str) -> str:
        return f"interface {re.escape(name)}"

    async def get(self, name: str) -> Optional[SwitchportConfig]:
        return parse_switchport(name, await self.get_block(self._parent(name)))

    async def getall(self) -> dict[str, SwitchportConfig]:
        config = await self.config()
        switchports = {}
        for name in SWITCHPORT_INTERFACES.findall(config):
            switchport = parse_switchport(name, await self.get_block(self._parent(name), config))
            if switchport is not None:
                switchports[name] = switchport
        return switchports

    async def create(self, name: str) -> bool:
        """Turn a routed interface into a switchport."""
        return await self.configure_interface(name, ["no ip address", "switchport"])

    async def delete(self, name: str) -> bool:
        return await self.configure_interface(name, "no switchport")

    async def default(self, name: str) -> bool:
        return await self.configure_interface(name, ["no ip address", "default switchport"])

    async def set_mode(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value not in ("", "access", "trunk"):
            return False
        cmd = self.command_builder("switchport mode", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_access_vlan(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("switchport access vlan", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_trunk_native_vlan(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("switchport trunk native vlan", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_trunk_allowed_vlans(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("switchport trunk allowed vlan", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_trunk_groups(
        self,
        name: str,
        value: Iterable[str] = (),
        default: bool = False,
        enable: bool = True,
    ) -> bool:
        """Make the port's trunk groups exactly ``value``."""
        if default:
            return await self.configure_interface(name, "default switchport trunk group")
        if not enable:
            return await self.configure_interface(name, "no switchport trunk group")

        current = await self.get(name)
        existing = current.trunk_groups if current else frozenset()
        wanted = frozenset(value)
        commands = [f"switchport trunk group {group}" for group in sorted(wanted - existing)]
        commands += [f"no switchport trunk group {group}" for group in sorted(existing - wanted)]
        if not commands:
            return True
        return await self.configure_interface(name, commands)

    async def add_trunk_group(self, name: str, group: str) -> bool:
        return await self.configure_interface(name, f"switchport trunk group {group}")

    async def remove_trunk_group(self, name: str, group: str) -> bool:
        return await self.configure_interface(name, f"no switchport trunk group {group}")
