"""Spanning tree: global mode and per-interface edge settings."""
import re
from dataclasses import dataclass, field
from typing import Optional

from .base import EntityBase, match_group

STP_INTERFACES = re.compile(r"^interface ((?:Et|Po)\S+)$", re.M)
STP_MODE = re.compile(r"^spanning-tree mode (\S+)$", re.M)
BPDUGUARD = re.compile(r"^\s+spanning-tree bpduguard enable$", re.M)
NO_PORTFAST = re.compile(r"^\s+no spanning-tree portfast$", re.M)
PORTFAST_NETWORK = re.compile(r"^\s+spanning-tree portfast network$", re.M)

STP_MODES = ("mstp", "none")
PORTFAST_TYPES = ("edge", "network", "normal")


@dataclass
class StpInterfaceConfig:
    name: str
    bpduguard: bool = False
    portfast: bool = True
    portfast_type: str = "edge"


@dataclass
class StpConfig:
    mode: str = "mstp"
    interfaces: dict[str, StpInterfaceConfig] = field(default_factory=dict)


def is_stp_interface(name: str) -> bool:
    return name.startswith(("Et", "Po"))


def parse_stp_interface(name: str, block: str) -> StpInterfaceConfig:
    if PORTFAST_NETWORK.search(block):
        portfast_type = "network"
    elif NO_PORTFAST.search(block):
        portfast_type = "normal"
    else:
        portfast_type = "edge"
    return StpInterfaceConfig(
        name=name,
        bpduguard=BPDUGUARD.search(block) is not None,
        portfast=NO_PORTFAST.search(block) is None,
        portfast_type=portfast_type,
    )


class StpInterfaceEntity(EntityBase):
    """Spanning tree settings of Ethernet and Port-Channel interfaces."""

    def _parent(self, name: str) -> str:
        return f"interface {re.escape(name)}"

    async def get(self, name: str) -> Optional[StpInterfaceConfig]:
        if not is_stp_interface(name):
            return None
        block = await self.get_block(self._parent(name))
        if not block:
            return None
        return parse_stp_interface(name, block)

    async def getall(self) -> dict[str, StpInterfaceConfig]:
        config = await self.config()
        return {
            name: parse_stp_interface(name, await self.get_block(self._parent(name), config))
            for name in STP_INTERFACES.findall(config)
        }

    async def configure_interface(self, name, commands) -> bool:
        if not is_stp_interface(name):
            return False
        return await super().configure_interface(name, commands)

    async def set_portfast(self, name: str, enable: bool = True, default: bool = False) -> bool:
        cmd = self.command_builder("spanning-tree portfast", "", default, enable)
        return await self.configure_interface(name, cmd)

    async def set_portfast_type(self, name: str, value: str = "edge") -> bool:
        if value not in PORTFAST_TYPES:
            return False
        commands = [f"spanning-tree portfast {value}"]
        if value == "edge":
            commands.append("spanning-tree portfast auto")
        return await self.configure_interface(name, commands)

    async def set_bpduguard(self, name: str, enable: bool = True, default: bool = False) -> bool:
        value = "enable" if enable else "disable"
        cmd = self.command_builder("spanning-tree bpduguard", value, default, True)
        return await self.configure_interface(name, cmd)


class StpEntity(EntityBase):
    """Global spanning tree settings."""

    def __init__(self, node):
        super().__init__(node)
        self.interfaces = StpInterfaceEntity(node)

    async def get(self) -> StpConfig:
        config = await self.config()
        return StpConfig(
            mode=match_group(STP_MODE, config, "mstp"),
            interfaces=await self.interfaces.getall(),
        )

    async def set_mode(self, value: str = "", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value not in STP_MODES:
            return False
        return await self.configure(self.command_builder("spanning-tree mode", value, default, enable))
