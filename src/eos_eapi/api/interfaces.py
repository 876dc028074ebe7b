"""Interface configuration.

Each interface family has its own entity, all sharing the generic
description/shutdown handling:

    EthernetEntity     Ethernet ports: sflow, flow control
    PortChannelEntity  Port-Channels: members, LACP mode, min-links
    VxlanEntity        Vxlan VTEP: source interface, flood lists, VLAN to VNI maps

:class:`InterfacesEntity` dispatches on the interface name.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..section import find_section
from .base import EntityBase, match_group

logger = logging.getLogger(__name__)

INTERFACE_NAMES = re.compile(r"^interface (\S+)$", re.M)
DESCRIPTION = re.compile(r"^\s+description (.+)$", re.M)
SHUTDOWN = re.compile(r"^\s+shutdown$", re.M)

NO_SFLOW = re.compile(r"^\s+no sflow( enable)?$", re.M)
FLOWCONTROL_SEND = re.compile(r"^\s+flowcontrol send (\w+)$", re.M)
FLOWCONTROL_RECEIVE = re.compile(r"^\s+flowcontrol receive (\w+)$", re.M)

MIN_LINKS = re.compile(r"^\s+port-channel min-links (\d+)$", re.M)
CHANNEL_GROUP = re.compile(r"^\s+channel-group (\d+) mode (\S+)$", re.M)

VXLAN_SOURCE = re.compile(r"^\s+vxlan source-interface (\S+)$", re.M)
VXLAN_MULTICAST = re.compile(r"^\s+vxlan multicast-group (\S+)$", re.M)
VXLAN_UDP_PORT = re.compile(r"^\s+vxlan udp-port (\d+)$", re.M)
VXLAN_FLOOD = re.compile(r"^\s+vxlan flood vtep (.+)$", re.M)
VXLAN_VLAN_VNI = re.compile(r"^\s+vxlan vlan (\d+) vni (\d+)$", re.M)
VXLAN_VLAN_FLOOD = re.compile(r"^\s+vxlan vlan (\d+) flood vtep (.+)$", re.M)

LACP_MODES = ("active", "passive", "on")
FLOWCONTROL_VALUES = ("on", "off")


@dataclass
class InterfaceConfig:
    name: str
    type: str = "generic"
    shutdown: bool = False
    description: str = ""


@dataclass
class EthernetConfig(InterfaceConfig):
    type: str = "ethernet"
    sflow: bool = True
    flowcontrol_send: str = "off"
    flowcontrol_receive: str = "off"


@dataclass
class PortChannelConfig(InterfaceConfig):
    type: str = "portchannel"
    lacp_mode: str = ""
    minimum_links: int = 0
    members: list[str] = field(default_factory=list)


@dataclass
class VxlanVlan:
    vni: str = ""
    flood_list: list[str] = field(default_factory=list)


@dataclass
class VxlanConfig(InterfaceConfig):
    type: str = "vxlan"
    source_interface: str = ""
    multicast_group: str = ""
    udp_port: int = 4789
    flood_list: list[str] = field(default_factory=list)
    vlans: dict[str, VxlanVlan] = field(default_factory=dict)


def parse_common(block: str) -> dict:
    return {
        "shutdown": SHUTDOWN.search(block) is not None,
        "description": match_group(DESCRIPTION, block).strip(),
    }


class BaseInterfaceEntity(EntityBase):
    """Settings every interface type has."""

    def _parent(self, name: str) -> str:
        return f"interface {re.escape(name)}"

    def parse(self, name: str, block: str, config: str) -> InterfaceConfig:
        return InterfaceConfig(name=name, **parse_common(block))

    async def get(self, name: str) -> Optional[InterfaceConfig]:
        """Parsed interface, or None if it is not configured."""
        config = await self.config()
        block = await self.get_block(self._parent(name), config)
        if not block:
            return None
        return self.parse(name, block, config)

    async def create(self, name: str) -> bool:
        return await self.configure(f"interface {name}")

    async def delete(self, name: str) -> bool:
        return await self.configure(f"no interface {name}")

    async def default(self, name: str) -> bool:
        return await self.configure(f"default interface {name}")

    async def set_description(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("description", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_shutdown(self, name: str, shutdown: bool = True, default: bool = False) -> bool:
        """Shut the interface down (``shutdown=False`` enables it)."""
        cmd = self.command_builder("shutdown", "", default, shutdown)
        return await self.configure_interface(name, cmd)


class EthernetEntity(BaseInterfaceEntity):
    """Ethernet ports. They always exist, so create/delete are refused."""

    def parse(self, name: str, block: str, config: str) -> EthernetConfig:
        return EthernetConfig(
            name=name,
            sflow=NO_SFLOW.search(block) is None,
            flowcontrol_send=match_group(FLOWCONTROL_SEND, block, "off"),
            flowcontrol_receive=match_group(FLOWCONTROL_RECEIVE, block, "off"),
            **parse_common(block),
        )

    async def create(self, name: str) -> bool:
        logger.warning(f"Ethernet interface {name} cannot be created")
        return False

    async def delete(self, name: str) -> bool:
        logger.warning(f"Ethernet interface {name} cannot be deleted")
        return False

    async def set_sflow(self, name: str, enable: bool = True, default: bool = False) -> bool:
        cmd = self.command_builder("sflow enable", "", default, enable)
        return await self.configure_interface(name, cmd)

    async def _set_flowcontrol(self, name: str, direction: str, value: str, default: bool, enable: bool) -> bool:
        if enable and not default and value not in FLOWCONTROL_VALUES:
            return False
        cmd = self.command_builder(f"flowcontrol {direction}", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_flowcontrol_send(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        return await self._set_flowcontrol(name, "send", value, default, enable)

    async def set_flowcontrol_receive(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        return await self._set_flowcontrol(name, "receive", value, default, enable)


def channel_group_id(name: str) -> str:
    """Numeric id of a Port-Channel name ("Port-Channel10" -> "10")."""
    match = re.search(r"(\d+)$", name)
    if match is None:
        raise ValueError(f"Not a Port-Channel name: {name}")
    return match.group(1)


class PortChannelEntity(BaseInterfaceEntity):
    """Port-Channels and their member ports."""

    def _members(self, group: str, config: str) -> dict[str, str]:
        """Member port -> LACP mode for channel-group ``group``."""
        members = {}
        for name in INTERFACE_NAMES.findall(config):
            if not name.startswith("Et"):
                continue
            block = self._block(name, config)
            for gid, mode in CHANNEL_GROUP.findall(block):
                if gid == group:
                    members[name] = mode
        return members

    def _block(self, name: str, config: str) -> str:
        return find_section(config, f"^{self._parent(name)}$")

    def parse(self, name: str, block: str, config: str) -> PortChannelConfig:
        members = self._members(channel_group_id(name), config)
        modes = set(members.values())
        return PortChannelConfig(
            name=name,
            lacp_mode=modes.pop() if len(modes) == 1 else "",
            minimum_links=int(match_group(MIN_LINKS, block, "0")),
            members=sorted(members),
            **parse_common(block),
        )

    async def set_members(self, name: str, members: Iterable[str], mode: Optional[str] = None) -> bool:
        """Make ``members`` exactly the ports of this Port-Channel."""
        group = channel_group_id(name)
        config = await self.config()
        current = self._members(group, config)
        if mode is None:
            modes = set(current.values())
            mode = modes.pop() if len(modes) == 1 else "on"
        if mode not in LACP_MODES:
            return False

        wanted = set(members)
        commands = []
        for member in sorted(set(current) - wanted):
            commands += [f"interface {member}", f"no channel-group {group}"]
        for member in sorted(wanted - set(current)):
            commands += [f"interface {member}", f"channel-group {group} mode {mode}"]
        if not commands:
            return True
        return await self.configure(commands)

    async def set_lacp_mode(self, name: str, mode: str) -> bool:
        """Change the LACP mode of every member (members are removed and re-added)."""
        if mode not in LACP_MODES:
            return False
        group = channel_group_id(name)
        members = sorted(self._members(group, await self.config()))
        commands = []
        for member in members:
            commands += [f"interface {member}", f"no channel-group {group}"]
        for member in members:
            commands += [f"interface {member}", f"channel-group {group} mode {mode}"]
        if not commands:
            return True
        return await self.configure(commands)

    async def set_minimum_links(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value != "":
            try:
                if not 1 <= int(value) <= 16:
                    return False
            except ValueError:
                return False
        cmd = self.command_builder("port-channel min-links", value, default, enable)
        return await self.configure_interface(name, cmd)


class VxlanEntity(BaseInterfaceEntity):
    """The Vxlan VTEP interface."""

    def parse(self, name: str, block: str, config: str) -> VxlanConfig:
        vlans = {vid: VxlanVlan(vni=vni) for vid, vni in VXLAN_VLAN_VNI.findall(block)}
        for vid, vteps in VXLAN_VLAN_FLOOD.findall(block):
            vlans.setdefault(vid, VxlanVlan()).flood_list = vteps.split()
        return VxlanConfig(
            name=name,
            source_interface=match_group(VXLAN_SOURCE, block),
            multicast_group=match_group(VXLAN_MULTICAST, block),
            udp_port=int(match_group(VXLAN_UDP_PORT, block, "4789")),
            flood_list=match_group(VXLAN_FLOOD, block).split(),
            vlans=vlans,
            **parse_common(block),
        )

    async def set_source_interface(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("vxlan source-interface", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_multicast_group(self, name: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder("vxlan multicast-group", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def set_udp_port(self, name: str, value="", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value != "":
            try:
                if not 1024 <= int(value) <= 65535:
                    return False
            except ValueError:
                return False
        cmd = self.command_builder("vxlan udp-port", value, default, enable)
        return await self.configure_interface(name, cmd)

    async def add_vtep(self, name: str, vtep: str, vlan: Optional[str] = None) -> bool:
        """Add ``vtep`` to the global flood list, or to the list of ``vlan``."""
        if vlan:
            return await self.configure_interface(name, f"vxlan vlan {vlan} flood vtep add {vtep}")
        return await self.configure_interface(name, f"vxlan flood vtep add {vtep}")

    async def remove_vtep(self, name: str, vtep: str, vlan: Optional[str] = None) -> bool:
        if vlan:
            return await self.configure_interface(name, f"vxlan vlan {vlan} flood vtep remove {vtep}")
        return await self.configure_interface(name, f"vxlan flood vtep remove {vtep}")

    async def update_vlan(self, name: str, vid, vni) -> bool:
        """Map VLAN ``vid`` to ``vni``."""
        return await self.configure_interface(name, f"vxlan vlan {vid} vni {vni}")

    async def remove_vlan(self, name: str, vid) -> bool:
        return await self.configure_interface(name, f"no vxlan vlan {vid} vni")


class InterfacesEntity(BaseInterfaceEntity):
    """All interfaces; each name is handled by the entity of its family."""

    def __init__(self, node):
        super().__init__(node)
        self.ethernet = EthernetEntity(node)
        self.portchannel = PortChannelEntity(node)
        self.vxlan = VxlanEntity(node)
        self.generic = BaseInterfaceEntity(node)

    def entity_for(self, name: str) -> BaseInterfaceEntity:
        if name.startswith("Et"):
            return self.ethernet
        if name.startswith("Po"):
            return self.portchannel
        if name.startswith("Vx"):
            return self.vxlan
        return self.generic

    def parse(self, name: str, block: str, config: str) -> InterfaceConfig:
        return self.entity_for(name).parse(name, block, config)

    async def getall(self) -> dict[str, InterfaceConfig]:
        config = await self.config()
        interfaces = {}
        for name in INTERFACE_NAMES.findall(config):
            block = await self.get_block(self._parent(name), config)
            interfaces[name] = self.parse(name, block, config)
        return interfaces

    async def create(self, name: str) -> bool:
        return await self.entity_for(name).create(name)

    async def delete(self, name: str) -> bool:
        return await self.entity_for(name).delete(name)
