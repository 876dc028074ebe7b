"""MLAG domain settings and per Port-Channel MLAG ids."""
import re
from dataclasses import dataclass, field

from .base import EntityBase, match_group

DOMAIN_ID = re.compile(r"^\s+domain-id (\S+)$", re.M)
LOCAL_INTERFACE = re.compile(r"^\s+local-interface (\S+)$", re.M)
PEER_ADDRESS = re.compile(r"^\s+peer-address (\S+)$", re.M)
PEER_LINK = re.compile(r"^\s+peer-link (\S+)$", re.M)
NO_SHUTDOWN = re.compile(r"^\s+no shutdown$", re.M)
PORT_CHANNELS = re.compile(r"^interface (Po\S+)$", re.M)
MLAG_ID = re.compile(r"^\s+mlag (\d+)$", re.M)


@dataclass
class MlagConfig:
    domain_id: str = ""
    local_interface: str = ""
    peer_address: str = ""
    peer_link: str = ""
    shutdown: bool = False
    interfaces: dict[str, str] = field(default_factory=dict)


def parse_mlag_block(block: str) -> dict:
    if not block:
        return {}
    return {
        "domain_id": match_group(DOMAIN_ID, block),
        "local_interface": match_group(LOCAL_INTERFACE, block),
        "peer_address": match_group(PEER_ADDRESS, block),
        "peer_link": match_group(PEER_LINK, block),
        "shutdown": NO_SHUTDOWN.search(block) is None,
    }


class MlagEntity(EntityBase):
    """``mlag configuration`` block plus ``mlag <id>`` on Port-Channels."""

    async def get(self) -> MlagConfig:
        config = await self.config()
        interfaces = {}
        for name in PORT_CHANNELS.findall(config):
            block = await self.get_block(f"interface {re.escape(name)}", config)
            mlag_id = match_group(MLAG_ID, block)
            if mlag_id:
                interfaces[name] = mlag_id
        block = await self.get_block("mlag configuration", config)
        return MlagConfig(interfaces=interfaces, **parse_mlag_block(block))

    async def configure_mlag(self, verb: str, value: str = "", default: bool = False, enable: bool = True) -> bool:
        cmd = self.command_builder(verb, value, default, enable)
        return await self.configure(["mlag configuration", cmd])

    async def set_domain_id(self, value: str = "", default: bool = False) -> bool:
        return await self.configure_mlag("domain-id", value, default, bool(value))

    async def set_local_interface(self, value: str = "", default: bool = False) -> bool:
        return await self.configure_mlag("local-interface", value, default, bool(value))

    async def set_peer_address(self, value: str = "", default: bool = False) -> bool:
        return await self.configure_mlag("peer-address", value, default, bool(value))

    async def set_peer_link(self, value: str = "", default: bool = False) -> bool:
        return await self.configure_mlag("peer-link", value, default, bool(value))

    async def set_shutdown(self, shutdown: bool = True, default: bool = False) -> bool:
        return await self.configure_mlag("shutdown", "", default, shutdown)

    async def set_mlag_id(self, name: str, value="", default: bool = False) -> bool:
        """Set (or with an empty value remove) the MLAG id of a Port-Channel."""
        cmd = self.command_builder("mlag", value, default, str(value) != "")
        return await self.configure_interface(name, cmd)
