"""BGP router process and its neighbors.

All changes are sent inside the ``router bgp <asn>`` context taken from the
running-config, so a node without a BGP process only accepts ``create``.
"""
import ipaddress
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..errors import CommandError
from .base import EntityBase, match_group

logger = logging.getLogger(__name__)

BGP_BLOCK = r"router bgp .*"
BGP_AS = re.compile(r"^router bgp (\d+)", re.M)
ROUTER_ID = re.compile(r"router-id (\S+)", re.M)
MAXIMUM_PATHS = re.compile(r"maximum-paths\s+(\d+)(?:\s+ecmp\s+(\d+))?")
NETWORK = re.compile(r"network (.+)/(\d+)(?: route-map (\w+))*", re.M)
SHUTDOWN = re.compile(r"^\s+shutdown$", re.M)
NEIGHBOR_NAMES = re.compile(r"^\s+neighbor (\S+)", re.M)


@dataclass
class BgpNetwork:
    prefix: str
    masklen: str
    route_map: str = ""


@dataclass
class BgpConfig:
    bgp_as: str
    router_id: str = ""
    shutdown: bool = False
    maximum_paths: str = ""
    maximum_ecmp_paths: str = ""
    networks: list[BgpNetwork] = field(default_factory=list)


@dataclass
class BgpNeighborConfig:
    name: str
    peer_group: str = ""
    remote_as: str = ""
    send_community: bool = False
    shutdown: bool = True
    description: str = ""
    next_hop_self: bool = False
    route_map_in: str = ""
    route_map_out: str = ""


def is_bgp_as(value) -> bool:
    try:
        return 0 < int(value) < 65535
    except (TypeError, ValueError):
        return False


def parse_bgp(block: str) -> Optional[BgpConfig]:
    bgp_as = match_group(BGP_AS, block)
    if not bgp_as:
        return None
    paths = MAXIMUM_PATHS.search(block)
    return BgpConfig(
        bgp_as=bgp_as,
        router_id=match_group(ROUTER_ID, block),
        shutdown=SHUTDOWN.search(block) is not None,
        maximum_paths=paths.group(1) if paths else "",
        maximum_ecmp_paths=(paths.group(2) or "") if paths else "",
        networks=[
            BgpNetwork(prefix, masklen, route_map or "")
            for prefix, masklen, route_map in NETWORK.findall(block)
        ],
    )


def parse_neighbor(name: str, block: str) -> BgpNeighborConfig:
    prefix = f"neighbor {re.escape(name)}"

    def find(pattern: str) -> str:
        return match_group(re.compile(f"{prefix} {pattern}", re.M), block)

    def present(pattern: str) -> bool:
        return re.search(f"{prefix} {pattern}", block) is not None

    return BgpNeighborConfig(
        name=name,
        peer_group=find(r"peer-group (\S+)"),
        remote_as=find(r"remote-as (\d+)"),
        send_community=present("send-community"),
        shutdown=re.search(f"no {prefix} shutdown", block) is None,
        description=find(r"description (.*)$"),
        next_hop_self=present("next-hop-self"),
        route_map_in=find(r"route-map (\S+) in"),
        route_map_out=find(r"route-map (\S+) out"),
    )


class _BgpContext(EntityBase):
    async def section(self) -> str:
        return await self.get_block(BGP_BLOCK)

    async def configure_bgp(self, cmd: str) -> bool:
        """Send ``cmd`` under ``router bgp <asn>``; False without a BGP process."""
        bgp_as = match_group(BGP_AS, await self.section())
        if not bgp_as:
            logger.debug(f"No BGP process on {self.node.name}, skipping {cmd!r}")
            return False
        return await self.configure([f"router bgp {bgp_as}", cmd])


class BgpEntity(_BgpContext):
    """The BGP router process."""

    def __init__(self, node):
        super().__init__(node)
        self.neighbors = BgpNeighborsEntity(node)

    async def get(self) -> Optional[BgpConfig]:
        return parse_bgp(await self.section())

    async def create(self, bgp_as) -> bool:
        if not is_bgp_as(bgp_as):
            return False
        return await self.configure(f"router bgp {int(bgp_as)}")

    async def delete(self) -> bool:
        config = await self.get()
        if config is None:
            return True
        return await self.configure(f"no router bgp {config.bgp_as}")

    async def default(self) -> bool:
        config = await self.get()
        if config is None:
            return True
        return await self.configure(f"default router bgp {config.bgp_as}")

    async def set_router_id(self, value: str = "", default: bool = False) -> bool:
        return await self.configure_bgp(self.command_builder("router-id", value, default, bool(value)))

    async def set_maximum_paths(self, max_path=None, max_ecmp=None, default: bool = False) -> bool:
        if default or max_path is None:
            return await self.configure_bgp("default maximum-paths")
        cmd = f"maximum-paths {int(max_path)}"
        if max_ecmp is not None:
            cmd += f" ecmp {int(max_ecmp)}"
        return await self.configure_bgp(cmd)

    async def set_shutdown(self, shutdown: bool = True, default: bool = False) -> bool:
        return await self.configure_bgp(self.command_builder("shutdown", "", default, shutdown))

    async def add_network(self, prefix: str, masklen, route_map: str = "") -> bool:
        cmd = f"network {prefix}/{masklen}"
        if route_map:
            cmd += f" route-map {route_map}"
        return await self.configure_bgp(cmd)

    async def remove_network(self, prefix: str, masklen, route_map: str = "") -> bool:
        cmd = f"no network {prefix}/{masklen}"
        if route_map:
            cmd += f" route-map {route_map}"
        return await self.configure_bgp(cmd)


class BgpNeighborsEntity(_BgpContext):
    """Neighbors (peers or peer groups) of the BGP process."""

    async def get(self, name: str) -> BgpNeighborConfig:
        return parse_neighbor(name, await self.section())

    async def getall(self) -> dict[str, BgpNeighborConfig]:
        block = await self.section()
        return {name: parse_neighbor(name, block) for name in dict.fromkeys(NEIGHBOR_NAMES.findall(block))}

    def neighbor_command(self, name: str, cmd: str, value="", default: bool = False, enable: bool = True) -> str:
        return self.command_builder(f"neighbor {name} {cmd}", value, default, enable)

    async def create(self, name: str) -> bool:
        """Neighbors start out shut down."""
        return await self.set_shutdown(name, True)

    async def delete(self, name: str) -> bool:
        try:
            return await self.configure_bgp(f"no neighbor {name}")
        except CommandError:
            logger.debug(f"Removing {name} as a neighbor failed, retrying as a peer-group")
            return await self.configure_bgp(f"no neighbor {name} peer-group")

    async def set_peer_group(self, name: str, value: str = "", default: bool = False) -> bool:
        """Only an IP neighbor can join a peer-group."""
        try:
            ipaddress.ip_address(name)
        except ValueError:
            return False
        return await self.configure_bgp(self.neighbor_command(name, "peer-group", value, default, bool(value)))

    async def set_remote_as(self, name: str, value="", default: bool = False) -> bool:
        enable = str(value) != ""
        return await self.configure_bgp(self.neighbor_command(name, "remote-as", value, default, enable))

    async def set_shutdown(self, name: str, shutdown: bool = True, default: bool = False) -> bool:
        return await self.configure_bgp(self.neighbor_command(name, "shutdown", "", default, shutdown))

    async def set_send_community(self, name: str, enable: bool = True, default: bool = False) -> bool:
        return await self.configure_bgp(self.neighbor_command(name, "send-community", "", default, enable))

    async def set_next_hop_self(self, name: str, enable: bool = True, default: bool = False) -> bool:
        return await self.configure_bgp(self.neighbor_command(name, "next-hop-self", "", default, enable))

    async def set_route_map_in(self, name: str, value: str = "", default: bool = False) -> bool:
        cmd = self.neighbor_command(name, "route-map", value, default, bool(value))
        return await self.configure_bgp(f"{cmd} in")

    async def set_route_map_out(self, name: str, value: str = "", default: bool = False) -> bool:
        cmd = self.neighbor_command(name, "route-map", value, default, bool(value))
        return await self.configure_bgp(f"{cmd} out")

    async def set_description(self, name: str, value: str = "", default: bool = False) -> bool:
        return await self.configure_bgp(self.neighbor_command(name, "description", value, default, bool(value)))
