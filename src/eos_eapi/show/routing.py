"""Layer 3 show commands: ARP, routing table, BGP summary."""
from typing import ClassVar, Optional, Union

from pydantic import Field

from .base import EosModel, ShowCommand


class Ipv4Neighbor(EosModel):
    address: str = ""
    hw_address: str = ""
    interface: str = ""
    age: int = 0


class ShowArp(ShowCommand):
    CMD: ClassVar[str] = "show arp"

    dynamic_entries: int = 0
    static_entries: int = 0
    not_learned_entries: int = 0
    total_entries: int = 0
    ipv4_neighbors: list[Ipv4Neighbor] = Field(default=[], alias="ipV4Neighbors")


class Via(EosModel):
    interface: str = ""
    nexthop_addr: str = ""


class Route(EosModel):
    kernel_programmed: bool = False
    directly_connected: bool = False
    hardware_programmed: bool = False
    preference: int = 0
    metric: int = 0
    route_action: str = ""
    route_type: str = ""
    vias: list[Via] = []


class RouteTable(EosModel):
    routes: dict[str, Route] = {}


class ShowIpRoute(ShowCommand):
    CMD: ClassVar[str] = "show ip route"

    vrfs: dict[str, RouteTable] = {}


class BgpPeer(EosModel):
    peer_state: str = ""
    peer_state_idle_reason: Optional[str] = None
    asn: Union[int, str] = 0
    version: int = 0
    up_down_time: float = 0
    msg_sent: int = 0
    msg_received: int = 0
    in_msg_queue: int = 0
    out_msg_queue: int = 0
    prefix_received: int = 0
    prefix_accepted: int = 0
    under_maintenance: bool = False


class BgpVrf(EosModel):
    vrf: str = ""
    router_id: str = ""
    asn: Union[int, str] = 0
    peers: dict[str, BgpPeer] = {}


class ShowIpBgpSummary(ShowCommand):
    CMD: ClassVar[str] = "show ip bgp summary"

    vrfs: dict[str, BgpVrf] = {}
