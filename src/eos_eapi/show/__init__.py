"""Typed bindings for common ``show`` commands."""
from .base import EosModel, ShowCommand
from .entity import ShowEntity
from .interfaces import (
    InterfaceDetail,
    LldpNeighbor,
    MacAddressEntry,
    ShowInterfaces,
    ShowInterfacesSwitchport,
    ShowLldpNeighbors,
    ShowMacAddressTable,
    ShowTrunkGroups,
)
from .monitoring import ShowPtp, ShowQueueMonitor
from .routing import BgpPeer, Ipv4Neighbor, Route, ShowArp, ShowIpBgpSummary, ShowIpRoute
from .system import ShowEnvironmentPower, ShowHostname, ShowVersion

__all__ = [
    # Base
    "EosModel",
    "ShowCommand",
    "ShowEntity",
    # System
    "ShowVersion",
    "ShowHostname",
    "ShowEnvironmentPower",
    # Layer 2 / interfaces
    "ShowInterfaces",
    "InterfaceDetail",
    "ShowInterfacesSwitchport",
    "ShowTrunkGroups",
    "ShowLldpNeighbors",
    "LldpNeighbor",
    "ShowMacAddressTable",
    "MacAddressEntry",
    # Layer 3
    "ShowArp",
    "Ipv4Neighbor",
    "ShowIpRoute",
    "Route",
    "ShowIpBgpSummary",
    "BgpPeer",
    # Monitoring
    "ShowPtp",
    "ShowQueueMonitor",
]
