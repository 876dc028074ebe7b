"""Feature modules: typed views over the running-config plus mutators."""
from .acl import AclConfig, AclEntity, AclEntry
from .base import EntityBase, command_builder
from .bgp import BgpConfig, BgpEntity, BgpNeighborConfig, BgpNeighborsEntity
from .interfaces import (
    EthernetConfig,
    EthernetEntity,
    InterfaceConfig,
    InterfacesEntity,
    PortChannelConfig,
    PortChannelEntity,
    VxlanConfig,
    VxlanEntity,
)
from .ipinterfaces import IpInterfaceConfig, IpInterfaceEntity
from .mlag import MlagConfig, MlagEntity
from .ptp import PtpConfig, PtpEntity, PtpInterfaceConfig, PtpInterfaceEntity
from .stp import StpConfig, StpEntity, StpInterfaceConfig, StpInterfaceEntity
from .switchports import SwitchportConfig, SwitchportEntity
from .system import SystemConfig, SystemEntity
from .users import UserConfig, UsersEntity
from .vlans import VlanConfig, VlanEntity
from ..errors import UsageError

__all__ = [
    "EntityBase",
    "command_builder",
    "create_api",
    "API_MODULES",
    "AclConfig",
    "AclEntity",
    "AclEntry",
    "BgpConfig",
    "BgpEntity",
    "BgpNeighborConfig",
    "BgpNeighborsEntity",
    "EthernetConfig",
    "EthernetEntity",
    "InterfaceConfig",
    "InterfacesEntity",
    "PortChannelConfig",
    "PortChannelEntity",
    "VxlanConfig",
    "VxlanEntity",
    "IpInterfaceConfig",
    "IpInterfaceEntity",
    "MlagConfig",
    "MlagEntity",
    "PtpConfig",
    "PtpEntity",
    "PtpInterfaceConfig",
    "PtpInterfaceEntity",
    "StpConfig",
    "StpEntity",
    "StpInterfaceConfig",
    "StpInterfaceEntity",
    "SwitchportConfig",
    "SwitchportEntity",
    "SystemConfig",
    "SystemEntity",
    "UserConfig",
    "UsersEntity",
    "VlanConfig",
    "VlanEntity",
]

# Feature module registry
API_MODULES = {
    "acl": AclEntity,
    "bgp": BgpEntity,
    "bgp_neighbors": BgpNeighborsEntity,
    "ethernet": EthernetEntity,
    "interfaces": InterfacesEntity,
    "ipinterfaces": IpInterfaceEntity,
    "mlag": MlagEntity,
    "portchannel": PortChannelEntity,
    "ptp": PtpEntity,
    "ptp_interfaces": PtpInterfaceEntity,
    "stp": StpEntity,
    "stp_interfaces": StpInterfaceEntity,
    "switchports": SwitchportEntity,
    "system": SystemEntity,
    "users": UsersEntity,
    "vlans": VlanEntity,
    "vxlan": VxlanEntity,
}


def create_api(name: str, node) -> EntityBase:
    """Factory function to bind a feature module to a node."""
    key = name.lower()
    if key not in API_MODULES:
        raise UsageError(f"Unknown feature module: {name}")
    return API_MODULES[key](node)
