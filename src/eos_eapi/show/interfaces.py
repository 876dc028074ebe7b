"""Layer 2 and interface show commands."""
from typing import Any, ClassVar, Optional

from pydantic import Field

from .base import EosModel, ShowCommand


class IpAddress(EosModel):
    address: str = ""
    mask_len: int = 0


class InterfaceAddress(EosModel):
    broadcast_address: str = ""
    primary_ip: IpAddress = IpAddress()
    secondary_ips: dict[str, Any] = {}
    secondary_ips_ordered_list: list[IpAddress] = []
    virtual_ip: IpAddress = IpAddress()


class InputErrors(EosModel):
    alignment_errors: int = 0
    fcs_errors: int = 0
    giant_frames: int = 0
    runt_frames: int = 0
    rx_pause: int = 0
    symbol_errors: int = 0


class OutputErrors(EosModel):
    collisions: int = 0
    deferred_transmissions: int = 0
    late_collisions: int = 0
    tx_pause: int = 0


class InterfaceCounters(EosModel):
    counter_refresh_time: float = 0
    in_broadcast_pkts: int = 0
    in_discards: int = 0
    in_multicast_pkts: int = 0
    in_octets: int = 0
    in_ucast_pkts: int = 0
    input_errors_detail: InputErrors = InputErrors()
    last_clear: float = 0
    link_status_changes: int = 0
    out_broadcast_pkts: int = 0
    out_discards: int = 0
    out_multicast_pkts: int = 0
    out_octets: int = 0
    out_ucast_pkts: int = 0
    output_errors_detail: OutputErrors = OutputErrors()
    total_in_errors: int = 0
    total_out_errors: int = 0


class InterfaceStatistics(EosModel):
    in_bits_rate: float = 0
    out_bits_rate: float = 0
    in_pkts_rate: float = 0
    out_pkts_rate: float = 0
    update_interval: float = 0


class InterfaceDetail(EosModel):
    name: str = ""
    bandwidth: int = 0
    burned_in_address: str = ""
    description: str = ""
    forwarding_model: str = ""
    hardware: str = ""
    interface_address: list[InterfaceAddress] = []
    interface_counters: Optional[InterfaceCounters] = None
    interface_membership: str = ""
    interface_statistics: Optional[InterfaceStatistics] = None
    interface_status: str = ""
    l2_mtu: int = Field(default=0, alias="l2Mtu")
    last_status_change_timestamp: float = 0
    line_protocol_status: str = ""
    mtu: int = 0
    physical_address: str = ""


class ShowInterfaces(ShowCommand):
    CMD: ClassVar[str] = "show interfaces"

    interfaces: dict[str, InterfaceDetail] = {}


class SwitchportInfo(EosModel):
    access_vlan_id: int = 0
    access_vlan_name: str = ""
    dynamic_allowed_vlans: dict[str, Any] = {}
    dynamic_trunk_groups: list[Any] = []
    mac_learning: bool = False
    mode: str = ""
    static_trunk_groups: list[Any] = []
    tpid: str = ""
    tpid_status: bool = False
    trunk_allowed_vlans: str = ""
    trunking_native_vlan_id: int = 0
    trunking_native_vlan_name: str = ""


class Switchport(EosModel):
    enabled: bool = False
    switchport_info: SwitchportInfo = SwitchportInfo()


class ShowInterfacesSwitchport(ShowCommand):
    CMD: ClassVar[str] = "show interfaces switchport"

    switchports: dict[str, Switchport] = {}


class TrunkGroupNames(EosModel):
    names: list[str] = []


class ShowTrunkGroups(ShowCommand):
    CMD: ClassVar[str] = "show vlan trunk group"

    trunk_groups: dict[str, TrunkGroupNames] = {}


class LldpNeighbor(EosModel):
    port: str = ""
    neighbor_device: str = ""
    neighbor_port: str = ""
    ttl: int = 0


class ShowLldpNeighbors(ShowCommand):
    CMD: ClassVar[str] = "show lldp neighbors"

    tables_last_change_time: float = 0
    tables_age_outs: int = 0
    tables_inserts: int = 0
    tables_deletes: int = 0
    tables_drops: int = 0
    lldp_neighbors: list[LldpNeighbor] = []


class MacAddressEntry(EosModel):
    mac_address: str = ""
    last_move: float = 0
    interface: str = ""
    moves: int = 0
    entry_type: str = ""
    vlan_id: int = 0


class MacAddressTable(EosModel):
    table_entries: list[MacAddressEntry] = []


class ShowMacAddressTable(ShowCommand):
    CMD: ClassVar[str] = "show mac address-table"

    multicast_table: MacAddressTable = MacAddressTable()
    unicast_table: MacAddressTable = MacAddressTable()
