"""Clock and congestion monitoring: PTP and LANZ queue-monitor."""
from typing import ClassVar, Union

from pydantic import PrivateAttr

from .base import EosModel, ShowCommand


class PtpClockSummary(EosModel):
    clock_identity: str = ""
    gm_clock_identity: str = ""
    mean_path_delay: int = 0
    steps_removed: int = 0
    skew: float = 0
    slave_port: str = ""
    number_of_master_ports: int = 0
    number_of_slave_ports: int = 0
    current_ptp_system_time: int = 0
    offset_from_master: int = 0
    last_sync_time: int = 0


class PtpInterfaceSummary(EosModel):
    port_state: str = ""
    delay_mechanism: str = ""
    transport_mode: str = ""


class ShowPtp(ShowCommand):
    CMD: ClassVar[str] = "show ptp"

    ptp_mode: str = ""
    ptp_clock_summary: PtpClockSummary = PtpClockSummary()
    ptp_intf_summaries: dict[str, PtpInterfaceSummary] = {}


class QueueEntry(EosModel):
    interface: str = ""
    entry_type: str = ""
    entry_time: float = 0
    entry_time_usecs: int = 0
    duration: int = 0
    duration_usecs: int = 0
    queue_length: int = 0
    traffic_class: int = 0
    global_protection_mode_enabled: bool = False
    ingress_port_set: list[str] = []


class ShowQueueMonitor(ShowCommand):
    """``show queue-monitor length <port> [limit <n> <unit>]``.

    The command depends on the port, so build instances with
    :meth:`for_port`.
    """

    CMD: ClassVar[str] = "show queue-monitor length"

    report_time: float = 0
    warnings: Union[list[str], str] = []
    bytes_per_txmp_segment: int = 0
    global_hit_count: int = 0
    lanz_enabled: bool = False
    platform_name: str = ""
    entry_list: list[QueueEntry] = []

    _cmd: str = PrivateAttr(default="")

    @classmethod
    def for_port(cls, port: str, limit_by: str = "", limit: int = 0) -> "ShowQueueMonitor":
        """Shape for one port, optionally limited (e.g. ``limit=10, limit_by="samples"``)."""
        shape = cls()
        if limit_by and limit:
            shape._cmd = f"{cls.CMD} {port} limit {limit} {limit_by}"
        else:
            shape._cmd = f"{cls.CMD} {port}"
        return shape

    def command(self) -> str:
        return self._cmd or self.CMD
