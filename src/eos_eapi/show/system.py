"""System level show commands: version, hostname, power supplies."""
from typing import ClassVar

from .base import EosModel, ShowCommand


class ShowVersion(ShowCommand):
    CMD: ClassVar[str] = "show version"

    model_name: str = ""
    internal_version: str = ""
    system_mac_address: str = ""
    serial_number: str = ""
    mem_total: int = 0
    bootup_timestamp: float = 0
    mem_free: int = 0
    version: str = ""
    architecture: str = ""
    internal_build_id: str = ""
    hardware_revision: str = ""


class ShowHostname(ShowCommand):
    CMD: ClassVar[str] = "show hostname"

    hostname: str = ""
    fqdn: str = ""


class TempSensor(EosModel):
    status: str = ""
    temperature: float = 0


class Fan(EosModel):
    status: str = ""
    speed: float = 0


class PowerSupply(EosModel):
    output_power: float = 0
    state: str = ""
    model_name: str = ""
    capacity: float = 0
    input_current: float = 0
    output_current: float = 0
    temp_sensors: dict[str, TempSensor] = {}
    fans: dict[str, Fan] = {}
    uptime: float = 0
    managed: bool = False


class ShowEnvironmentPower(ShowCommand):
    CMD: ClassVar[str] = "show environment power"

    power_supplies: dict[str, PowerSupply] = {}
