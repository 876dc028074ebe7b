"""Precision Time Protocol: global and per-interface settings."""
import re
from dataclasses import dataclass
from typing import Optional

from .base import EntityBase, match_group

PTP_INTERFACES = re.compile(r"^interface ((?:Eth|Po)\S+)$", re.M)
PTP_ENABLED = re.compile(r"^\s+ptp enable", re.M)
PTP_ROLE_MASTER = re.compile(r"ptp role master")
PTP_TRANSPORT_LAYER2 = re.compile(r"ptp transport layer2")


def _global_setting(name: str) -> "re.Pattern[str]":
    return re.compile(rf"^ptp {name} (\S+)", re.M)


SOURCE_IP = _global_setting("source ip")
MODE = _global_setting("mode")
TTL = _global_setting("ttl")


@dataclass
class PtpConfig:
    source_ip: str = ""
    mode: str = ""
    ttl: str = ""


@dataclass
class PtpInterfaceConfig:
    name: str
    enabled: bool = False
    role: str = "dynamic"
    transport: str = "ipv4"


def parse_ptp(config: str) -> PtpConfig:
    return PtpConfig(
        source_ip=match_group(SOURCE_IP, config),
        mode=match_group(MODE, config),
        ttl=match_group(TTL, config),
    )


def parse_ptp_interface(name: str, block: str) -> PtpInterfaceConfig:
    return PtpInterfaceConfig(
        name=name,
        enabled=PTP_ENABLED.search(block) is not None,
        role="master" if PTP_ROLE_MASTER.search(block) else "dynamic",
        transport="layer2" if PTP_TRANSPORT_LAYER2.search(block) else "ipv4",
    )


class PtpInterfaceEntity(EntityBase):
    def _parent(self, name: str) -> str:
        return rf"interface\s+{re.escape(name)}"

    async def get(self, name: str) -> Optional[PtpInterfaceConfig]:
        block = await self.get_block(self._parent(name))
        if not block:
            return None
        return parse_ptp_interface(name, block)

    async def getall(self) -> dict[str, PtpInterfaceConfig]:
        config = await self.config()
        return {
            name: parse_ptp_interface(name, await self.get_block(self._parent(name), config))
            for name in PTP_INTERFACES.findall(config)
        }

    async def set_enable(self, name: str, enable: bool = True, default: bool = False) -> bool:
        return await self.configure_interface(name, self.command_builder("ptp enable", "", default, enable))

    async def set_role(self, name: str, value: str = "", default: bool = False) -> bool:
        if value and value not in ("master", "dynamic"):
            return False
        return await self.configure_interface(name, self.command_builder("ptp role", value, default, bool(value)))

    async def set_transport(self, name: str, value: str = "", default: bool = False) -> bool:
        if value and value not in ("layer2", "ipv4"):
            return False
        return await self.configure_interface(
            name, self.command_builder("ptp transport", value, default, bool(value))
        )


class PtpEntity(EntityBase):
    """Global ``ptp`` settings; ``interfaces`` covers the per-port ones."""

    def __init__(self, node):
        super().__init__(node)
        self.interfaces = PtpInterfaceEntity(node)

    async def get(self) -> PtpConfig:
        return parse_ptp(await self.config())

    async def _set(self, verb: str, value: str, default: bool) -> bool:
        return await self.configure(self.command_builder(verb, value, default, bool(value)))

    async def set_source_ip(self, value: str = "", default: bool = False) -> bool:
        return await self._set("ptp source ip", value, default)

    async def set_mode(self, value: str = "", default: bool = False) -> bool:
        return await self._set("ptp mode", value, default)

    async def set_ttl(self, value="", default: bool = False) -> bool:
        return await self._set("ptp ttl", str(value), default)
