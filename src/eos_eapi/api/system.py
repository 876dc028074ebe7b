"""Global system settings: hostname and IP routing."""
import re
from dataclasses import dataclass

from .base import EntityBase, match_group

HOSTNAME = re.compile(r"^hostname (\S+)$", re.M)
NO_IP_ROUTING = re.compile(r"^no ip routing$", re.M)


@dataclass
class SystemConfig:
    hostname: str = "localhost"
    iprouting: bool = True


def parse_system(config: str) -> SystemConfig:
    return SystemConfig(
        hostname=match_group(HOSTNAME, config, "localhost"),
        iprouting=NO_IP_ROUTING.search(config) is None,
    )


class SystemEntity(EntityBase):
    """Hostname and IP routing."""

    async def get(self) -> SystemConfig:
        return parse_system(await self.config())

    async def set_hostname(self, value: str = "", default: bool = False, enable: bool = True) -> bool:
        return await self.configure(self.command_builder("hostname", value, default, enable))

    async def set_ip_routing(self, enable: bool = True, default: bool = False) -> bool:
        return await self.configure(self.command_builder("ip routing", "", default, enable))
