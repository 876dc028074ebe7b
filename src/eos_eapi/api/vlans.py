"""VLAN configuration.

Trunk groups are kept as a set; ``VlanConfig.trunk_groups_str`` gives the
comma-joined form for callers that compare strings.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .base import Commands, EntityBase, as_list, match_group

logger = logging.getLogger(__name__)

VLAN_IDS = re.compile(r"^vlan (\d+)$", re.M)
NAME = re.compile(r"^\s+name (.+)$", re.M)
STATE = re.compile(r"^\s+state (\S+)$", re.M)
TRUNK_GROUP = re.compile(r"^\s+trunk group (\S+)$", re.M)

VlanId = Union[int, str]


@dataclass
class VlanConfig:
    vlan_id: str
    name: str = ""
    state: str = "active"
    trunk_groups: frozenset[str] = field(default_factory=frozenset)

    @property
    def trunk_groups_str(self) -> str:
        """Trunk groups as a sorted, comma-joined string."""
        return ",".join(sorted(self.trunk_groups))


def is_vlan(vid: VlanId) -> bool:
    """True for a valid VLAN id (1-4094)."""
    try:
        return 0 < int(vid) < 4095
    except (TypeError, ValueError):
        return False


def parse_vlan(vid: str, block: str) -> VlanConfig:
    return VlanConfig(
        vlan_id=vid,
        name=match_group(NAME, block).strip(),
        state=match_group(STATE, block, "active"),
        trunk_groups=frozenset(TRUNK_GROUP.findall(block)),
    )


class VlanEntity(EntityBase):
    """VLAN database."""

    async def get(self, vid: VlanId) -> Optional[VlanConfig]:
        """Parsed VLAN, or None if it does not exist."""
        if not is_vlan(vid):
            return None
        block = await self.get_block(f"vlan {vid}")
        if not block:
            return None
        return parse_vlan(str(vid), block)

    async def getall(self) -> dict[str, VlanConfig]:
        config = await self.config()
        vlans = {}
        for vid in VLAN_IDS.findall(config):
            vlans[vid] = parse_vlan(vid, await self.get_block(f"vlan {vid}", config))
        return vlans

    async def create(self, vid: VlanId) -> bool:
        if not is_vlan(vid):
            return False
        return await self.configure(f"vlan {vid}")

    async def delete(self, vid: VlanId) -> bool:
        if not is_vlan(vid):
            return False
        return await self.configure(f"no vlan {vid}")

    async def default(self, vid: VlanId) -> bool:
        if not is_vlan(vid):
            return False
        return await self.configure(f"default vlan {vid}")

    async def configure_vlan(self, vid: VlanId, commands: Commands) -> bool:
        """Send commands in the context of ``vlan <vid>``."""
        if not is_vlan(vid):
            return False
        return await self.configure([f"vlan {vid}", *as_list(commands)])

    async def set_name(self, vid: VlanId, value: str = "", default: bool = False, enable: bool = True) -> bool:
        return await self.configure_vlan(vid, self.command_builder("name", value, default, enable))

    async def set_state(self, vid: VlanId, value: str = "", default: bool = False, enable: bool = True) -> bool:
        if enable and not default and value not in ("", "active", "suspend"):
            return False
        return await self.configure_vlan(vid, self.command_builder("state", value, default, enable))

    async def set_trunk_groups(
        self,
        vid: VlanId,
        value: Iterable[str] = (),
        default: bool = False,
        enable: bool = True,
    ) -> bool:
        """Make the VLAN's trunk groups exactly ``value``.

        Only the difference to the current config is sent. ``value`` may
        also be a comma-joined string.
        """
        if isinstance(value, str):
            value = [name for name in value.split(",") if name]
        if default:
            return await self.configure_vlan(vid, "default trunk group")
        if not enable:
            return await self.configure_vlan(vid, "no trunk group")

        current = await self.get(vid)
        existing = current.trunk_groups if current else frozenset()
        wanted = frozenset(value)
        commands = [f"trunk group {name}" for name in sorted(wanted - existing)]
        commands += [f"no trunk group {name}" for name in sorted(existing - wanted)]
        if not commands:
            logger.debug(f"vlan {vid}: trunk groups already {sorted(wanted)}")
            return True
        return await self.configure_vlan(vid, commands)

    async def add_trunk_group(self, vid: VlanId, name: str) -> bool:
        return await self.configure_vlan(vid, f"trunk group {name}")

    async def remove_trunk_group(self, vid: VlanId, name: str) -> bool:
        return await self.configure_vlan(vid, f"no trunk group {name}")
