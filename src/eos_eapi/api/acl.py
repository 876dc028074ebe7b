"""Standard IPv4 access lists.

Parses blocks like::

    ip access-list standard MGMT
       10 permit host 192.0.2.10 log
       20 permit 10.0.0.0/8
       30 deny any

Entries are keyed by sequence number. Source length comes from the prefix
length, the dotted mask, or is 32 for ``host`` and ``any``.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .base import EntityBase

logger = logging.getLogger(__name__)

ACL_NAMES = re.compile(r"^ip access-list standard (\S+)$", re.M)
ENTRY_LINES = re.compile(r"^\s*(\d+ [pd]\w*.*)$", re.M)
ENTRY = re.compile(
    r"(\d+)"
    r"(?: ([pd]\w+))"
    r"(?: (any))?"
    r"(?: (host))?"
    r"(?: ([0-9]+(?:\.[0-9]+){3}))?"
    r"(?:/([0-9]{1,2}))?"
    r"(?: ([0-9]+(?:\.[0-9]+){3}))?"
    r"(?: (log))?"
)


@dataclass
class AclEntry:
    action: str
    srcaddr: str = "0.0.0.0"
    srclen: str = "32"
    log: str = ""


@dataclass
class AclConfig:
    name: str
    type: str = "standard"
    entries: dict[str, AclEntry] = field(default_factory=dict)


def mask_to_prefixlen(mask: str) -> int:
    """Number of set bits in a dotted IPv4 mask ("" means 255.255.255.255)."""
    if not mask:
        return 32
    return sum(bin(int(octet)).count("1") for octet in mask.split("."))


def parse_entries(block: str) -> dict[str, AclEntry]:
    """Parse the numbered entries of an access-list block."""
    entries = {}
    for line in ENTRY_LINES.findall(block):
        match = ENTRY.match(line.strip())
        if match is None:
            continue
        seq, action, _any, _host, addr, prefixlen, mask, log = match.groups()
        if prefixlen is None:
            prefixlen = str(mask_to_prefixlen(mask or ""))
        entries[seq] = AclEntry(
            action=action,
            srcaddr=addr or "0.0.0.0",
            srclen=prefixlen,
            log=log or "",
        )
    return entries


class AclEntity(EntityBase):
    """Standard access-list configuration."""

    def _parent(self, name: str) -> str:
        return f"ip access-list standard {re.escape(name)}"

    async def get(self, name: str) -> Optional[AclConfig]:
        """Parsed access list, or None if it is not configured."""
        block = await self.get_block(self._parent(name))
        if not block:
            return None
        return AclConfig(name=name, entries=parse_entries(block))

    async def getall(self) -> dict[str, AclConfig]:
        config = await self.config()
        acls = {}
        for name in ACL_NAMES.findall(config):
            block = await self.get_block(self._parent(name), config)
            acls[name] = AclConfig(name=name, entries=parse_entries(block))
        return acls

    async def create(self, name: str) -> bool:
        return await self.configure(f"ip access-list standard {name}")

    async def delete(self, name: str) -> bool:
        return await self.configure(f"no ip access-list standard {name}")

    async def default(self, name: str) -> bool:
        return await self.configure(f"default ip access-list standard {name}")

    def _entry(self, seqno, action: str, addr: str, prefixlen, log: bool) -> str:
        entry = f"{action} {addr}/{prefixlen}"
        if seqno is not None:
            entry = f"{seqno} {entry}"
        if log:
            entry += " log"
        return entry

    async def update_entry(
        self, name: str, seqno, action: str, addr: str, prefixlen, log: bool = False
    ) -> bool:
        """Replace entry ``seqno``."""
        return await self.configure([
            f"ip access-list standard {name}",
            f"no {seqno}",
            self._entry(seqno, action, addr, prefixlen, log),
            "exit",
        ])

    async def add_entry(
        self, name: str, action: str, addr: str, prefixlen, log: bool = False, seqno=None
    ) -> bool:
        """Append an entry (the device picks the sequence if none is given)."""
        return await self.configure([
            f"ip access-list standard {name}",
            self._entry(seqno, action, addr, prefixlen, log),
            "exit",
        ])

    async def remove_entry(self, name: str, seqno) -> bool:
        return await self.configure([
            f"ip access-list standard {name}",
            f"no {seqno}",
            "exit",
        ])
