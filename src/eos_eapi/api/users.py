"""Local user accounts.

Parses lines like::

    username admin privilege 15 role network-admin secret sha512 $6$...
    username admin sshkey ssh-rsa AAAA...
    username guest privilege 1 nopassword
"""
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import UsageError
from .base import EntityBase

USER = re.compile(
    r"^username (\S+) privilege (\d+)"
    r"(?: role (\S+))?"
    r"(?: (nopassword))?"
    r"(?: secret (0|5|7|sha512) (\S+))?"
    r".*$\n?"
    r"(?:^username \1 sshkey (.+)$)?",
    re.M,
)

ENCRYPTION = {
    "cleartext": "0",
    "md5": "5",
    "sha512": "sha512",
}


@dataclass
class UserConfig:
    username: str
    privilege: str = "1"
    role: str = ""
    nopassword: bool = False
    format: str = ""
    secret: str = ""
    sshkey: str = ""


def parse_users(config: str) -> dict[str, UserConfig]:
    users = {}
    for match in USER.finditer(config):
        name, privilege, role, nopassword, fmt, secret, sshkey = match.groups()
        users[name] = UserConfig(
            username=name,
            privilege=privilege,
            role=role or "",
            nopassword=nopassword == "nopassword",
            format=fmt or "",
            secret=secret or "",
            sshkey=(sshkey or "").strip(),
        )
    return users


def is_privilege(value) -> bool:
    try:
        return 0 <= int(value) <= 15
    except (TypeError, ValueError):
        return False


class UsersEntity(EntityBase):
    """Local users."""

    async def get(self, name: str) -> Optional[UserConfig]:
        return parse_users(await self.config()).get(name)

    async def getall(self) -> dict[str, UserConfig]:
        return parse_users(await self.config())

    async def create(
        self,
        name: str,
        nopassword: bool = False,
        secret: str = "",
        encryption: str = "cleartext",
    ) -> bool:
        """Create a user with a secret or without a password.

        Raises:
            UsageError: Neither ``secret`` nor ``nopassword`` given, or an
                unknown ``encryption``
        """
        if secret:
            if encryption not in ENCRYPTION:
                raise UsageError(f"encryption must be one of {', '.join(ENCRYPTION)}")
            return await self.configure(f"username {name} secret {ENCRYPTION[encryption]} {secret}")
        if nopassword:
            return await self.configure(f"username {name} nopassword")
        raise UsageError("either nopassword or secret must be given to create a user")

    async def delete(self, name: str) -> bool:
        return await self.configure(f"no username {name}")

    async def default(self, name: str) -> bool:
        return await self.configure(f"default username {name}")

    async def set_privilege(self, name: str, value="") -> bool:
        """Set the privilege level (0-15); an empty value resets it."""
        if value != "" and not is_privilege(value):
            return False
        cmd = f"username {name}"
        if value != "":
            cmd += f" privilege {value}"
        return await self.configure(cmd)

    async def set_role(self, name: str, value: str = "", default: bool = False) -> bool:
        cmd = self.command_builder(f"username {name} role", value, default, bool(value))
        return await self.configure(cmd)

    async def set_sshkey(self, name: str, value: str = "", default: bool = False) -> bool:
        cmd = self.command_builder(f"username {name} sshkey", value, default, bool(value))
        return await self.configure(cmd)
