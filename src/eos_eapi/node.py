"""Node: a session with one EOS switch.

EOS needs privileged (enable) mode before most show commands and before
``configure``; the node adds that prelude to every batch and strips its
result again. It also caches the running and startup configuration, which
every feature module parses.
"""
import logging
import re
from typing import Any, Iterable, Optional, Union

from .api import create_api
from .commands import WireCommand, command_text, enable_command
from .connection import EapiConnection, RequestParameters, check_encoding
from .errors import UsageError
from .handle import Handle
from .section import Pattern, get_section
from .show import ShowEntity

logger = logging.getLogger(__name__)

CONFIG_SOURCES = ("running-config", "startup-config")

# "! Command: show running-config all", "! device: ...", "!"
CONFIG_BANNER = re.compile(r"\A(?:![^\n]*(?:\n|\Z))+")


def normalize_config(output: str) -> str:
    """Strip surrounding whitespace and the leading ``!`` banner lines."""
    return CONFIG_BANNER.sub("", output.strip()).strip()


def _as_list(commands: Union[WireCommand, Iterable[WireCommand]]) -> list[WireCommand]:
    if isinstance(commands, (str, dict)):
        return [commands]
    return list(commands)


class _ConfigCache:
    """Cached configuration text plus a dirty flag."""

    def __init__(self):
        self.text = ""
        self.dirty = True

    def get(self) -> Optional[str]:
        if self.dirty or not self.text:
            return None
        return self.text

    def store(self, text: str) -> None:
        self.text = text
        self.dirty = False

    def invalidate(self) -> None:
        self.dirty = True


class Node:
    """High level operations over an eAPI connection.

    Args:
        connection: Transport to the switch, owned by the node from now on
        enable_password: Password for the enable prelude, if the switch wants one
        auto_refresh: Re-read the running-config after every config batch
        encoding: Default encoding for enable() and run_commands()
        name: Label used in logs, usually the profile name
    """

    def __init__(
        self,
        connection: EapiConnection,
        enable_password: Optional[str] = None,
        auto_refresh: bool = True,
        encoding: str = "json",
        name: Optional[str] = None,
    ):
        self._connection = connection
        self._enable_password = ""
        self.enable_authentication(enable_password)
        self.auto_refresh = auto_refresh
        self.encoding = check_encoding(encoding)
        self.name = name or connection.host
        self._running = _ConfigCache()
        self._startup = _ConfigCache()

    def __repr__(self) -> str:
        return f"Node({self.name!r}, {self._connection!r})"

    async def __aenter__(self) -> "Node":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def connection(self) -> EapiConnection:
        return self._connection

    @property
    def enable_password(self) -> str:
        return self._enable_password

    def enable_authentication(self, password: Optional[str]) -> None:
        """Set the password sent with the enable prelude."""
        self._enable_password = (password or "").strip()

    async def close(self) -> None:
        await self._connection.close()

    # === Configuration cache ===

    def refresh(self) -> None:
        """Drop cached configs so the next read goes to the switch."""
        self._running.invalidate()
        self._startup.invalidate()

    async def get_config(self, config: str = "running-config", params: Optional[str] = None) -> str:
        """Fetch ``show <config> [params]`` as text, bypassing the cache."""
        if config not in CONFIG_SOURCES:
            raise UsageError(f"Unknown config source: {config!r}")
        cmd = f"show {config}"
        if params:
            cmd += f" {params}"
        result = await self.enable([cmd], encoding="text")
        return normalize_config(result[0].get("output", ""))

    async def running_config(self) -> str:
        """Running configuration (``show running-config all``), cached."""
        cached = self._running.get()
        if cached is None:
            cached = await self.get_config("running-config", "all")
            self._running.store(cached)
        return cached

    async def startup_config(self) -> str:
        """Startup configuration, cached."""
        cached = self._startup.get()
        if cached is None:
            cached = await self.get_config("startup-config")
            self._startup.store(cached)
        return cached

    async def section(self, regex: Pattern, config: str = "running-config") -> str:
        """Return the block under the first line matching ``regex``.

        Raises:
            SectionNotFound: No line matches
            UsageError: ``config`` is not running-config or startup-config
        """
        if config == "running-config":
            text = await self.running_config()
        elif config == "startup-config":
            text = await self.startup_config()
        else:
            raise UsageError(f"Unknown config source: {config!r}")
        return get_section(text, regex)

    # === Command execution ===

    async def run_commands(
        self,
        commands: Union[WireCommand, Iterable[WireCommand]],
        encoding: Optional[str] = None,
        **flags: bool,
    ) -> list[Any]:
        """Send the batch exactly as given and return all results."""
        return await self._connection.execute(
            _as_list(commands), encoding or self.encoding, **flags
        )

    async def enable(
        self,
        commands: Union[WireCommand, Iterable[WireCommand]],
        encoding: Optional[str] = None,
        **flags: bool,
    ) -> list[Any]:
        """Run commands in privileged mode.

        Args:
            commands: One command or a list of commands
            encoding: "json" or "text", defaults to the node's encoding
            **flags: auto_complete, expand_aliases, timestamps

        Returns:
            One result per command, without the enable prelude

        Raises:
            UsageError: A command contains "configure"; use config() instead
            CommandError: The device rejected a command
        """
        commands = _as_list(commands)
        for cmd in commands:
            if "configure" in command_text(cmd):
                raise UsageError(
                    f"Config mode commands are not supported by enable(): {command_text(cmd)!r}"
                )
        batch = [enable_command(self._enable_password), *commands]
        results = await self.run_commands(batch, encoding, **flags)
        return results[1:]

    async def config_outputs(self, commands: Union[str, Iterable[str]]) -> list[str]:
        """Run commands in configuration mode.

        Sends ``enable``, ``configure`` and the commands as one text batch.

        Returns:
            The text output of each command
        """
        commands = _as_list(commands)
        batch = [enable_command(self._enable_password), "configure", *commands]
        try:
            results = await self._connection.execute(batch, "text")
        finally:
            # earlier commands of a failed batch may already be applied
            if self.auto_refresh:
                self._running.invalidate()
        logger.info(f"{self.name}: applied {len(commands)} config command(s)")
        return [r.get("output", "") if isinstance(r, dict) else str(r) for r in results[2:]]

    async def config(self, commands: Union[str, Iterable[str]]) -> bool:
        """Run commands in configuration mode; True once the batch is applied.

        Use :meth:`config_outputs` for the text each command printed.
        """
        await self.config_outputs(commands)
        return True

    async def configure(self, commands: Union[str, Iterable[str]]) -> bool:
        """Alias of :meth:`config` used by the feature modules."""
        return await self.config(commands)

    # === Handles and feature modules ===

    def get_handle(self, encoding: Union[str, RequestParameters] = "json") -> Handle:
        """Open a batch handle bound to this node."""
        if isinstance(encoding, RequestParameters):
            return Handle(self, encoding)
        return Handle(self, RequestParameters(format=encoding))

    def api(self, name: str):
        """Feature module ``name`` (e.g. "vlans", "acl") bound to this node."""
        return create_api(name, self)

    @property
    def show(self) -> ShowEntity:
        """Typed ``show`` commands for this node."""
        return ShowEntity(self)
