"""Base class for feature modules.

A feature module reads state by parsing the running-config (cached by the
node) and changes state by sending config batches. It never caches parsed
records itself, so every ``get`` reflects the node's current config.
"""
import logging
import re
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from ..section import find_section

if TYPE_CHECKING:
    from ..node import Node

logger = logging.getLogger(__name__)

Commands = Union[str, Iterable[str]]


def command_builder(verb: str, value: Any = "", default: bool = False, enable: bool = True) -> str:
    """Build a config command for ``verb``.

    - ``default`` set: ``default <verb>``
    - ``enable`` false: ``no <verb>`` (value ignored)
    - value given: ``<verb> <value>``
    - otherwise: ``<verb>``
    """
    if default:
        return f"default {verb}"
    if not enable:
        return f"no {verb}"
    if value is not None and str(value) != "":
        return f"{verb} {value}"
    return verb


def as_list(commands: Commands) -> list[str]:
    if isinstance(commands, str):
        return [commands]
    return list(commands)


def match_group(pattern: "re.Pattern[str]", text: str, default: str = "", group: int = 1) -> str:
    """First match of ``pattern`` in ``text``, or ``default``."""
    match = pattern.search(text)
    if match is None or match.group(group) is None:
        return default
    return match.group(group)


class EntityBase:
    """Shared plumbing for feature modules."""

    command_builder = staticmethod(command_builder)

    def __init__(self, node: "Node"):
        self.node = node

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node.name!r})"

    async def config(self) -> str:
        """The node's running-config."""
        return await self.node.running_config()

    async def get_block(self, parent: str, config: Optional[str] = None) -> str:
        """Block whose first line is exactly ``parent`` (a regex), or ``""``."""
        if config is None:
            config = await self.config()
        return find_section(config, f"^{parent}$")

    async def configure(self, commands: Commands) -> bool:
        """Send config commands; True once applied."""
        return await self.node.configure(as_list(commands))

    async def configure_interface(self, name: str, commands: Commands) -> bool:
        """Send config commands in the context of ``interface <name>``."""
        return await self.configure([f"interface {name}", *as_list(commands)])
