"""Extract a configuration block by its parent line.

EOS configuration is hierarchical by indentation::

    interface Ethernet1
       description uplink
       no shutdown
    interface Ethernet2

The block of ``interface Ethernet1`` is the parent line plus every following
line that starts with whitespace (blank lines included), up to the next line
starting at column 0.
"""
import re
from typing import Union

from .errors import SectionNotFound

# First line of the next block
BLOCK_END = re.compile(r"^\S", re.M)

Pattern = Union[str, "re.Pattern[str]"]


def compile_parent(regex: Pattern) -> "re.Pattern[str]":
    """Compile a parent-line regex in multiline mode.

    Precompiled patterns are recompiled with ``re.M`` added so that ``^``
    and ``$`` match at every line of the config.
    """
    if isinstance(regex, re.Pattern):
        if regex.flags & re.M:
            return regex
        return re.compile(regex.pattern, regex.flags | re.M)
    return re.compile(regex, re.M)


def get_section(config: str, regex: Pattern) -> str:
    """Return the block under the first line matching ``regex``.

    Args:
        config: Configuration text
        regex: Pattern for the parent line (compiled with re.M if a string)

    Returns:
        The parent line and its indented children, trailing newline included

    Raises:
        SectionNotFound: No line matches ``regex``
    """
    pattern = compile_parent(regex)
    match = pattern.search(config)
    if match is None:
        raise SectionNotFound(f"No configuration block matches {pattern.pattern!r}")

    start = config.rfind("\n", 0, match.start()) + 1
    line_end = config.find("\n", start)
    if line_end == -1:
        return config[start:]

    next_block = BLOCK_END.search(config, line_end + 1)
    end = next_block.start() if next_block else len(config)
    return config[start:end]


def find_section(config: str, regex: Pattern, default: str = "") -> str:
    """Like :func:`get_section` but returns ``default`` when nothing matches."""
    try:
        return get_section(config, regex)
    except SectionNotFound:
        return default
