"""Command objects queued on a Handle.

A command object knows the CLI string it sends and how to take the decoded
result for that command back. Built-in ``show`` shapes live in
:mod:`eos_eapi.show`; this module holds the protocol and the generic commands.
"""
from typing import Any, Optional, Protocol, Union, runtime_checkable

# A batch entry on the wire: a CLI string or {"cmd": ..., "input": ...}
WireCommand = Union[str, dict]


@runtime_checkable
class EapiCommand(Protocol):
    """Capability every command object implements."""

    def command(self) -> WireCommand:
        ...

    def decode(self, result: Any) -> None:
        ...


class RawCommand:
    """Command that keeps its result undecoded.

    With json encoding ``result`` is the JSON object returned by the device;
    with text encoding it is the command output string.
    """

    def __init__(self, cmd: str):
        self.cmd = cmd
        self.result: Any = None

    def command(self) -> str:
        return self.cmd

    def decode(self, result: Any) -> None:
        self.result = result

    def __repr__(self) -> str:
        return f"RawCommand({self.cmd!r})"


class InputCommand(RawCommand):
    """Command that answers an interactive prompt, e.g. enable with a password."""

    def __init__(self, cmd: str, input: str):
        super().__init__(cmd)
        self.input = input

    def command(self) -> dict:
        return {"cmd": self.cmd, "input": self.input}

    def __repr__(self) -> str:
        return f"InputCommand({self.cmd!r})"


def enable_command(password: Optional[str] = None) -> WireCommand:
    """The enable prelude, structured when a password is needed."""
    if password:
        return {"cmd": "enable", "input": password}
    return "enable"


def command_text(cmd: WireCommand) -> str:
    """CLI text of a wire command, without any prompt input."""
    if isinstance(cmd, dict):
        return str(cmd.get("cmd", ""))
    return cmd
