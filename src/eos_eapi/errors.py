"""Error kinds raised by the eAPI client.

Every error derives from EapiError so callers can catch the whole family.
Where a builtin exception describes the same failure, the error subclasses it
as well (EapiConnectionError is a ConnectionError, UsageError a ValueError).
"""
from typing import Any, Optional


class EapiError(Exception):
    """Base class for all eAPI client errors."""

    def __init__(self, message: str, host: Optional[str] = None):
        self.message = message
        self.host = host
        super().__init__(message)

    def __str__(self) -> str:
        if self.host:
            return f"[{self.host}] {self.message}"
        return self.message


class EapiConnectionError(EapiError, ConnectionError):
    """Transport failure, timeout or an unusable response body."""


class CommandError(EapiError):
    """The device answered the batch with a JSON-RPC error object.

    Attributes:
        code: JSON-RPC error code reported by the device
        message: Human readable error message
        errors: Per-command CLI error strings
        commands: The batch as it was sent
        failed_index: Position in ``commands`` of the first failing command
    """

    def __init__(
        self,
        code: int,
        message: str,
        errors: Optional[list[str]] = None,
        commands: Optional[list[Any]] = None,
        failed_index: Optional[int] = None,
        host: Optional[str] = None,
    ):
        super().__init__(message, host=host)
        self.code = code
        self.errors = list(errors or [])
        self.commands = list(commands or [])
        if failed_index is None:
            failed_index = infer_failed_index(len(self.commands), len(self.errors))
        self.failed_index = failed_index

    @property
    def failed_command(self) -> Optional[Any]:
        """The command at ``failed_index``, if the batch is known."""
        if self.failed_index is None or not self.commands:
            return None
        return self.commands[self.failed_index]

    @property
    def command_error(self) -> str:
        """The first per-command error string, or the message."""
        return self.errors[0] if self.errors else self.message

    def __str__(self) -> str:
        text = f"CommandError {self.code}: {self.message}"
        if self.errors:
            text += f" ({'; '.join(self.errors)})"
        if self.host:
            return f"[{self.host}] {text}"
        return text


class ConfigError(EapiError):
    """Unknown connection profile or malformed profile file."""


class UsageError(EapiError, ValueError):
    """The caller used the API in a way it does not support."""


class StateError(EapiError, RuntimeError):
    """Operation on a closed handle or an unusable node."""


class SectionNotFound(EapiError, LookupError):
    """No configuration line matched the parent pattern."""


def infer_failed_index(command_count: int, error_count: int) -> Optional[int]:
    """Infer the failing command from the size of the error list.

    The device reports errors for the failing command and whatever was not
    executed after it, so the first failure sits at ``len(cmds) - len(errors)``.
    The result is clamped into the batch.
    """
    if command_count <= 0:
        return None
    index = command_count - error_count
    return max(0, min(index, command_count - 1))
