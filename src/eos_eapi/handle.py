"""Batch builder: several command objects, one eAPI round-trip.

Usage:
    version, hostname = ShowVersion(), ShowHostname()
    async with node.get_handle("json") as handle:
        handle.add_command(version)
        handle.add_command(hostname)
        await handle.call()
    print(version.version, hostname.hostname)
"""
import logging
from typing import TYPE_CHECKING, Any, Optional

from .commands import EapiCommand, WireCommand, enable_command
from .connection import RequestParameters
from .errors import CommandError, EapiError, StateError, UsageError
from .utils.logging_config import timed_section

if TYPE_CHECKING:
    from .node import Node

logger = logging.getLogger(__name__)

# Commands one handle accepts per batch
MAX_COMMANDS = 64


class Handle:
    """Ordered batch of command objects bound to a node.

    The device receives ``enable`` followed by the queued commands in
    insertion order; results are decoded back into the objects in the same
    order. After a successful call the queue is emptied and the handle can be
    reused. After a failed call the queue and ``last_error`` stay until close.
    """

    def __init__(self, node: "Node", params: Optional[RequestParameters] = None):
        self._node = node
        self.params = params or RequestParameters()
        self._queue: list[tuple[EapiCommand, Optional[WireCommand]]] = []
        self._closed = False
        self.last_error: Optional[EapiError] = None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Handle({state}, encoding={self.encoding}, commands={len(self._queue)})"

    async def __aenter__(self) -> "Handle":
        self._check_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def encoding(self) -> str:
        return self.params.format

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def commands(self) -> list[EapiCommand]:
        """Command objects queued for the next call."""
        return [obj for obj, _ in self._queue]

    def _check_open(self) -> None:
        if self._closed:
            raise StateError("Handle is closed")

    def add_command(self, obj: EapiCommand, command: Optional[WireCommand] = None) -> None:
        """Queue a command object.

        Args:
            obj: Object with ``command()`` and ``decode()``
            command: Send this instead of ``obj.command()``

        Raises:
            StateError: The handle is closed
            UsageError: ``obj`` is not a command object, or the batch is full
        """
        self._check_open()
        if not isinstance(obj, EapiCommand):
            raise UsageError(f"{type(obj).__name__} does not implement command()/decode()")
        if len(self._queue) >= MAX_COMMANDS:
            raise UsageError(f"Handle is limited to {MAX_COMMANDS} commands")
        self._queue.append((obj, command))

    async def enable(self, obj: EapiCommand, command: Optional[WireCommand] = None) -> None:
        """Queue ``obj`` and call the batch."""
        self.add_command(obj, command)
        await self.call()

    def _batch(self) -> list[WireCommand]:
        batch = [enable_command(self._node.enable_password)]
        for obj, override in self._queue:
            cmd = override if override is not None else obj.command()
            if not cmd:
                raise UsageError(f"{obj!r} produced an empty command")
            batch.append(cmd)
        return batch

    async def call(self) -> None:
        """Send the queued commands and decode the results into their objects.

        Raises:
            StateError: The handle is closed
            UsageError: Nothing is queued
            CommandError: The device rejected a command
            EapiConnectionError: Transport failure
        """
        self._check_open()
        if not self._queue:
            raise UsageError("No commands queued on handle")

        batch = self._batch()
        connection = self._node.connection
        async with timed_section("handle_call", host=connection.host, commands=len(self._queue)):
            try:
                results = await connection.execute(batch, self.encoding, **self.params.flags())
                # drop the enable prelude
                for (obj, _), result in zip(self._queue, results[1:]):
                    obj.decode(self._payload(obj, result))
            except EapiError as e:
                self.last_error = e
                raise

        self.last_error = None
        self._queue.clear()

    def _payload(self, obj: EapiCommand, result: Any) -> Any:
        if self.encoding == "text":
            if isinstance(result, dict):
                return result.get("output", "")
            return str(result)

        # Older EOS answers some commands with free-form text even for json
        if not isinstance(result, dict) or set(result) == {"output"}:
            raise CommandError(
                1003,
                f"Command {obj.command()!r} did not return JSON",
                errors=[f"{obj.command()!r} returned text output for a json request"],
                host=self._node.connection.host,
            )
        return result

    def close(self) -> None:
        """Close the handle; later operations raise StateError."""
        if not self._closed:
            logger.debug(f"Closing {self!r}")
        self._closed = True
        self._queue.clear()
