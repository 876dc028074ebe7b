"""eAPI transports and the JSON-RPC ``runCmds`` envelope.

One connection class per transport, all speaking the same wire format:

    POST /command-api
    {"jsonrpc": "2.0", "method": "runCmds", "id": 7,
     "params": {"version": 1, "cmds": ["enable", "show version"], "format": "json"}}

Transports:
    http        http://<host>:80
    https       https://<host>:443 (certificate verification can be disabled)
    http_local  http://127.0.0.1:8080, on-box, no credentials
    socket      UNIX socket /var/run/command-api.sock, on-box
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from .commands import WireCommand, command_text
from .errors import CommandError, ConfigError, EapiConnectionError, EapiError, UsageError
from .utils.logging_config import timed

logger = logging.getLogger(__name__)

COMMAND_API_PATH = "/command-api"
DEFAULT_SOCKET_PATH = "/var/run/command-api.sock"
DEFAULT_TIMEOUT = 60
MAX_TIMEOUT = 65535
ENCODINGS = ("json", "text")


def check_encoding(encoding: str) -> str:
    """Return ``encoding`` if it is one eAPI understands."""
    if encoding not in ENCODINGS:
        raise UsageError(f"Unsupported encoding: {encoding!r} (expected json or text)")
    return encoding


@dataclass
class RequestParameters:
    """Encoding and optional runCmds flags for a batch."""
    format: str = "json"
    auto_complete: bool = False
    expand_aliases: bool = False
    timestamps: bool = False

    def __post_init__(self):
        check_encoding(self.format)

    def flags(self) -> dict[str, bool]:
        return {
            "auto_complete": self.auto_complete,
            "expand_aliases": self.expand_aliases,
            "timestamps": self.timestamps,
        }


class EapiConnection:
    """Base eAPI connection over plain HTTP.

    A connection sends one batch at a time. ``last_error`` keeps the error of
    the most recent failed batch until a later batch succeeds.
    """

    transport = "http"
    scheme = "http"
    default_port = 80

    def __init__(
        self,
        host: str = "localhost",
        username: str = "",
        password: str = "",
        port: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ):
        self.host = host
        self.port = port or self.default_port
        self.verify_ssl = verify_ssl
        self.username = ""
        self.password = ""
        self.authentication(username, password)
        self.timeout = DEFAULT_TIMEOUT
        self.set_timeout(timeout)
        self.last_error: Optional[EapiError] = None
        self._ids = itertools.count(1)
        self._client: Optional[httpx.AsyncClient] = None
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(host={self.host!r}, port={self.port})"

    async def __aenter__(self) -> "EapiConnection":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # === Settings ===

    def authentication(self, username: str, password: str) -> None:
        """Set HTTP Basic credentials (embedded newlines are dropped)."""
        self.username = (username or "").replace("\n", "")
        self.password = (password or "").replace("\n", "")

    def set_timeout(self, timeout: float) -> None:
        """Set the per-request timeout in seconds.

        Values above 65535 fall back to the default of 60 seconds.
        """
        if timeout is None or timeout <= 0:
            raise UsageError(f"Timeout must be positive, got {timeout!r}")
        if timeout > MAX_TIMEOUT:
            logger.warning(f"Timeout {timeout}s too large, using {DEFAULT_TIMEOUT}s")
            timeout = DEFAULT_TIMEOUT
        self.timeout = timeout

    def clear_error(self) -> None:
        self.last_error = None

    @property
    def base_url(self) -> str:
        host = self.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{self.scheme}://{host}:{self.port}"

    # === HTTP client ===

    def _client_kwargs(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "headers": {"Content-Type": "application/json"},
        }

    def _auth(self) -> Optional[httpx.BasicAuth]:
        if not self.username:
            return None
        return httpx.BasicAuth(self.username, self.password)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(**self._client_kwargs())
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client; the next batch reopens it."""
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    # === runCmds ===

    def build_request(
        self,
        commands: Sequence[WireCommand],
        encoding: str = "json",
        auto_complete: bool = False,
        expand_aliases: bool = False,
        timestamps: bool = False,
    ) -> dict[str, Any]:
        """Build the JSON-RPC request body for a batch, taking the next id."""
        params: dict[str, Any] = {
            "version": 1,
            "cmds": list(commands),
            "format": check_encoding(encoding),
        }
        if auto_complete:
            params["autoComplete"] = True
        if expand_aliases:
            params["expandAliases"] = True
        if timestamps:
            params["timestamps"] = True
        return {
            "jsonrpc": "2.0",
            "method": "runCmds",
            "params": params,
            "id": next(self._ids),
        }

    @timed("execute")
    async def execute(
        self,
        commands: Sequence[WireCommand],
        encoding: str = "json",
        *,
        auto_complete: bool = False,
        expand_aliases: bool = False,
        timestamps: bool = False,
        cancel: Optional[asyncio.Event] = None,
    ) -> list[Any]:
        """Send one batch and return the per-command results.

        Args:
            commands: CLI strings or ``{"cmd": ..., "input": ...}`` entries
            encoding: "json" for structured results, "text" for ``{"output": str}``
            auto_complete: Let the device expand abbreviated commands
            expand_aliases: Let the device expand CLI aliases
            timestamps: Ask for per-command timestamps
            cancel: Event that aborts the request and closes the transport

        Returns:
            One result per command, in batch order

        Raises:
            EapiConnectionError: Transport failure, timeout or bad response
            CommandError: The device rejected a command
        """
        commands = list(commands)
        if not commands:
            raise UsageError("Command batch is empty")
        request = self.build_request(
            commands, encoding, auto_complete, expand_aliases, timestamps
        )

        async with self._lock:
            try:
                response = await self._send(request, cancel)
                result = self._decode(request, response)
            except EapiError as e:
                self.last_error = e
                logger.debug(f"{self.host}: request {request['id']} failed: {e}")
                raise

        self.last_error = None
        return result

    async def _send(
        self, request: dict[str, Any], cancel: Optional[asyncio.Event]
    ) -> httpx.Response:
        client = self._get_client()
        cmds = [command_text(c) for c in request["params"]["cmds"]]
        logger.debug(
            f"{self.host}: runCmds id={request['id']} "
            f"format={request['params']['format']} cmds={cmds}"
        )
        post = client.post(
            COMMAND_API_PATH, json=request, auth=self._auth(), timeout=self.timeout
        )
        try:
            if cancel is None:
                return await post
            return await self._cancellable(post, cancel)
        except httpx.TimeoutException as e:
            raise EapiConnectionError(
                f"Request timed out after {self.timeout}s", host=self.host
            ) from e
        except httpx.HTTPError as e:
            raise EapiConnectionError(f"Transport error: {e}", host=self.host) from e

    async def _cancellable(self, post, cancel: asyncio.Event) -> httpx.Response:
        request_task = asyncio.ensure_future(post)
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_task.cancel()
            if not request_task.done():
                request_task.cancel()

        if request_task in done:
            await asyncio.gather(cancel_task, return_exceptions=True)
            return request_task.result()

        # the request must unwind before its client is closed
        await asyncio.gather(request_task, cancel_task, return_exceptions=True)
        logger.info(f"{self.host}: request cancelled, closing transport")
        await self.close()
        raise EapiConnectionError("Request cancelled", host=self.host)

    def _decode(self, request: dict[str, Any], response: httpx.Response) -> list[Any]:
        cmds = request["params"]["cmds"]

        if response.status_code == 401:
            raise EapiConnectionError("Authentication failed (HTTP 401)", host=self.host)
        if response.status_code != 200:
            raise EapiConnectionError(
                f"HTTP {response.status_code} {response.reason_phrase}", host=self.host
            )

        try:
            body = response.json()
        except ValueError as e:
            raise EapiConnectionError("Invalid response body: not JSON", host=self.host) from e
        if not isinstance(body, dict):
            raise EapiConnectionError("Invalid response body: not a JSON-RPC object", host=self.host)

        if body.get("id") != request["id"]:
            logger.warning(
                f"{self.host}: response id {body.get('id')!r} does not match request {request['id']}"
            )

        error = body.get("error")
        if error is not None:
            raise self._command_error(error, cmds)

        result = body.get("result")
        if not isinstance(result, list):
            raise EapiConnectionError(
                "Invalid response body: neither result nor error", host=self.host
            )
        if len(result) != len(cmds):
            raise EapiConnectionError(
                f"Invalid response body: {len(result)} results for {len(cmds)} commands",
                host=self.host,
            )
        return result

    def _command_error(self, error: Any, cmds: list[WireCommand]) -> CommandError:
        if not isinstance(error, dict):
            return CommandError(0, str(error), commands=cmds, host=self.host)

        errors: list[str] = []
        failed_index = None
        data = error.get("data")
        if isinstance(data, dict):
            errors = [str(e) for e in data.get("errors") or []]
        elif isinstance(data, list):
            # One entry per executed command; the failing one carries "errors"
            for index, entry in enumerate(data):
                if isinstance(entry, dict) and entry.get("errors"):
                    if failed_index is None:
                        failed_index = index
                    errors.extend(str(e) for e in entry["errors"])

        return CommandError(
            error.get("code", 0),
            error.get("message", ""),
            errors,
            commands=cmds,
            failed_index=failed_index,
            host=self.host,
        )


class HttpEapiConnection(EapiConnection):
    """eAPI over plain HTTP."""


class HttpsEapiConnection(EapiConnection):
    """eAPI over HTTPS. Pass ``verify_ssl=False`` for self-signed lab switches."""

    transport = "https"
    scheme = "https"
    default_port = 443

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs = super()._client_kwargs()
        kwargs["verify"] = self.verify_ssl
        return kwargs


class HttpLocalEapiConnection(EapiConnection):
    """On-box eAPI over the loopback HTTP server; no credentials are sent."""

    transport = "http_local"
    default_port = 8080

    def __init__(self, host: str = "127.0.0.1", **kwargs):
        super().__init__(host="127.0.0.1", **kwargs)

    def _auth(self) -> Optional[httpx.BasicAuth]:
        return None


class SocketEapiConnection(EapiConnection):
    """On-box eAPI over the UNIX domain socket."""

    transport = "socket"

    def __init__(self, host: str = "localhost", socket_path: str = DEFAULT_SOCKET_PATH, **kwargs):
        super().__init__(host=host, **kwargs)
        self.socket_path = socket_path

    @property
    def base_url(self) -> str:
        return "http://localhost"

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs = super()._client_kwargs()
        kwargs["transport"] = httpx.AsyncHTTPTransport(uds=self.socket_path)
        return kwargs

    def __repr__(self) -> str:
        return f"{type(self).__name__}(socket_path={self.socket_path!r})"


# Transport registry
TRANSPORTS: dict[str, type[EapiConnection]] = {
    "http": HttpEapiConnection,
    "https": HttpsEapiConnection,
    "http_local": HttpLocalEapiConnection,
    "socket": SocketEapiConnection,
}


def create_connection(transport: str = "https", **kwargs) -> EapiConnection:
    """Factory function to create a connection for a transport name."""
    transport = (transport or "https").lower()
    if transport not in TRANSPORTS:
        raise ConfigError(f"Unknown transport: {transport}")
    return TRANSPORTS[transport](**kwargs)
