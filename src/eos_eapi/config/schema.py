"""Connection profile schema."""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..connection import DEFAULT_TIMEOUT, TRANSPORTS

Transport = Literal["http", "https", "http_local", "socket"]


class ConnectionProfile(BaseModel):
    """One ``[connection:<name>]`` entry of an eapi.conf file."""

    model_config = ConfigDict(extra="ignore")

    name: str
    host: str = "localhost"
    username: str = ""
    password: str = ""
    port: Optional[int] = None
    transport: Transport = "https"
    enablepwd: str = ""
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    @field_validator("transport", mode="before")
    @classmethod
    def _lower_transport(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or "https"
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _empty_port(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("port")
    @classmethod
    def _port_range(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not 0 < value < 65536:
            raise ValueError(f"port {value} out of range")
        return value

    @property
    def effective_port(self) -> int:
        """Configured port, or the transport's default."""
        return self.port or TRANSPORTS[self.transport].default_port

    def connection_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :func:`eos_eapi.connection.create_connection`."""
        return {
            "host": self.host,
            "username": self.username,
            "password": self.password,
            "port": self.effective_port,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
        }
