"""Async client for the Arista EOS command API (eAPI)."""
from .config import (
    ConnectionProfile,
    ProfileStore,
    config_for,
    connect,
    connect_to,
    connections,
    load,
)
from .connection import (
    EapiConnection,
    HttpEapiConnection,
    HttpLocalEapiConnection,
    HttpsEapiConnection,
    RequestParameters,
    SocketEapiConnection,
    create_connection,
)
from .errors import (
    CommandError,
    ConfigError,
    EapiConnectionError,
    EapiError,
    SectionNotFound,
    StateError,
    UsageError,
)
from .handle import Handle
from .node import Node

__version__ = "0.1.0"

__all__ = [
    # Node and batches
    "Node",
    "Handle",
    "RequestParameters",
    # Transports
    "EapiConnection",
    "HttpEapiConnection",
    "HttpsEapiConnection",
    "HttpLocalEapiConnection",
    "SocketEapiConnection",
    "create_connection",
    # Profiles
    "ConnectionProfile",
    "ProfileStore",
    "config_for",
    "connect",
    "connect_to",
    "connections",
    "load",
    # Errors
    "EapiError",
    "EapiConnectionError",
    "CommandError",
    "ConfigError",
    "UsageError",
    "StateError",
    "SectionNotFound",
]
