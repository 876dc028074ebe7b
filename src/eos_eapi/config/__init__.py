"""Connection profiles (eapi.conf)."""
from .schema import ConnectionProfile
from .profiles import (
    ProfileStore,
    add_connection,
    config_for,
    connect,
    connect_to,
    connections,
    get_store,
    load,
    node_from_profile,
    search_paths,
)

__all__ = [
    "ConnectionProfile",
    "ProfileStore",
    "add_connection",
    "config_for",
    "connect",
    "connect_to",
    "connections",
    "get_store",
    "load",
    "node_from_profile",
    "search_paths",
]
