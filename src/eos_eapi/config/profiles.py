"""Named connection profiles loaded from eapi.conf.

The file is INI formatted, one section per switch::

    [DEFAULT]
    username = admin

    [connection:leaf1]
    host = 192.0.2.11
    password = secret
    transport = https

    [connection:spine1]
    transport = http
    port = 8080

A section without ``host`` connects to its own name (``spine1`` above).
``[DEFAULT]`` values apply to every section. A ``localhost`` profile using the
on-box UNIX socket is always available.
"""
import configparser
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..connection import create_connection
from ..errors import ConfigError
from ..node import Node
from .schema import ConnectionProfile

logger = logging.getLogger(__name__)

SECTION_PREFIX = "connection:"
LOCALHOST = "localhost"


def search_paths() -> list[Path]:
    """Candidate config files, most specific first."""
    paths = []
    env_path = os.environ.get("EAPI_CONF")
    if env_path:
        paths.append(Path(env_path).expanduser())
    paths.extend([
        Path.cwd() / "eapi.conf",
        Path.home() / ".eapi.conf",
        Path("/mnt/flash/eapi.conf"),
    ])
    return paths


def _profile_name(name: str) -> str:
    if name.startswith(SECTION_PREFIX):
        return name[len(SECTION_PREFIX):]
    return name


def localhost_profile() -> ConnectionProfile:
    return ConnectionProfile(name=LOCALHOST, host=LOCALHOST, transport="socket")


class ProfileStore:
    """Connection profiles keyed by name.

    Args:
        config_path: File to load. When omitted the search path is used, and
            a missing file simply leaves the ``localhost`` profile.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path: Optional[Path] = None
        self._profiles: dict[str, ConnectionProfile] = {LOCALHOST: localhost_profile()}
        if config_path is not None:
            self.load(config_path)
        else:
            self.autoload()

    def _find_config(self) -> Optional[Path]:
        """Find the first existing eapi.conf on the search path."""
        for path in search_paths():
            if path.exists():
                return path
        return None

    def autoload(self) -> None:
        """Load the first config file found on the search path."""
        path = self._find_config()
        if path is None:
            logger.debug("No eapi.conf found, only the localhost profile is defined")
            self._profiles = {LOCALHOST: localhost_profile()}
            self.config_path = None
            return
        self.load(path)

    def load(self, path: Union[str, Path]) -> None:
        """Replace all profiles with the contents of ``path``.

        Raises:
            ConfigError: The file is missing, unparsable or has invalid values
        """
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        self.loads(text, source=str(path))
        self.config_path = path

    def loads(self, text: str, source: str = "<string>") -> None:
        """Replace all profiles with profiles parsed from INI text."""
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read_string(text, source=source)
        except configparser.Error as e:
            raise ConfigError(f"Malformed config file {source}: {e}") from e

        profiles: dict[str, ConnectionProfile] = {}
        for section in parser.sections():
            if not section.startswith(SECTION_PREFIX):
                logger.debug(f"{source}: ignoring section [{section}]")
                continue
            name = _profile_name(section)
            fields = dict(parser.items(section))
            if not fields.get("host"):
                fields["host"] = name
            profiles[name] = self._build(name, fields, source)

        profiles.setdefault(LOCALHOST, localhost_profile())
        self._profiles = profiles
        logger.info(f"Loaded {len(profiles)} connection profile(s) from {source}")

    @staticmethod
    def _build(name: str, fields: dict, source: str) -> ConnectionProfile:
        try:
            return ConnectionProfile(**{**fields, "name": name})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(f"{source}: invalid profile {name!r}: {problems}") from e

    def connections(self) -> list[str]:
        """Names of all profiles, ``localhost`` included."""
        return sorted(self._profiles)

    def config_for(self, name: str) -> ConnectionProfile:
        """Profile for ``name``.

        Raises:
            ConfigError: No such profile
        """
        profile = self._profiles.get(_profile_name(name))
        if profile is None:
            raise ConfigError(f"Connection profile not found: {name}")
        return profile

    def add_connection(self, name: str, **fields) -> ConnectionProfile:
        """Add or replace a profile programmatically."""
        name = _profile_name(name)
        if not fields.get("host"):
            fields["host"] = name
        profile = self._build(name, fields, "add_connection")
        self._profiles[name] = profile
        return profile

    def connect_to(self, name: str, **node_options) -> Node:
        """New Node for the named profile.

        Raises:
            ConfigError: No such profile
        """
        return node_from_profile(self.config_for(name), **node_options)


def node_from_profile(profile: ConnectionProfile, **node_options) -> Node:
    """Build a Node (and its connection) from a profile."""
    connection = create_connection(profile.transport, **profile.connection_kwargs())
    node_options.setdefault("enable_password", profile.enablepwd)
    node_options.setdefault("name", profile.name)
    logger.debug(f"Connecting profile {profile.name!r} via {connection!r}")
    return Node(connection, **node_options)


# Process-wide store, created on first use
_store: Optional[ProfileStore] = None


def get_store() -> ProfileStore:
    global _store
    if _store is None:
        _store = ProfileStore()
    return _store


def load(path: Union[str, Path]) -> ProfileStore:
    """Replace the process-wide profiles with the contents of ``path``."""
    global _store
    _store = ProfileStore(path)
    return _store


def connections() -> list[str]:
    return get_store().connections()


def config_for(name: str) -> ConnectionProfile:
    return get_store().config_for(name)


def add_connection(name: str, **fields) -> ConnectionProfile:
    return get_store().add_connection(name, **fields)


def connect_to(name: str, **node_options) -> Node:
    """New Node for the named profile of the process-wide store."""
    return get_store().connect_to(name, **node_options)


def connect(
    transport: str = "https",
    host: str = "localhost",
    username: str = "",
    password: str = "",
    port: Optional[int] = None,
    enablepwd: str = "",
    timeout: float = 60,
    verify_ssl: bool = True,
    **node_options,
) -> Node:
    """New Node for an ad-hoc connection, without touching the profile store.

    Raises:
        ConfigError: Invalid transport or port
    """
    profile = ProfileStore._build(
        host,
        {
            "host": host,
            "username": username,
            "password": password,
            "port": port,
            "transport": transport,
            "enablepwd": enablepwd,
            "timeout": timeout,
            "verify_ssl": verify_ssl,
        },
        "connect",
    )
    return node_from_profile(profile, **node_options)
