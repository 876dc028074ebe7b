"""Tests for eapi.conf connection profiles."""
import os
import tempfile
from pathlib import Path

import pytest

from eos_eapi.config import ConnectionProfile, ProfileStore, connect
from eos_eapi.config import profiles
from eos_eapi.connection import HttpEapiConnection, HttpsEapiConnection, SocketEapiConnection
from eos_eapi.errors import ConfigError
from eos_eapi.node import Node

EAPI_CONF = """
[DEFAULT]
username = admin
password = admin

[connection:leaf1]
host = 192.0.2.11
transport = https
verify_ssl = false
enablepwd = s3cret

[connection:spine1]
transport = HTTP
port = 8080

[connection:labswitch]
host =
timeout = 120

[settings]
ignored = yes
"""


class TestProfileStore:
    """Tests for ProfileStore."""

    @pytest.fixture
    def temp_config(self):
        """Write a temporary eapi.conf."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".conf", delete=False) as f:
            f.write(EAPI_CONF)
            path = f.name
        yield path
        os.unlink(path)

    @pytest.fixture
    def store(self, temp_config):
        return ProfileStore(temp_config)

    def test_connections(self, store):
        """Profile names without the connection: prefix, localhost included."""
        assert store.connections() == ["labswitch", "leaf1", "localhost", "spine1"]

    def test_profile_values(self, store):
        """Values come from the section and [DEFAULT]."""
        leaf1 = store.config_for("leaf1")

        assert leaf1.host == "192.0.2.11"
        assert leaf1.username == "admin"
        assert leaf1.transport == "https"
        assert leaf1.verify_ssl is False
        assert leaf1.enablepwd == "s3cret"
        assert leaf1.effective_port == 443

    def test_host_defaults_to_name(self, store):
        """A missing or empty host falls back to the profile name."""
        assert store.config_for("spine1").host == "spine1"
        assert store.config_for("labswitch").host == "labswitch"

    def test_transport_case_insensitive(self, store):
        """Transport names are lower-cased."""
        spine1 = store.config_for("spine1")
        assert spine1.transport == "http"
        assert spine1.port == 8080

    def test_prefixed_lookup(self, store):
        """Lookups accept the section name too."""
        assert store.config_for("connection:leaf1").name == "leaf1"

    def test_unknown_profile(self, store):
        """Unknown names raise ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            store.config_for("nope")
        assert "nope" in str(exc_info.value)

    def test_localhost_profile(self, store):
        """localhost always uses the UNIX socket."""
        assert store.config_for("localhost").transport == "socket"

    def test_connect_to(self, store):
        """connect_to builds a node on the profile's transport."""
        node = store.connect_to("leaf1")

        assert isinstance(node, Node)
        assert isinstance(node.connection, HttpsEapiConnection)
        assert node.connection.verify_ssl is False
        assert node.enable_password == "s3cret"
        assert node.name == "leaf1"

    def test_connect_to_localhost(self, store):
        """The localhost profile gives a socket connection."""
        assert isinstance(store.connect_to("localhost").connection, SocketEapiConnection)

    def test_add_connection(self, store):
        """Profiles can be added at runtime."""
        store.add_connection("spine2", transport="http", username="ops")

        spine2 = store.config_for("spine2")
        assert spine2.host == "spine2"
        assert spine2.username == "ops"

    def test_missing_file(self):
        """Loading a missing file is a ConfigError."""
        with pytest.raises(ConfigError):
            ProfileStore("/nonexistent/eapi.conf")

    def test_malformed_file(self):
        """Unparsable INI text is a ConfigError."""
        store = ProfileStore.__new__(ProfileStore)
        with pytest.raises(ConfigError):
            store.loads("[connection:leaf1\nhost = 1.2.3.4\n")

    def test_invalid_values(self):
        """Invalid values name the profile."""
        store = ProfileStore.__new__(ProfileStore)
        with pytest.raises(ConfigError) as exc_info:
            store.loads("[connection:leaf1]\ntransport = telnet\n")
        assert "leaf1" in str(exc_info.value)

    def test_port_out_of_range(self):
        """Ports must fit in 16 bits."""
        store = ProfileStore.__new__(ProfileStore)
        with pytest.raises(ConfigError):
            store.loads("[connection:leaf1]\nport = 70000\n")


class TestSearchPath:
    """Tests for locating eapi.conf."""

    def test_env_var_first(self, monkeypatch, tmp_path):
        """EAPI_CONF is searched before the default locations."""
        conf = tmp_path / "eapi.conf"
        conf.write_text("[connection:envswitch]\nhost = 192.0.2.99\n")
        monkeypatch.setenv("EAPI_CONF", str(conf))

        assert profiles.search_paths()[0] == conf
        store = ProfileStore()
        assert store.config_path == conf
        assert store.config_for("envswitch").host == "192.0.2.99"

    def test_default_locations(self, monkeypatch):
        """Without EAPI_CONF the cwd, home and flash are searched."""
        monkeypatch.delenv("EAPI_CONF", raising=False)
        paths = profiles.search_paths()

        assert paths[0] == Path.cwd() / "eapi.conf"
        assert Path.home() / ".eapi.conf" in paths
        assert Path("/mnt/flash/eapi.conf") in paths

    def test_nothing_found(self, monkeypatch, tmp_path):
        """With no file only localhost is defined."""
        monkeypatch.setattr(profiles, "search_paths", lambda: [tmp_path / "missing.conf"])
        store = ProfileStore()

        assert store.connections() == ["localhost"]
        assert store.config_path is None


class TestModuleFunctions:
    """Tests for the process-wide store helpers."""

    def test_load_replaces_store(self, monkeypatch, tmp_path):
        """load() swaps the process-wide store."""
        monkeypatch.setattr(profiles, "_store", None)
        conf = tmp_path / "eapi.conf"
        conf.write_text("[connection:leaf9]\nhost = 192.0.2.9\n")

        profiles.load(conf)

        assert "leaf9" in profiles.connections()
        assert profiles.config_for("leaf9").host == "192.0.2.9"
        assert isinstance(profiles.connect_to("leaf9"), Node)

    def test_connect(self):
        """connect() builds a node without a profile file."""
        node = connect(transport="http", host="192.0.2.1", username="admin", password="pw")

        assert isinstance(node.connection, HttpEapiConnection)
        assert node.connection.base_url == "http://192.0.2.1:80"
        assert node.connection.username == "admin"

    def test_connect_bad_transport(self):
        """Unknown transports are a ConfigError."""
        with pytest.raises(ConfigError):
            connect(transport="ssh", host="192.0.2.1")

    def test_profile_model(self):
        """Profiles validate on their own too."""
        profile = ConnectionProfile(name="x", transport="SOCKET", port="")
        assert profile.transport == "socket"
        assert profile.port is None
