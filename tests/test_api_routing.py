"""Tests for the BGP modules."""
import pytest

from eos_eapi.api.bgp import BgpEntity, BgpNetwork, BgpNeighborsEntity, is_bgp_as
from eos_eapi.errors import CommandError
from eos_eapi.node import Node

from conftest import FakeConnection


@pytest.fixture
def bgp(node):
    return BgpEntity(node)


@pytest.fixture
def no_bgp():
    """A node without a BGP process."""
    conn = FakeConnection("hostname leaf9\n!\nend\n")
    return BgpEntity(Node(conn)), conn


class TestBgp:
    """Tests for the router process."""

    @pytest.mark.asyncio
    async def test_get(self, bgp):
        config = await bgp.get()

        assert config.bgp_as == "65001"
        assert config.router_id == "10.255.0.1"
        assert config.shutdown is False
        assert config.maximum_paths == "4"
        assert config.maximum_ecmp_paths == "8"
        assert config.networks == [
            BgpNetwork("172.16.10.0", "24"),
            BgpNetwork("172.16.20.0", "24", "Test1"),
        ]

    @pytest.mark.asyncio
    async def test_no_process(self, no_bgp):
        """Without `router bgp` there is nothing to change."""
        bgp, conn = no_bgp
        assert await bgp.get() is None
        assert await bgp.set_router_id("1.1.1.1") is False
        assert await bgp.delete() is True
        assert conn.config_batches == []

    @pytest.mark.parametrize("value,valid", [(1, True), ("65534", True), (0, False), (65535, False), ("x", False)])
    def test_is_bgp_as(self, value, valid):
        assert is_bgp_as(value) is valid

    @pytest.mark.asyncio
    async def test_create(self, no_bgp):
        bgp, conn = no_bgp
        assert await bgp.create(65010)
        assert conn.last_config == ["router bgp 65010"]
        assert await bgp.create(70000) is False

    @pytest.mark.asyncio
    async def test_delete_default(self, bgp, connection):
        await bgp.delete()
        assert connection.last_config == ["no router bgp 65001"]
        await bgp.default()
        assert connection.last_config == ["default router bgp 65001"]

    @pytest.mark.asyncio
    async def test_router_context(self, bgp, connection):
        """Commands are sent under `router bgp <asn>`."""
        await bgp.set_router_id("10.255.0.9")
        assert connection.last_config == ["router bgp 65001", "router-id 10.255.0.9"]
        await bgp.set_router_id()
        assert connection.last_config == ["router bgp 65001", "no router-id"]

    @pytest.mark.asyncio
    async def test_maximum_paths(self, bgp, connection):
        await bgp.set_maximum_paths(8, 16)
        assert connection.last_config == ["router bgp 65001", "maximum-paths 8 ecmp 16"]
        await bgp.set_maximum_paths(2)
        assert connection.last_config == ["router bgp 65001", "maximum-paths 2"]
        await bgp.set_maximum_paths()
        assert connection.last_config == ["router bgp 65001", "default maximum-paths"]

    @pytest.mark.asyncio
    async def test_shutdown(self, bgp, connection):
        await bgp.set_shutdown()
        assert connection.last_config == ["router bgp 65001", "shutdown"]

    @pytest.mark.asyncio
    async def test_networks(self, bgp, connection):
        await bgp.add_network("172.16.30.0", 24, route_map="RM1")
        assert connection.last_config == ["router bgp 65001", "network 172.16.30.0/24 route-map RM1"]
        await bgp.remove_network("172.16.10.0", 24)
        assert connection.last_config == ["router bgp 65001", "no network 172.16.10.0/24"]


class TestBgpNeighbors:
    """Tests for BGP neighbors."""

    @pytest.fixture
    def neighbors(self, node):
        return BgpNeighborsEntity(node)

    @pytest.mark.asyncio
    async def test_get(self, neighbors):
        spine1 = await neighbors.get("10.0.0.2")

        assert spine1.remote_as == "65002"
        assert spine1.send_community is True
        assert spine1.description == "spine1"
        assert spine1.route_map_in == "RM-IN"
        assert spine1.route_map_out == "RM-OUT"
        assert spine1.shutdown is False

    @pytest.mark.asyncio
    async def test_peer_group_member(self, neighbors):
        """Neighbors are shut down unless `no neighbor X shutdown` is present."""
        member = await neighbors.get("10.0.0.3")
        assert member.peer_group == "EVPN"
        assert member.next_hop_self is True
        assert member.shutdown is True

    @pytest.mark.asyncio
    async def test_getall(self, bgp):
        assert list(await bgp.neighbors.getall()) == ["10.0.0.2", "10.0.0.3"]

    @pytest.mark.asyncio
    async def test_create(self, neighbors, connection):
        await neighbors.create("10.0.0.4")
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.4 shutdown"]

    @pytest.mark.asyncio
    async def test_delete_falls_back_to_peer_group(self, running_config):
        """A rejected neighbor removal is retried as a peer-group."""
        class PeerGroupConnection(FakeConnection):
            async def execute(self, commands, encoding="json", **flags):
                if "no neighbor EVPN" in commands:
                    self.batches.append((list(commands), encoding))
                    raise CommandError(1002, "invalid command", errors=["Invalid input"], commands=commands)
                return await super().execute(commands, encoding, **flags)

        conn = PeerGroupConnection(running_config)
        neighbors = BgpNeighborsEntity(Node(conn))

        assert await neighbors.delete("EVPN")
        assert conn.config_batches[-2:] == [
            ["router bgp 65001", "no neighbor EVPN"],
            ["router bgp 65001", "no neighbor EVPN peer-group"],
        ]

    @pytest.mark.asyncio
    async def test_set_peer_group(self, neighbors, connection):
        """Only IP neighbors join a peer-group."""
        await neighbors.set_peer_group("10.0.0.4", "EVPN")
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.4 peer-group EVPN"]
        assert await neighbors.set_peer_group("EVPN", "OTHER") is False

    @pytest.mark.asyncio
    async def test_set_remote_as(self, neighbors, connection):
        await neighbors.set_remote_as("10.0.0.2", 65003)
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.2 remote-as 65003"]
        await neighbors.set_remote_as("10.0.0.2", default=True)
        assert connection.last_config == ["router bgp 65001", "default neighbor 10.0.0.2 remote-as"]

    @pytest.mark.asyncio
    async def test_flags(self, neighbors, connection):
        await neighbors.set_shutdown("10.0.0.2", False)
        assert connection.last_config == ["router bgp 65001", "no neighbor 10.0.0.2 shutdown"]
        await neighbors.set_send_community("10.0.0.2", False)
        assert connection.last_config == ["router bgp 65001", "no neighbor 10.0.0.2 send-community"]
        await neighbors.set_next_hop_self("10.0.0.2")
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.2 next-hop-self"]

    @pytest.mark.asyncio
    async def test_route_maps(self, neighbors, connection):
        await neighbors.set_route_map_in("10.0.0.2", "RM-IN2")
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.2 route-map RM-IN2 in"]
        await neighbors.set_route_map_out("10.0.0.2")
        assert connection.last_config == ["router bgp 65001", "no neighbor 10.0.0.2 route-map out"]

    @pytest.mark.asyncio
    async def test_set_description(self, neighbors, connection):
        await neighbors.set_description("10.0.0.3", "spine2")
        assert connection.last_config == ["router bgp 65001", "neighbor 10.0.0.3 description spine2"]
