"""Tests for the system feature module."""
import pytest

from eos_eapi.api.system import SystemEntity, parse_system


class TestSystem:
    """Tests for hostname and IP routing."""

    @pytest.mark.asyncio
    async def test_get(self, node):
        config = await SystemEntity(node).get()
        assert config.hostname == "veos01"
        assert config.iprouting is True

    def test_parse_defaults(self):
        """Missing hostname and `no ip routing`."""
        config = parse_system("no ip routing\n")
        assert config.hostname == "localhost"
        assert config.iprouting is False

    @pytest.mark.asyncio
    async def test_set_hostname(self, node, connection):
        system = SystemEntity(node)

        assert await system.set_hostname("leaf01")
        assert connection.last_config == ["hostname leaf01"]
        await system.set_hostname(default=True)
        assert connection.last_config == ["default hostname"]
        await system.set_hostname(enable=False)
        assert connection.last_config == ["no hostname"]

    @pytest.mark.asyncio
    async def test_set_ip_routing(self, node, connection):
        system = SystemEntity(node)

        await system.set_ip_routing(enable=False)
        assert connection.last_config == ["no ip routing"]
        await system.set_ip_routing()
        assert connection.last_config == ["ip routing"]

    @pytest.mark.asyncio
    async def test_get_after_set_rereads(self, node, connection):
        """A config batch makes the next get() read the device again."""
        system = SystemEntity(node)
        await system.get()
        await system.set_hostname("leaf01")
        await system.get()

        reads = [cmds for cmds, _ in connection.batches if "show running-config all" in cmds]
        assert len(reads) == 2
