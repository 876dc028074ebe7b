"""Shared fixtures: a fake eAPI connection serving a captured running-config."""
import json
from pathlib import Path

import pytest

from eos_eapi.commands import command_text
from eos_eapi.node import Node

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def load_json_fixture(name: str) -> dict:
    return json.loads(load_fixture(name))


class FakeConnection:
    """Stands in for EapiConnection: records batches, answers from a table.

    ``responses`` maps CLI text to a result. For text batches a string
    response is wrapped as ``{"output": ...}``.
    """

    def __init__(self, running_config: str = "", responses: dict = None, host: str = "fake-switch"):
        self.host = host
        self.running_config = running_config
        self.responses = dict(responses or {})
        self.batches: list[tuple[list, str]] = []
        self.closed = False

    async def execute(self, commands, encoding="json", **flags):
        commands = list(commands)
        self.batches.append((commands, encoding))
        results = []
        for cmd in commands:
            text = command_text(cmd)
            if text == "show running-config all":
                results.append({"output": self.running_config})
            elif text in self.responses:
                value = self.responses[text]
                if encoding == "text" and isinstance(value, str):
                    value = {"output": value}
                results.append(value)
            elif encoding == "text":
                results.append({"output": ""})
            else:
                results.append({})
        return results

    async def close(self):
        self.closed = True

    @property
    def config_batches(self) -> list[list[str]]:
        """Commands of every config batch, without enable/configure."""
        return [cmds[2:] for cmds, _ in self.batches if len(cmds) > 1 and cmds[1] == "configure"]

    @property
    def last_config(self) -> list[str]:
        batches = self.config_batches
        return batches[-1] if batches else []


@pytest.fixture
def running_config():
    """Captured `show running-config all` of a lab switch."""
    return load_fixture("running_config.text")


@pytest.fixture
def connection(running_config):
    return FakeConnection(running_config)


@pytest.fixture
def node(connection):
    return Node(connection)
