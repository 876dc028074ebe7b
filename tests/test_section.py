"""Tests for configuration block extraction."""
import re

import pytest

from eos_eapi.errors import SectionNotFound
from eos_eapi.section import compile_parent, find_section, get_section

CONFIG = (
    "interface Ethernet1\n"
    "   no shutdown\n"
    "   description uplink\n"
    "interface Ethernet2\n"
    "   shutdown\n"
)


class TestGetSection:
    """Tests for get_section."""

    def test_block_of_parent(self):
        """Parent line plus its indented children."""
        block = get_section(CONFIG, r"^interface Ethernet1$")
        assert block == (
            "interface Ethernet1\n"
            "   no shutdown\n"
            "   description uplink\n"
        )

    def test_last_block_runs_to_end(self):
        """The final block ends with the text."""
        assert get_section(CONFIG, r"^interface Ethernet2$") == "interface Ethernet2\n   shutdown\n"

    def test_idempotent(self):
        """Extracting from an extracted block gives the same block."""
        block = get_section(CONFIG, r"^interface Ethernet1$")
        assert get_section(block, r"^interface Ethernet1$") == block

    def test_compiled_pattern(self):
        """A precompiled multiline pattern is used as is."""
        pattern = re.compile(r"^interface Ethernet2$", re.M)
        assert get_section(CONFIG, pattern).startswith("interface Ethernet2")
        assert compile_parent(pattern) is pattern

    def test_compiled_pattern_without_multiline(self):
        """Anchors of a precompiled pattern match every line, not just the text."""
        pattern = re.compile(r"^interface Ethernet2$", re.I)

        assert get_section(CONFIG, pattern) == "interface Ethernet2\n   shutdown\n"
        assert compile_parent(pattern).flags & re.I

    def test_child_match_returns_whole_line(self):
        """A pattern matching mid-line still starts the block at the line."""
        block = get_section(CONFIG, r"Ethernet2$")
        assert block.startswith("interface Ethernet2\n")

    def test_blank_lines_stay_in_block(self):
        """Blank lines do not end a block."""
        config = "router bgp 1\n   router-id 1.1.1.1\n\n   maximum-paths 2\nend\n"
        block = get_section(config, r"^router bgp 1$")
        assert "maximum-paths 2" in block
        assert "end" not in block

    def test_parent_on_last_line(self):
        """A parent without trailing newline is its own block."""
        assert get_section("hostname sw1\nvlan 10", r"^vlan 10$") == "vlan 10"

    def test_not_found(self):
        """No matching line raises SectionNotFound."""
        with pytest.raises(SectionNotFound) as exc_info:
            get_section(CONFIG, r"^interface Ethernet9$")
        assert "Ethernet9" in str(exc_info.value)


class TestFindSection:
    """Tests for find_section."""

    def test_default_when_missing(self):
        """Missing blocks give the default."""
        assert find_section(CONFIG, r"^vlan 10$") == ""
        assert find_section(CONFIG, r"^vlan 10$", default=None) is None

    def test_found(self):
        """Existing blocks are returned."""
        assert "shutdown" in find_section(CONFIG, r"^interface Ethernet2$")
