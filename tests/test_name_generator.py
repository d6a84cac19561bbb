"""Tests for deterministic name generation."""
import pytest
from unittest.mock import patch

from wayfarer.core import name_generator as names
from wayfarer.core.rng import RngStream
from wayfarer.core.world import SystemType


class TestSystemNames:
    """Test system names by type."""

    def test_derelict(self):
        name = names.generate_system_name(SystemType.DERELICT, RngStream("names", 5))

        assert any(name.startswith(prefix) for prefix in names.DERELICT_PREFIXES)

    def test_asteroid(self):
        first, suffix = names.generate_system_name(SystemType.ASTEROID, RngStream("names", 5)).split(" ")

        assert first in names.ASTEROID_NAMES
        assert suffix in names.SYSTEM_SUFFIXES

    def test_nebula(self):
        name = names.generate_system_name(SystemType.NEBULA, RngStream("names", 5))

        assert name.split(" ")[-1] in names.NEBULA_NAMES

    def test_low_rolls_add_prefix_and_suffix(self):
        stream = RngStream("names", 5)

        with patch.object(stream, "next_float", return_value=0.0):
            name = names.generate_system_name(SystemType.STATION, stream)

        assert name == "New Haven Prime"

    def test_high_rolls_give_bare_name(self):
        stream = RngStream("names", 5)

        with patch.object(stream, "next_float", return_value=0.99):
            name = names.generate_system_name(SystemType.OUTPOST, stream)

        assert name == names.SYSTEM_NAMES[-1]

    @pytest.mark.parametrize("system_type", list(SystemType))
    def test_deterministic(self, system_type):
        a = names.generate_system_name(system_type, RngStream("names", 11))
        b = names.generate_system_name(system_type, RngStream("names", 11))

        assert a == b


class TestPeopleAndShips:
    """Test NPC, ship and cargo names."""

    def test_npc_name_without_nickname(self):
        first, last = names.generate_npc_name(RngStream("names", 3), include_nickname=False).split(" ")

        assert first in names.FIRST_NAMES
        assert last in names.LAST_NAMES

    def test_nickname_on_low_roll(self):
        stream = RngStream("names", 3)

        with patch.object(stream, "next_float", return_value=0.0):
            name = names.generate_npc_name(stream)

        assert name == 'Ada "Red" Okafor'

    def test_pirate_name(self):
        title, nickname = names.generate_pirate_name(RngStream("names", 8)).split(" ", 1)

        assert title in names.PIRATE_TITLES
        assert nickname in names.NICKNAMES

    def test_ship_names(self):
        stream = RngStream("names", 8)

        prefix, rest = names.generate_ship_name(stream).split(" ", 1)
        assert prefix in names.SHIP_PREFIXES
        assert rest in names.SHIP_NAMES
        assert names.generate_pirate_ship_name(stream)[len("the "):] in names.PIRATE_SHIP_NAMES

    @pytest.mark.parametrize("valuable,illegal,pool", [
        (False, False, names.CARGO_TYPES),
        (True, False, names.VALUABLE_CARGO),
        (False, True, names.ILLEGAL_CARGO),
        (True, True, names.ILLEGAL_CARGO),
    ])
    def test_cargo_pools(self, valuable, illegal, pool):
        cargo = names.generate_cargo_type(RngStream("names", 4), valuable=valuable, illegal=illegal)

        assert cargo in pool

    def test_one_draw_per_word(self):
        stream = RngStream("names", 4)

        names.generate_ship_name(stream)

        assert stream.call_count == 2
