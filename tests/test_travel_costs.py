"""Tests for the travel cost model."""
import pytest

from wayfarer.core.travel_costs import (
    MAX_ENCOUNTER_CHANCE,
    EncounterType,
    encounter_chance,
    fuel_cost,
    heuristic,
    pathfinding_cost,
    suggest_encounter_type,
    time_cost,
)
from wayfarer.core.world import Route, RouteTag, StarSystem, SystemMetrics


class TestFuelCost:
    """Test fuel cost."""

    @pytest.mark.parametrize("distance,efficiency,expected", [
        (150, 1.0, 15),
        (200, 1.0, 20),
        (101, 1.0, 11),
        (100, 2.0, 5),
        (100, 0.5, 20),
    ])
    def test_fuel_cost(self, distance, efficiency, expected):
        """Fuel should be ceil(distance * 0.1 / efficiency)."""
        assert fuel_cost(distance, efficiency) == expected

    def test_zero_distance(self):
        assert fuel_cost(0, 1.0) == 0

    def test_non_positive_efficiency_treated_as_one(self):
        assert fuel_cost(150, 0) == 15
        assert fuel_cost(150, -3) == 15


class TestTimeCost:
    """Test travel time."""

    @pytest.mark.parametrize("distance,speed,expected", [
        (150, 100, 2),
        (200, 100, 2),
        (100, 100, 1),
        (1, 100, 1),
        (250, 50, 5),
    ])
    def test_time_cost(self, distance, speed, expected):
        """Time should be ceil(distance / speed), at least 1."""
        assert time_cost(distance, speed) == expected

    def test_short_trip_takes_a_day(self):
        """Any positive distance takes at least one day."""
        assert time_cost(0.5, 1000) == 1


class TestEncounterChance:
    """Test per-day encounter probability."""

    def test_hazard_only(self):
        assert encounter_chance(Route(1, 2, 100, hazard_level=2)) == pytest.approx(0.2)

    def test_tag_modifiers(self):
        """Patrolled lowers, dangerous raises."""
        patrolled = Route(1, 2, 100, hazard_level=2, tags={RouteTag.PATROLLED})
        dangerous = Route(1, 2, 100, hazard_level=2, tags={RouteTag.DANGEROUS})

        assert encounter_chance(patrolled) == pytest.approx(0.1)
        assert encounter_chance(dangerous) == pytest.approx(0.3)

    def test_clamped_high(self):
        """Chance should never exceed 0.8."""
        route = Route(1, 2, 100, hazard_level=5, tags={RouteTag.BLOCKADED, RouteTag.DANGEROUS})

        assert encounter_chance(route) == MAX_ENCOUNTER_CHANCE

    def test_clamped_low(self):
        """Chance should never go below 0."""
        route = Route(1, 2, 100, hazard_level=0, tags={RouteTag.PATROLLED, RouteTag.HIDDEN})

        assert encounter_chance(route) == 0.0

    def test_always_in_bounds(self):
        """Every hazard and tag combination stays within [0, 0.8]."""
        all_tags = [RouteTag.PATROLLED, RouteTag.DANGEROUS, RouteTag.HIDDEN,
                    RouteTag.BLOCKADED, RouteTag.ASTEROID_FIELD, RouteTag.NEBULA]
        for hazard in range(6):
            for mask in range(1 << len(all_tags)):
                tags = {t for i, t in enumerate(all_tags) if mask & (1 << i)}
                chance = encounter_chance(Route(1, 2, 10, hazard, tags))
                assert 0.0 <= chance <= 0.8

    def test_missing_route(self):
        assert encounter_chance(None) == 0.0

    def test_high_security_lowers_chance(self):
        """Both ends secure should lower the chance."""
        route = Route(1, 2, 100, hazard_level=3)
        secure = StarSystem(id=1, name="A", metrics=SystemMetrics(security_level=5, criminal_activity=2))
        also_secure = StarSystem(id=2, name="B", metrics=SystemMetrics(security_level=4, criminal_activity=2))

        assert encounter_chance(route, secure, also_secure) == pytest.approx(0.2)

    def test_weakest_security_and_worst_crime_apply(self):
        """The lower security and the higher crime of the two ends decide."""
        route = Route(1, 2, 100, hazard_level=2)
        safe = StarSystem(id=1, name="A", metrics=SystemMetrics(security_level=5, criminal_activity=0))
        rough = StarSystem(id=2, name="B", metrics=SystemMetrics(security_level=1, criminal_activity=4))

        # 0.2 + 0.10 (low security) + 0.15 (high crime)
        assert encounter_chance(route, safe, rough) == pytest.approx(0.45)

    def test_missing_metrics_count_as_zero(self):
        """A system without metrics counts as security 0, crime 0."""
        route = Route(1, 2, 100, hazard_level=2)
        bare = StarSystem(id=1, name="A")

        # 0.2 + 0.10 (security 0) - 0.05 (crime 0)
        assert encounter_chance(route, bare, None) == pytest.approx(0.25)


class TestSuggestEncounterType:
    """Test encounter flavor suggestions."""

    def test_high_hazard_pirate(self):
        """Hazard 4+ wins over any tag."""
        route = Route(1, 2, hazard_level=4, tags={RouteTag.PATROLLED})
        assert suggest_encounter_type(route) == EncounterType.PIRATE

    def test_patrolled(self):
        assert suggest_encounter_type(Route(1, 2, hazard_level=2, tags={RouteTag.PATROLLED})) == EncounterType.PATROL

    def test_hidden(self):
        assert suggest_encounter_type(Route(1, 2, hazard_level=2, tags={RouteTag.HIDDEN})) == EncounterType.SMUGGLER

    def test_dangerous(self):
        assert suggest_encounter_type(Route(1, 2, hazard_level=2, tags={RouteTag.DANGEROUS})) == EncounterType.PIRATE

    def test_quiet_route_trader(self):
        assert suggest_encounter_type(Route(1, 2, hazard_level=1)) == EncounterType.TRADER

    def test_otherwise_random(self):
        assert suggest_encounter_type(Route(1, 2, hazard_level=3)) == EncounterType.RANDOM
        assert suggest_encounter_type(None) == EncounterType.RANDOM


class TestPathfindingCost:
    """Test search edge weights."""

    def test_distance_plus_hazard_penalty(self):
        route = Route(1, 2, distance=100, hazard_level=2)

        assert pathfinding_cost(route, 1.0) == 200
        assert pathfinding_cost(route, 0.5) == 150
        assert pathfinding_cost(route, 0.0) == 100

    def test_heuristic(self):
        a = StarSystem(id=1, name="A", position=(0, 0))
        b = StarSystem(id=2, name="B", position=(3, 4))

        assert heuristic(a, b) == pytest.approx(5.0)
        assert heuristic(a, None) == 0.0
