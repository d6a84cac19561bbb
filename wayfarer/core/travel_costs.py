"""
Travel Cost Model.

Pure functions converting route distance, hazard and tags into fuel
cost, travel time, per-day encounter probability and pathfinding weight.
No state.
"""
import math
from enum import Enum
from typing import Optional

from wayfarer.core.world import Route, RouteTag, StarSystem, SystemMetrics


# =============================================================================
# CONSTANTS
# =============================================================================

FUEL_RATE = 0.1               # fuel per distance unit at efficiency 1.0
DEFAULT_SPEED = 100           # distance units per day
DEFAULT_EFFICIENCY = 1.0
MAX_ENCOUNTER_CHANCE = 0.8
HAZARD_CHANCE_PER_LEVEL = 0.1
SAFETY_COST_PER_HAZARD = 50   # pathfinding penalty per hazard level at weight 1.0

# Per-day encounter chance modifiers by route tag
ROUTE_TAG_MODIFIERS = {
    RouteTag.PATROLLED: -0.10,
    RouteTag.DANGEROUS: 0.10,
    RouteTag.HIDDEN: -0.05,
    RouteTag.BLOCKADED: 0.20,
    RouteTag.ASTEROID_FIELD: 0.05,
    RouteTag.NEBULA: 0.05,
}

# System metric thresholds
HIGH_SECURITY = 4
LOW_SECURITY = 1
HIGH_CRIME = 4
LOW_CRIME = 1

HIGH_SECURITY_MODIFIER = -0.10
LOW_SECURITY_MODIFIER = 0.10
HIGH_CRIME_MODIFIER = 0.15
LOW_CRIME_MODIFIER = -0.05


class EncounterType(str, Enum):
    """Encounter flavor suggested by a route's character."""
    RANDOM = "random"
    PIRATE = "pirate"
    PATROL = "patrol"
    TRADER = "trader"
    SMUGGLER = "smuggler"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# =============================================================================
# COSTS
# =============================================================================

def fuel_cost(distance: float, efficiency: float = DEFAULT_EFFICIENCY) -> int:
    """
    Fuel needed to cover a distance.

    ceil(distance * 0.1 / efficiency); zero for non-positive distance.
    Efficiency <= 0 is treated as 1.0.
    """
    if distance <= 0:
        return 0
    if efficiency <= 0:
        efficiency = DEFAULT_EFFICIENCY
    # Strip float noise before ceil: 30 * 0.1 must cost 3
    return max(0, math.ceil(round(distance * FUEL_RATE / efficiency, 9)))


def time_cost(distance: float, speed: float = DEFAULT_SPEED) -> int:
    """
    Whole days needed to cover a distance, at least 1.

    Zero for non-positive distance. Speed <= 0 uses the default speed.
    """
    if distance <= 0:
        return 0
    if speed <= 0:
        speed = DEFAULT_SPEED
    return max(1, math.ceil(distance / speed))


def encounter_chance(
    route: Optional[Route],
    from_system: Optional[StarSystem] = None,
    to_system: Optional[StarSystem] = None,
) -> float:
    """
    Per-day encounter probability for a route, in [0.0, 0.8].

    hazard * 0.1 plus route tag modifiers. When either endpoint system is
    given, endpoint metrics are also applied: the weaker security and the
    stronger crime of the two ends decide the modifier. A system without
    metrics counts as security 0 and crime 0.
    """
    if route is None:
        return 0.0

    chance = route.hazard_level * HAZARD_CHANCE_PER_LEVEL
    for tag in route.tags:
        chance += ROUTE_TAG_MODIFIERS.get(tag, 0.0)

    if from_system is not None or to_system is not None:
        chance += _metric_modifier(
            from_system.metrics if from_system else None,
            to_system.metrics if to_system else None,
        )

    return _clamp(chance, 0.0, MAX_ENCOUNTER_CHANCE)


def _metric_modifier(a: Optional[SystemMetrics], b: Optional[SystemMetrics]) -> float:
    security = min(a.security_level if a else 0, b.security_level if b else 0)
    crime = max(a.criminal_activity if a else 0, b.criminal_activity if b else 0)

    modifier = 0.0
    if security >= HIGH_SECURITY:
        modifier += HIGH_SECURITY_MODIFIER
    elif security <= LOW_SECURITY:
        modifier += LOW_SECURITY_MODIFIER

    if crime >= HIGH_CRIME:
        modifier += HIGH_CRIME_MODIFIER
    elif crime <= LOW_CRIME:
        modifier += LOW_CRIME_MODIFIER

    return modifier


def suggest_encounter_type(route: Optional[Route]) -> EncounterType:
    """Pick the encounter flavor a route suggests. First match wins."""
    if route is None:
        return EncounterType.RANDOM
    if route.hazard_level >= 4:
        return EncounterType.PIRATE
    if route.has_tag(RouteTag.PATROLLED):
        return EncounterType.PATROL
    if route.has_tag(RouteTag.HIDDEN):
        return EncounterType.SMUGGLER
    if route.has_tag(RouteTag.DANGEROUS):
        return EncounterType.PIRATE
    if route.hazard_level <= 1:
        return EncounterType.TRADER
    return EncounterType.RANDOM


# =============================================================================
# PATHFINDING
# =============================================================================

def pathfinding_cost(route: Route, safety_weight: float = 1.0) -> float:
    """Edge weight for route search: distance plus a hazard penalty."""
    return route.distance + route.hazard_level * SAFETY_COST_PER_HAZARD * safety_weight


def heuristic(a: Optional[StarSystem], b: Optional[StarSystem]) -> float:
    """Straight-line distance between two systems."""
    if a is None or b is None:
        return 0.0
    return math.hypot(a.position[0] - b.position[0], a.position[1] - b.position[1])
