"""
World graph used by the travel simulation.

Star systems are graph vertices with a 2D position, an owning faction,
numeric metrics and descriptive tags. Routes are undirected edges with a
distance, a hazard level (0-5) and tags. The planner, cost model and
encounter selector only read from this graph.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, Any

logger = logging.getLogger(__name__)


# =============================================================================
# TAGS
# =============================================================================

class RouteTag:
    """Route tag vocabulary."""
    DANGEROUS = "dangerous"
    PATROLLED = "patrolled"
    HIDDEN = "hidden"
    BLOCKADED = "blockaded"
    SHORTCUT = "shortcut"
    ASTEROID_FIELD = "asteroid_field"
    NEBULA = "nebula"
    UNSTABLE = "unstable"


class SystemTag:
    """System tag vocabulary."""
    CORE = "core"
    FRONTIER = "frontier"
    BORDER = "border"
    INDUSTRIAL = "industrial"
    MINING = "mining"
    AGRICULTURAL = "agricultural"
    LAWLESS = "lawless"
    MILITARY = "military"
    CONTESTED = "contested"
    HUB = "hub"
    PIRATE_HAVEN = "pirate_haven"
    RESEARCH_OUTPOST = "research_outpost"
    QUARANTINED = "quarantined"


class SystemType(str, Enum):
    """Kinds of star system."""
    STATION = "station"
    OUTPOST = "outpost"
    DERELICT = "derelict"
    ASTEROID = "asteroid"
    NEBULA = "nebula"
    CONTESTED = "contested"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class SystemMetrics:
    """Local conditions of a system, each on a 0-5 scale."""
    stability: int = 3
    security_level: int = 3
    criminal_activity: int = 2
    economic_activity: int = 3
    law_enforcement_presence: int = 3

    @classmethod
    def for_system_type(cls, system_type: SystemType) -> "SystemMetrics":
        """Typical metrics for a system of the given type."""
        presets = {
            SystemType.STATION: cls(4, 4, 1, 4, 4),
            SystemType.OUTPOST: cls(3, 2, 2, 2, 2),
            SystemType.DERELICT: cls(1, 0, 3, 0, 0),
            SystemType.ASTEROID: cls(2, 1, 2, 3, 1),
            SystemType.NEBULA: cls(2, 0, 3, 1, 0),
            SystemType.CONTESTED: cls(1, 1, 4, 2, 1),
        }
        preset = presets.get(system_type)
        return cls(**preset.to_dict()) if preset else cls()

    def to_dict(self) -> Dict[str, int]:
        return {
            "stability": self.stability,
            "security_level": self.security_level,
            "criminal_activity": self.criminal_activity,
            "economic_activity": self.economic_activity,
            "law_enforcement_presence": self.law_enforcement_presence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SystemMetrics":
        return cls(
            stability=data.get("stability", 3),
            security_level=data.get("security_level", 3),
            criminal_activity=data.get("criminal_activity", 2),
            economic_activity=data.get("economic_activity", 3),
            law_enforcement_presence=data.get("law_enforcement_presence", 3),
        )


@dataclass
class Faction:
    """A faction that may own systems."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass
class StarSystem:
    """A location in the world graph."""
    id: int
    name: str
    type: SystemType = SystemType.OUTPOST
    position: Tuple[float, float] = (0.0, 0.0)
    connections: List[int] = field(default_factory=list)
    owning_faction_id: Optional[str] = None
    metrics: Optional[SystemMetrics] = None
    tags: Set[str] = field(default_factory=set)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "position": list(self.position),
            "connections": list(self.connections),
            "owning_faction_id": self.owning_faction_id,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "tags": sorted(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StarSystem":
        system_type = SystemType(data.get("type", SystemType.OUTPOST.value))
        metrics_data = data.get("metrics")
        if metrics_data is not None:
            metrics = SystemMetrics.from_dict(metrics_data)
        else:
            metrics = SystemMetrics.for_system_type(system_type)
        position = data.get("position") or (0.0, 0.0)
        return cls(
            id=data["id"],
            name=data.get("name", f"System {data['id']}"),
            type=system_type,
            position=(float(position[0]), float(position[1])),
            owning_faction_id=data.get("owning_faction_id"),
            metrics=metrics,
            tags=set(data.get("tags", [])),
        )


def route_id(system_a: int, system_b: int) -> int:
    """Direction-independent route identity."""
    low, high = min(system_a, system_b), max(system_a, system_b)
    return low * 1_000_000 + high


@dataclass
class Route:
    """An undirected connection between two systems."""
    system_a: int
    system_b: int
    distance: float = 0.0
    hazard_level: int = 0
    tags: Set[str] = field(default_factory=set)

    @property
    def id(self) -> int:
        return route_id(self.system_a, self.system_b)

    def connects(self, system_id: int) -> bool:
        return system_id in (self.system_a, self.system_b)

    def get_other(self, system_id: int) -> int:
        return self.system_b if self.system_a == system_id else self.system_a

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "system_a": self.system_a,
            "system_b": self.system_b,
            "distance": self.distance,
            "hazard_level": self.hazard_level,
            "tags": sorted(self.tags),
        }


# =============================================================================
# WORLD STATE
# =============================================================================

class WorldState:
    """
    The world graph: systems, routes and factions.

    Systems are kept in insertion order so neighbor iteration is stable.
    """

    def __init__(self):
        self.systems: Dict[int, StarSystem] = {}
        self.routes: Dict[int, Route] = {}
        self.factions: Dict[str, Faction] = {}

    def add_system(self, system: StarSystem) -> StarSystem:
        if system.metrics is None:
            system.metrics = SystemMetrics.for_system_type(system.type)
        self.systems[system.id] = system
        return system

    def add_faction(self, faction: Faction) -> Faction:
        self.factions[faction.id] = faction
        return faction

    def connect(
        self,
        system_a: int,
        system_b: int,
        distance: Optional[float] = None,
        hazard_level: int = 0,
        tags: Optional[Set[str]] = None,
    ) -> Optional[Route]:
        """
        Connect two systems with a route.

        When distance is omitted it is taken from the systems' positions.
        Returns None if either system is unknown.
        """
        a = self.systems.get(system_a)
        b = self.systems.get(system_b)
        if a is None or b is None:
            logger.warning(f"Cannot connect unknown systems {system_a} <-> {system_b}")
            return None

        if distance is None:
            distance = math.hypot(a.position[0] - b.position[0], a.position[1] - b.position[1])

        route = Route(
            system_a=system_a,
            system_b=system_b,
            distance=distance,
            hazard_level=max(0, min(5, hazard_level)),
            tags=set(tags or ()),
        )
        self.routes[route.id] = route

        if system_b not in a.connections:
            a.connections.append(system_b)
        if system_a not in b.connections:
            b.connections.append(system_a)
        return route

    def get_system(self, system_id: int) -> Optional[StarSystem]:
        return self.systems.get(system_id)

    def get_neighbors(self, system_id: int) -> List[int]:
        system = self.systems.get(system_id)
        return list(system.connections) if system else []

    def get_route(self, system_a: int, system_b: int) -> Optional[Route]:
        return self.routes.get(route_id(system_a, system_b))

    def get_system_metrics(self, system_id: int) -> Optional[SystemMetrics]:
        system = self.systems.get(system_id)
        return system.metrics if system else None

    def get_faction(self, faction_id: Optional[str]) -> Optional[Faction]:
        if not faction_id:
            return None
        return self.factions.get(faction_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "systems": [s.to_dict() for s in self.systems.values()],
            "routes": [r.to_dict() for r in self.routes.values()],
            "factions": [f.to_dict() for f in self.factions.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldState":
        """Build a world from plain data (systems, routes, factions)."""
        world = cls()
        for faction_data in data.get("factions", []):
            world.add_faction(Faction(id=faction_data["id"], name=faction_data.get("name", faction_data["id"])))
        for system_data in data.get("systems", []):
            world.add_system(StarSystem.from_dict(system_data))
        for route_data in data.get("routes", []):
            world.connect(
                route_data["system_a"],
                route_data["system_b"],
                distance=route_data.get("distance"),
                hazard_level=route_data.get("hazard_level", 0),
                tags=set(route_data.get("tags", [])),
            )
        return world
